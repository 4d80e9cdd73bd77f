#!/usr/bin/env python3

from avcleanlib.media.ffmpeg_extract import extractAudioSlice
from avcleanlib.media.ffmpeg_extract import extractAudio
from avcleanlib.media.ffmpeg_extract import hasVideoStream
from avcleanlib.media.ffmpeg_render import buildConcatFilter
from avcleanlib.media.ffmpeg_render import concatenateWithAudio

__all__ = [
	'extractAudioSlice',
	'extractAudio',
	'hasVideoStream',
	'buildConcatFilter',
	'concatenateWithAudio',
]

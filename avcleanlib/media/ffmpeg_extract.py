#!/usr/bin/env python3

import json
from avcleanlib.core import utils

#============================================

def ffmpegCommand(runner) -> list:
	loglevel = "info" if runner.verbose else "error"
	return ["ffmpeg", "-hide_banner", "-nostdin", "-y", "-loglevel", loglevel]

#============================================

def extractAudioSlice(runner, movfile: str, wavfile: str, starttime: str,
	endtime: str) -> str:
	cmd = ffmpegCommand(runner)
	cmd += ["-i", movfile]
	# plain seconds; ffmpeg rejects MM:SS fields above 59
	cmd += ["-ss", str(utils.parse_timecode(starttime))]
	cmd += ["-to", str(utils.parse_timecode(endtime))]
	cmd += ["-vn", "-sn", "-dn"]
	cmd += ["-acodec", "pcm_s16le"]
	cmd.append(wavfile)
	runner.run(cmd)
	if not runner.dry_run:
		utils.ensure_file_exists(wavfile)
	return wavfile

#============================================

def extractAudio(runner, movfile: str, wavfile: str) -> str:
	cmd = ffmpegCommand(runner)
	cmd += ["-i", movfile]
	cmd += ["-map", "0:a:0"]
	cmd += ["-vn", "-sn", "-dn"]
	cmd += ["-acodec", "pcm_s16le"]
	cmd.append(wavfile)
	runner.run(cmd)
	if not runner.dry_run:
		utils.ensure_file_exists(wavfile)
	return wavfile

#============================================

def hasVideoStream(runner, movfile: str) -> bool:
	"""
	Probe a media file for a video stream with ffprobe.

	Attached pictures (cover art) do not count as video. In dry-run mode
	nothing is probed and the file is assumed to carry video.
	"""
	cmd = [
		"ffprobe", "-v", "error",
		"-select_streams", "v",
		"-show_entries", "stream=codec_type:stream_disposition=attached_pic",
		"-of", "json",
		movfile,
	]
	output = runner.query(cmd)
	if output is None:
		return True
	try:
		data = json.loads(output)
	except ValueError as exc:
		raise utils.EngineError(f"cannot read ffprobe output for {movfile}") from exc
	for stream in data.get('streams', []):
		if stream.get('codec_type') != 'video':
			continue
		if stream.get('disposition', {}).get('attached_pic', 0) == 1:
			continue
		return True
	return False

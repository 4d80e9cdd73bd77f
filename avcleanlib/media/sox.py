
from avcleanlib.media.sox_normalize import buildNoiseProfile
from avcleanlib.media.sox_normalize import removeNoise
from avcleanlib.media.sox_edit import combineWaveFiles

__all__ = [
	'buildNoiseProfile',
	'removeNoise',
	'combineWaveFiles',
]

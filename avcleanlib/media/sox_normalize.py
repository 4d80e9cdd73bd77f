
from avcleanlib.core import utils

#============================================

def buildNoiseProfile(runner, noisewavfile: str, profilefile: str) -> str:
	cmd = ["sox", noisewavfile, "-n", "noiseprof", profilefile]
	runner.run(cmd)
	if not runner.dry_run:
		utils.ensure_file_exists(profilefile)
	return profilefile

#============================================

def removeNoise(runner, wavfile: str, cleanwavfile: str, profilefile: str,
	amount: float = 0.21, effects: list = None) -> str:
	"""
	Apply noisered with a saved profile, then the rest of the effect chain.
	"""
	cmd = ["sox", wavfile, cleanwavfile]
	cmd += ["noisered", profilefile, str(amount)]
	if effects:
		cmd += list(effects)
	runner.run(cmd)
	if not runner.dry_run:
		utils.ensure_file_exists(cleanwavfile)
	return cleanwavfile


from avcleanlib.core import utils

#============================================

def combineWaveFiles(runner, wavfiles: list, mergewavfile: str) -> str:
	if len(wavfiles) == 0:
		raise RuntimeError("no audio files to combine")
	cmd = ["sox"]
	cmd += list(wavfiles)
	cmd.append(mergewavfile)
	runner.run(cmd)
	if not runner.dry_run:
		utils.ensure_file_exists(mergewavfile)
	return mergewavfile

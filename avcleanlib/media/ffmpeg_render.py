#!/usr/bin/env python3

from avcleanlib.core import utils
from avcleanlib.media.ffmpeg_extract import ffmpegCommand

#============================================

def buildConcatFilter(count: int) -> str:
	"""
	Build a filter graph joining count video inputs and count audio inputs.

	Inputs 0..count-1 are the original movies (video taken from each),
	inputs count..2*count-1 are the cleaned wav files. Stream order in the
	graph follows input order.
	"""
	if count < 1:
		raise RuntimeError("no inputs to concatenate")
	video_labels = "".join(f"[{index}:v:0]" for index in range(count))
	audio_labels = "".join(f"[{count + index}:a:0]" for index in range(count))
	video_chain = f"{video_labels}concat=n={count}:v=1:a=0[v]"
	audio_chain = f"{audio_labels}concat=n={count}:v=0:a=1[a]"
	return f"{video_chain};{audio_chain}"

#============================================

def concatenateWithAudio(runner, movfiles: list, wavfiles: list,
	outfile: str) -> str:
	if len(movfiles) != len(wavfiles):
		raise RuntimeError("video and audio input counts do not match")
	cmd = ffmpegCommand(runner)
	for movfile in movfiles:
		cmd += ["-i", movfile]
	for wavfile in wavfiles:
		cmd += ["-i", wavfile]
	cmd += ["-filter_complex", buildConcatFilter(len(movfiles))]
	cmd += ["-map", "[v]", "-map", "[a]"]
	cmd.append(outfile)
	runner.run(cmd)
	if not runner.dry_run:
		utils.ensure_file_exists(outfile)
	return outfile

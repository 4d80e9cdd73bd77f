#!/usr/bin/env python3

"""
Pytest coverage for the clean pipeline command sequence.
"""

# Standard Library
import json
import os
import sys
import tempfile

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from avcleanlib.core.options import NoiseWindow
from avcleanlib.core.options import RunConfig
from avcleanlib.core.pipeline import CleanPipeline
from avcleanlib.core.runner import CommandRunner
from avcleanlib.core.workspace import Workspace
from avcleanlib.media import ffmpeg

#============================================

class ScriptedRunner(CommandRunner):
	"""
	Records commands like a dry run, but answers ffprobe queries.
	"""
	def __init__(self, video_files: set):
		super().__init__(dry_run=True)
		self.video_files = video_files

	#============================
	def run(self, cmd: list):
		self.history.append([str(arg) for arg in cmd])
		return None

	#============================
	def query(self, cmd: list):
		self.history.append([str(arg) for arg in cmd])
		streams = []
		if cmd[-1] in self.video_files:
			streams.append({'codec_type': 'video', 'disposition': {'attached_pic': 0}})
		return json.dumps({'streams': streams})

#============================================

def _make_config(input_files: list, audio_only: bool = False,
	pause: bool = False) -> RunConfig:
	config = RunConfig()
	config.input_files = list(input_files)
	config.output_file = "out.mkv"
	config.audio_only = audio_only
	config.pause = pause
	config.noise_reduction = 0.3
	config.sox_effects = ["highpass", "20", "norm", "-1.9"]
	config.noise_window = NoiseWindow("00:00:01", "00:00:05", None, input_files[0])
	return config

#============================================

def _tools(history: list) -> list:
	return [cmd[0] for cmd in history]

#============================================

@pytest.fixture
def workspace(tmp_path, monkeypatch):
	monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
	with Workspace() as open_workspace:
		yield open_workspace

#============================================

def test_video_inputs_merge_with_ffmpeg(workspace) -> None:
	config = _make_config(["a.mkv", "b.mkv"])
	runner = ScriptedRunner({"a.mkv", "b.mkv"})
	state = CleanPipeline(config, runner, workspace).run()
	assert _tools(runner.history) == [
		"ffmpeg", "sox",
		"ffprobe", "ffmpeg", "sox",
		"ffprobe", "ffmpeg", "sox",
		"ffmpeg",
	]
	assert state.audio_only is False
	merge = runner.history[-1]
	inputs = [merge[index + 1] for index, arg in enumerate(merge) if arg == "-i"]
	assert inputs == ["a.mkv", "b.mkv"] + state.polished_files
	graph = merge[merge.index("-filter_complex") + 1]
	assert graph == ffmpeg.buildConcatFilter(2)
	assert merge[-1] == "out.mkv"

#============================================

def test_noise_profile_comes_from_window(workspace) -> None:
	config = _make_config(["a.mkv", "b.mkv"])
	config.noise_window = NoiseWindow("1:00", "1:04.5", "2", "b.mkv")
	runner = ScriptedRunner({"a.mkv", "b.mkv"})
	state = CleanPipeline(config, runner, workspace).run()
	noise_slice = runner.history[0]
	assert noise_slice[noise_slice.index("-i") + 1] == "b.mkv"
	assert noise_slice[noise_slice.index("-ss") + 1] == "60"
	assert noise_slice[noise_slice.index("-to") + 1] == "64.5"
	assert "-vn" in noise_slice
	profile_cmd = runner.history[1]
	assert profile_cmd[0] == "sox"
	assert profile_cmd[1] == noise_slice[-1]
	assert profile_cmd[2:4] == ["-n", "noiseprof"]
	assert profile_cmd[4] == state.noise_profile

#============================================

def test_polish_applies_noisered_then_chain(workspace) -> None:
	config = _make_config(["a.mkv", "b.mkv"])
	runner = ScriptedRunner({"a.mkv", "b.mkv"})
	state = CleanPipeline(config, runner, workspace).run()
	polish_cmds = [cmd for cmd in runner.history if cmd[0] == "sox" and "noisered" in cmd]
	assert len(polish_cmds) == 2
	for cmd, clean_file in zip(polish_cmds, state.polished_files):
		assert cmd[2] == clean_file
		assert cmd[3:] == ["noisered", state.noise_profile, "0.3",
			"highpass", "20", "norm", "-1.9"]

#============================================

def test_missing_video_switches_whole_run_to_audio(workspace) -> None:
	config = _make_config(["a.mkv", "b.wav", "c.mkv"])
	runner = ScriptedRunner({"a.mkv", "c.mkv"})
	state = CleanPipeline(config, runner, workspace).run()
	assert state.audio_only is True
	probed = [cmd[-1] for cmd in runner.history if cmd[0] == "ffprobe"]
	assert probed == ["a.mkv", "b.wav"]
	merge = runner.history[-1]
	assert merge == ["sox"] + state.polished_files + ["out.mkv"]
	assert len(state.polished_files) == 3

#============================================

def test_forced_audio_only_skips_probe(workspace) -> None:
	config = _make_config(["a.mkv"], audio_only=True)
	runner = ScriptedRunner({"a.mkv"})
	CleanPipeline(config, runner, workspace).run()
	assert "ffprobe" not in _tools(runner.history)
	assert _tools(runner.history) == ["ffmpeg", "sox", "ffmpeg", "sox", "sox"]

#============================================

def test_pause_waits_before_merge(workspace, capsys) -> None:
	config = _make_config(["a.mkv"], pause=True)
	runner = ScriptedRunner({"a.mkv"})
	seen = []

	def fake_prompt(message: str) -> str:
		seen.append(len(runner.history))
		return ""

	CleanPipeline(config, runner, workspace, prompt=fake_prompt).run()
	# prompt came after the five per-file commands and before the merge
	assert seen == [5]
	assert len(runner.history) == 6
	assert workspace.path in capsys.readouterr().out

#============================================

def test_pause_accepts_end_of_input(workspace) -> None:
	config = _make_config(["a.mkv"], pause=True)
	runner = ScriptedRunner({"a.mkv"})

	def closed_prompt(message: str) -> str:
		raise EOFError()

	CleanPipeline(config, runner, workspace, prompt=closed_prompt).run()
	assert runner.history[-1][0] == "ffmpeg"

#============================================

def test_concat_filter_keeps_input_order() -> None:
	graph = ffmpeg.buildConcatFilter(3)
	assert graph == (
		"[0:v:0][1:v:0][2:v:0]concat=n=3:v=1:a=0[v];"
		"[3:a:0][4:a:0][5:a:0]concat=n=3:v=0:a=1[a]"
	)

#============================================

def test_cover_art_is_not_video() -> None:
	class CoverArtRunner(CommandRunner):
		def query(self, cmd: list):
			streams = [{'codec_type': 'video', 'disposition': {'attached_pic': 1}}]
			return json.dumps({'streams': streams})

	assert ffmpeg.hasVideoStream(CoverArtRunner(), "song.mp3") is False

#============================================

@pytest.mark.parametrize("amount,expected", [(0.125, "0.125"), (0.004, "0.004")])
def test_noise_reduction_amount_is_not_rounded(workspace, amount: float,
	expected: str) -> None:
	config = _make_config(["a.mkv"])
	config.noise_reduction = amount
	runner = ScriptedRunner({"a.mkv"})
	CleanPipeline(config, runner, workspace).run()
	polish = [cmd for cmd in runner.history if "noisered" in cmd][0]
	assert polish[polish.index("noisered") + 2] == expected

#============================================

def test_noise_window_reaches_ffmpeg_as_seconds(workspace) -> None:
	config = _make_config(["a.mkv"])
	config.noise_window = NoiseWindow("0:75", "90:00", None, "a.mkv")
	runner = ScriptedRunner({"a.mkv"})
	CleanPipeline(config, runner, workspace).run()
	noise_slice = runner.history[0]
	assert noise_slice[noise_slice.index("-ss") + 1] == "75"
	assert noise_slice[noise_slice.index("-to") + 1] == "5400"

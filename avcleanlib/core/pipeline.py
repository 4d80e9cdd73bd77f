#!/usr/bin/env python3

from avcleanlib.media import ffmpeg
from avcleanlib.media import sox

#============================================

class RunState():
	def __init__(self, audio_only: bool = False):
		# once set, audio_only stays set for the rest of the run
		self.audio_only = audio_only
		self.noise_profile = None
		self.polished_files = []

	#============================
	def switch_to_audio_only(self) -> None:
		self.audio_only = True

#============================================

class CleanPipeline():
	def __init__(self, config, runner, workspace, prompt=input):
		self.config = config
		self.runner = runner
		self.workspace = workspace
		self.prompt = prompt
		self.state = RunState(audio_only=config.audio_only)

	#============================
	def run(self) -> RunState:
		self.build_noise_profile()
		for index, input_file in enumerate(self.config.input_files, start=1):
			self.polish_file(input_file, index)
		if self.config.pause:
			self.pause()
		self.merge()
		return self.state

	#============================
	def build_noise_profile(self) -> str:
		window = self.config.noise_window
		noise_wav = self.workspace.make_temp_path("noise-sample.wav")
		ffmpeg.extractAudioSlice(self.runner, window.source_file, noise_wav,
			window.start, window.end)
		profile_file = self.workspace.make_temp_path("noise.prof")
		sox.buildNoiseProfile(self.runner, noise_wav, profile_file)
		self.runner.remove([noise_wav])
		self.state.noise_profile = profile_file
		return profile_file

	#============================
	def polish_file(self, input_file: str, index: int) -> str:
		if not self.state.audio_only:
			if not ffmpeg.hasVideoStream(self.runner, input_file):
				if self.config.verbose:
					print(f"no video stream in {input_file}, switching to audio-only output")
				self.state.switch_to_audio_only()
		raw_file = self.workspace.make_temp_path(f"audio-raw-{index:03d}.wav")
		ffmpeg.extractAudio(self.runner, input_file, raw_file)
		clean_file = self.workspace.make_temp_path(f"audio-clean-{index:03d}.wav")
		sox.removeNoise(self.runner, raw_file, clean_file,
			self.state.noise_profile, amount=self.config.noise_reduction,
			effects=self.config.sox_effects)
		self.runner.remove([raw_file])
		self.state.polished_files.append(clean_file)
		return clean_file

	#============================
	def pause(self) -> None:
		print(f"cleaned audio is in {self.workspace.path}:")
		for clean_file in self.state.polished_files:
			print(f"  {clean_file}")
		try:
			self.prompt("edit the files if needed, then press Enter to merge ")
		except EOFError:
			print("")

	#============================
	def merge(self) -> str:
		output_file = self.config.output_file
		if self.state.audio_only:
			sox.combineWaveFiles(self.runner, self.state.polished_files, output_file)
		else:
			ffmpeg.concatenateWithAudio(self.runner, self.config.input_files,
				self.state.polished_files, output_file)
		return output_file

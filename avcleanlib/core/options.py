#!/usr/bin/env python3

import os
import shlex
import yaml
from avcleanlib.core import utils
from avcleanlib.core.utils import UsageError

#============================================

DEFAULT_SOX_OPTIONS = "highpass 20 lowpass 10000 norm -1.9"
DEFAULT_NOISE_REDUCTION = 0.21
DEFAULT_NOISE_WINDOW = "0-1"

CONFIG_KEYS = (
	'sox_options',
	'noise_reduction',
	'noise_window',
	'audio_only',
	'keep_temp',
	'verbose',
)

#============================================

class NoiseWindow():
	def __init__(self, start: str, end: str, selector: str = None,
		source_file: str = None):
		self.start = start
		self.end = end
		self.selector = selector
		self.source_file = source_file

	#============================
	def __repr__(self) -> str:
		return (f"NoiseWindow(start={self.start!r}, end={self.end!r}, "
			f"source_file={self.source_file!r})")

#============================================

class RunConfig():
	def __init__(self):
		self.verbose = False
		self.dry_run = False
		self.pause = False
		self.force = False
		self.audio_only = False
		self.keep_temp = False
		self.config_file = None
		self.sox_options = DEFAULT_SOX_OPTIONS
		self.sox_effects = []
		self.noise_reduction = DEFAULT_NOISE_REDUCTION
		self.noise_window = None
		self.output_file = None
		self.input_files = []

	#============================
	def __setattr__(self, name: str, value) -> None:
		if getattr(self, '_frozen', False):
			raise AttributeError(f"run config is read-only after loading: {name}")
		super().__setattr__(name, value)

	#============================
	def freeze(self) -> None:
		self._frozen = True

#============================================

def split_noise_window(value: str) -> tuple:
	"""
	Split START-END[-SOURCE] into its parts.

	The source keeps any further dashes so file names like
	room-tone.wav survive.
	"""
	parts = value.split('-', 2)
	if len(parts) < 2:
		raise UsageError(f"noise window must be START-END[-SOURCE]: '{value}'")
	start = parts[0]
	end = parts[1]
	selector = parts[2] if len(parts) == 3 else None
	if selector == '':
		raise UsageError(f"noise window source is empty: '{value}'")
	for timecode in (start, end):
		if not utils.is_timecode(timecode):
			raise UsageError(
				f"invalid noise window time '{timecode}', expected [[H:]M:]S[.fraction]"
			)
	if utils.parse_timecode(end) <= utils.parse_timecode(start):
		raise UsageError(f"noise window end must be after start: '{value}'")
	return (start, end, selector)

#============================================

def resolve_noise_source(selector: str, input_files: list) -> str:
	if selector is None:
		return input_files[0]
	if selector.isascii() and selector.isdigit():
		index = int(selector)
		if index < 1 or index > len(input_files):
			raise UsageError(
				f"noise window source {index} is out of range 1..{len(input_files)}"
			)
		return input_files[index - 1]
	if not os.path.isfile(selector):
		raise RuntimeError(f"noise window source file not found: {selector}")
	return selector

#============================================

def parse_noise_reduction(value) -> float:
	try:
		amount = float(value)
	except (TypeError, ValueError) as exc:
		raise UsageError(f"noise reduction must be a number: '{value}'") from exc
	if not 0.0 <= amount <= 1.0:
		raise UsageError(f"noise reduction must be between 0 and 1: '{value}'")
	return amount

#============================================

def split_sox_options(value: str) -> list:
	try:
		return shlex.split(value)
	except ValueError as exc:
		raise UsageError(f"cannot parse sox options '{value}': {exc}") from exc

#============================================

class OptionsLoader():
	def __init__(self, args):
		self.args = args

	#============================
	def load(self) -> RunConfig:
		args = self.args
		config = RunConfig()
		config.config_file = args.config_file
		file_settings = {}
		if args.config_file is not None:
			file_settings = self._load_config_file(args.config_file)
		config.verbose = self._pick(args.verbose, file_settings, 'verbose', False)
		config.dry_run = bool(args.dry_run)
		config.pause = bool(args.pause)
		config.force = bool(args.force)
		config.audio_only = self._pick(args.audio_only, file_settings, 'audio_only', False)
		config.keep_temp = self._pick(args.keep_temp, file_settings, 'keep_temp', False)
		(config.input_files, config.output_file) = self._resolve_files(
			list(args.files), args.output_file)
		config.sox_options = str(self._pick(args.sox_options, file_settings,
			'sox_options', DEFAULT_SOX_OPTIONS))
		config.sox_effects = split_sox_options(config.sox_options)
		config.noise_reduction = parse_noise_reduction(self._pick(
			args.noise_reduction, file_settings, 'noise_reduction',
			DEFAULT_NOISE_REDUCTION))
		window_text = str(self._pick(args.noise_window, file_settings,
			'noise_window', DEFAULT_NOISE_WINDOW))
		(start, end, selector) = split_noise_window(window_text)
		self._validate_files(config)
		source_file = resolve_noise_source(selector, config.input_files)
		config.noise_window = NoiseWindow(start, end, selector, source_file)
		config.freeze()
		return config

	#============================
	def _pick(self, cli_value, file_settings: dict, key: str, default):
		if cli_value is not None:
			return cli_value
		if file_settings.get(key) is not None:
			return file_settings[key]
		return default

	#============================
	def _resolve_files(self, files: list, output_file: str) -> tuple:
		if output_file is None:
			if len(files) < 2:
				raise UsageError("need at least one input file and an output file")
			output_file = files.pop()
		if len(files) == 0:
			raise UsageError("need at least one input file")
		return (files, output_file)

	#============================
	def _validate_files(self, config: RunConfig) -> None:
		for input_file in config.input_files:
			if not os.path.isfile(input_file):
				raise UsageError(f"input file not found: {input_file}")
			if utils.same_path(input_file, config.output_file):
				raise UsageError(f"input file is also the output file: {input_file}")
		if os.path.exists(config.output_file) and not config.force:
			raise RuntimeError(
				f"output file exists, use --force to overwrite: {config.output_file}"
			)

	#============================
	def _load_config_file(self, config_path: str) -> dict:
		if not os.path.isfile(config_path):
			raise UsageError(f"config file not found: {config_path}")
		with open(config_path, 'r', encoding='utf-8') as config_file:
			try:
				data = yaml.safe_load(config_file)
			except (yaml.YAMLError, UnicodeDecodeError) as exc:
				raise UsageError(f"cannot parse config file {config_path}: {exc}") from exc
		if data is None:
			return {}
		if not isinstance(data, dict):
			raise UsageError(f"config file must be a mapping: {config_path}")
		for key in data:
			if key not in CONFIG_KEYS:
				raise UsageError(f"unknown config key '{key}' in {config_path}")
		for key in ('audio_only', 'keep_temp', 'verbose'):
			if key in data and not isinstance(data[key], bool):
				raise UsageError(f"config key '{key}' must be true or false")
		return data

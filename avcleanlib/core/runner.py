#!/usr/bin/env python3

"""
Execution shim for the external engines.

Every ffmpeg, ffprobe and sox invocation goes through CommandRunner so
that dry-run and verbose modes behave the same way for all stages.
"""

# Standard Library
import os
import shlex
import subprocess
import sys

# PIP3 modules
from rich.console import Console
from rich.text import Text

# local repo modules
from avcleanlib.core.utils import EngineError

#============================================

NORD_COLORS = {
	'ffmpeg': "#88C0D0",
	'sox': "#A3BE8C",
	'other': "#D8DEE9",
	'error': "#BF616A",
}

ENGINE_FAMILIES = {
	'ffmpeg': 'ffmpeg',
	'ffprobe': 'ffmpeg',
	'sox': 'sox',
}

STDERR_TAIL_LINES = 12

#============================================

def engine_color(cmd: list) -> str:
	"""
	Pick the display color for a command from its executable name.

	Args:
		cmd: Command list.

	Returns:
		str: Hex color for the engine family.
	"""
	if len(cmd) == 0:
		return NORD_COLORS['other']
	tool = os.path.basename(cmd[0])
	family = ENGINE_FAMILIES.get(tool, 'other')
	return NORD_COLORS[family]

#============================================

def child_environment() -> dict:
	env = dict(os.environ)
	# ffmpeg must not color its own log output
	env['AV_LOG_FORCE_NOCOLOR'] = '1'
	return env

#============================================

class CommandRunner():
	def __init__(self, dry_run: bool = False, verbose: bool = False):
		self.dry_run = dry_run
		self.verbose = verbose
		self.history = []

	#============================
	def render(self, cmd: list) -> str:
		"""
		Render a command as a string that a POSIX shell reads back unchanged.
		"""
		return shlex.join(str(arg) for arg in cmd)

	#============================
	def run(self, cmd: list) -> subprocess.CompletedProcess:
		"""
		Run an engine command, or print it in dry-run mode.

		Args:
			cmd: Command list to execute.

		Returns:
			subprocess.CompletedProcess: The completed process.
		"""
		cmd = [str(arg) for arg in cmd]
		self.history.append(cmd)
		if self.dry_run:
			self._print_dry_run(cmd)
			return subprocess.CompletedProcess(cmd, 0, "", "")
		if self.verbose:
			self._echo(cmd)
		return self._execute(cmd, capture_output=not self.verbose)

	#============================
	def query(self, cmd: list):
		"""
		Run a read-only probe and return its stdout.

		In dry-run mode the probe is printed and None is returned.
		"""
		cmd = [str(arg) for arg in cmd]
		self.history.append(cmd)
		if self.dry_run:
			self._print_dry_run(cmd)
			return None
		if self.verbose:
			self._echo(cmd)
		proc = self._execute(cmd, capture_output=True)
		return proc.stdout

	#============================
	def remove(self, filepaths: list) -> None:
		for filepath in filepaths:
			if filepath and os.path.isfile(filepath):
				os.remove(filepath)

	#============================
	def _execute(self, cmd: list, capture_output: bool) -> subprocess.CompletedProcess:
		showcmd = self.render(cmd)
		try:
			proc = subprocess.run(cmd, capture_output=capture_output, text=True,
				env=child_environment())
		except FileNotFoundError as exc:
			raise EngineError(f"missing dependency: {cmd[0]}") from exc
		if proc.returncode != 0:
			message = f"command failed ({proc.returncode}): {showcmd}"
			if proc.stderr:
				tail = proc.stderr.strip().splitlines()[-STDERR_TAIL_LINES:]
				message += "\n" + "\n".join(tail)
			raise EngineError(message)
		return proc

	#============================
	def _print_dry_run(self, cmd: list) -> None:
		console = Console(file=sys.stdout, soft_wrap=True, highlight=False)
		console.print(Text(self.render(cmd), style=engine_color(cmd)))

	#============================
	def _echo(self, cmd: list) -> None:
		console = Console(file=sys.stderr, soft_wrap=True, highlight=False)
		console.print(Text(f"CMD: '{self.render(cmd)}'", style=f"bold {engine_color(cmd)}"))

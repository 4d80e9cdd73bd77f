#!/usr/bin/env python3

import os
import shutil
import tempfile

#============================================

class Workspace():
	"""
	Process-scoped temporary directory for intermediate audio files.

	Used as a context manager; the directory is removed on every exit
	path unless keep_temp is set.
	"""
	def __init__(self, keep_temp: bool = False, prefix: str = "avclean-"):
		self.keep_temp = keep_temp
		self.prefix = prefix
		self.path = None
		self.temp_counter = 0

	#============================
	def __enter__(self):
		# tempfile honors TMPDIR
		self.path = tempfile.mkdtemp(prefix=self.prefix)
		return self

	#============================
	def __exit__(self, exc_type, exc_value, traceback) -> bool:
		self.cleanup()
		return False

	#============================
	def make_temp_path(self, filename: str) -> str:
		if self.path is None:
			raise RuntimeError("workspace is not open")
		self.temp_counter += 1
		return os.path.join(self.path, f"{self.temp_counter:04d}-{filename}")

	#============================
	def cleanup(self) -> None:
		if self.path is None:
			return
		if self.keep_temp:
			print(f"temporary files kept in {self.path}")
		else:
			shutil.rmtree(self.path, ignore_errors=True)
		self.path = None

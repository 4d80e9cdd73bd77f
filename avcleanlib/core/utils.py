#!/usr/bin/env python3

import os
import re
import shutil
from decimal import Decimal

#============================================

# [[H:]M:]S[.fraction]
TIMECODE_PATTERN = re.compile(r"^(?:(?:\d+:)?\d+:)?\d+(?:\.\d+)?$")

REQUIRED_TOOLS = ("ffmpeg", "ffprobe", "sox")

#============================================

class UsageError(RuntimeError):
	exit_code = 2

#============================================

class EngineError(RuntimeError):
	exit_code = 1

#============================================

def is_timecode(value: str) -> bool:
	if value is None:
		return False
	return TIMECODE_PATTERN.match(value) is not None

#============================================

def parse_timecode(raw_time: str) -> Decimal:
	if not is_timecode(raw_time):
		raise UsageError(f"invalid time value: '{raw_time}'")
	parts = raw_time.split(':')
	seconds = Decimal(parts.pop())
	minutes = Decimal(0)
	hours = Decimal(0)
	if len(parts) > 0:
		minutes = Decimal(parts.pop())
	if len(parts) > 0:
		hours = Decimal(parts.pop())
	return hours * Decimal(3600) + minutes * Decimal(60) + seconds

#============================================

def same_path(path1: str, path2: str) -> bool:
	return os.path.realpath(path1) == os.path.realpath(path2)

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise EngineError(f"file not found: {filepath}")
	return

#============================================

def check_dependency(cmd_name: str) -> None:
	if shutil.which(cmd_name) is None:
		raise EngineError(f"missing dependency: {cmd_name}")
	return

#============================================

def check_dependencies(tools: tuple = REQUIRED_TOOLS) -> None:
	for tool in tools:
		check_dependency(tool)
	return

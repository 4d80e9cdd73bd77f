#!/usr/bin/env python3

"""
Remove background noise from the audio of one or more media files and
join them into a single output file.

Usage: avclean [options] INPUT... OUTPUT
       avclean [options] -o OUTPUT INPUT...
"""

import argparse
import signal
import sys
from avcleanlib.core.options import OptionsLoader
from avcleanlib.core.options import DEFAULT_NOISE_REDUCTION
from avcleanlib.core.options import DEFAULT_NOISE_WINDOW
from avcleanlib.core.options import DEFAULT_SOX_OPTIONS
from avcleanlib.core.project import CleanProject
from avcleanlib.core.utils import UsageError

#============================================

def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="avclean", allow_abbrev=False,
		description="Clean background noise from media audio and concatenate the results",
		epilog="Use -- to treat every following argument as a file.")
	parser.add_argument('files', nargs='*', metavar='FILE',
		help='input files followed by the output file (unless -o is given)')
	parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
		help='show every command and the tool output')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='print the commands instead of running them')
	parser.add_argument('-p', '--pause', dest='pause', action='store_true',
		help='pause before merging so the cleaned audio can be edited')
	parser.add_argument('-f', '--force', dest='force', action='store_true',
		help='overwrite the output file if it exists')
	parser.add_argument('-a', '--audio-only', dest='audio_only', action='store_true',
		help='write only the joined audio')
	parser.add_argument('-k', '--keep-temp', dest='keep_temp', action='store_true',
		help='keep temporary files')
	parser.add_argument('-K', '--no-keep-temp', dest='keep_temp', action='store_false',
		help='remove temporary files')
	parser.add_argument('-c', '--config', dest='config_file',
		help='yaml file with default settings')
	parser.add_argument('-w', '--noise-window', dest='noise_window',
		help=f'START-END[-SOURCE] noise sample, SOURCE is a file index or path '
			f'(default: {DEFAULT_NOISE_WINDOW})')
	parser.add_argument('-o', '--output-file', dest='output_file',
		help='output file')
	parser.add_argument('-s', '--sox-options', dest='sox_options',
		help=f"sox effects applied after noise reduction (default: '{DEFAULT_SOX_OPTIONS}')")
	parser.add_argument('-r', '--noise-reduction', dest='noise_reduction',
		help=f'noise reduction amount from 0 to 1 (default: {DEFAULT_NOISE_REDUCTION})')
	parser.set_defaults(verbose=None, audio_only=None, keep_temp=None)
	return parser

#============================================

def parse_args(argv: list = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.

	Everything after the first -- is a file, even if it looks like a flag.
	"""
	if argv is None:
		argv = sys.argv[1:]
	argv = list(argv)
	trailing_files = []
	if '--' in argv:
		split_index = argv.index('--')
		trailing_files = argv[split_index + 1:]
		argv = argv[:split_index]
	parser = build_parser()
	args = parser.parse_intermixed_args(argv)
	args.files = list(args.files or []) + trailing_files
	return args

#============================================

def terminate(signum, frame) -> None:
	# SystemExit runs Workspace.__exit__, which removes the temp area
	raise SystemExit(128 + signum)

#============================================

def main(argv: list = None) -> int:
	args = parse_args(argv)
	previous_handler = signal.signal(signal.SIGTERM, terminate)
	try:
		config = OptionsLoader(args).load()
		CleanProject(config).run()
	except UsageError as exc:
		print(f"avclean: error: {exc}", file=sys.stderr)
		return exc.exit_code
	except RuntimeError as exc:
		print(f"avclean: error: {exc}", file=sys.stderr)
		return 1
	except KeyboardInterrupt:
		print("avclean: interrupted", file=sys.stderr)
		return 1
	finally:
		signal.signal(signal.SIGTERM, previous_handler)
	return 0


if __name__ == '__main__':
	sys.exit(main())

#!/usr/bin/env python3

from avcleanlib.core import utils
from avcleanlib.core.pipeline import CleanPipeline
from avcleanlib.core.runner import CommandRunner
from avcleanlib.core.workspace import Workspace

#============================================

class CleanProject():
	def __init__(self, config, runner: CommandRunner = None, prompt=input):
		self.config = config
		if runner is None:
			runner = CommandRunner(dry_run=config.dry_run, verbose=config.verbose)
		self.runner = runner
		self.prompt = prompt
		self.state = None

	#============================
	def run(self) -> str:
		if not self.config.dry_run:
			utils.check_dependencies()
		with Workspace(keep_temp=self.config.keep_temp) as workspace:
			pipeline = CleanPipeline(self.config, self.runner, workspace,
				prompt=self.prompt)
			self.state = pipeline.run()
		if not self.config.dry_run:
			print(f"wrote {self.config.output_file}")
		return self.config.output_file

"""`escli update`: upgrade escli to the latest published release."""

import logging
from typing import TextIO

import click

from escli.builder import new_cmd
from escli.context import CommandContext
from escli.executor import Executor, run_executor
from escli.services.command_runner import CommandRunner
from escli.services.updater import UpdateService

logger = logging.getLogger("escli")


def update(ctx: CommandContext, out: TextIO):
    def use_runner(executor: Executor):
        service = UpdateService(command_runner=CommandRunner(logger=logger), logger=logger)
        installed = service.update(executor.ctx)
        if installed is None:
            out.write(f"escli is already up to date ({service.current_version})\n")
        else:
            out.write(f"escli updated to {installed}\n")

    run_executor(ctx, use_runner)


def new_update_command() -> click.Command:
    return new_cmd("update").with_description("update escli version").no_args(update)

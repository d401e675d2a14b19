"""`escli cat ...` commands mirroring the Elasticsearch _cat APIs."""

from typing import TextIO

import click

from escli.builder import new_cmd
from escli.context import CommandContext
from escli.executor import run_executor


def cat_indices(ctx: CommandContext, out: TextIO):
    run_executor(ctx, lambda executor: executor.runner.cat_indices(out))


def new_cat_indices_command() -> click.Command:
    return new_cmd("indices").with_description("_cat/indices").no_args(cat_indices)


def new_cat_group() -> click.Group:
    group = click.Group(name="cat", help="Query the _cat APIs.")
    group.add_command(new_cat_indices_command())
    return group

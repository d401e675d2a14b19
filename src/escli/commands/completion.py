"""`escli completion SHELL`: print shell completion code."""

from typing import Sequence, TextIO

import click
from click.shell_completion import get_completion_class

from escli.builder import new_cmd
from escli.context import CommandContext
from escli.errors import ArgumentError

SUPPORTED_SHELLS = ("bash", "zsh")
PROG_NAME = "escli"
COMPLETE_VAR = "_ESCLI_COMPLETE"

LONG_DESCRIPTION = """Output shell completion for the given shell (bash or zsh)

\b
Example installation:
    $ escli completion bash > ~/.escli-completion  # for bash users
    $ escli completion zsh > ~/.escli-completion   # for zsh users
    $ source ~/.escli-completion

Alternatively, source it directly from your .bashrc or .zshrc:
    $ source <(escli completion bash)
"""


def validate_shell_args(args: Sequence[str]):
    if len(args) != 1:
        raise ArgumentError(f"requires 1 argument, found {len(args)}")
    if args[0] not in SUPPORTED_SHELLS:
        raise ArgumentError(
            f"invalid argument '{args[0]}', expected one of: {', '.join(SUPPORTED_SHELLS)}"
        )


def completion(ctx: CommandContext, out: TextIO):
    shell = ctx.args[0]
    root = click.get_current_context().find_root().command
    completion_cls = get_completion_class(shell)
    script = completion_cls(root, {}, PROG_NAME, COMPLETE_VAR).source()
    out.write(script)
    if not script.endswith("\n"):
        out.write("\n")


def new_completion_command() -> click.Command:
    return (
        new_cmd("completion")
        .with_description(LONG_DESCRIPTION)
        .variable_args(validate_shell_args, completion, metavar="SHELL")
    )

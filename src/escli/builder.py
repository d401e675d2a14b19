"""Declarative construction of escli subcommands.

A command is declared with a name, a description and an arity policy, and is
finalized around a handler::

    new_cmd("indices").with_description("_cat/indices").no_args(handler)

Handlers are plain callables ``handler(ctx, out)`` receiving a fresh
``CommandContext`` and the standard output stream. They either return
``None`` on success or raise (or return) an ``EscliError``. The dispatch
layer built here is the only place that turns errors into messages and exit
codes.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TextIO

import click
from rich.console import Console
from rich.text import Text

from escli.context import CommandContext
from escli.errors import ArgumentError, Cancelled, EscliError, HandlerError

logger = logging.getLogger("escli")
error_console = Console(stderr=True)

Handler = Callable[[CommandContext, TextIO], Optional[Exception]]
Validator = Callable[[Sequence[str]], None]


@dataclass(frozen=True)
class CliSettings:
    """Global options shared by every subcommand through ``click.Context.obj``."""

    config_path: Optional[str] = None
    timeout: Optional[float] = None


def _plural(count: int) -> str:
    return "argument" if count == 1 else "arguments"


def no_args_policy(args: Sequence[str]):
    if args:
        raise ArgumentError(f"accepts no arguments, found {len(args)}")


def exact_args_policy(count: int) -> Validator:
    def check(args: Sequence[str]):
        if len(args) != count:
            raise ArgumentError(f"requires exactly {count} {_plural(count)}, found {len(args)}")

    return check


def report_error(error: EscliError):
    if isinstance(error, Cancelled):
        error_console.print(Text("Cancelled", style="yellow"), soft_wrap=True)
        return
    error_console.print(
        Text.assemble(("Error: ", "bold red"), f"{error.kind}: {error}"),
        soft_wrap=True,
    )


def _as_escli_error(value) -> Optional[EscliError]:
    if value is None:
        return None
    if isinstance(value, EscliError):
        return value
    if isinstance(value, Exception):
        return HandlerError(str(value) or type(value).__name__)
    raise TypeError(f"command handlers must return None or an exception, got {type(value).__name__}")


def invoke_handler(handler: Handler, ctx: CommandContext, out: TextIO) -> Optional[EscliError]:
    """Run a handler and normalize every outcome into ``None`` or an ``EscliError``."""
    try:
        return _as_escli_error(handler(ctx, out))
    except KeyboardInterrupt:
        ctx.cancel("interrupted")
        return Cancelled("interrupted")
    except EscliError as exc:
        logger.debug("Command failed with %s", exc.kind, exc_info=True)
        return exc
    except Exception as exc:
        logger.debug("Unexpected error in command handler", exc_info=True)
        return HandlerError(str(exc) or type(exc).__name__)


class CommandBuilder:
    """Fluent declaration of a single subcommand."""

    def __init__(self, name: str):
        self.name = name
        self.description = ""

    def with_description(self, text: str) -> "CommandBuilder":
        self.description = text
        return self

    def no_args(self, handler: Handler) -> click.Command:
        return self._build(no_args_policy, handler, metavar="")

    def exact_args(self, count: int, handler: Handler, metavar: Optional[str] = None) -> click.Command:
        if count < 0:
            raise ValueError("argument count must not be negative")
        if metavar is None:
            metavar = " ".join(["ARG"] * count)
        return self._build(exact_args_policy(count), handler, metavar=metavar)

    def variable_args(self, validator: Validator, handler: Handler, metavar: str = "[ARGS]...") -> click.Command:
        return self._build(validator, handler, metavar=metavar)

    def _build(self, policy: Validator, handler: Handler, metavar: str) -> click.Command:
        name = self.name
        description = self.description.strip()

        def callback(args):
            click_ctx = click.get_current_context()
            try:
                policy(tuple(args))
            except ArgumentError as exc:
                raise click.UsageError(f"{exc.kind}: '{name}' {exc}", ctx=click_ctx) from exc

            settings = click_ctx.find_object(CliSettings) or CliSettings()
            ctx = CommandContext(
                config_path=settings.config_path,
                timeout=settings.timeout,
                args=tuple(args),
            )
            error = invoke_handler(handler, ctx, sys.stdout)
            if error is not None:
                report_error(error)
                click_ctx.exit(error.exit_code)

        params = [click.Argument(["args"], nargs=-1, metavar=metavar)]
        return click.Command(
            name=name,
            callback=callback,
            params=params,
            help=description or None,
            short_help=description.splitlines()[0] if description else None,
        )


def new_cmd(name: str) -> CommandBuilder:
    return CommandBuilder(name)

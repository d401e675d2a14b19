import logging
from typing import Optional

import click
from rich.logging import RichHandler

from . import __version__
from .builder import CliSettings
from .commands.cat import new_cat_group
from .commands.completion import new_completion_command
from .commands.config import new_config_group
from .commands.update import new_update_command
from .services.config_store import CONFIG_ENV_VAR

logger = logging.getLogger("escli")


def remove_file_handlers():
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(verbose: bool, log_file: Optional[str]):
    level = logging.DEBUG if verbose else logging.WARNING
    root_logger = logging.getLogger()
    if not any(isinstance(handler, RichHandler) for handler in root_logger.handlers):
        rich_handler = RichHandler(rich_tracebacks=True, show_level=False, show_path=False)
        rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root_logger.addHandler(rich_handler)
    root_logger.setLevel(level)
    logger.setLevel(logging.DEBUG if verbose or log_file else logging.INFO)
    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)

    remove_file_handlers()
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)


def build_cli() -> click.Group:
    """Construct the root command and register every subcommand on it."""

    @click.group(name="escli", context_settings={"help_option_names": ["-h", "--help"]})
    @click.version_option(__version__, prog_name="escli")
    @click.option(
        "--config",
        "config_path",
        required=False,
        type=click.Path(dir_okay=False),
        envvar=CONFIG_ENV_VAR,
        help="Path to the escli YAML configuration. Defaults to ~/.escli/config.yaml.",
    )
    @click.option(
        "--timeout",
        required=False,
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Cancel the command if it has not finished after this many seconds.",
    )
    @click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
    @click.option("--log-file", type=click.Path(dir_okay=False), help="Path to log file")
    @click.pass_context
    def root(ctx, config_path, timeout, verbose, log_file):
        """Administrative commands for Elasticsearch clusters."""
        configure_logging(verbose, log_file)
        ctx.call_on_close(remove_file_handlers)
        ctx.obj = CliSettings(config_path=config_path, timeout=timeout)

    root.add_command(new_cat_group())
    root.add_command(new_update_command())
    root.add_command(new_completion_command())
    root.add_command(new_config_group())
    return root


def main():
    build_cli()(prog_name="escli")


if __name__ == "__main__":
    main()

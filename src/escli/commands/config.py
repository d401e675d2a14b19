"""`escli config ...`: inspect and upgrade the persisted configuration."""

from typing import TextIO

import click
import yaml

from escli.builder import new_cmd
from escli.context import CommandContext
from escli.services.config_store import ConfigStore


def view_config(ctx: CommandContext, out: TextIO):
    config = ConfigStore(ctx.config_path).load()
    out.write(yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False))


def migrate_config(ctx: CommandContext, out: TextIO):
    store = ConfigStore(ctx.config_path)
    config = store.load()
    ctx.raise_if_cancelled()
    store.save(config)
    out.write(f"Configuration at {store.path} is now version {config.VERSION}\n")


def new_config_group() -> click.Group:
    group = click.Group(name="config", help="Inspect or upgrade the escli configuration file.")
    group.add_command(new_cmd("view").with_description("print the resolved configuration").no_args(view_config))
    group.add_command(
        new_cmd("migrate")
        .with_description("rewrite the configuration file in the current format")
        .no_args(migrate_config)
    )
    return group

"""Executor factory: builds a connected runner for one command invocation."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from escli.context import CommandContext
from escli.errors import Cancelled, ConnectionFailed, EscliError
from escli.errors_catalog import actionable_error
from escli.models import Config
from escli.services.config_store import ConfigStore
from escli.services.runner import Runner

logger = logging.getLogger("escli")

T = TypeVar("T")


@dataclass
class Executor:
    """A connected runner plus the per-invocation state it was built from."""

    ctx: CommandContext
    config: Config
    runner: Runner


def build_runner(ctx: CommandContext, config: Config, runner_factory=Runner) -> Runner:
    try:
        return runner_factory(config, ctx=ctx)
    except KeyboardInterrupt as exc:
        ctx.cancel("interrupted")
        raise Cancelled("interrupted while connecting") from exc
    except EscliError:
        raise
    except Exception as exc:
        # a deadline that expires mid-handshake surfaces as a timeout
        ctx.raise_if_cancelled()
        raise ConnectionFailed(
            actionable_error("connection_failed", url=config.elasticsearch_url, reason=str(exc))
        ) from exc


def run_executor(
    ctx: CommandContext,
    use_runner: Callable[[Executor], T],
    *,
    store_factory: Optional[Callable[[Optional[str]], ConfigStore]] = None,
    runner_factory=Runner,
) -> T:
    """Build an Executor, hand it to ``use_runner`` and always release it.

    Load errors propagate untouched and no runner is built. Cancellation
    observed before, during or right after construction raises ``Cancelled``;
    a runner that finished connecting after cancellation is closed and dropped.
    """
    store_factory = store_factory or ConfigStore

    ctx.raise_if_cancelled()
    config = store_factory(ctx.config_path).load()

    ctx.raise_if_cancelled()
    runner = build_runner(ctx, config, runner_factory=runner_factory)
    try:
        ctx.raise_if_cancelled()
        return use_runner(Executor(ctx=ctx, config=config, runner=runner))
    finally:
        runner.close()

import pytest
import requests

from escli.context import CommandContext
from escli.errors import Cancelled, ConfigInvalid, ConnectionFailed, HandlerError
from escli.executor import run_executor
from escli.models import Config

CONFIG = Config(profile="", elasticsearch_url="http://h:9200", aws_region="us-east-1")


class FakeStore:
    def __init__(self, config=CONFIG, error=None):
        self.config = config
        self.error = error
        self.paths = []

    def __call__(self, path):
        self.paths.append(path)
        return self

    def load(self):
        if self.error:
            raise self.error
        return self.config


class FakeRunner:
    def __init__(self, config, ctx=None):
        self.config = config
        self.ctx = ctx
        self.closed = False

    def close(self):
        self.closed = True


class RunnerFactory:
    def __init__(self, error=None, on_build=None):
        self.error = error
        self.on_build = on_build
        self.built = []

    def __call__(self, config, ctx=None):
        if self.on_build:
            self.on_build(ctx)
        if self.error:
            raise self.error
        runner = FakeRunner(config, ctx=ctx)
        self.built.append(runner)
        return runner


def test_run_executor_passes_connected_executor_and_releases_it():
    store = FakeStore()
    factory = RunnerFactory()
    ctx = CommandContext(config_path="/etc/escli.yaml")

    result = run_executor(
        ctx,
        lambda executor: (executor.config, executor.runner, executor.ctx),
        store_factory=store,
        runner_factory=factory,
    )

    assert result == (CONFIG, factory.built[0], ctx)
    assert store.paths == ["/etc/escli.yaml"]
    assert len(factory.built) == 1
    assert factory.built[0].closed is True


def test_run_executor_releases_runner_when_handler_fails():
    factory = RunnerFactory()

    def use_runner(_executor):
        raise HandlerError("boom")

    with pytest.raises(HandlerError, match="boom"):
        run_executor(CommandContext(), use_runner, store_factory=FakeStore(), runner_factory=factory)

    assert factory.built[0].closed is True


def test_config_failure_prevents_connection():
    factory = RunnerFactory()
    store = FakeStore(error=ConfigInvalid("bad config"))

    with pytest.raises(ConfigInvalid):
        run_executor(CommandContext(), lambda _e: None, store_factory=store, runner_factory=factory)

    assert factory.built == []


def test_connection_error_becomes_connection_failed():
    cause = requests.ConnectionError("refused")
    factory = RunnerFactory(error=cause)

    with pytest.raises(ConnectionFailed, match="http://h:9200") as exc_info:
        run_executor(CommandContext(), lambda _e: None, store_factory=FakeStore(), runner_factory=factory)

    assert exc_info.value.__cause__ is cause


def test_cancelled_before_construction_never_connects():
    factory = RunnerFactory()
    store = FakeStore()
    ctx = CommandContext()
    ctx.cancel()

    with pytest.raises(Cancelled):
        run_executor(ctx, lambda _e: None, store_factory=store, runner_factory=factory)

    assert store.paths == []
    assert factory.built == []


def test_cancelled_during_failed_construction_is_not_connection_failed():
    factory = RunnerFactory(
        error=requests.Timeout("handshake aborted"),
        on_build=lambda ctx: ctx.cancel(),
    )

    with pytest.raises(Cancelled):
        run_executor(CommandContext(), lambda _e: None, store_factory=FakeStore(), runner_factory=factory)


def test_runner_built_after_cancellation_is_discarded():
    factory = RunnerFactory(on_build=lambda ctx: ctx.cancel())
    called = []

    with pytest.raises(Cancelled):
        run_executor(
            CommandContext(),
            called.append,
            store_factory=FakeStore(),
            runner_factory=factory,
        )

    assert called == []
    assert factory.built[0].closed is True


def test_interrupt_during_construction_cancels_context():
    def interrupt(_ctx):
        raise KeyboardInterrupt

    ctx = CommandContext()

    with pytest.raises(Cancelled):
        run_executor(ctx, lambda _e: None, store_factory=FakeStore(), runner_factory=RunnerFactory(on_build=interrupt))

    assert ctx.cancelled is True


def test_each_call_builds_a_fresh_runner():
    factory = RunnerFactory()
    store = FakeStore()

    run_executor(CommandContext(), lambda _e: None, store_factory=store, runner_factory=factory)
    run_executor(CommandContext(), lambda _e: None, store_factory=store, runner_factory=factory)

    assert len(factory.built) == 2
    assert factory.built[0] is not factory.built[1]


def test_unparseable_cluster_url_becomes_connection_failed():
    cause = ValueError("Failed to parse: label empty or too long")
    factory = RunnerFactory(error=cause)

    with pytest.raises(ConnectionFailed, match="label empty or too long") as exc_info:
        run_executor(CommandContext(), lambda _e: None, store_factory=FakeStore(), runner_factory=factory)

    assert exc_info.value.__cause__ is cause


def test_escli_errors_from_runner_construction_pass_through():
    factory = RunnerFactory(error=HandlerError("already classified"))

    with pytest.raises(HandlerError, match="already classified"):
        run_executor(CommandContext(), lambda _e: None, store_factory=FakeStore(), runner_factory=factory)


def test_factories_are_keyword_only():
    with pytest.raises(TypeError):
        run_executor(CommandContext(), lambda _e: None, FakeStore())

"""Cancellable execution context handed to every command handler."""

import threading
import time
from typing import Optional, Sequence

from escli.errors import Cancelled


class CommandContext:
    """Carries cancellation, an optional deadline and the config location.

    One context is created per command invocation. Components that reach a
    suspension point (config read, cluster handshake, HTTP calls) call
    ``raise_if_cancelled`` before and after it and size their network
    timeouts with ``timeout``.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        timeout: Optional[float] = None,
        args: Sequence[str] = (),
    ):
        self.config_path = config_path
        self.args = tuple(args)
        self._event = threading.Event()
        self._reason = "operation cancelled"
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self, reason: str = "operation cancelled"):
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        if not self._event.is_set() and self._deadline is not None:
            if time.monotonic() >= self._deadline:
                self.cancel("deadline exceeded")
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self.cancelled:
            raise Cancelled(self._reason)

    def timeout(self, default: float) -> float:
        """Return the time budget for the next blocking call."""
        if self._deadline is None:
            return default
        remaining = self._deadline - time.monotonic()
        return max(0.0, min(default, remaining))

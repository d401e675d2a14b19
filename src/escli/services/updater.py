"""Self-update service for escli."""

import sys
from typing import Optional

import requests
from packaging import version

from escli import __version__
from escli.context import CommandContext
from escli.errors import HandlerError


class UpdateService:
    """Compares the installed release with the latest published one and upgrades via pip."""

    PACKAGE_NAME = "escli"
    INDEX_URL = "https://pypi.org/pypi/{package}/json"

    def __init__(self, command_runner, logger, requests_module=requests, current_version: str = __version__):
        self.command_runner = command_runner
        self.logger = logger
        self.requests = requests_module
        self.current_version = current_version

    def latest_version(self, ctx: CommandContext) -> str:
        url = self.INDEX_URL.format(package=self.PACKAGE_NAME)
        ctx.raise_if_cancelled()
        try:
            response = self.requests.get(url, timeout=ctx.timeout(30.0))
            response.raise_for_status()
            payload = response.json()
        except self.requests.RequestException as exc:
            raise HandlerError(f"Could not check for escli releases: {exc}") from exc
        except ValueError as exc:
            raise HandlerError(f"Release index returned invalid JSON: {exc}") from exc
        ctx.raise_if_cancelled()

        latest: Optional[str] = (payload.get("info") or {}).get("version") if isinstance(payload, dict) else None
        if not latest:
            raise HandlerError("Release index did not report a version for escli.")
        return latest

    def is_newer(self, candidate: str) -> bool:
        try:
            return version.parse(candidate) > version.parse(self.current_version)
        except version.InvalidVersion as exc:
            raise HandlerError(f"Cannot compare versions '{candidate}' and '{self.current_version}'.") from exc

    def update(self, ctx: CommandContext) -> Optional[str]:
        """Upgrade to the latest release; returns the new version or None when current."""
        latest = self.latest_version(ctx)
        if not self.is_newer(latest):
            self.logger.info("escli %s is the latest release", self.current_version)
            return None

        self.logger.info("Upgrading escli %s -> %s", self.current_version, latest)
        self.command_runner.run(
            [sys.executable, "-m", "pip", "install", "--upgrade", f"{self.PACKAGE_NAME}=={latest}"],
            ctx=ctx,
            timeout=300.0,
            retry_count=1,
            retry_backoff_seconds=2.0,
        )
        return latest

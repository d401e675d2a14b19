"""Connected Elasticsearch session that command handlers operate against."""

import logging
from typing import Any, Dict, Optional, TextIO

import requests

from escli import __version__
from escli.context import CommandContext
from escli.errors import HandlerError
from escli.models import Config

logger = logging.getLogger("escli")


class Runner:
    """Holds a live HTTP session to the cluster named by the configuration.

    Construction performs the handshake (``GET /``) and raises whatever the
    transport raises; the executor factory maps those failures onto
    ``ConnectionFailed``.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        config: Config,
        ctx: Optional[CommandContext] = None,
        timeout: float = DEFAULT_TIMEOUT,
        requests_module=None,
    ):
        self.config = config
        self.ctx = ctx or CommandContext()
        self.default_timeout = timeout
        self.requests = requests_module or requests
        self.base_url = config.elasticsearch_url.rstrip("/")
        self.profile = config.profile
        self.aws_region = config.aws_region

        self.session = self.requests.Session()
        self.session.headers.update({"User-Agent": f"escli/{__version__}"})
        self._closed = False
        try:
            self.info = self._handshake()
        except BaseException:
            self.close()
            raise

    @property
    def cluster_name(self) -> str:
        return str(self.info.get("cluster_name", ""))

    def _handshake(self) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/", timeout=self.ctx.timeout(self.default_timeout))
        response.raise_for_status()
        try:
            info = response.json()
        except ValueError:
            info = {}
        if not isinstance(info, dict):
            info = {}
        logger.info("Connected to cluster '%s' at %s", info.get("cluster_name", "?"), self.base_url)
        return info

    def get(self, path: str, params: Optional[Dict[str, str]] = None):
        self.ctx.raise_if_cancelled()
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.ctx.timeout(self.default_timeout))
            response.raise_for_status()
        except self.requests.RequestException as exc:
            raise HandlerError(f"Request to {url} failed: {exc}") from exc
        self.ctx.raise_if_cancelled()
        return response

    def cat_indices(self, out: TextIO):
        response = self.get("_cat/indices", params={"v": "true"})
        out.write(response.text)
        if response.text and not response.text.endswith("\n"):
            out.write("\n")

    def close(self):
        if self._closed:
            return
        self._closed = True
        self.session.close()
        logger.debug("Closed session to %s", self.base_url)

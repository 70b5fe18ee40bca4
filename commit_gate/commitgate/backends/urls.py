"""URL helpers built on the configured canonical web URL."""

from __future__ import annotations

import logging
import socket
from urllib.parse import urlsplit

from commitgate.backends.base import UrlFormatter

logger = logging.getLogger(__name__)


class CanonicalUrlFormatter(UrlFormatter):
    """Formats URLs relative to a fixed canonical web URL."""

    def __init__(self, canonical_web_url: str | None) -> None:
        if canonical_web_url and not canonical_web_url.endswith("/"):
            canonical_web_url += "/"
        self._web_url = canonical_web_url or None

    def web_url(self) -> str | None:
        return self._web_url

    def settings_url(self, section: str = "") -> str | None:
        if self._web_url is None:
            return None
        url = f"{self._web_url}settings"
        if section:
            url += f"#{section}"
        return url


def server_host(canonical_web_url: str | None) -> str:
    """Host name from the canonical URL, else the machine's host name."""
    if canonical_web_url:
        try:
            host = urlsplit(canonical_web_url).hostname
        except ValueError as e:
            host = None
            logger.warning(
                "configured canonical web URL is invalid, using system default: %s", e
            )
        if host:
            return host
    return socket.gethostname()

"""
Protocol handlers that turn a URL into a readable text stream.

Each handler serves a fixed set of URL schemes and returns None when it
cannot supply the content, letting open_url() try the next one.
"""

from __future__ import annotations

import io
import os
import urllib.request
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import TextIO
from urllib.parse import urlsplit, urlunsplit

import httpx

from ..core.config import Settings, get_settings
from ..core.logging import get_logger

logger = get_logger(__name__)


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"


class ProtocolHandler(ABC):
    """Supplies the content behind URLs of some schemes."""

    #: Lowercase URL schemes this handler serves
    protocols: tuple[str, ...] = ()

    def handles(self, url: str) -> bool:
        return urlsplit(url).scheme.lower() in self.protocols

    @abstractmethod
    def open(self, url: str) -> TextIO | None:
        """Open url for reading, or return None if the content is unavailable."""


class HttpProtocolHandler(ProtocolHandler):
    """
    Fetches http and https URLs with httpx.

    The whole body is downloaded and decoded with the charset named by the
    response, falling back to the configured default charset.

    Attributes:
        client: Client used for requests; when None a client is created per request
        method: Method used by open()
        settings: Timeout, redirect and charset configuration
    """

    protocols = ("http", "https")

    def __init__(
        self,
        client: httpx.Client | None = None,
        method: HttpMethod = HttpMethod.GET,
        settings: Settings | None = None,
    ):
        self.client = client
        self.method = method
        self.settings = settings or get_settings()

    def open(self, url: str) -> TextIO | None:
        try:
            return self.get_contents(url, self.method, self.settings.HTTP_FOLLOW_REDIRECTS)
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            return None

    def get_contents(
        self, url: str, method: HttpMethod = HttpMethod.GET, follow_redirects: bool = False
    ) -> TextIO:
        """
        Request url and return the decoded body.

        For POST the query string is removed from the URL and sent as a
        form-encoded body instead.

        Raises:
            httpx.HTTPError: On transport failures and error status codes
        """
        request_url = url
        content: bytes | None = None
        headers: dict[str, str] = {}

        if method is HttpMethod.POST:
            parts = urlsplit(url)
            request_url = urlunsplit(parts._replace(query=""))
            if parts.query:
                content = parts.query.encode(self.settings.HTTP_DEFAULT_CHARSET)
                headers["Content-Type"] = "application/x-www-form-urlencoded"

        logger.debug("%s %s", method.value, request_url)
        if self.client is not None:
            response = self.client.request(
                method.value,
                request_url,
                content=content,
                headers=headers,
                follow_redirects=follow_redirects,
            )
        else:
            with httpx.Client(timeout=self.settings.HTTP_TIMEOUT) as client:
                response = client.request(
                    method.value,
                    request_url,
                    content=content,
                    headers=headers,
                    follow_redirects=follow_redirects,
                )
        response.raise_for_status()

        return io.StringIO(self._decode(response))

    def _decode(self, response: httpx.Response) -> str:
        charset = response.charset_encoding or self.settings.HTTP_DEFAULT_CHARSET
        try:
            return response.content.decode(charset)
        except LookupError:
            logger.warning(
                "Unknown charset %r, decoding as %s", charset, self.settings.HTTP_DEFAULT_CHARSET
            )
            return response.content.decode(self.settings.HTTP_DEFAULT_CHARSET, errors="replace")


class FileProtocolHandler(ProtocolHandler):
    """Opens file URLs that point at an existing, readable file."""

    protocols = ("file",)

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def open(self, url: str) -> TextIO | None:
        path = Path(urllib.request.url2pathname(urlsplit(url).path))
        if not (path.is_file() and os.access(path, os.R_OK)):
            logger.debug("File %s does not exist or is not readable", path)
            return None

        try:
            return open(path, "r", encoding=self.settings.FILE_ENCODING)
        except OSError as e:
            logger.warning("Failed to open %s: %s", path, e)
            return None

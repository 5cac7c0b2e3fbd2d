"""
Content fetching.

open_url() resolves a URL to a text stream a Cursor can read: http and
https through httpx, file URLs from disk, and anything else through
urllib as a last resort.
"""

from __future__ import annotations

import io
import urllib.request
from collections.abc import Sequence
from typing import TextIO

from ..core.config import get_settings
from ..core.logging import get_logger
from .protocols import FileProtocolHandler, HttpMethod, HttpProtocolHandler, ProtocolHandler

logger = get_logger(__name__)


def default_handlers() -> list[ProtocolHandler]:
    return [HttpProtocolHandler(), FileProtocolHandler()]


def open_url(url: str, handlers: Sequence[ProtocolHandler] | None = None) -> TextIO | None:
    """
    Open the content behind url as text.

    Handlers serving the URL's scheme (compared case-insensitively) are
    tried in order; the first stream returned wins.

    Args:
        url: The URL to read
        handlers: Handlers to try, defaults to http(s) and file

    Returns:
        A text stream, or None if the content could not be opened
    """
    if handlers is None:
        handlers = default_handlers()

    for handler in handlers:
        if handler.handles(url):
            stream = handler.open(url)
            if stream is not None:
                logger.debug("Opened %s with %s", url, type(handler).__name__)
                return stream

    logger.debug("No handler opened %s, falling back to urllib", url)
    try:
        response = urllib.request.urlopen(url)
    except (OSError, ValueError) as e:
        logger.warning("Failed to open %s: %s", url, e)
        return None
    return io.TextIOWrapper(response, encoding=get_settings().FILE_ENCODING)


__all__ = [
    "FileProtocolHandler",
    "HttpMethod",
    "HttpProtocolHandler",
    "ProtocolHandler",
    "default_handlers",
    "open_url",
]

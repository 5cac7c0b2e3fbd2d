"""
Character cursor over a text source.

The cursor is the only place characters are read. It offers one character
of lookahead plus an injection buffer: text handed to inject() is read back
before anything else from the underlying stream, which is how parsers push
back characters they consumed speculatively.
"""

from __future__ import annotations

import io
from typing import TextIO

from ..core.errors import InvalidArgumentError
from ..core.logging import get_logger

logger = get_logger(__name__)

# Returned by peek() and pop() once the input is exhausted.
EOF = ""


class Cursor:
    """
    Single-character lookahead over a text stream.

    The cursor exclusively owns the stream: it is closed exactly once, as
    soon as end of input is first observed (or when close() is called).

    Attributes:
        source: The underlying text stream
    """

    def __init__(self, source: TextIO | None):
        """
        Wrap a text stream and prime the lookahead.

        Args:
            source: Any object with read(1) and close()

        Raises:
            InvalidArgumentError: If source is None
        """
        if source is None:
            raise InvalidArgumentError("A character source is required")

        self.source = source
        self._closed = False
        self._current = EOF
        self._pending = ""
        self._advance()

    @classmethod
    def from_string(cls, text: str) -> Cursor:
        return cls(io.StringIO(text))

    @classmethod
    def from_url(cls, url: str) -> Cursor:
        """
        Open a cursor on the content behind a URL (http, https, file, ...).

        Raises:
            InvalidArgumentError: If no protocol handler could supply the content
        """
        from ..reader import open_url

        return cls(open_url(url))

    def peek(self) -> str:
        """Current character without consuming it, or EOF."""
        if self._pending:
            return self._pending[0]
        return self._current

    def pop(self) -> str:
        """Consume and return the current character, or EOF (repeatedly) at the end."""
        if self._pending:
            char = self._pending[0]
            self._pending = self._pending[1:]
            return char

        char = self._current
        self._advance()
        return char

    def inject(self, text: str | None) -> None:
        """
        Make text the next thing read, ahead of the underlying stream.

        Successive injections are read back in the order they were made.
        """
        if text:
            self._pending += text

    def is_next(self, expected: str) -> bool:
        """
        Skip whitespace, then consume expected if it is the lookahead.

        Returns:
            True if the character was consumed
        """
        self.skip_whitespace()
        if self.peek() != EOF and self.peek() == expected:
            self.pop()
            return True
        return False

    def skip_whitespace(self) -> None:
        while self.peek().isspace():
            self.pop()

    def at_end(self) -> bool:
        return self.peek() == EOF

    def close(self) -> None:
        """Release the underlying stream; further reads return EOF."""
        if not self._closed:
            self._closed = True
            self._current = EOF
            self.source.close()

    def _advance(self) -> None:
        if self._closed:
            self._current = EOF
            return

        try:
            char = self.source.read(1)
        except (OSError, ValueError) as exc:
            # I/O failures are reported as end of input
            logger.debug("Read failed, treating as end of input: %s", exc)
            char = EOF

        if char == EOF:
            self.close()
        else:
            self._current = char

    def __repr__(self) -> str:
        return f"Cursor(peek={self.peek()!r}, pending={self._pending!r})"

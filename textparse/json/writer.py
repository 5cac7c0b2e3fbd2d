"""Serialization of JSONObject and JSONArray to text."""

from __future__ import annotations

from typing import Any, TextIO

from ..core.errors import ErrorKind, InvalidArgumentError, JSONError
from .model import (
    ARRAY_END,
    ARRAY_START,
    COLON,
    COMMA,
    NULL_LITERAL,
    OBJECT_END,
    OBJECT_START,
    JSONArray,
    JSONObject,
    JSONType,
    type_of,
)

INDENT = "\t"
QUOTE = '"'
SINGLE_QUOTE = "'"
ESCAPE = "\\"


class JSONWriter:
    """
    Writes JSON containers to a text stream.

    With indent, every member goes on its own line, nested one tab per
    level, and keys are followed by ": ". Without it nothing but the
    separators is written. Strings are written verbatim between double
    quotes, or single quotes when they hold an unescaped double quote; the
    parser keeps escape sequences as-is, so a parsed document is written
    back as text that parses to an equal document.
    """

    def __init__(self, stream: TextIO, indent: bool = True):
        if stream is None:
            raise InvalidArgumentError("A stream to write to is required")
        self.stream = stream
        self.indent = indent
        self._depth = 0

    def write(self, container: JSONObject | JSONArray) -> None:
        if isinstance(container, JSONObject):
            self.write_object(container)
        else:
            self.write_array(container)

    def write_object(self, obj: JSONObject) -> None:
        keys = obj.keys()
        if not keys:
            self.stream.write(OBJECT_START + OBJECT_END)
            return

        separator = COLON + (" " if self.indent else "")
        self.stream.write(OBJECT_START)
        self._depth += 1
        for i, key in enumerate(keys):
            self._line_end()
            self._write_string(key)
            self.stream.write(separator)
            self._write_value(obj.get(key))
            if i != len(keys) - 1:
                self.stream.write(COMMA)
        self._depth -= 1
        self._line_end()
        self.stream.write(OBJECT_END)
        self._flush()

    def write_array(self, array: JSONArray) -> None:
        size = len(array)
        if not size:
            self.stream.write(ARRAY_START + ARRAY_END)
            return

        self.stream.write(ARRAY_START)
        self._depth += 1
        for i in range(size):
            self._line_end()
            self._write_value(array.get(i))
            if i != size - 1:
                self.stream.write(COMMA)
        self._depth -= 1
        self._line_end()
        self.stream.write(ARRAY_END)
        self._flush()

    def _line_end(self) -> None:
        if self.indent:
            self.stream.write("\n" + INDENT * self._depth)

    def _flush(self) -> None:
        if self._depth == 0:
            self.stream.flush()

    def _write_string(self, text: str) -> None:
        quote = SINGLE_QUOTE if _has_unescaped(text, QUOTE) else QUOTE
        self.stream.write(quote + text + quote)

    def _write_value(self, value: Any) -> None:
        match type_of(value):
            case JSONType.STRING:
                self._write_string(value)
            case JSONType.OBJECT:
                self.write_object(value)
            case JSONType.ARRAY:
                self.write_array(value)
            case JSONType.BOOLEAN:
                self.stream.write("true" if value else "false")
            case JSONType.NUMBER:
                self.stream.write(repr(value))
            case JSONType.NULL:
                self.stream.write(NULL_LITERAL)
            case _:
                raise JSONError(
                    ErrorKind.INVALID_VALUE, f"Cannot write {value!r} as JSON", value=value
                )


def _has_unescaped(text: str, char: str) -> bool:
    escaped = False
    for c in text:
        if escaped:
            escaped = False
        elif c == ESCAPE:
            escaped = True
        elif c == char:
            return True
    return False

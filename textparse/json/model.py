"""
JSON document model.

JSONObject and JSONArray parse themselves from a Cursor using the shared
literal grammar and expose typed accessors over the parsed values. Values
are kept as plain Python objects: str, bool, int/float, nested containers
and the NULL marker for JSON null.

Example:
    >>> doc = JSONObject('{"name": "a", "scores": [1, 2.5, null]}')
    >>> doc.get_string("name")
    'a'
    >>> doc.get_array("scores").is_null(2)
    True
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from collections.abc import Hashable
from enum import Enum
from typing import Any, Generic, Protocol, TextIO, TypeVar

from ..core.errors import ErrorKind, JSONError, ParseError
from ..parser.cursor import EOF, Cursor
from ..parser.literals import LiteralParser

OBJECT_START = "{"
OBJECT_END = "}"
ARRAY_START = "["
ARRAY_END = "]"
COLON = ":"
COMMA = ","
NULL_LITERAL = "null"


class JSONType(Enum):
    """Type of a stored value."""

    OBJECT = "object"
    ARRAY = "array"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    NULL = "null"  # JSON null
    UNKNOWN = "unknown"  # Not a JSON value


class _Null:
    """Marker stored for JSON null."""

    _instance: _Null | None = None

    def __new__(cls) -> _Null:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __str__(self) -> str:
        return NULL_LITERAL

    def __repr__(self) -> str:
        return "NULL"


NULL = _Null()


def type_of(value: Any) -> JSONType:
    match value:
        case JSONObject():
            return JSONType.OBJECT
        case JSONArray():
            return JSONType.ARRAY
        case bool():
            return JSONType.BOOLEAN
        case int() | float():
            return JSONType.NUMBER
        case str():
            return JSONType.STRING
        case _Null():
            return JSONType.NULL
        case _:
            return JSONType.UNKNOWN


def _as_cursor(source: str | TextIO | Cursor) -> Cursor:
    if isinstance(source, Cursor):
        return source
    if isinstance(source, str):
        return Cursor.from_string(source)
    return Cursor(source)


class JSONParser(LiteralParser):
    """Literal grammar extended with objects, arrays and null."""

    def parse_value(self) -> Any:
        value = super().parse_value()
        if value is not None:
            return value

        char = self.cursor.peek()
        if char == ARRAY_START:
            return JSONArray(self.cursor)
        if char == OBJECT_START:
            return JSONObject(self.cursor)
        return self.parse_null()

    def parse_null(self) -> _Null | None:
        """
        Parse the literal null.

        Returns:
            NULL, or None if the next characters do not spell null (they
            are consumed regardless once an 'n' was seen)
        """
        self.cursor.skip_whitespace()
        if self.cursor.peek() != NULL_LITERAL[0]:
            return None

        chars: list[str] = []
        for _ in NULL_LITERAL:
            if self.cursor.peek() == EOF:
                break
            chars.append(self.cursor.pop())
        return NULL if "".join(chars) == NULL_LITERAL else None


K = TypeVar("K", bound=Hashable)


class JSON(ABC, Generic[K]):
    """Accessors shared by objects (keyed by str) and arrays (keyed by int)."""

    container_type: JSONType

    @abstractmethod
    def has(self, key: K) -> bool:
        ...

    @abstractmethod
    def _lookup(self, key: K) -> Any:
        ...

    @abstractmethod
    def _parse(self, cursor: Cursor) -> None:
        ...

    def _parse_source(self, source: str | TextIO | Cursor) -> None:
        """Parse source, closing the stream on failure unless the caller passed a Cursor."""
        cursor = _as_cursor(source)
        try:
            self._parse(cursor)
        except ParseError:
            if cursor is not source:
                cursor.close()
            raise

    def get(self, key: K) -> Any:
        """
        Raises:
            JSONError: If key is not present
        """
        if not self.has(key):
            raise JSONError(
                ErrorKind.MISSING_KEY,
                f"Expected an existing key '{key}' in {self.container_type.value}",
                key=key,
            )
        return self._lookup(key)

    def get_type(self, key: K) -> JSONType:
        return type_of(self.get(key))

    def is_null(self, key: K) -> bool:
        return self.get(key) is NULL

    def _get_typed(self, key: K, expected: JSONType) -> Any:
        value = self.get(key)
        actual = type_of(value)
        if actual is not expected:
            raise JSONError(
                ErrorKind.WRONG_TYPE,
                f"Expected the value of '{key}' to be {expected.value}, got {actual.value}",
                key=key,
                expected=expected,
                actual=actual,
            )
        return value

    def get_string(self, key: K) -> str:
        return self._get_typed(key, JSONType.STRING)

    def get_int(self, key: K) -> int:
        return int(self._get_typed(key, JSONType.NUMBER))

    def get_float(self, key: K) -> float:
        return float(self._get_typed(key, JSONType.NUMBER))

    def get_boolean(self, key: K) -> bool:
        return self._get_typed(key, JSONType.BOOLEAN)

    def get_object(self, key: K) -> JSONObject:
        return self._get_typed(key, JSONType.OBJECT)

    def get_array(self, key: K) -> JSONArray:
        return self._get_typed(key, JSONType.ARRAY)

    @staticmethod
    def _check_value(value: Any) -> None:
        if type_of(value) is JSONType.UNKNOWN:
            raise JSONError(
                ErrorKind.INVALID_VALUE,
                f"Cannot store {value!r}, values must be JSON types",
                value=value,
            )

    def to_string(self, indent: bool = False) -> str:
        from .writer import JSONWriter

        buffer = io.StringIO()
        JSONWriter(buffer, indent).write(self)
        return buffer.getvalue()

    def __str__(self) -> str:
        return self.to_string()


class JSONObject(JSON[str]):
    """
    An ordered mapping of string keys to JSON values.

    Args:
        source: Text, stream or Cursor positioned at '{'; None creates an
            empty object

    Raises:
        ParseError: If source does not hold a well-formed object
    """

    container_type = JSONType.OBJECT

    def __init__(self, source: str | TextIO | Cursor | None = None):
        self._storage: dict[str, Any] = {}
        if source is not None:
            self._parse_source(source)

    def _parse(self, cursor: Cursor) -> None:
        if not cursor.is_next(OBJECT_START):
            raise ParseError.expected(OBJECT_START)
        if cursor.is_next(OBJECT_END):
            return

        parser = JSONParser(cursor)
        while True:
            key = parser.parse_string()
            if key is None:
                raise ParseError.expected("key")
            if not cursor.is_next(COLON):
                raise ParseError.expected(COLON)
            value = parser.parse_value()
            if value is None:
                raise ParseError.expected("value")
            self._storage[key] = value
            if not cursor.is_next(COMMA):
                break

        if not cursor.is_next(OBJECT_END):
            raise ParseError.expected(OBJECT_END)

    def has(self, key: str) -> bool:
        return key in self._storage

    def _lookup(self, key: str) -> Any:
        return self._storage[key]

    def keys(self) -> list[str]:
        return list(self._storage)

    def set(self, key: str, value: Any) -> JSONObject:
        """
        Store value under key, replacing any previous value.

        Raises:
            JSONError: If key is None or value is not a JSON value
        """
        if key is None:
            raise JSONError(ErrorKind.INVALID_VALUE, "Key cannot be None")
        self._check_value(value)
        self._storage[key] = value
        return self

    def set_null(self, key: str) -> JSONObject:
        return self.set(key, NULL)

    def delete(self, key: str) -> None:
        self.get(key)
        del self._storage[key]

    def __contains__(self, key: object) -> bool:
        return key in self._storage

    def __len__(self) -> int:
        return len(self._storage)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONObject):
            return NotImplemented
        return self._storage == other._storage

    def __repr__(self) -> str:
        return f"JSONObject({self.to_string()!r})"


class JSONArray(JSON[int]):
    """
    An ordered list of JSON values.

    Args:
        source: Text, stream or Cursor positioned at '['; None creates an
            empty array

    Raises:
        ParseError: If source does not hold a well-formed array
    """

    container_type = JSONType.ARRAY

    def __init__(self, source: str | TextIO | Cursor | None = None):
        self._storage: list[Any] = []
        if source is not None:
            self._parse_source(source)

    def _parse(self, cursor: Cursor) -> None:
        if not cursor.is_next(ARRAY_START):
            raise ParseError.expected(ARRAY_START)

        parser = JSONParser(cursor)
        # A comma directly before ']' is tolerated
        while (value := parser.parse_value()) is not None:
            self._storage.append(value)
            if not cursor.is_next(COMMA):
                break

        if not cursor.is_next(ARRAY_END):
            raise ParseError.expected(ARRAY_END)

    def has(self, key: int) -> bool:
        return 0 <= key < len(self._storage)

    def _lookup(self, key: int) -> Any:
        return self._storage[key]

    def add(self, value: Any) -> JSONArray:
        """
        Append value.

        Raises:
            JSONError: If value is not a JSON value
        """
        self._check_value(value)
        self._storage.append(value)
        return self

    def add_null(self) -> JSONArray:
        return self.add(NULL)

    def set(self, index: int, value: Any) -> JSONArray:
        """
        Replace the value at index.

        Raises:
            JSONError: If value is not a JSON value
            IndexError: If index is outside the array
        """
        self._check_value(value)
        if not 0 <= index < len(self._storage):
            raise IndexError(f"Index {index} out of range for array of {len(self._storage)}")
        self._storage[index] = value
        return self

    def set_null(self, index: int) -> JSONArray:
        return self.set(index, NULL)

    def delete(self, index: int) -> None:
        self.get(index)
        del self._storage[index]

    def __len__(self) -> int:
        return len(self._storage)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONArray):
            return NotImplemented
        return self._storage == other._storage

    def __repr__(self) -> str:
        return f"JSONArray({self.to_string()!r})"


def parse_json(source: str | TextIO | Cursor) -> JSONObject | JSONArray | None:
    """
    Parse an object or an array, whichever the input starts with.

    A stream or string source is closed when it holds no container or a
    malformed one; a Cursor is left to the caller.

    Returns:
        The container, or None if the input starts with neither '{' nor '['
    """
    cursor = _as_cursor(source)
    owns_cursor = cursor is not source
    cursor.skip_whitespace()
    char = cursor.peek()
    try:
        if char == OBJECT_START:
            return JSONObject(cursor)
        if char == ARRAY_START:
            return JSONArray(cursor)
    except ParseError:
        if owns_cursor:
            cursor.close()
        raise

    if owns_cursor:
        cursor.close()
    return None


T = TypeVar("T")


class JSONFactory(Protocol[T]):
    """Converts instances of T to and from JSON."""

    def create_json(self, obj: T) -> JSON:
        ...

    def create_instance(self, json: JSON) -> T:
        ...

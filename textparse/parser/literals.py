"""
Literal value grammar shared by every parser in the package.

LiteralParser reads strings, numbers and booleans straight off a Cursor.
Each parse_* method returns None when the lookahead cannot start its
literal, so a caller can try the next alternative; once a literal has
started, malformed input raises ParseError.
"""

from __future__ import annotations

import math

from ..core.errors import ErrorKind, ParseError
from .cursor import EOF, Cursor

QUOTES = ("'", '"')
SIGNS = ("+", "-")
ESCAPE = "\\"
DECIMAL_POINT = "."
EXPONENT_MARKERS = ("e", "E")


class LiteralParser:
    """
    Base class for parsers that need literal values.

    Subclasses extend parse_value() to recognise their own values, calling
    the base implementation first.

    Attributes:
        cursor: The cursor characters are read from
    """

    def __init__(self, cursor: Cursor):
        self.cursor = cursor

    def parse_value(self) -> str | float | bool | None:
        """
        Parse whichever literal the lookahead announces.

        Returns:
            The value, or None if the lookahead starts no literal
        """
        self.cursor.skip_whitespace()
        char = self.cursor.peek()

        if char in QUOTES:
            return self.parse_string()
        if char.isdecimal() or char in SIGNS:
            return self.parse_number(allow_exponent=True)
        if char in ("t", "f"):
            return self.parse_boolean()
        return None

    def parse_string(self) -> str | None:
        """
        Parse a single- or double-quoted string.

        A backslash keeps the character after it verbatim (the backslash is
        kept too), so an escaped quote does not end the string.

        Returns:
            The text between the quotes, or None if the lookahead is not a quote

        Raises:
            ParseError: If the input ends before the closing quote
        """
        self.cursor.skip_whitespace()
        quote = self.cursor.peek()
        if quote not in QUOTES:
            return None
        self.cursor.pop()

        chars: list[str] = []
        escaped = False
        while (char := self.cursor.peek()) != EOF:
            if escaped:
                escaped = False
            elif char == quote:
                self.cursor.pop()
                return "".join(chars)
            elif char == ESCAPE:
                escaped = True
            chars.append(self.cursor.pop())

        raise ParseError(ErrorKind.UNTERMINATED_STRING, "Unfinished string")

    def parse_number(self, allow_exponent: bool = True) -> float | None:
        """
        Parse a signed decimal number, optionally in exponent form.

        A sign with no digits after it is pushed back onto the cursor and
        reported as not parsed, leaving the sign for an operator parser.

        Args:
            allow_exponent: Accept an e/E marker followed by an exponent

        Returns:
            The number, or None if no digits were found

        Raises:
            ParseError: On a second decimal point or a missing exponent
        """
        self.cursor.skip_whitespace()

        chars: list[str] = []
        seen_point = False
        seen_digit = False
        while (char := self.cursor.peek()) != EOF:
            if char.isdecimal():
                seen_digit = True
                chars.append(self.cursor.pop())
            elif char in SIGNS:
                # Only a leading sign belongs to the number
                if chars:
                    break
                chars.append(self.cursor.pop())
            elif char == DECIMAL_POINT:
                if seen_point:
                    raise ParseError(
                        ErrorKind.MULTIPLE_DECIMAL_POINTS, "Multiple dots have been found"
                    )
                seen_point = True
                chars.append(self.cursor.pop())
            elif char in EXPONENT_MARKERS and allow_exponent and seen_digit:
                self.cursor.pop()
                exponent = self.parse_number(allow_exponent=False)
                if exponent is None:
                    raise ParseError(
                        ErrorKind.MALFORMED_NUMBER,
                        f"Expected an exponent after '{char}'",
                    )
                return float("".join(chars)) * math.pow(10.0, exponent)
            else:
                break

        if not chars:
            return None
        if len(chars) == 1 and chars[0] in SIGNS:
            self.cursor.inject(chars[0])
            return None
        if not seen_digit:
            raise ParseError(
                ErrorKind.MALFORMED_NUMBER, f"Expected digits in '{''.join(chars)}'"
            )
        return float("".join(chars))

    def parse_boolean(self) -> bool | None:
        """
        Parse the literal true or false (case-sensitive).

        Returns:
            The boolean, or None if the lookahead is not 't' or 'f'

        Raises:
            ParseError: If the consumed characters spell neither literal
        """
        self.cursor.skip_whitespace()
        char = self.cursor.peek()
        if char not in ("t", "f"):
            return None

        expected = "true" if char == "t" else "false"
        chars: list[str] = []
        for _ in expected:
            if self.cursor.peek() == EOF:
                break
            chars.append(self.cursor.pop())

        word = "".join(chars)
        if word != expected:
            raise ParseError(
                ErrorKind.INVALID_BOOLEAN_LITERAL,
                f"Tried to parse to '{expected}', got '{word}'",
                expected=expected,
                found=word,
            )
        return expected == "true"

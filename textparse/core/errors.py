"""
Exceptions raised by the parsers.

Every grammar failure is a ParseError tagged with an ErrorKind, so callers
can tell an unterminated string from an unknown function without matching
on message text. "Rule did not match" is never an exception: parsers
return None for that.
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Categories of syntax errors."""

    # Literal grammar
    UNTERMINATED_STRING = "unterminated_string"
    MULTIPLE_DECIMAL_POINTS = "multiple_decimal_points"
    MALFORMED_NUMBER = "malformed_number"
    INVALID_BOOLEAN_LITERAL = "invalid_boolean_literal"

    # Expressions
    UNEXPECTED_CHARACTER = "unexpected_character"
    EXPECTED_CHAR = "expected_char"
    NO_VALID_TERM = "no_valid_term"
    UNKNOWN_FUNCTION = "unknown_function"
    ARGUMENT_COUNT_OUT_OF_RANGE = "argument_count_out_of_range"
    DIVIDE_BY_ZERO = "divide_by_zero"

    # JSON model
    MISSING_KEY = "missing_key"
    WRONG_TYPE = "wrong_type"
    INVALID_VALUE = "invalid_value"

    # Grade solver
    INVALID_GRADE = "invalid_grade"
    INVALID_AVERAGE_EXPRESSION = "invalid_average_expression"
    EXPECTED_VARIABLE = "expected_variable"


class ParseError(Exception):
    """
    Malformed input at some grammar point.

    Attributes:
        kind: The category of the failure
        message: Human readable, already formatted message
        details: Parameters used to build the message
    """

    def __init__(self, kind: ErrorKind, message: str, **details: Any):
        self.kind = kind
        self.message = message
        self.details = details
        super().__init__(message)

    @classmethod
    def expected(cls, what: str) -> "ParseError":
        return cls(ErrorKind.EXPECTED_CHAR, f"Expected '{what}'", expected=what)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {self.message!r})"


class JSONError(ParseError):
    """Raised by the JSON document model for missing keys and type mismatches."""


class GradeError(ParseError):
    """Raised by the grade solver."""


class InvalidArgumentError(ValueError):
    """A required constructor input (such as a character source) is missing."""

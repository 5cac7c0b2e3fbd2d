"""
textparse

A small text-processing toolkit: a character cursor, a literal value
grammar, an arithmetic expression evaluator with functions and variables,
a JSON document model and a weighted-average grade solver, all built on the
same parsing primitives.
"""

from .core.errors import ErrorKind, GradeError, InvalidArgumentError, JSONError, ParseError
from .grade import Calculator, ExpressionCalculator, Grade
from .json import JSONArray, JSONObject, parse_json
from .parser import Context, Cursor, FunctionRegistry, LiteralParser, MathExpression

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "GradeError",
    "InvalidArgumentError",
    "JSONError",
    "ParseError",
    "Calculator",
    "ExpressionCalculator",
    "Grade",
    "JSONArray",
    "JSONObject",
    "parse_json",
    "Context",
    "Cursor",
    "FunctionRegistry",
    "LiteralParser",
    "MathExpression",
    "__version__",
]

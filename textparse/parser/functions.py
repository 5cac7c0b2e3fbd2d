"""
Functions callable from expressions, and the registry that names them.

A Function is an arity-checked calculation over floats. The arithmetic
operators are anonymous Functions; named ones are looked up by expressions
through a FunctionRegistry, which is built explicitly (see
FunctionRegistry.default) and handed to the parser.
"""

from __future__ import annotations

import math
import operator
import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from functools import wraps

from ..core.errors import ErrorKind, InvalidArgumentError, ParseError
from ..core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Function:
    """
    A pure calculation from a fixed number of floats to one float.

    Attributes:
        name: Lookup name, or None for functions only bound to operators
        min_args: Fewest arguments accepted
        max_args: Most arguments accepted
        body: The calculation, called with the arguments positionally
    """

    name: str | None
    min_args: int
    max_args: int
    body: Callable[..., float]

    def __post_init__(self):
        if self.min_args > self.max_args:
            raise InvalidArgumentError(
                f"Function {self.name!r}: min_args ({self.min_args}) exceeds "
                f"max_args ({self.max_args})"
            )

    def accepts(self, count: int) -> bool:
        return self.min_args <= count <= self.max_args

    def calculate(self, args: Sequence[float]) -> float:
        return self.body(*args)

    def __repr__(self) -> str:
        return f"Function({self.name or '<anonymous>'}, {self.min_args}..{self.max_args})"


def total(func: Callable[..., float]) -> Callable[..., float]:
    """Map Python's math domain errors to NaN and overflows to infinity."""

    @wraps(func)
    def wrapper(*args: float) -> float:
        try:
            return func(*args)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    return wrapper


def _divide(dividend: float, divisor: float) -> float:
    if divisor == 0:
        raise ParseError(ErrorKind.DIVIDE_BY_ZERO, "Cannot divide by 0")
    return dividend / divisor


@total
def _root(radicand: float, degree: float = 2.0) -> float:
    exponent = math.copysign(math.inf, degree) if degree == 0 else 1 / degree
    return math.pow(radicand, exponent)


# Operator bindings (anonymous, never registered)
ADD = Function(None, 2, 2, operator.add)
SUBTRACT = Function(None, 2, 2, operator.sub)
MULTIPLY = Function(None, 2, 2, operator.mul)
DIVIDE = Function(None, 2, 2, _divide)
POWER = Function(None, 2, 2, total(math.pow))

# Named built-ins
ROOT = Function("root", 1, 2, _root)
SIN = Function("sin", 1, 1, total(math.sin))
ASIN = Function("asin", 1, 1, total(math.asin))
COS = Function("cos", 1, 1, total(math.cos))
ACOS = Function("acos", 1, 1, total(math.acos))
TAN = Function("tan", 1, 1, total(math.tan))
ATAN = Function("atan", 1, 1, total(math.atan))
RAD = Function("rad", 1, 1, math.radians)
DEG = Function("deg", 1, 1, math.degrees)

BUILTINS: tuple[Function, ...] = (ROOT, SIN, ASIN, COS, ACOS, TAN, ATAN, RAD, DEG)


class FunctionRegistry:
    """
    Name to Function catalog.

    Lookup is exact and case-sensitive. The first function registered under
    a name wins; registering the name again is a no-op.
    """

    def __init__(self, functions: Sequence[Function] = ()):
        self._functions: dict[str, Function] = {}
        self._lock = threading.Lock()
        for function in functions:
            self.register(function)

    @classmethod
    def default(cls) -> FunctionRegistry:
        """Registry pre-seeded with the built-in functions."""
        return cls(BUILTINS)

    def register(self, function: Function) -> bool:
        """
        Add a named function unless its name is taken.

        Returns:
            True if the function was added
        """
        if function.name is None:
            return False

        with self._lock:
            if function.name in self._functions:
                logger.debug("Function %r already registered, ignoring", function.name)
                return False
            self._functions[function.name] = function
        return True

    def lookup(self, name: str) -> Function | None:
        return self._functions.get(name)

    def copy(self) -> FunctionRegistry:
        return FunctionRegistry(list(self._functions.values()))

    def names(self) -> list[str]:
        return list(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[Function]:
        return iter(list(self._functions.values()))

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return f"FunctionRegistry({', '.join(self._functions)})"

"""
Binary operators and their priority tiers.

There are exactly two tiers. Additive operators sit in the LOW tier and
multiplicative ones (including power) in the HIGH tier; within a tier
evaluation runs left to right.
"""

from __future__ import annotations

from enum import Enum

from . import functions as fn
from .functions import Function


class Tier(Enum):
    """Operator priority tiers."""

    LOW = "low"
    HIGH = "high"

    @property
    def is_highest(self) -> bool:
        return self is Tier.HIGH

    @property
    def higher(self) -> Tier:
        """The next tighter-binding tier."""
        return Tier.HIGH

    @property
    def operators(self) -> tuple[Operator, ...]:
        return tuple(op for op in Operator if op.tier is self)


class Operator(Enum):
    """
    A binary operator.

    Attributes:
        symbol: The operator character
        tier: Priority tier
        function: Applied as function(left, right)
        reverse: Undoes function: reverse(function(a, b), b) == a
    """

    PLUS = ("+", Tier.LOW, fn.ADD, fn.SUBTRACT)
    MINUS = ("-", Tier.LOW, fn.SUBTRACT, fn.ADD)
    MULTIPLY = ("*", Tier.HIGH, fn.MULTIPLY, fn.DIVIDE)
    DIVIDE = ("/", Tier.HIGH, fn.DIVIDE, fn.MULTIPLY)
    POWER = ("^", Tier.HIGH, fn.POWER, fn.ROOT)

    def __init__(self, symbol: str, tier: Tier, function: Function, reverse: Function):
        self.symbol = symbol
        self.tier = tier
        self.function = function
        self.reverse = reverse

    @classmethod
    def from_symbol(cls, symbol: str) -> Operator | None:
        for op in cls:
            if op.symbol == symbol:
                return op
        return None

    def calculate(self, left: float, right: float) -> float:
        return self.function.calculate((left, right))

    def undo(self, result: float, right: float) -> float:
        """
        Recover the left operand from a result and the right operand.

        Example: Operator.DIVIDE.undo(2.0, 4.0) == 8.0
        """
        return self.reverse.calculate((result, right))

    def __str__(self) -> str:
        return self.symbol

"""
Exact rational numbers for grade weightings.

Weightings such as 1/3 must add up to exactly one, which floating point
cannot guarantee, so they are kept as reduced integer fractions.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Fraction(BaseModel):
    """
    A reduced fraction with a positive denominator.

    Examples:
        >>> Fraction(2, 4)
        Fraction(1, 2)
        >>> Fraction(1, 3) + Fraction(1, 6)
        Fraction(1, 2)
        >>> Fraction(0.25)
        Fraction(1, 4)
    """

    model_config = ConfigDict(frozen=True)

    numerator: int = Field(description="The numerator")
    denominator: int = Field(description="The denominator, always positive")

    def __init__(self, num: int | float, den: int = 1, **kwargs):
        """
        Create a Fraction.

        Args:
            num: Numerator, or the whole value when den is 1
            den: Denominator (default 1)

        Raises:
            ValueError: If den is zero
        """
        # If given a float, scale by powers of 10 until it is whole
        if isinstance(num, float) and den == 1:
            temp_den = 1
            temp_num = num
            while abs(temp_num - round(temp_num)) > 1e-9 and temp_den < 1e10:
                temp_num *= 10
                temp_den *= 10
            num = int(round(temp_num))
            den = temp_den

        num = int(num)
        den = int(den)

        if den == 0:
            raise ValueError("Fraction denominator cannot be zero")

        # Lowest terms, sign carried by the numerator
        if den < 0:
            num, den = -num, -den
        g = math.gcd(num, den)
        num, den = num // g, den // g
        super().__init__(numerator=num, denominator=den, **kwargs)

    @staticmethod
    def _coerce(other: Any) -> Fraction | None:
        if isinstance(other, Fraction):
            return other
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return Fraction(other)
        return None

    def __add__(self, other: Any) -> Fraction:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        l = math.lcm(self.denominator, other.denominator)
        return Fraction(
            self.numerator * (l // self.denominator) + other.numerator * (l // other.denominator),
            l,
        )

    def __radd__(self, other: Any) -> Fraction:
        return self.__add__(other)

    def __mul__(self, other: Any) -> Fraction:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return Fraction(self.numerator * other.numerator, self.denominator * other.denominator)

    def __rmul__(self, other: Any) -> Fraction:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Fraction:
        """
        Raises:
            ValueError: When dividing by zero
        """
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return Fraction(self.numerator * other.denominator, self.denominator * other.numerator)

    def __eq__(self, other: object) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.numerator == other.numerator and self.denominator == other.denominator

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator))

    def __float__(self) -> float:
        return self.numerator / self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def __repr__(self) -> str:
        return f"Fraction({self.numerator}, {self.denominator})"


ONE = Fraction(1)

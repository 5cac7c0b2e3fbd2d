"""
Weighted average calculators.

Calculator works from a list of grades. ExpressionCalculator derives that
list from a weighting expression such as "(2a + 3b)/5", in which every
identifier names a grade and the coefficients give its share of the
average:

    term := [number] ('*' [number])* ( '(' term ('+' term)* ')' [number] | identifier ) ['/' number]

The shares must add up to exactly one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from ..core.errors import ErrorKind, GradeError, ParseError
from ..core.logging import get_logger
from ..parser.cursor import EOF, Cursor
from ..parser.literals import LiteralParser
from ..parser.operators import Operator
from .fraction import ONE, Fraction
from .grade import Grade

logger = get_logger(__name__)

MULTIPLY = "*"
DIVIDE = "/"
PLUS = "+"
OPEN_PAREN = "("
CLOSE_PAREN = ")"


class Calculator:
    """
    Weighted average over a fixed set of grades.

    Attributes:
        grades: The grades, in the order given
    """

    def __init__(self, grades: Sequence[Grade]):
        self.grades: tuple[Grade, ...] = tuple(grades)

    def get_grade(self, name: str) -> Grade | None:
        return next((grade for grade in self.grades if grade.name == name), None)

    def calculate_average(self) -> float:
        """Weighted mean of the grades that are set, or 0.0 if none are."""
        total = 0.0
        total_weighting = 0
        for grade in self.grades:
            if grade.is_set:
                total += grade.value * grade.weighting
                total_weighting += grade.weighting

        if total_weighting == 0:
            return 0.0
        return total / total_weighting

    def calculate_grade(self, grade: Grade | str, average: float) -> float:
        """
        Value grade needs for the average of it and every other set grade to
        equal average.

        The averaging is undone step by step: multiply back by the total
        weighting, subtract the other grades' contributions, then divide by
        the weighting of grade.

        Raises:
            GradeError: If no grade has the given name
            ParseError: If grade has a weighting of zero
        """
        if isinstance(grade, str):
            name = grade
            grade = self.get_grade(name)
            if grade is None:
                raise GradeError(ErrorKind.INVALID_GRADE, f"Invalid grade name '{name}'", name=name)

        others = [other for other in self.grades if other.is_set and other is not grade]
        total_weighting = grade.weighting + sum(other.weighting for other in others)

        result = Operator.DIVIDE.undo(average, total_weighting)
        for other in others:
            result = Operator.PLUS.undo(result, other.weighting * other.value)
        return Operator.MULTIPLY.undo(result, grade.weighting)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(g.name for g in self.grades)})"


@dataclass
class WeightedTerm:
    """
    A node of a weighting expression.

    A leaf names a grade; a group holds the terms inside parentheses and
    its weighting is always the sum of theirs.
    """

    weighting: Fraction = ONE
    name: str | None = None
    children: list[WeightedTerm] = field(default_factory=list)

    def scale(self, factor: Fraction) -> None:
        if self.children:
            for child in self.children:
                child.scale(factor)
            self.recount()
        else:
            self.weighting = self.weighting * factor

    def recount(self) -> None:
        total = self.children[0].weighting
        for child in self.children[1:]:
            total = total + child.weighting
        self.weighting = total

    def leaves(self) -> list[WeightedTerm]:
        if not self.children:
            return [self]
        return [leaf for child in self.children for leaf in child.leaves()]


class WeightingParser(LiteralParser):
    """Parses weighting expressions into WeightedTerm trees."""

    def parse_term(self) -> WeightedTerm:
        """
        Raises:
            GradeError: On a missing ')' or a missing grade name
        """
        multiplier = self.parse_number(allow_exponent=False)
        while self.cursor.is_next(MULTIPLY):
            multiplier = self._combine(multiplier, self.parse_number(allow_exponent=False))

        term = WeightedTerm()
        if self.cursor.is_next(OPEN_PAREN):
            term.children.append(self.parse_term())
            while self.cursor.is_next(PLUS):
                term.children.append(self.parse_term())
            if not self.cursor.is_next(CLOSE_PAREN):
                raise GradeError.expected(CLOSE_PAREN)
            multiplier = self._combine(multiplier, self.parse_number(allow_exponent=False))
            term.recount()
        else:
            term.name = self._parse_name()

        if multiplier:
            term.scale(Fraction(multiplier))

        if self.cursor.is_next(DIVIDE):
            divider = self.parse_number(allow_exponent=False)
            if divider:
                term.scale(ONE / Fraction(divider))
        return term

    @staticmethod
    def _combine(multiplier: float | None, number: float | None) -> float | None:
        if number is None:
            return multiplier
        if multiplier is None:
            return number
        return multiplier * number

    def _parse_name(self) -> str:
        self.cursor.skip_whitespace()
        chars: list[str] = []
        while (char := self.cursor.peek()) != EOF:
            if not (char.isascii() and (char.isalnum() or char == "_")):
                break
            if not chars and char.isdigit():
                break
            chars.append(self.cursor.pop())

        if not chars:
            raise GradeError(ErrorKind.EXPECTED_VARIABLE, "A variable is needed here")
        return "".join(chars)


class ExpressionCalculator(Calculator):
    """
    Calculator whose grades come from a weighting expression.

    Example:
        >>> calc = ExpressionCalculator("(a + b/2 + c/2)/2")
        >>> [(g.name, g.weighting) for g in calc.grades]
        [('a', 2), ('b', 1), ('c', 1)]

    Raises:
        GradeError: If the expression is malformed or its shares do not add
            up to one
    """

    def __init__(self, source: str | TextIO | Cursor):
        owns_cursor = not isinstance(source, Cursor)
        if isinstance(source, str):
            cursor = Cursor.from_string(source)
        elif owns_cursor:
            cursor = Cursor(source)
        else:
            cursor = source

        try:
            root = WeightingParser(cursor).parse_term()
            if owns_cursor:
                cursor.skip_whitespace()
                if not cursor.at_end():
                    char = cursor.peek()
                    raise GradeError(
                        ErrorKind.UNEXPECTED_CHARACTER,
                        f"Unexpected character '{char}'",
                        character=char,
                    )
        except ParseError:
            if owns_cursor:
                cursor.close()
            raise

        super().__init__(self._build_grades(root))

    @staticmethod
    def _build_grades(root: WeightedTerm) -> list[Grade]:
        if root.weighting != ONE:
            raise GradeError(
                ErrorKind.INVALID_AVERAGE_EXPRESSION,
                f"This is an invalid average expression, the weightings add up to {root.weighting}",
                total=str(root.weighting),
            )

        leaves = root.leaves()
        denominator = 1
        for leaf in leaves:
            denominator = math.lcm(denominator, leaf.weighting.denominator)

        weightings: dict[str, int] = {}
        for leaf in leaves:
            share = leaf.weighting.numerator * (denominator // leaf.weighting.denominator)
            weightings[leaf.name] = weightings.get(leaf.name, 0) + share

        logger.debug("Weightings over %d: %s", denominator, weightings)
        return [Grade(name=name, weighting=weighting) for name, weighting in weightings.items()]

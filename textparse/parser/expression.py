"""
Expression parser for arithmetic with variables and function calls.

Parsing runs once per operator tier. The LOW tier parses HIGH tier units
separated by + and -; the HIGH tier parses terms separated by *, / and ^.
An operator of the other tier ends the current tier and is left for the
invocation waiting on the stack, so precedence falls out of the recursion
rather than a lookup table.

Grammar:

    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/' | '^') factor)*
    factor := '(' expr ')' | [number] [identifier ['(' expr (',' expr)* ')']]

Runs of literal arithmetic are folded into a single Constant while no
variable has been seen, so "5+2*3" parses to Constant(11.0).
"""

from __future__ import annotations

from typing import TextIO

from ..core.errors import ErrorKind, ParseError
from .ast import Component, Constant, Expression, FunctionCall, Group, Variable
from .context import Context
from .cursor import EOF, Cursor
from .evaluation import bind, evaluate, render
from .functions import FunctionRegistry
from .literals import LiteralParser
from .operators import Operator, Tier

OPEN_PAREN = "("
CLOSE_PAREN = ")"
ARGUMENT_SEPARATOR = ","


def _is_identifier_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char == "_")


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


class ExpressionParser(LiteralParser):
    """
    Recursive descent parser building a component tree from a Cursor.

    Attributes:
        cursor: The cursor characters are read from
        functions: Registry consulted for function calls
    """

    def __init__(self, cursor: Cursor, functions: FunctionRegistry | None = None):
        super().__init__(cursor)
        self.functions = functions if functions is not None else FunctionRegistry.default()

    def parse(self, tier: Tier = Tier.LOW) -> Component:
        """
        Parse operands joined by the operators of one tier.

        Args:
            tier: The tier whose operators are consumed here

        Returns:
            The single unit when no operator followed it, otherwise a folded
            Constant or an Expression

        Raises:
            ParseError: On malformed input
        """
        unit = self._parse_unit(tier)
        components: list[Component] = []
        operators: list[Operator] = []

        while True:
            self.cursor.skip_whitespace()
            char = self.cursor.peek()
            if char == EOF:
                break

            operator = Operator.from_symbol(char)
            if operator not in tier.operators:
                if operator is None and char not in (CLOSE_PAREN, ARGUMENT_SEPARATOR):
                    raise ParseError(
                        ErrorKind.UNEXPECTED_CHARACTER,
                        f"Unexpected character '{char}'",
                        character=char,
                    )
                break

            self.cursor.pop()
            following = self._parse_unit(tier)

            if not components and not unit.variables and not following.variables:
                unit = Constant(operator.calculate(evaluate(unit), evaluate(following)))
                continue

            if not components:
                components.append(unit)
            components.append(following)
            operators.append(operator)

        if not components:
            return unit
        return Expression(tuple(components), tuple(operators))

    def parse_term(self) -> Component:
        """
        Parse a group, a function call, or a variable/number with a coefficient.

        Raises:
            ParseError: On an unmatched parenthesis, an unknown function, a
                wrong argument count, or when no term is present at all
        """
        if self.cursor.is_next(OPEN_PAREN):
            inner = self.parse(Tier.LOW)
            if not self.cursor.is_next(CLOSE_PAREN):
                raise ParseError.expected(CLOSE_PAREN)
            return Group(inner)

        coefficient = self.parse_number(allow_exponent=False)
        name = self._parse_identifier()

        if name and self.cursor.is_next(OPEN_PAREN):
            call = self._parse_call(name)
            if coefficient is None:
                return call
            return Expression((Constant(coefficient), call), (Operator.MULTIPLY,))

        if name:
            return Variable(name, coefficient)
        if coefficient is not None:
            return Constant(coefficient)

        char = self.cursor.peek()
        raise ParseError(
            ErrorKind.NO_VALID_TERM,
            "No valid data has been found"
            + (f" at '{char}'" if char != EOF else " before end of input"),
        )

    def _parse_unit(self, tier: Tier) -> Component:
        if tier.is_highest:
            return self.parse_term()
        return self.parse(tier.higher)

    def _parse_identifier(self) -> str:
        chars: list[str] = []
        while (char := self.cursor.peek()) != EOF:
            matches = _is_identifier_char(char) if chars else _is_identifier_start(char)
            if not matches:
                break
            chars.append(self.cursor.pop())
        return "".join(chars)

    def _parse_call(self, name: str) -> FunctionCall:
        function = self.functions.lookup(name)
        if function is None:
            raise ParseError(
                ErrorKind.UNKNOWN_FUNCTION, f"Unknown function '{name}'", name=name
            )

        args = [self.parse(Tier.LOW)]
        while self.cursor.is_next(ARGUMENT_SEPARATOR):
            args.append(self.parse(Tier.LOW))
        if not self.cursor.is_next(CLOSE_PAREN):
            raise ParseError.expected(CLOSE_PAREN)

        if not function.accepts(len(args)):
            raise ParseError(
                ErrorKind.ARGUMENT_COUNT_OUT_OF_RANGE,
                f"{name}() takes between {function.min_args} and "
                f"{function.max_args} arguments, got {len(args)}",
                name=name,
                count=len(args),
            )
        return FunctionCall(function, tuple(args))


class MathExpression:
    """
    A parsed expression that can be re-evaluated after rebinding variables.

    Example:
        >>> expr = MathExpression("3x+2")
        >>> expr.variables
        ['x']
        >>> expr.set_variable("x", 4.0)
        >>> expr.value()
        14.0

    Attributes:
        root: Root of the component tree
        context: Functions and default variable values used while parsing
    """

    def __init__(self, source: str | TextIO | Cursor, context: Context | None = None):
        """
        Parse an expression.

        A cursor passed in is shared with the caller and may hold more input
        after the expression; strings and streams must contain exactly one
        expression.

        Raises:
            ParseError: On malformed input
            InvalidArgumentError: If source is None
        """
        self.context = context if context is not None else Context.default()

        owns_cursor = not isinstance(source, Cursor)
        if isinstance(source, str):
            cursor = Cursor.from_string(source)
        elif owns_cursor:
            cursor = Cursor(source)
        else:
            cursor = source

        parser = ExpressionParser(cursor, self.context.functions)
        try:
            self.root = parser.parse()
            if owns_cursor:
                cursor.skip_whitespace()
                if not cursor.at_end():
                    char = cursor.peek()
                    raise ParseError(
                        ErrorKind.UNEXPECTED_CHARACTER,
                        f"Unexpected character '{char}'",
                        character=char,
                    )
        except ParseError:
            if owns_cursor:
                cursor.close()
            raise

        for name in self.root.variables:
            if name in self.context.variables:
                bind(self.root, name, self.context.variables[name])

    @property
    def variables(self) -> list[str]:
        """Distinct variable names in order of first appearance."""
        return list(self.root.variables)

    def has_variable(self) -> bool:
        return bool(self.root.variables)

    def set_variable(self, name: str, value: float) -> None:
        """Bind every occurrence of name; unknown names are ignored."""
        bind(self.root, name, value)

    def value(self) -> float:
        return evaluate(self.root)

    def __str__(self) -> str:
        return render(self.root)

    def __repr__(self) -> str:
        return f"MathExpression({render(self.root)!r})"

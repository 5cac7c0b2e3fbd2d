"""
Component tree produced by the expression parser.

The tree is a closed family of node types:

- Constant: a number
- Variable: a named quantity with an optional coefficient
- Group: a parenthesized sub-expression
- FunctionCall: a resolved Function applied to argument components
- Expression: components joined by operators of one tier, evaluated left to right

Every node records, at construction, the distinct free variable names found
beneath it in order of first appearance. Evaluation, rebinding and
rendering live in evaluation.py and dispatch on the node type.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union

from .functions import Function
from .operators import Operator


def collect_variables(children: Iterable[Component]) -> tuple[str, ...]:
    """Union of the children's variable names, deduplicated, first seen first."""
    names: dict[str, None] = {}
    for child in children:
        for name in child.variables:
            names.setdefault(name)
    return tuple(names)


@dataclass(frozen=True)
class Constant:
    """
    A numeric literal, or the folded result of literal arithmetic.

    Examples: 42, -2.5, the 11 that "5+2*3" folds into
    """

    number: float

    @property
    def variables(self) -> tuple[str, ...]:
        return ()


@dataclass(eq=False)
class Variable:
    """
    A named variable.

    Evaluates to coefficient * value. The value is 0.0 until bound.

    Examples: x, 3x, 0.5rate
    """

    name: str
    coefficient: float | None = None
    value: float = 0.0
    variables: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        self.variables = (self.name,)


@dataclass(frozen=True)
class Group:
    """A parenthesized sub-expression, e.g. (x + 1)."""

    inner: Component
    variables: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "variables", self.inner.variables)


@dataclass(frozen=True)
class FunctionCall:
    """A call of a resolved function, e.g. root(x, 3)."""

    function: Function
    args: tuple[Component, ...]
    variables: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "variables", collect_variables(self.args))

    @property
    def name(self) -> str:
        return self.function.name or "<anonymous>"


@dataclass(frozen=True)
class Expression:
    """
    Components joined by operators of a single tier.

    There is always exactly one operator fewer than components; operator i
    sits between component i and component i + 1.
    """

    components: tuple[Component, ...]
    operators: tuple[Operator, ...] = ()
    variables: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        if len(self.operators) != len(self.components) - 1:
            raise ValueError(
                f"Expression needs {len(self.components) - 1} operators, "
                f"got {len(self.operators)}"
            )
        object.__setattr__(self, "variables", collect_variables(self.components))


Component = Union[Constant, Variable, Group, FunctionCall, Expression]

"""
Operations over the component tree: evaluation, variable rebinding and
rendering back to expression text.

Precedence is fully encoded in the tree shape, so evaluation only ever
applies operators left to right.
"""

from __future__ import annotations

from .ast import Component, Constant, Expression, FunctionCall, Group, Variable


def evaluate(component: Component) -> float:
    """
    Reduce a component to its value.

    Raises:
        ParseError: If a division by zero is reached
    """
    match component:
        case Constant(number):
            return number
        case Variable(coefficient=None, value=value):
            return value
        case Variable(coefficient=coefficient, value=value):
            return coefficient * value
        case Group(inner):
            return evaluate(inner)
        case FunctionCall(function, args):
            return function.calculate([evaluate(arg) for arg in args])
        case Expression(components, operators):
            result = evaluate(components[0])
            for operator, operand in zip(operators, components[1:]):
                result = operator.calculate(result, evaluate(operand))
            return result
    raise TypeError(f"Not a component: {component!r}")


def bind(component: Component, name: str, value: float) -> None:
    """
    Set every occurrence of variable name beneath component to value.

    Subtrees that do not mention the variable are not visited.
    """
    if name not in component.variables:
        return

    match component:
        case Variable():
            component.value = value
        case Group(inner):
            bind(inner, name, value)
        case FunctionCall(args=children) | Expression(components=children):
            for child in children:
                bind(child, name, value)


def format_number(number: float) -> str:
    """Format a number without a trailing .0 for whole values."""
    if number.is_integer():
        return str(int(number))
    return str(number)


def render(component: Component) -> str:
    """
    Render a component as expression text that parses back to the same value.

    Examples:
    - Expression((Constant(2.0), Variable("x")), (Operator.MULTIPLY,)) → "2 * x"
    - FunctionCall(ROOT, (Constant(9.0),)) → "root(9)"
    """
    match component:
        case Constant(number):
            return format_number(number)
        case Variable(name, None):
            return name
        case Variable(name, coefficient):
            return f"{format_number(coefficient)}{name}"
        case Group(inner):
            return f"({render(inner)})"
        case FunctionCall(args=args):
            return f"{component.name}({', '.join(render(arg) for arg in args)})"
        case Expression(components, operators):
            parts = [render(components[0])]
            for operator, operand in zip(operators, components[1:]):
                parts.append(f"{operator.symbol} {render(operand)}")
            return " ".join(parts)
    raise TypeError(f"Not a component: {component!r}")

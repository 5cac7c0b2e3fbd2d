"""
Expression Parser Package

This package provides the character cursor, the literal value grammar and
the arithmetic expression parser built on them.
"""

from .ast import Component, Constant, Expression, FunctionCall, Group, Variable
from .context import Context, ContextConfig, FunctionDefinition
from .cursor import EOF, Cursor
from .evaluation import bind, evaluate, render
from .expression import ExpressionParser, MathExpression
from .functions import Function, FunctionRegistry
from .literals import LiteralParser
from .operators import Operator, Tier

__all__ = [
    "Component",
    "Constant",
    "Expression",
    "FunctionCall",
    "Group",
    "Variable",
    "Context",
    "ContextConfig",
    "FunctionDefinition",
    "EOF",
    "Cursor",
    "bind",
    "evaluate",
    "render",
    "ExpressionParser",
    "MathExpression",
    "Function",
    "FunctionRegistry",
    "LiteralParser",
    "Operator",
    "Tier",
]

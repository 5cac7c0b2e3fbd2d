"""
Parsing contexts.

A Context bundles what an expression may refer to: the function registry
consulted for calls, default values for variables, and free-form flags.
Contexts are built explicitly and passed to MathExpression; there is no
process-wide catalog.

Contexts can be loaded from YAML:

    name: physics
    variables:
      g: 9.81
    functions:
      - name: square
        params: [x]
        body: x^2
      - name: hyp
        params: [a, b]
        body: root(a^2 + b^2)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.logging import get_logger
from .functions import Function, FunctionRegistry

logger = get_logger(__name__)


class FunctionDefinition(BaseModel):
    """A user function written as an expression over its parameters."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(pattern=r"^[A-Za-z_][A-Za-z0-9_]*$", description="Call name")
    params: list[str] = Field(default_factory=list, description="Parameter names, in call order")
    body: str = Field(min_length=1, description="Expression evaluated on each call")

    @field_validator("params")
    @classmethod
    def _validate_params(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("parameter names must be distinct")
        return value


class ContextConfig(BaseModel):
    """Validated shape of a context YAML document."""

    name: str = "custom"
    functions: list[FunctionDefinition] = Field(default_factory=list)
    variables: dict[str, float] = Field(default_factory=dict)
    flags: dict[str, Any] = Field(default_factory=dict)


def expression_function(definition: FunctionDefinition, functions: FunctionRegistry) -> Function:
    """
    Build a Function whose body is an expression.

    The body is parsed once, against the functions registered so far; each
    call binds the parameters and evaluates it.

    Raises:
        ParseError: If the body is not a valid expression
    """
    from .expression import MathExpression

    body = MathExpression(definition.body, Context(definition.name, functions=functions))
    params = tuple(definition.params)

    def calculate(*args: float) -> float:
        for param, arg in zip(params, args):
            body.set_variable(param, arg)
        return body.value()

    return Function(definition.name, len(params), len(params), calculate)


@dataclass
class Context:
    """
    Environment an expression is parsed in.

    Attributes:
        name: Context name
        functions: Functions callable from expressions
        variables: Values bound to matching variables right after parsing
        flags: Additional context-specific flags
    """

    name: str
    functions: FunctionRegistry = field(default_factory=FunctionRegistry.default)
    variables: dict[str, float] = field(default_factory=dict)
    flags: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def default(cls) -> Context:
        """Context with only the built-in functions."""
        return cls("default")

    @classmethod
    def from_config(cls, config: ContextConfig) -> Context:
        """
        Build a context from a validated configuration.

        User functions are registered after the built-ins and in document
        order, so a definition may call the ones before it. A definition
        reusing a taken name is ignored.
        """
        functions = FunctionRegistry.default()
        for definition in config.functions:
            functions.register(expression_function(definition, functions))

        return cls(
            name=config.name,
            functions=functions,
            variables=dict(config.variables),
            flags=dict(config.flags),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Context:
        """
        Load context from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Context instance

        Raises:
            pydantic.ValidationError: If the document has the wrong shape
            ParseError: If a function body is malformed
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f)

        context = cls.from_config(ContextConfig.model_validate(data or {}))
        logger.info(
            "Loaded context %r from %s (%d functions)", context.name, path, len(context.functions)
        )
        return context

    def get_flag(self, flag_name: str, default: Any = None) -> Any:
        return self.flags.get(flag_name, default)

    def set_flag(self, flag_name: str, value: Any) -> None:
        self.flags[flag_name] = value

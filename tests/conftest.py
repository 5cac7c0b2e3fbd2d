"""
Shared pytest fixtures.

This module provides:
- Cursors and parsers over literal text
- A YAML context file with user functions
- httpx clients backed by a mock transport
"""

from typing import Callable

import httpx
import pytest

from textparse.parser import Cursor, FunctionRegistry, LiteralParser


@pytest.fixture
def cursor() -> Callable[[str], Cursor]:
    """Factory for cursors over a string."""
    return Cursor.from_string


@pytest.fixture
def literal_parser() -> Callable[[str], LiteralParser]:
    """Factory for literal parsers over a string."""
    def _factory(text: str) -> LiteralParser:
        return LiteralParser(Cursor.from_string(text))
    return _factory


@pytest.fixture
def registry() -> FunctionRegistry:
    """A fresh registry holding the built-in functions."""
    return FunctionRegistry.default()


CONTEXT_YAML = """\
name: physics
variables:
  g: 9.81
flags:
  units: metric
functions:
  - name: square
    params: [x]
    body: "x^2"
  - name: hyp
    params: [a, b]
    body: "root(a^2 + b^2)"
  - name: quad
    params: [x]
    body: "square(square(x))"
"""


@pytest.fixture
def context_file(tmp_path):
    """Path to a YAML context defining square, hyp and quad."""
    path = tmp_path / "context.yaml"
    path.write_text(CONTEXT_YAML)
    return path


@pytest.fixture
def mock_client():
    """Factory for httpx clients that answer through a handler function."""
    clients: list[httpx.Client] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _factory

    for client in clients:
        client.close()

"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from texir import ir
from texir.ast import Command, Document
from texir.elaborate import elaborate
from texir.parser import parse
from texir.scanner import scan
from texir.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that scans source and returns tokens."""

    def _lex(source: str) -> list[Token]:
        return scan(source)

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Document."""

    def _parse(source: str) -> Document:
        return parse(source)

    return _parse


@pytest.fixture
def elab():
    """Return a helper that runs the full pipeline on source text."""

    def _elab(source: str) -> tuple[ir.Document, list[str]]:
        return elaborate(parse(source))

    return _elab


# Source inputs that exercise every scanner and parser recovery path
MALFORMED_INPUTS = [
    "",
    "\\",
    "{",
    "}",
    "}}}{{{",
    "\\{",
    "\\}",
    "\\\\",
    "\\1",
    "\\ ",
    "{\\",
    "\\emph{",
    "\\section{unclosed",
    "}\\section}{x}",
    "\x00\x01\x02",
    "\\begin{itemize}\\item a\\end{itemize}",
    "{{{{{{{{{{}}}}}}}}}}",
    "text \\cmd{a}{b}{c} more",
    "é\\ünïcode{ß}",
    "\r\n\t",
]

# Nesting far deeper than the interpreter recursion limit
DEEPLY_NESTED_INPUTS = [
    pytest.param("{" * 5000 + "x" + "}" * 5000, id="balanced-groups"),
    pytest.param("{" * 5000 + "x", id="unterminated-groups"),
    pytest.param("\\emph" + "{" * 3000, id="unterminated-command-arg"),
    pytest.param("\\emph{" * 3000 + "x", id="nested-style-commands"),
    pytest.param("\\foo{" * 3000 + "x" + "}" * 3000, id="nested-unknown-commands"),
    pytest.param("\\begin" + "{" * 3000 + "x", id="nested-begin-argument"),
]


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_command(node: object, name: str, num_args: int = 0) -> None:
    """Assert basic properties of a Command node."""
    assert isinstance(node, Command), f"Expected Command, got {type(node).__name__}"
    assert node.name == name, f"Expected name '{name}', got '{node.name}'"
    assert len(node.args) == num_args, f"Expected {num_args} args, got {len(node.args)}"

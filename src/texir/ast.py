"""AST node types for parsed markup documents.

Spans are best-effort source locations and do not take part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from texir.tokens import Span


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text run."""

    value: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Comment:
    """Source comment. Only present in hand-built trees."""

    value: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Group:
    """Brace-delimited group {...}."""

    children: tuple[Node, ...]
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Command:
    r"""A command \name followed by zero or more brace groups."""

    name: str
    args: tuple[Node, ...] = ()
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Environment:
    r"""Named body-bearing construct, \begin{name}...\end{name}.

    The shipped parser never produces these; they come from hand-built trees.
    """

    name: str
    args: tuple[Node, ...]
    body: tuple[Node, ...]
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Document:
    """Root document node."""

    children: tuple[Node, ...]
    span: Span | None = field(default=None, compare=False)


Node = Text | Comment | Group | Command | Environment | Document

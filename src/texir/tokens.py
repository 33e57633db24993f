"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    COMMAND = auto()  # \name, value is the name without the backslash
    TEXT = auto()  # run of characters other than \ { }, or a lone backslash
    LBRACE = auto()  # {
    RBRACE = auto()  # }


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanner token with its value and original source lexeme."""

    type: TokenType
    value: str
    raw: str
    span: Span


# Characters that terminate a text run
SPECIAL_CHARS = frozenset("\\{}")


def is_command_char(ch: str) -> bool:
    """Return True if ch may appear in a command name."""
    return ch.isalpha()

"""Scanner: converts source text into a flat token list.

The scanner is total: every input string produces a token list, and the
concatenated ``raw`` lexemes of the result reproduce the input exactly.
"""

from __future__ import annotations

from texir.tokens import SPECIAL_CHARS, Position, Span, Token, TokenType, is_command_char


class Scanner:
    """Tokenize markup source into a list of Token objects."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def scan(self) -> list[Token]:
        """Scan the full source and return the token list."""
        while self._pos < len(self._source):
            ch = self._peek()
            if ch == "\\":
                self._scan_backslash()
            elif ch == "{":
                start = self._current_pos()
                self._advance()
                self._emit(TokenType.LBRACE, "{", "{", start)
            elif ch == "}":
                start = self._current_pos()
                self._advance()
                self._emit(TokenType.RBRACE, "}", "}", start)
            else:
                self._scan_text()
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position) -> Token:
        tok = Token(tt, value, raw, Span(start, self._current_pos()))
        self._tokens.append(tok)
        return tok

    # ------------------------------------------------------------------
    # Token kinds
    # ------------------------------------------------------------------

    def _scan_backslash(self) -> None:
        start = self._current_pos()
        self._advance()  # consume backslash

        # Control symbol or trailing backslash: keep the backslash as text
        if not is_command_char(self._peek()):
            self._emit(TokenType.TEXT, "\\", "\\", start)
            return

        chars = []
        while self._pos < len(self._source) and is_command_char(self._peek()):
            chars.append(self._advance())
        name = "".join(chars)
        self._emit(TokenType.COMMAND, name, f"\\{name}", start)

    def _scan_text(self) -> None:
        start = self._current_pos()
        chars = []
        while self._pos < len(self._source) and self._peek() not in SPECIAL_CHARS:
            chars.append(self._advance())
        text = "".join(chars)
        self._emit(TokenType.TEXT, text, text, start)


def scan(source: str) -> list[Token]:
    """Convenience function: scan source text and return the token list."""
    return Scanner(source).scan()

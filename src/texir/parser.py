"""Parser: converts a token list into an AST.

The parser never fails: unterminated groups are closed at end of input and a
closing brace with no open group becomes literal text. Open groups live on an
explicit stack, so nesting depth is bounded by memory, not the call stack.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from texir.ast import Command, Document, Group, Node, Text
from texir.scanner import scan
from texir.tokens import Position, Span, Token, TokenType

_ORIGIN = Position(1, 1, 0)


@dataclass
class _Frame:
    """One open brace group (or the document root) being filled."""

    start: Position
    children: list[Node] = field(default_factory=list)
    is_arg: bool = False
    # Command whose argument groups are still being collected
    command: Token | None = None
    args: list[Node] = field(default_factory=list)


class Parser:
    """Stack-based parser for scanner token lists."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _prev_end(self, default: Position) -> Position:
        """End position of the previously consumed token."""
        if self._pos > 0:
            return self._tokens[self._pos - 1].span.end
        return default

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def parse(self) -> Document:
        start = self._tokens[0].span.start if self._tokens else _ORIGIN
        root = _Frame(start)
        stack = [root]

        while self._pos < len(self._tokens):
            tok = self._tokens[self._pos]
            frame = stack[-1]

            if frame.command is not None:
                if tok.type == TokenType.LBRACE:
                    self._advance()
                    stack.append(_Frame(tok.span.start, is_arg=True))
                    continue
                self._finish_command(frame)

            self._advance()
            if tok.type == TokenType.RBRACE:
                if len(stack) > 1:
                    self._close_group(stack)
                else:
                    frame.children.append(Text("}", tok.span))
            elif tok.type == TokenType.LBRACE:
                stack.append(_Frame(tok.span.start))
            elif tok.type == TokenType.COMMAND:
                frame.command = tok
            else:
                frame.children.append(Text(tok.value, tok.span))

        # Unterminated groups are closed implicitly at end of input
        while len(stack) > 1:
            self._close_group(stack)
        self._finish_command(root)
        return Document(tuple(root.children), Span(start, self._prev_end(start)))

    def _close_group(self, stack: list[_Frame]) -> None:
        frame = stack.pop()
        self._finish_command(frame)
        group = Group(tuple(frame.children), Span(frame.start, self._prev_end(frame.start)))
        parent = stack[-1]
        if frame.is_arg:
            parent.args.append(group)
        else:
            parent.children.append(group)

    def _finish_command(self, frame: _Frame) -> None:
        name_tok = frame.command
        if name_tok is None:
            return
        end = self._prev_end(name_tok.span.end)
        frame.children.append(
            Command(name_tok.value, tuple(frame.args), Span(name_tok.span.start, end))
        )
        frame.command = None
        frame.args = []


def parse_tokens(tokens: list[Token]) -> Document:
    """Parse a token list into a Document AST."""
    return Parser(tokens).parse()


def parse(source: str) -> Document:
    """Convenience function: scan and parse source text."""
    return parse_tokens(scan(source))

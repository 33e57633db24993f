"""Minimal LSP server for texir: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from texir import __version__
from texir.elaborate import elaborate_located
from texir.parser import parse
from texir.tokens import Span

server = LanguageServer("texir-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _to_range(span: Span | None) -> Range:
    """Convert a 1-based source span to a 0-based LSP range."""
    if span is None:
        return Range(start=Position(line=0, character=0), end=Position(line=0, character=0))
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the conversion pipeline and publish its diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    _, located = elaborate_located(parse(doc.source))

    diagnostics = [
        Diagnostic(
            range=_to_range(span),
            message=message,
            severity=DiagnosticSeverity.Warning,
            source="texir",
        )
        for message, span in located
    ]

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()

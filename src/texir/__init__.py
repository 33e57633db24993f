"""LaTeX-like markup to backend-agnostic document IR."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from texir import ast
    from texir.ir import Document

__version__ = "0.1.0"


def convert(source: str, root: ast.Document | None = None) -> tuple[Document, list[str]]:
    """Scan, parse, and elaborate source into an IR document plus diagnostics.

    Callers that already hold the tree from ``parse(source)`` pass it as
    *root* so the source is not parsed twice.
    """
    from dataclasses import replace

    from texir.elaborate import elaborate
    from texir.parser import parse

    if root is None:
        root = parse(source)
    doc, diagnostics = elaborate(root)
    return replace(doc, raw=source), diagnostics

"""--debug AST and IR dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from texir import ast, ir


def dump_ast(node: ast.Node, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    _dump_node(node, 0, file)


def dump_ir(doc: ir.Document, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable IR tree to *file*."""
    _dump_document(doc, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------


def _dump_node(node: ast.Node, depth: int, f: TextIO) -> None:
    if isinstance(node, ast.Text):
        f.write(f"{_indent(depth)}Text({node.value!r})\n")
    elif isinstance(node, ast.Comment):
        f.write(f"{_indent(depth)}Comment({node.value!r})\n")
    elif isinstance(node, ast.Command):
        f.write(f"{_indent(depth)}Command \\{node.name}\n")
        for arg in node.args:
            _dump_node(arg, depth + 1, f)
    elif isinstance(node, ast.Group):
        f.write(f"{_indent(depth)}Group\n")
        for child in node.children:
            _dump_node(child, depth + 1, f)
    elif isinstance(node, ast.Environment):
        f.write(f"{_indent(depth)}Environment {node.name}\n")
        for arg in node.args:
            f.write(f"{_indent(depth + 1)}Arg\n")
            _dump_node(arg, depth + 2, f)
        for child in node.body:
            _dump_node(child, depth + 1, f)
    elif isinstance(node, ast.Document):
        f.write(f"{_indent(depth)}Document\n")
        for child in node.children:
            _dump_node(child, depth + 1, f)


# ---------------------------------------------------------------------------
# IR
# ---------------------------------------------------------------------------


def _dump_document(doc: ir.Document, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Document\n")
    meta = doc.metadata
    for name in ("title", "author", "date"):
        value = getattr(meta, name)
        if value is not None:
            f.write(f"{_indent(depth + 1)}{name}={value!r}\n")
    if meta.keywords:
        f.write(f"{_indent(depth + 1)}keywords={list(meta.keywords)!r}\n")
    if meta.abstract is not None:
        f.write(f"{_indent(depth + 1)}Abstract\n")
        for block in meta.abstract:
            _dump_block(block, depth + 2, f)
    for block in doc.content:
        _dump_block(block, depth + 1, f)


def _dump_block(block: ir.Block, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    if isinstance(block, ir.Paragraph):
        f.write(f"{pad}Paragraph\n")
        for inline in block.inlines:
            _dump_inline(inline, depth + 1, f)
    elif isinstance(block, ir.Section):
        label = f" label={block.label!r}" if block.label else ""
        f.write(f"{pad}Section level={block.level}{label}\n")
        for inline in block.title:
            _dump_inline(inline, depth + 1, f)
    elif isinstance(block, ir.ListBlock):
        f.write(f"{pad}List ordered={block.ordered}\n")
        for item in block.items:
            f.write(f"{_indent(depth + 1)}Item\n")
            for child in item:
                _dump_block(child, depth + 2, f)
    elif isinstance(block, ir.Quote):
        f.write(f"{pad}Quote\n")
        for child in block.content:
            _dump_block(child, depth + 1, f)
    elif isinstance(block, ir.Verbatim):
        f.write(f"{pad}Verbatim({block.text!r})\n")
    elif isinstance(block, ir.Raw):
        f.write(f"{pad}Raw[{block.format}]({block.content!r})\n")
    elif isinstance(block, ir.EnvironmentBlock):
        f.write(f"{pad}Environment {block.name} args={list(block.args)!r}\n")
        for child in block.content:
            _dump_block(child, depth + 1, f)


def _dump_inline(inline: ir.Inline, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    if isinstance(inline, ir.InlineText):
        if inline.style is ir.TextStyle.PLAIN:
            f.write(f"{pad}Text({inline.content!r})\n")
        else:
            f.write(f"{pad}Text({inline.content!r}, {inline.style.name})\n")
    elif isinstance(inline, ir.InlineCommand):
        f.write(f"{pad}Command \\{inline.name}\n")
        for arg in inline.args:
            _dump_inline(arg, depth + 1, f)
    elif isinstance(inline, ir.Math):
        kind = "display" if inline.display else "inline"
        f.write(f"{pad}Math[{kind}]({inline.content!r})\n")
    elif isinstance(inline, ir.Space):
        f.write(f"{pad}Space\n")
    elif isinstance(inline, ir.LineBreak):
        f.write(f"{pad}LineBreak\n")

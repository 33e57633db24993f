"""Two-pass elaborator: turns an AST into an IR document plus diagnostics.

Block elaboration recurses into environment bodies; inline elaboration walks
brace nesting with an explicit worklist. Nothing here raises:
every anomaly either degrades to no output for the offending node plus a
diagnostic, or is reinterpreted on a best-effort basis.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from texir import ast, ir
from texir.tokens import Span

# Command name -> inline style
STYLE_COMMANDS: dict[str, ir.TextStyle] = {
    "emph": ir.TextStyle.EMPHASIS,
    "textbf": ir.TextStyle.BOLD,
    "textit": ir.TextStyle.ITALIC,
    "texttt": ir.TextStyle.TYPEWRITER,
}

# Command name -> section level
SECTION_COMMANDS: dict[str, int] = {
    "section": 1,
    "subsection": 2,
    "subsubsection": 3,
    "paragraph": 4,
    "subparagraph": 5,
}

# Block-level commands that also record document metadata
METADATA_COMMANDS = ir.METADATA_COMMANDS

_LIST_ENVIRONMENTS: dict[str, bool] = {"itemize": False, "enumerate": True}

_END = object()


@dataclass
class ElabContext:
    """State carried through one elaboration call."""

    section_level: int = 0
    metadata: ir.Metadata = field(default_factory=ir.Metadata)
    errors: list[tuple[str, Span | None]] = field(default_factory=list)

    def report_error(self, message: str, span: Span | None = None) -> None:
        self.errors.append((message, span))

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.errors]


def elaborate(root: ast.Node) -> tuple[ir.Document, list[str]]:
    """Elaborate a Document AST into an IR document and diagnostic messages."""
    doc, ctx = _run(root)
    return doc, ctx.messages


def elaborate_located(root: ast.Node) -> tuple[ir.Document, list[tuple[str, Span | None]]]:
    """Like elaborate(), but pair each diagnostic with the span it was reported on."""
    doc, ctx = _run(root)
    return doc, list(ctx.errors)


def _run(root: ast.Node) -> tuple[ir.Document, ElabContext]:
    ctx = ElabContext()
    if not isinstance(root, ast.Document):
        ctx.report_error(f"unexpected root node: {type(root).__name__}", _span_of(root))
        return ir.Document(ir.Metadata(), ()), ctx
    content = elab_block(root.children, ctx)
    return ir.Document(ctx.metadata, tuple(content)), ctx


# ---------------------------------------------------------------------------
# Inline elaboration
# ---------------------------------------------------------------------------


def elab_inline(node: ast.Node, ctx: ElabContext) -> list[ir.Inline]:
    """Elaborate a single node in inline context."""
    return elab_inlines((node,), ctx)


def elab_inlines(nodes: tuple[ast.Node, ...], ctx: ElabContext) -> list[ir.Inline]:
    """Elaborate a node sequence in inline context, flattening groups.

    Traversal uses an explicit worklist so arbitrarily deep brace nesting
    cannot exhaust the call stack. Each entry holds the remaining siblings,
    the list they elaborate into, and the command that owns that list (None
    for groups, whose children flatten into the enclosing list).
    """
    result: list[ir.Inline] = []
    stack: list[tuple[Iterator[ast.Node], list[ir.Inline], ast.Command | None]] = [
        (iter(nodes), result, None)
    ]
    while stack:
        siblings, out, owner = stack[-1]
        node = next(siblings, _END)

        if node is _END:
            stack.pop()
            if owner is not None:
                stack[-1][1].extend(_finish_inline_command(owner, out))
            continue

        if isinstance(node, ast.Text):
            out.append(ir.InlineText(node.value))
        elif isinstance(node, ast.Group):
            stack.append((iter(node.children), out, None))
        elif isinstance(node, ast.Command):
            if node.name in ("begin", "end"):
                env_name = _plain_text(node.args[0]) if node.args else ""
                ctx.report_error(
                    f"{node.name} without matching environment parser: {env_name}", node.span
                )
            stack.append((iter(node.args), [], node))
        else:
            ctx.report_error(
                f"unexpected {type(node).__name__} node in inline content", _span_of(node)
            )
    return result


def _finish_inline_command(node: ast.Command, args: list[ir.Inline]) -> list[ir.Inline]:
    style = STYLE_COMMANDS.get(node.name)
    if style is not None:
        # Only top-level text runs take the style; nested commands pass through
        return [
            ir.InlineText(i.content, style) if isinstance(i, ir.InlineText) else i for i in args
        ]
    return [ir.InlineCommand(node.name, tuple(args))]


# ---------------------------------------------------------------------------
# Block elaboration
# ---------------------------------------------------------------------------


def elab_block(nodes: tuple[ast.Node, ...], ctx: ElabContext) -> list[ir.Block]:
    """Elaborate a node sequence in block context, grouping runs into paragraphs."""
    blocks: list[ir.Block] = []
    paragraph: list[ir.Inline] = []

    def flush() -> None:
        if paragraph:
            blocks.append(ir.Paragraph(tuple(paragraph)))
            paragraph.clear()

    for node in nodes:
        if isinstance(node, ast.Text):
            paragraph.append(ir.InlineText(node.value))

        elif isinstance(node, ast.Command) and node.name in SECTION_COMMANDS:
            flush()
            level = SECTION_COMMANDS[node.name]
            title = elab_inlines(node.args, ctx)
            ctx.section_level = level
            blocks.append(ir.Section(level, tuple(title)))

        elif isinstance(node, (ast.Command, ast.Group)):
            if isinstance(node, ast.Command) and node.name in METADATA_COMMANDS:
                _set_metadata(node, ctx)
            paragraph.extend(elab_inline(node, ctx))

        elif isinstance(node, ast.Environment):
            flush()
            blocks.append(_elab_environment(node, ctx))

        else:
            ctx.report_error(
                f"unexpected {type(node).__name__} node in block content", _span_of(node)
            )

    flush()
    return blocks


def _elab_environment(node: ast.Environment, ctx: ElabContext) -> ir.Block:
    if node.name in _LIST_ENVIRONMENTS:
        items = [tuple(elab_block(chunk, ctx)) for chunk in split_items(node.body)]
        return ir.ListBlock(_LIST_ENVIRONMENTS[node.name], tuple(items))

    if node.name == "quote":
        return ir.Quote(tuple(elab_block(node.body, ctx)))

    if node.name == "verbatim":
        return ir.Verbatim("".join(raw_text(child) for child in node.body))

    args = tuple(_plain_text(arg) for arg in node.args)
    content = tuple(elab_block(node.body, ctx))
    if node.name == "abstract":
        ctx.metadata = replace(ctx.metadata, abstract=content)
    return ir.EnvironmentBlock(node.name, args, content)


def split_items(body: tuple[ast.Node, ...]) -> list[tuple[ast.Node, ...]]:
    r"""Split an environment body into per-\item chunks.

    Nodes before the first \item belong to no item and are dropped.
    """
    items: list[tuple[ast.Node, ...]] = []
    current: list[ast.Node] | None = None
    for node in body:
        if isinstance(node, ast.Command) and node.name == "item":
            if current is not None:
                items.append(tuple(current))
            current = []
        elif current is not None:
            current.append(node)
    if current is not None:
        items.append(tuple(current))
    return items


def _set_metadata(node: ast.Command, ctx: ElabContext) -> None:
    text = _plain_text(node).strip()
    if node.name == "keywords":
        keywords = tuple(k.strip() for k in text.split(",") if k.strip())
        ctx.metadata = replace(ctx.metadata, keywords=keywords)
    else:
        ctx.metadata = replace(ctx.metadata, **{node.name: text})


# ---------------------------------------------------------------------------
# Text extraction
# ---------------------------------------------------------------------------


def raw_text(node: ast.Node) -> str:
    """Reconstruct the source text of a node, unprocessed."""
    parts: list[str] = []
    # Pending nodes and literal strings, popped in source order
    stack: list[ast.Node | str] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            parts.append(current)
        elif isinstance(current, (ast.Text, ast.Comment)):
            parts.append(current.value)
        elif isinstance(current, ast.Command):
            parts.append(f"\\{current.name}")
            stack.extend(reversed(current.args))
        elif isinstance(current, ast.Group):
            parts.append("{")
            stack.append("}")
            stack.extend(reversed(current.children))
        elif isinstance(current, ast.Environment):
            parts.append(f"\\begin{{{current.name}}}")
            stack.append(f"\\end{{{current.name}}}")
            stack.extend(reversed(current.body))
            stack.extend(reversed(current.args))
        elif isinstance(current, ast.Document):
            stack.extend(reversed(current.children))
    return "".join(parts)


def _plain_text(node: ast.Node) -> str:
    """Concatenated text leaves of a node, without markup."""
    parts: list[str] = []
    stack: list[ast.Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, (ast.Text, ast.Comment)):
            parts.append(current.value)
        elif isinstance(current, ast.Group):
            stack.extend(reversed(current.children))
        elif isinstance(current, ast.Command):
            stack.extend(reversed(current.args))
    return "".join(parts)


def _span_of(node: object) -> Span | None:
    return getattr(node, "span", None)

"""LaTeX renderer: converts an IR document back to standalone LaTeX source."""

from __future__ import annotations

import re

from texir.elaborate import SECTION_COMMANDS, STYLE_COMMANDS
from texir.ir import (
    METADATA_COMMANDS,
    Block,
    Document,
    EnvironmentBlock,
    Inline,
    InlineCommand,
    InlineText,
    LineBreak,
    ListBlock,
    Math,
    Paragraph,
    Quote,
    Raw,
    Section,
    Space,
    TextStyle,
    Verbatim,
)

_LATEX_SPECIAL = re.compile(r"([&%$#_{}~^\\])")

_LATEX_ESCAPE_MAP = {
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "\\": r"\textbackslash{}",
}

_LABEL_UNSAFE = re.compile(r"[^A-Za-z0-9:._-]")

_VERBATIM_END = "\\end{verbatim}"

_STYLE_NAMES: dict[TextStyle, str] = {style: name for name, style in STYLE_COMMANDS.items()}
_SECTION_NAMES: dict[int, str] = {level: name for name, level in SECTION_COMMANDS.items()}


def escape_latex(text: str) -> str:
    """Escape LaTeX special characters in plain text."""
    return _LATEX_SPECIAL.sub(lambda m: _LATEX_ESCAPE_MAP[m.group(1)], text)


def _label_key(label: str) -> str:
    """Reduce a label to characters that are safe inside \\label and \\ref."""
    return _LABEL_UNSAFE.sub("-", label)


def _render_verbatim(text: str) -> str:
    # The environment cannot contain its own terminator; emit that with \verb
    chunks = text.split(_VERBATIM_END)
    return f"\\verb!{_VERBATIM_END}!".join(
        f"\\begin{{verbatim}}{chunk}{_VERBATIM_END}" for chunk in chunks
    )


def render_latex(doc: Document) -> str:
    """Render an IR document to a complete LaTeX article."""
    meta = doc.metadata

    parts: list[str] = ["\\documentclass{article}\n"]
    if meta.title:
        parts.append(f"\\title{{{escape_latex(meta.title)}}}\n")
    if meta.author:
        parts.append(f"\\author{{{escape_latex(meta.author)}}}\n")
    if meta.date is not None:
        parts.append(f"\\date{{{escape_latex(meta.date)}}}\n")
    parts.append("\\begin{document}\n")

    if meta.title:
        parts.append("\\maketitle\n")

    parts.append(_render_blocks(doc.content))
    parts.append("\\end{document}\n")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


def _render_blocks(blocks: tuple[Block, ...]) -> str:
    parts: list[str] = []
    for block in blocks:
        rendered = _render_block(block)
        if rendered:
            parts.append(rendered)
            parts.append("\n\n")
    return "".join(parts)


def _render_block(block: Block) -> str:
    match block:
        case Paragraph(inlines=inlines):
            return _render_inlines(inlines).strip()
        case Section(level=level, title=title, label=label):
            command = _SECTION_NAMES.get(level, "subparagraph")
            result = f"\\{command}{{{_render_inlines(title)}}}"
            if label:
                result += f"\\label{{{_label_key(label)}}}"
            return result
        case ListBlock(ordered=ordered, items=items):
            env = "enumerate" if ordered else "itemize"
            lines = [f"\\begin{{{env}}}"]
            for item in items:
                lines.append(f"\\item {_render_blocks(item).strip()}")
            lines.append(f"\\end{{{env}}}")
            return "\n".join(lines)
        case Quote(content=content):
            return f"\\begin{{quote}}\n{_render_blocks(content).strip()}\n\\end{{quote}}"
        case Verbatim(text=text):
            return _render_verbatim(text)
        case Raw(format=fmt, content=content):
            return content if fmt == "latex" else ""
        case EnvironmentBlock(name=name, args=args, content=content):
            arg_text = "".join(f"{{{escape_latex(a)}}}" for a in args)
            body = _render_blocks(content).strip()
            return f"\\begin{{{name}}}{arg_text}\n{body}\n\\end{{{name}}}"
    return ""


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------


def _render_inlines(inlines: tuple[Inline, ...]) -> str:
    return "".join(_render_inline(i) for i in inlines)


def _render_inline(inline: Inline) -> str:
    match inline:
        case InlineText(content=content, style=style):
            text = escape_latex(content)
            name = _STYLE_NAMES.get(style)
            if name is None:
                return text
            return f"\\{name}{{{text}}}"
        case InlineCommand(name=name) if name in METADATA_COMMANDS:
            # Emitted once in the preamble from Metadata
            return ""
        case InlineCommand(name=name, args=args):
            if not args:
                return f"\\{name}{{}}"
            return f"\\{name}{{{_render_inlines(args)}}}"
        case Math(content=content, display=True):
            return f"\\[{content}\\]"
        case Math(content=content):
            return f"\\({content}\\)"
        case Space():
            return " "
        case LineBreak():
            return "\\\\\n"
    return ""

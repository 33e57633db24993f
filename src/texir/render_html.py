"""HTML renderer: converts an IR document to an HTML document."""

from __future__ import annotations

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
    blocks_to_plain_text,
)

_STYLE_TAGS: dict[TextStyle, str] = {
    TextStyle.EMPHASIS: "em",
    TextStyle.BOLD: "strong",
    TextStyle.ITALIC: "i",
    TextStyle.TYPEWRITER: "code",
}


def render_html(doc: Document) -> str:
    """Render an IR document to a complete HTML document."""
    meta = doc.metadata

    parts: list[str] = ["<!DOCTYPE html>\n", "<html>\n", "<head>\n"]
    parts.append('<meta charset="utf-8">\n')
    if meta.title:
        parts.append(f"<title>{_escape_html(meta.title)}</title>\n")
    if meta.author:
        parts.append(f'<meta name="author" content="{_escape_attr(meta.author)}">\n')
    if meta.keywords:
        keywords = ", ".join(meta.keywords)
        parts.append(f'<meta name="keywords" content="{_escape_attr(keywords)}">\n')
    if meta.abstract:
        description = blocks_to_plain_text(meta.abstract)
        parts.append(f'<meta name="description" content="{_escape_attr(description)}">\n')
    parts.append("</head>\n")
    parts.append("<body>\n")

    if meta.title:
        parts.append(f'<h1 class="title">{_escape_html(meta.title)}</h1>\n')
    if meta.author:
        parts.append(f'<p class="author">{_escape_html(meta.author)}</p>\n')
    if meta.date:
        parts.append(f'<p class="date">{_escape_html(meta.date)}</p>\n')

    parts.append(_render_blocks(doc.content))
    parts.append("</body>\n")
    parts.append("</html>\n")

    return "".join(parts)


# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


def _escape_html(text: str) -> str:
    """Escape text for HTML body content. Also encodes non-ASCII as entities."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ord(ch) > 0x7F:
            result.append(f"&#x{ord(ch):X};")
        else:
            result.append(ch)
    return "".join(result)


def _escape_attr(text: str) -> str:
    """Escape text for HTML attribute values."""
    return _escape_html(text).replace('"', "&quot;")


def _class_name(name: str) -> str:
    """Reduce a command or environment name to a safe CSS class suffix."""
    return "".join(ch if ch.isalnum() or ch in "-_" else "-" for ch in name)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


def _render_blocks(blocks: tuple[Block, ...]) -> str:
    parts: list[str] = []
    for block in blocks:
        rendered = _render_block(block)
        if rendered:
            parts.append(rendered)
            parts.append("\n")
    return "".join(parts)


def _render_block(block: Block) -> str:
    match block:
        case Paragraph(inlines=inlines):
            return f"<p>{_render_inlines(inlines)}</p>"
        case Section(level=level, title=title, label=label):
            tag = f"h{min(level + 1, 6)}"
            id_attr = f' id="{_escape_attr(label)}"' if label else ""
            return f"<{tag}{id_attr}>{_render_inlines(title)}</{tag}>"
        case ListBlock():
            return _render_list(block)
        case Quote(content=content):
            return f"<blockquote>\n{_render_blocks(content)}</blockquote>"
        case Verbatim(text=text):
            return f"<pre>{_escape_html(text)}</pre>"
        case Raw(format=fmt, content=content):
            return content if fmt == "html" else ""
        case EnvironmentBlock(name=name, content=content):
            return f'<div class="env-{_class_name(name)}">\n{_render_blocks(content)}</div>'
    return ""


def _render_list(block: ListBlock) -> str:
    tag = "ol" if block.ordered else "ul"
    parts: list[str] = [f"<{tag}>\n"]
    for item in block.items:
        # A single paragraph renders inline inside the <li>
        if len(item) == 1 and isinstance(item[0], Paragraph):
            parts.append(f"<li>{_render_inlines(item[0].inlines).strip()}</li>\n")
        else:
            parts.append(f"<li>\n{_render_blocks(item)}</li>\n")
    parts.append(f"</{tag}>")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------


def _render_inlines(inlines: tuple[Inline, ...]) -> str:
    return "".join(_render_inline(i) for i in inlines)


def _render_inline(inline: Inline) -> str:
    match inline:
        case InlineText(content=content, style=style):
            text = _escape_html(content)
            tag = _STYLE_TAGS.get(style)
            if tag is None:
                return text
            return f"<{tag}>{text}</{tag}>"
        case InlineCommand(name=name) if name in METADATA_COMMANDS:
            return ""
        case InlineCommand(name=name, args=args):
            return f'<span class="cmd-{_class_name(name)}">{_render_inlines(args)}</span>'
        case Math(content=content, display=True):
            return f'<div class="math">\\[{_escape_html(content)}\\]</div>'
        case Math(content=content):
            return f'<span class="math">\\({_escape_html(content)}\\)</span>'
        case Space():
            return " "
        case LineBreak():
            return "<br>"
    return ""

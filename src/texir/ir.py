"""Backend-agnostic intermediate representation produced by elaboration.

Pure data. Any combination of fields is constructible; shape invariants such
as small positive section levels are the elaborator's responsibility.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class TextStyle(Enum):
    PLAIN = auto()
    EMPHASIS = auto()
    BOLD = auto()
    ITALIC = auto()
    TYPEWRITER = auto()


# ---------------------------------------------------------------------------
# Inline content
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InlineText:
    """Styled text run."""

    content: str
    style: TextStyle = TextStyle.PLAIN


@dataclass(frozen=True, slots=True)
class InlineCommand:
    """Command with no known meaning, preserved for backends."""

    name: str
    args: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True)
class Math:
    content: str
    display: bool = False


@dataclass(frozen=True, slots=True)
class Space:
    pass


@dataclass(frozen=True, slots=True)
class LineBreak:
    pass


Inline = InlineText | InlineCommand | Math | Space | LineBreak


# ---------------------------------------------------------------------------
# Block content
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Paragraph:
    inlines: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Section:
    """Heading; level 1 is \\section, 5 is \\subparagraph."""

    level: int
    title: tuple[Inline, ...]
    label: str | None = None


@dataclass(frozen=True, slots=True)
class EnvironmentBlock:
    """Environment with no dedicated block type."""

    name: str
    args: tuple[str, ...]
    content: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListBlock:
    """Itemized or enumerated list; each item is a block sequence."""

    ordered: bool
    items: tuple[tuple[Block, ...], ...]


@dataclass(frozen=True, slots=True)
class Quote:
    content: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class Verbatim:
    text: str


@dataclass(frozen=True, slots=True)
class Raw:
    """Backend-specific passthrough content, e.g. format "html" or "latex"."""

    format: str
    content: str


Block = Paragraph | Section | EnvironmentBlock | ListBlock | Quote | Verbatim | Raw


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


# Commands whose arguments also fill the Metadata field of the same name.
# Backends present these from Metadata and render the commands as nothing.
METADATA_COMMANDS = frozenset({"title", "author", "date", "keywords"})


@dataclass(frozen=True, slots=True)
class Metadata:
    """Optional document-level fields."""

    title: str | None = None
    author: str | None = None
    date: str | None = None
    keywords: tuple[str, ...] = ()
    abstract: tuple[Block, ...] | None = None


@dataclass(frozen=True, slots=True)
class Document:
    """Elaborated document. ``raw`` keeps the original source for consumers."""

    metadata: Metadata = field(default_factory=Metadata)
    content: tuple[Block, ...] = ()
    raw: str = ""


# ---------------------------------------------------------------------------
# Plain-text projection (debugging and tests, not a rendering backend)
# ---------------------------------------------------------------------------


def inline_to_plain_text(inline: Inline) -> str:
    """Project an inline node to plain text."""
    match inline:
        case InlineText(content=content):
            return content
        case InlineCommand(name=name, args=args):
            if not args:
                return f"\\{name}"
            return f"\\{name}{{{inlines_to_plain_text(args)}}}"
        case Math(content=content, display=display):
            delim = "$$" if display else "$"
            return f"{delim}{content}{delim}"
        case Space():
            return " "
        case LineBreak():
            return "\n"
    return ""


def inlines_to_plain_text(inlines: tuple[Inline, ...] | list[Inline]) -> str:
    return "".join(inline_to_plain_text(i) for i in inlines)


def block_to_plain_text(block: Block) -> str:
    """Project a block node to plain text."""
    match block:
        case Paragraph(inlines=inlines):
            return inlines_to_plain_text(inlines)
        case Section(level=level, title=title):
            return f"{'#' * level} {inlines_to_plain_text(title)}"
        case EnvironmentBlock(content=content):
            return blocks_to_plain_text(content)
        case ListBlock(ordered=ordered, items=items):
            lines: list[str] = []
            for n, item in enumerate(items, start=1):
                marker = f"{n}. " if ordered else "- "
                lines.append(marker + blocks_to_plain_text(item).replace("\n", "\n  "))
            return "\n".join(lines)
        case Quote(content=content):
            text = blocks_to_plain_text(content)
            return "\n".join(f"> {line}" if line else ">" for line in text.split("\n"))
        case Verbatim(text=text):
            return text
        case Raw(content=content):
            return content
    return ""


def blocks_to_plain_text(blocks: tuple[Block, ...] | list[Block]) -> str:
    return "\n\n".join(block_to_plain_text(b) for b in blocks)


def document_to_plain_text(doc: Document) -> str:
    """Project a whole document to plain text, title first when present."""
    parts: list[str] = []
    if doc.metadata.title:
        parts.append(doc.metadata.title)
    if doc.content:
        parts.append(blocks_to_plain_text(doc.content))
    return "\n\n".join(parts)

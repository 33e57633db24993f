"""IR data model and plain-text projection tests."""

from texir import convert, ir
from texir.parser import parse

T = ir.InlineText


class TestConstruction:
    def test_defaults(self):
        doc = ir.Document()
        assert doc.metadata == ir.Metadata()
        assert doc.content == ()
        assert doc.raw == ""

    def test_text_default_style(self):
        assert T("x").style is ir.TextStyle.PLAIN

    def test_no_validation(self):
        # Out-of-range levels are representable; elaboration never builds them
        assert ir.Section(42, ()).level == 42

    def test_convert_keeps_raw_source(self):
        doc, diagnostics = convert("\\section{A}b")
        assert doc.raw == "\\section{A}b"
        assert diagnostics == []

    def test_convert_accepts_parsed_tree(self):
        source = "\\begin{x} body"
        root = parse(source)
        assert convert(source, root) == convert(source)
        doc, diagnostics = convert(source, root)
        assert doc.raw == source
        assert diagnostics == ["begin without matching environment parser: x"]


class TestInlinePlainText:
    def test_text(self):
        assert ir.inline_to_plain_text(T("a", ir.TextStyle.BOLD)) == "a"

    def test_command(self):
        assert ir.inline_to_plain_text(ir.InlineCommand("foo", (T("bar"),))) == "\\foo{bar}"

    def test_command_without_args(self):
        assert ir.inline_to_plain_text(ir.InlineCommand("today")) == "\\today"

    def test_math(self):
        assert ir.inline_to_plain_text(ir.Math("x^2")) == "$x^2$"
        assert ir.inline_to_plain_text(ir.Math("x^2", display=True)) == "$$x^2$$"

    def test_space_and_break(self):
        assert ir.inlines_to_plain_text([T("a"), ir.Space(), T("b"), ir.LineBreak()]) == "a b\n"


class TestBlockPlainText:
    def test_paragraph(self):
        assert ir.block_to_plain_text(ir.Paragraph((T("a"), T("b")))) == "ab"

    def test_section(self):
        assert ir.block_to_plain_text(ir.Section(2, (T("Title"),))) == "## Title"

    def test_unordered_list(self):
        block = ir.ListBlock(False, ((ir.Paragraph((T("a"),)),), (ir.Paragraph((T("b"),)),)))
        assert ir.block_to_plain_text(block) == "- a\n- b"

    def test_ordered_list(self):
        block = ir.ListBlock(True, ((ir.Paragraph((T("a"),)),), (ir.Paragraph((T("b"),)),)))
        assert ir.block_to_plain_text(block) == "1. a\n2. b"

    def test_quote(self):
        block = ir.Quote((ir.Paragraph((T("a"),)), ir.Paragraph((T("b"),))))
        assert ir.block_to_plain_text(block) == "> a\n>\n> b"

    def test_verbatim_and_raw(self):
        assert ir.block_to_plain_text(ir.Verbatim("  x\n")) == "  x\n"
        assert ir.block_to_plain_text(ir.Raw("html", "<hr>")) == "<hr>"

    def test_environment(self):
        block = ir.EnvironmentBlock("theorem", (), (ir.Paragraph((T("t"),)),))
        assert ir.block_to_plain_text(block) == "t"


class TestDocumentPlainText:
    def test_title_first(self):
        doc = ir.Document(ir.Metadata(title="Doc"), (ir.Paragraph((T("body"),)),))
        assert ir.document_to_plain_text(doc) == "Doc\n\nbody"

    def test_empty(self):
        assert ir.document_to_plain_text(ir.Document()) == ""

    def test_hello_world(self):
        doc, _ = convert("Hello, world!")
        assert "Hello, world!" in ir.document_to_plain_text(doc)

"""Tests for the CLI module: arg parsing, exit codes, formats, end-to-end."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from texir.cli import CliOptions, build_parser, compile_file, main


def _options(input_file: Path, **overrides: object) -> CliOptions:
    values: dict[str, object] = {
        "input_file": input_file,
        "output_file": None,
        "format": "html",
        "engine": "pdflatex",
        "timeout": 60.0,
        "cache_dir": None,
        "strict": False,
        "watch": False,
        "debug": False,
    }
    values.update(overrides)
    return CliOptions(**values)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["doc.tex"])
        assert ns.input == "doc.tex"
        assert ns.output is None
        assert ns.format is None

    def test_output_and_format(self) -> None:
        ns = build_parser().parse_args(["doc.tex", "-o", "out.tex", "-f", "latex"])
        assert ns.output == "out.tex"
        assert ns.format == "latex"

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["doc.tex", "-f", "docx"])

    def test_engine_and_timeout(self) -> None:
        ns = build_parser().parse_args(["doc.tex", "--engine", "xelatex", "--timeout", "10"])
        assert ns.engine == "xelatex"
        assert ns.timeout == 10.0

    def test_flags(self) -> None:
        ns = build_parser().parse_args(["doc.tex", "--watch", "--debug", "--strict", "-v"])
        assert ns.watch is True
        assert ns.debug is True
        assert ns.strict is True
        assert ns.verbose is True


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        doc = tmp_path / "ok.tex"
        doc.write_text("\\section{Hello}\n")
        assert main([str(doc), "-o", str(tmp_path / "out.html")]) == 0

    def test_missing_input_returns_1(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.tex")]) == 1

    def test_diagnostics_do_not_fail_by_default(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "env.tex"
        doc.write_text("\\begin{itemize}\\item x\\end{itemize}")
        assert main([str(doc), "-o", str(tmp_path / "out.html")]) == 0
        err = capsys.readouterr().err
        assert "warning: begin without matching environment parser: itemize" in err

    def test_strict_fails_on_diagnostics(self, tmp_path: Path) -> None:
        doc = tmp_path / "env.tex"
        doc.write_text("\\begin{quote}x\\end{quote}")
        assert main([str(doc), "--strict", "-o", str(tmp_path / "out.html")]) == 1

    def test_strict_passes_clean_input(self, tmp_path: Path) -> None:
        doc = tmp_path / "clean.tex"
        doc.write_text("plain")
        assert main([str(doc), "--strict", "-o", str(tmp_path / "out.html")]) == 0

    def test_pdf_requires_output(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("x")
        assert main([str(doc), "-f", "pdf"]) == 2
        assert "requires -o" in capsys.readouterr().err

    def test_engine_failure_returns_2(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("x")
        engine = tmp_path / "broken-tex"
        engine.write_text("#!/bin/sh\nexit 3\n")
        engine.chmod(engine.stat().st_mode | stat.S_IEXEC)
        argv = [str(doc), "-f", "pdf", "--engine", str(engine), "-o", str(tmp_path / "o.pdf")]
        assert main(argv) == 2


# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------


class TestFormats:
    def test_html_to_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("This is \\emph{important} text.")
        out = tmp_path / "out.html"
        assert main([str(doc), "-o", str(out)]) == 0
        assert "<p>This is <em>important</em> text.</p>" in out.read_text()

    def test_latex_to_stdout(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("\\section{Intro}")
        assert main([str(doc), "-f", "latex"]) == 0
        assert "\\section{Intro}" in capsys.readouterr().out

    def test_text_format(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("Hello, world!")
        assert main([str(doc), "-f", "text"]) == 0
        assert capsys.readouterr().out == "Hello, world!\n"

    def test_pdf_to_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("x")
        engine = tmp_path / "fake-tex"
        engine.write_text('#!/bin/sh\nfor last; do :; done\nprintf PDF > "${last%.tex}.pdf"\n')
        engine.chmod(engine.stat().st_mode | stat.S_IEXEC)
        out = tmp_path / "out.pdf"
        assert main([str(doc), "-f", "pdf", "--engine", str(engine), "-o", str(out)]) == 0
        assert out.read_bytes() == b"PDF"


# ---------------------------------------------------------------------------
# compile_file
# ---------------------------------------------------------------------------


class TestCompileFile:
    def test_basic(self, tmp_path: Path) -> None:
        doc = tmp_path / "simple.tex"
        doc.write_text("\\section{Hello World}")
        output, diagnostics = compile_file(_options(doc))
        assert isinstance(output, str)
        assert "<h2>Hello World</h2>" in output
        assert diagnostics == []

    def test_debug_dumps_to_stderr(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "simple.tex"
        doc.write_text("\\emph{x}")
        compile_file(_options(doc, debug=True))
        err = capsys.readouterr().err
        assert "Command \\emph" in err
        assert "Text('x', EMPHASIS)" in err

    def test_cache_reused(self, tmp_path: Path) -> None:
        doc = tmp_path / "cached.tex"
        doc.write_text("cached body")
        cache_dir = tmp_path / "cache"
        first, _ = compile_file(_options(doc, cache_dir=cache_dir))
        entries = list(cache_dir.iterdir())
        assert len(entries) == 1
        # Tamper with the entry to prove the second call reads it back
        entries[0].write_text("from cache")
        second, _ = compile_file(_options(doc, cache_dir=cache_dir))
        assert "cached body" in first
        assert second == "from cache"

    def test_pdf_cache_separated_by_engine(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.tex"
        doc.write_text("x")
        cache_dir = tmp_path / "cache"
        outputs = []
        for name in ("tex-a", "tex-b"):
            engine = tmp_path / name
            engine.write_text(
                f'#!/bin/sh\nfor last; do :; done\nprintf {name} > "${{last%.tex}}.pdf"\n'
            )
            engine.chmod(engine.stat().st_mode | stat.S_IEXEC)
            output, _ = compile_file(
                _options(doc, format="pdf", engine=str(engine), cache_dir=cache_dir)
            )
            outputs.append(output)
        assert outputs == [b"tex-a", b"tex-b"]
        assert len(list(cache_dir.iterdir())) == 2

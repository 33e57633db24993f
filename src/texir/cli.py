"""Command-line interface for texir."""

from __future__ import annotations

import argparse
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from texir.errors import CompileError

if TYPE_CHECKING:
    from texir.ir import Document

logger = logging.getLogger(__name__)

FORMATS = ("html", "latex", "pdf", "text")
CONFIG_NAME = "texir.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    format: str
    engine: str
    timeout: float
    cache_dir: Path | None
    strict: bool
    watch: bool
    debug: bool
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="texir",
        description="Convert LaTeX-like markup to HTML, LaTeX, PDF or plain text",
    )
    p.add_argument("input", help="Input markup file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: html)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--engine", metavar="CMD", help="TeX engine for PDF output (default: pdflatex)")
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECS",
        help="TeX engine timeout in seconds (default: 60.0)",
    )
    p.add_argument("--cache-dir", metavar="DIR", help="Enable the render cache in DIR")
    p.add_argument(
        "--strict", action="store_true", help="Exit with status 1 if any diagnostic is reported"
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and recompile")
    p.add_argument("--debug", action="store_true", help="Dump AST and IR to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Output format: config < CLI
    fmt = "html"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if isinstance(cfg_format, str):
            if cfg_format not in FORMATS:
                raise argparse.ArgumentTypeError(f"invalid output format in config: {cfg_format}")
            fmt = cfg_format
    if args.format is not None:
        fmt = args.format

    # PDF engine and timeout: config < CLI
    engine = "pdflatex"
    timeout = 60.0
    cfg_pdf = config.get("pdf")
    if isinstance(cfg_pdf, dict):
        cfg_engine = cfg_pdf.get("engine")
        if isinstance(cfg_engine, str):
            engine = cfg_engine
        cfg_timeout = cfg_pdf.get("timeout")
        if isinstance(cfg_timeout, (int, float)):
            timeout = float(cfg_timeout)
    if args.engine:
        engine = args.engine
    if args.timeout is not None:
        timeout = args.timeout

    # Cache directory, relative to the input file when from config
    cache_dir: Path | None = None
    cfg_cache = config.get("cache")
    if isinstance(cfg_cache, dict):
        cfg_dir = cfg_cache.get("dir")
        if isinstance(cfg_dir, str):
            cache_dir = input_dir / cfg_dir
    if args.cache_dir:
        cache_dir = Path(args.cache_dir)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        format=fmt,
        engine=engine,
        timeout=timeout,
        cache_dir=cache_dir,
        strict=args.strict,
        watch=args.watch,
        debug=args.debug,
        verbose=args.verbose,
    )


def compile_file(options: CliOptions) -> tuple[str | bytes, list[str]]:
    """Read and convert a markup file, returning (rendered output, diagnostics)."""
    from texir import convert
    from texir.cache import RenderCache
    from texir.debug import dump_ast, dump_ir
    from texir.parser import parse

    source = options.input_file.read_text(encoding="utf-8")
    ast_doc = parse(source)
    doc, diagnostics = convert(source, ast_doc)

    if options.debug:
        dump_ast(ast_doc)
        dump_ir(doc)

    cache = RenderCache(options.cache_dir) if options.cache_dir is not None else None
    if cache is not None:
        cached = cache.get(source, _cache_backend(options))
        if cached is not None:
            return cached, diagnostics

    output = render(doc, options)
    if cache is not None:
        cache.put(source, _cache_backend(options), output)
    return output, diagnostics


def _cache_backend(options: CliOptions) -> str:
    if options.format == "pdf":
        return f"pdf:{options.engine}"
    return options.format


def render(doc: Document, options: CliOptions) -> str | bytes:
    """Render an IR document with the backend selected in options."""
    from texir.ir import document_to_plain_text
    from texir.pdf import PdfCompiler
    from texir.render_html import render_html
    from texir.render_latex import render_latex

    logger.debug("rendering %s as %s", options.input_file, options.format)
    if options.format == "latex":
        return render_latex(doc)
    if options.format == "pdf":
        return PdfCompiler(engine=options.engine, timeout=options.timeout).compile(doc)
    if options.format == "text":
        return document_to_plain_text(doc) + "\n"
    return render_html(doc)


def report_diagnostics(options: CliOptions, diagnostics: list[str]) -> None:
    for message in diagnostics:
        print(f"{options.input_file}: warning: {message}", file=sys.stderr)


def write_output(options: CliOptions, output: str | bytes) -> None:
    if options.output_file is not None:
        if isinstance(output, bytes):
            options.output_file.write_bytes(output)
        else:
            options.output_file.write_text(output, encoding="utf-8")
    elif isinstance(output, bytes):
        sys.stdout.buffer.write(output)
    else:
        sys.stdout.write(output)
        sys.stdout.flush()


def watch_loop(options: CliOptions, *, interval: float = 0.5) -> None:
    """Poll input file for changes, recompile on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(interval)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    output, diagnostics = compile_file(options)
                    report_diagnostics(options, diagnostics)
                    write_output(options, output)
                    logger.info("recompiled %s", options.input_file)
                    print(f"Compiled {options.input_file}", file=sys.stderr)
                except CompileError as exc:
                    print(str(exc), file=sys.stderr)
            time.sleep(interval)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    if options.format == "pdf" and options.output_file is None:
        print("error: PDF output requires -o/--output", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        output, diagnostics = compile_file(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except CompileError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    report_diagnostics(options, diagnostics)
    write_output(options, output)

    if options.strict and diagnostics:
        return 1
    return 0


def run() -> None:
    """Console-script entry point."""
    raise SystemExit(main())

"""PDF backend: renders LaTeX and runs an external TeX engine on it."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from texir.errors import CompileError
from texir.ir import Document
from texir.render_latex import render_latex

logger = logging.getLogger(__name__)

_JOB_NAME = "document"


@dataclass
class PdfCompiler:
    """Invokes a TeX engine executable to turn an IR document into PDF bytes."""

    engine: str = "pdflatex"
    timeout: float = 60.0

    def find_engine(self) -> Path | None:
        """Resolve the engine to an executable path, or None if unavailable."""
        found = shutil.which(self.engine)
        return Path(found) if found is not None else None

    def compile(self, doc: Document) -> bytes:
        """Render doc to LaTeX, compile it, and return the PDF bytes."""
        return self.compile_source(render_latex(doc))

    def compile_source(self, latex: str) -> bytes:
        """Compile LaTeX source text and return the PDF bytes."""
        engine_path = self.find_engine()
        if engine_path is None:
            raise CompileError(f"TeX engine '{self.engine}' not found")

        with tempfile.TemporaryDirectory(prefix="texir-") as tmp:
            workdir = Path(tmp)
            tex_file = workdir / f"{_JOB_NAME}.tex"
            tex_file.write_text(latex, encoding="utf-8")

            cmd = [
                str(engine_path),
                "-interaction=nonstopmode",
                "-halt-on-error",
                tex_file.name,
            ]
            logger.info("running %s in %s", self.engine, workdir)
            try:
                result = subprocess.run(
                    cmd,
                    cwd=workdir,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired:
                raise CompileError(
                    f"TeX engine '{self.engine}' timed out after {self.timeout}s"
                ) from None

            if result.returncode != 0:
                raise CompileError(
                    f"TeX engine '{self.engine}' failed (exit {result.returncode})",
                    _read_log(workdir) or result.stdout,
                )

            pdf_file = workdir / f"{_JOB_NAME}.pdf"
            if not pdf_file.is_file():
                raise CompileError(
                    f"TeX engine '{self.engine}' produced no output",
                    _read_log(workdir) or result.stdout,
                )
            data = pdf_file.read_bytes()

        logger.debug("compiled %d bytes of PDF", len(data))
        return data


def _read_log(workdir: Path) -> str:
    log_file = workdir / f"{_JOB_NAME}.log"
    if log_file.is_file():
        return log_file.read_text(encoding="utf-8", errors="replace")
    return ""

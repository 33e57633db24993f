"""Error types raised outside the total conversion core."""

from __future__ import annotations

# Number of trailing engine log lines included in a formatted error
_LOG_TAIL_LINES = 20


class CompileError(Exception):
    """Raised when the external TeX engine fails to produce a PDF."""

    def __init__(self, message: str, log: str = "") -> None:
        self.message = message
        self.log = log
        super().__init__(self.format())

    def format(self, filename: str = "document.tex") -> str:
        result = f"error: {self.message}\n  --> {filename}"
        tail = [line for line in self.log.splitlines() if line.strip()][-_LOG_TAIL_LINES:]
        if tail:
            gutter = "   |"
            result += f"\n{gutter}\n" + "\n".join(f"{gutter} {line}" for line in tail)
        return result

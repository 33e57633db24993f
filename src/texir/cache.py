"""On-disk render cache keyed by source content and backend name.

The cache is an explicit object owned by the caller; nothing here is global.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Backend name -> file extension of the cached output
BACKEND_EXTENSIONS: dict[str, str] = {
    "html": "html",
    "latex": "tex",
    "pdf": "pdf",
    "text": "txt",
}


def cache_key(source: str, backend: str) -> str:
    """Content hash identifying one rendering of source by backend.

    A backend may carry a variant after a colon, such as "pdf:xelatex", so
    outputs of different TeX engines never share an entry.
    """
    digest = hashlib.sha256()
    digest.update(backend.encode("utf-8"))
    digest.update(b"\0")
    digest.update(source.encode("utf-8"))
    return digest.hexdigest()


def _format_of(backend: str) -> str:
    return backend.partition(":")[0]


@dataclass
class RenderCache:
    """Stores rendered outputs under directory/<key>.<ext>."""

    directory: Path

    def path_for(self, source: str, backend: str) -> Path:
        ext = BACKEND_EXTENSIONS.get(_format_of(backend), "out")
        return self.directory / f"{cache_key(source, backend)}.{ext}"

    def get(self, source: str, backend: str) -> str | bytes | None:
        """Return the cached output, or None on a miss."""
        path = self.path_for(source, backend)
        if not path.is_file():
            logger.debug("cache miss: %s", path.name)
            return None
        logger.debug("cache hit: %s", path.name)
        if _format_of(backend) == "pdf":
            return path.read_bytes()
        return path.read_text(encoding="utf-8")

    def put(self, source: str, backend: str, output: str | bytes) -> Path:
        """Store output for (source, backend) and return the entry path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(source, backend)
        if isinstance(output, bytes):
            path.write_bytes(output)
        else:
            path.write_text(output, encoding="utf-8")
        logger.debug("cache store: %s", path.name)
        return path

    def is_fresh(self, source_path: Path, backend: str) -> bool:
        """True if an entry exists for the file's content and is newer than the file."""
        try:
            source = source_path.read_text(encoding="utf-8")
            source_mtime = source_path.stat().st_mtime
        except OSError:
            return False
        path = self.path_for(source, backend)
        if not path.is_file():
            return False
        return path.stat().st_mtime >= source_mtime

    def clear(self) -> int:
        """Delete all cached entries and return how many were removed."""
        if not self.directory.is_dir():
            return 0
        removed = 0
        for ext in set(BACKEND_EXTENSIONS.values()) | {"out"}:
            for entry in self.directory.glob(f"*.{ext}"):
                entry.unlink()
                removed += 1
        return removed

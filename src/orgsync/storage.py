"""File-backed outline storage."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class OutlineFile:
    """Read and atomically replace the outline document on disk."""

    def __init__(self, path: str | Path, *, encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    async def read_outline(self) -> str:
        """Return the outline text, or an empty string when the file is missing."""

        return await asyncio.to_thread(self._read)

    async def write_outline(self, text: str) -> None:
        """Replace the whole outline with ``text``."""

        await asyncio.to_thread(self._write, text)

    def _read(self) -> str:
        if not self._path.exists():
            logger.info("Outline %s does not exist yet; treating it as empty", self._path)
            return ""
        return self._path.read_text(encoding=self._encoding)

    def _write(self, text: str) -> None:
        directory = self._path.parent.resolve()
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding=self._encoding, newline="") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Wrote %d characters to %s", len(text), self._path)


__all__ = ["OutlineFile"]

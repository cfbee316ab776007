"""On-disk storage for generated artifacts with write-if-changed semantics."""

from __future__ import annotations

from pathlib import Path

from ..logging import get_logger


class FileStore:
    """Reads and writes artifact text without translating line endings."""

    def __init__(self) -> None:
        self.logger = get_logger("stores")

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def write_if_changed(self, path: Path, content: str) -> bool:
        """Write ``content`` unless the file already holds it; returns True on write.

        A failed comparison read counts as a difference. A failed write is logged
        and reported as no write.
        """
        try:
            if self.exists(path) and self.read_text(path) == content:
                self.logger.debug("%s is up to date; skipping write", path)
                return False
        except (OSError, UnicodeDecodeError):
            self.logger.exception("Unable to read %s for comparison; rewriting", path)

        try:
            self.write_text(path, content)
        except OSError:
            self.logger.exception("Failed to write %s", path)
            return False
        self.logger.info("Wrote %s", path)
        return True


__all__ = ["FileStore"]

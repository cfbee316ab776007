"""External build verification run after a full sync."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .logging import get_logger


class BuildVerifier:
    """Runs the configured build command inside the project directory."""

    def __init__(
        self,
        command: Sequence[str] = ("dotnet", "build"),
        *,
        runner: Callable[..., int] | None = None,
    ) -> None:
        self.command = list(command)
        self._runner = runner or self._default_runner
        self.logger = get_logger("verifier")

    def verify(self, project_root: Path) -> bool:
        """Return True when the build command exits cleanly."""
        if not self.command:
            self.logger.debug("No build verification command configured")
            return False
        try:
            returncode = self._runner(self.command, cwd=project_root)
        except (OSError, subprocess.SubprocessError) as exc:
            self.logger.warning("Build verification could not run %s: %s", self.command[0], exc)
            return False
        if returncode != 0:
            self.logger.warning(
                "Build verification `%s` exited with %d", " ".join(self.command), returncode
            )
            return False
        self.logger.debug("Build verification succeeded")
        return True

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> int:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return completed.returncode


__all__ = ["BuildVerifier"]

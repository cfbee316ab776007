"""Boundary contract for the compilation-unit graph provider."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Protocol, Sequence

from ..models import CompilationUnit, ResponseFileData


class GraphProvider(Protocol):
    """Supplies a fresh snapshot of compilation units and assets on every call."""

    def list_units(self, predicate: Callable[[str], bool]) -> List[CompilationUnit]:
        """Return every unit, keeping only source files accepted by ``predicate``."""

    def list_all_asset_paths(self) -> List[str]:
        """Return every asset path known to the host."""

    def unit_name_for_path(self, path: str) -> str:
        """Return the owning unit's output name for ``path`` or an empty string."""

    def is_excluded_path(self, path: str) -> bool:
        """Return True for paths that must never appear in generated projects."""

    def set_included_sources(self, sources: Sequence[str]) -> None:
        """Replace the package sources whose files stay part of the projects."""

    def resolve_response_file(
        self, identifier: str, project_root: Path, system_dirs: Sequence[str]
    ) -> ResponseFileData:
        """Parse one response file referenced by a unit."""

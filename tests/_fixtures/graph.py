"""In-memory graph provider and recording store used across tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Mapping, Sequence

from slnsync.models import CompilationUnit, CompilerOptions, ResponseFileData
from slnsync.stores import FileStore


def make_unit(
    name: str,
    sources: Sequence[str] = (),
    *,
    references: Sequence[str] = (),
    precompiled: Sequence[str] = (),
    defines: Sequence[str] = (),
    output_path: str = "",
    **options: object,
) -> CompilationUnit:
    """Build a unit with sensible defaults for tests."""
    return CompilationUnit(
        name=name,
        source_files=list(sources),
        references=list(references),
        precompiled_references=list(precompiled),
        defines=list(defines),
        compiler_options=CompilerOptions(**options),  # type: ignore[arg-type]
        output_path=output_path or f"Library/ScriptAssemblies/{name}.dll",
    )


class InMemoryGraphProvider:
    """Graph provider whose snapshot is edited directly by the test."""

    def __init__(
        self,
        units: Sequence[CompilationUnit] = (),
        *,
        assets: Sequence[str] = (),
        excluded: Sequence[str] = (),
        response_files: Mapping[str, ResponseFileData] | None = None,
    ) -> None:
        self.units: List[CompilationUnit] = list(units)
        self.assets: List[str] = list(assets)
        self.excluded = set(excluded)
        self.response_files: Dict[str, ResponseFileData] = dict(response_files or {})
        self.list_calls = 0
        self.included_sources: List[str] = []

    def list_units(self, predicate: Callable[[str], bool]) -> List[CompilationUnit]:
        self.list_calls += 1
        return [
            CompilationUnit(
                name=unit.name,
                source_files=[path for path in unit.source_files if predicate(path)],
                references=list(unit.references),
                precompiled_references=list(unit.precompiled_references),
                defines=list(unit.defines),
                compiler_options=unit.compiler_options,
                output_path=unit.output_path,
            )
            for unit in self.units
        ]

    def list_all_asset_paths(self) -> List[str]:
        return list(self.assets)

    def unit_name_for_path(self, path: str) -> str:
        for unit in self.units:
            if path == unit.output_path or path in unit.source_files:
                return f"{unit.name}.dll"
        best = ""
        best_length = -1
        for unit in self.units:
            for source in unit.source_files:
                folder = source.rsplit("/", 1)[0]
                if path.startswith(f"{folder}/") and len(folder) > best_length:
                    best, best_length = unit.name, len(folder)
        return f"{best}.dll" if best else ""

    def is_excluded_path(self, path: str) -> bool:
        return any(path == item or path.startswith(f"{item}/") for item in self.excluded)

    def set_included_sources(self, sources: Sequence[str]) -> None:
        self.included_sources = [source.lower() for source in sources]

    def resolve_response_file(
        self, identifier: str, project_root: Path, system_dirs: Sequence[str]
    ) -> ResponseFileData:
        return self.response_files.get(
            identifier, ResponseFileData(errors=[f"{identifier} not found"])
        )


class RecordingFileStore(FileStore):
    """File store that remembers which paths were actually written."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: List[Path] = []
        self.fail_reads: set[Path] = set()

    def read_text(self, path: Path) -> str:
        if path in self.fail_reads:
            raise OSError(f"simulated read failure for {path}")
        return super().read_text(path)

    def write_text(self, path: Path, content: str) -> None:
        super().write_text(path, content)
        self.writes.append(path)

    def reset(self) -> None:
        self.writes.clear()


__all__ = ["InMemoryGraphProvider", "RecordingFileStore", "make_unit"]

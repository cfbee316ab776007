"""Graph provider backed by a YAML/JSON snapshot of the host's compilation units."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml

from ..logging import get_logger
from ..models import CompilationUnit, CompilerOptions, ResponseFileData
from ..responses import parse_response_file

BINARY_SUFFIX = ".dll"
DEFAULT_GRAPH_FILE = "slnsync-graph.yml"


class ManifestError(RuntimeError):
    """Raised when the graph snapshot cannot be read."""


@dataclass(frozen=True)
class PackageInfo:
    """A package folder and the source it was installed from."""

    path: str
    source: str


class ManifestGraphProvider:
    """Serves units, assets and ownership lookups from a snapshot file.

    The file is re-read at the start of every ``list_units`` call, so each sync
    works on a fresh snapshot.
    """

    def __init__(
        self,
        manifest_path: Path,
        project_root: Path,
        *,
        included_package_sources: Iterable[str] = ("embedded", "local"),
    ) -> None:
        self.manifest_path = manifest_path
        self.project_root = project_root.resolve()
        self.logger = get_logger("providers.manifest")
        self._data: Optional[Dict[str, Any]] = None
        self.set_included_sources(included_package_sources)

    # ------------------------------------------------------------------
    # GraphProvider

    def list_units(self, predicate: Callable[[str], bool]) -> List[CompilationUnit]:
        self.refresh()
        return [self._build_unit(raw, predicate) for raw in self._units_raw()]

    def list_all_asset_paths(self) -> List[str]:
        return _str_list(self._snapshot().get("assets"))

    def unit_name_for_path(self, path: str) -> str:
        target = self._relative(path)
        best: Tuple[int, str] = (-1, "")
        for raw in self._units_raw():
            name = str(raw.get("name", ""))
            if not name:
                continue
            output = raw.get("output_path")
            if isinstance(output, str) and self._relative(output) == target:
                return f"{name}{BINARY_SUFFIX}"
            sources = [self._relative(item) for item in _str_list(raw.get("source_files"))]
            if target in sources:
                return f"{name}{BINARY_SUFFIX}"
            root = _common_directory(sources)
            if root is not None and _is_under(target, root) and len(root) > best[0]:
                best = (len(root), name)
        return f"{best[1]}{BINARY_SUFFIX}" if best[1] else ""

    def is_excluded_path(self, path: str) -> bool:
        target = self._relative(path)
        snapshot = self._snapshot()
        for excluded in _str_list(snapshot.get("excluded_paths")):
            if _is_under(target, self._relative(excluded)):
                return True
        for package in self._packages():
            if _is_under(target, package.path):
                return package.source not in self.included_package_sources
        return False

    def set_included_sources(self, sources: Iterable[str]) -> None:
        self.included_package_sources = {source.lower() for source in sources}

    def resolve_response_file(
        self, identifier: str, project_root: Path, system_dirs: Sequence[str]
    ) -> ResponseFileData:
        path = Path(identifier)
        if not path.is_absolute():
            path = project_root / path
        return parse_response_file(path, project_root=project_root, system_dirs=system_dirs)

    # ------------------------------------------------------------------
    # Internal helpers

    def refresh(self) -> None:
        try:
            text = self.manifest_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Unable to read graph snapshot {self.manifest_path}: {exc}") from exc
        try:
            data = yaml.safe_load(text) if text.strip() else {}
        except yaml.YAMLError as exc:
            raise ManifestError(f"Failed to parse {self.manifest_path.name}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ManifestError(f"{self.manifest_path.name} must contain a mapping at the root")
        self._data = data
        self.logger.debug("Loaded %d units from %s", len(self._units_raw()), self.manifest_path)

    def _snapshot(self) -> Dict[str, Any]:
        if self._data is None:
            self.refresh()
        return self._data or {}

    def _units_raw(self) -> List[Dict[str, Any]]:
        units = self._snapshot().get("units") or []
        if not isinstance(units, list):
            raise ManifestError("'units' must be a list")
        return [unit for unit in units if isinstance(unit, dict)]

    def _packages(self) -> List[PackageInfo]:
        packages: List[PackageInfo] = []
        for raw in self._snapshot().get("packages") or []:
            if not isinstance(raw, dict) or not isinstance(raw.get("path"), str):
                continue
            source = str(raw.get("source") or "unknown").lower()
            packages.append(PackageInfo(path=self._relative(raw["path"]), source=source))
        return packages

    def _build_unit(
        self, raw: Dict[str, Any], predicate: Callable[[str], bool]
    ) -> CompilationUnit:
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestError("Every unit needs a non-empty 'name'")
        options = raw.get("compiler_options") if isinstance(raw.get("compiler_options"), dict) else {}
        compiler_options = CompilerOptions(
            language_version=str(options.get("language_version") or ""),
            allow_unsafe=bool(options.get("allow_unsafe", False)),
            ruleset_path=str(options.get("ruleset_path") or ""),
            analyzer_paths=_str_list(options.get("analyzer_paths")),
            response_files=_str_list(options.get("response_files")),
            api_compatibility_level=str(options.get("api_compatibility_level") or "NET_Standard"),
        )
        return CompilationUnit(
            name=name,
            source_files=[path for path in _str_list(raw.get("source_files")) if predicate(path)],
            references=_str_list(raw.get("references")),
            precompiled_references=_str_list(raw.get("precompiled_references")),
            defines=_str_list(raw.get("defines")),
            compiler_options=compiler_options,
            output_path=str(raw.get("output_path") or ""),
        )

    def _relative(self, path: str) -> str:
        normalised = path.replace("\\", "/")
        root = str(self.project_root).replace("\\", "/").rstrip("/") + "/"
        if normalised.startswith(root):
            normalised = normalised[len(root) :]
        return normalised.strip("/")


def _str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _common_directory(paths: Sequence[str]) -> Optional[str]:
    directories = sorted({os.path.dirname(path) for path in paths})
    if not directories:
        return None
    return os.path.commonpath(directories) if len(directories) > 1 else directories[0]


def _is_under(path: str, directory: str) -> bool:
    directory = directory.strip("/")
    if not directory:
        return False
    return path == directory or path.startswith(f"{directory}/")


__all__ = [
    "BINARY_SUFFIX",
    "DEFAULT_GRAPH_FILE",
    "ManifestError",
    "ManifestGraphProvider",
    "PackageInfo",
]

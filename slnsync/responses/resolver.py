"""Per-unit response-file resolution and argument precedence rules."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..logging import get_logger
from ..models import CompilationUnit, ResponseFileData
from ..providers.base import GraphProvider

OtherArguments = Dict[str, List[str]]

_WARN_AS_ERROR = "warnaserror"


class ResponseFileResolver:
    """Resolves a unit's response files through the graph provider.

    Parse errors never abort resolution: they are logged per file and returned
    alongside the data of every file that parsed cleanly.
    """

    def __init__(
        self,
        provider: GraphProvider,
        project_root: Path,
        system_dirs: Sequence[str] = (),
    ) -> None:
        self.provider = provider
        self.project_root = project_root
        self.system_dirs = list(system_dirs)
        self.logger = get_logger("responses")

    def resolve(self, unit: CompilationUnit) -> Tuple[List[ResponseFileData], List[str]]:
        resolved: List[ResponseFileData] = []
        errors: List[str] = []
        for identifier in unit.compiler_options.response_files:
            try:
                data = self.provider.resolve_response_file(
                    identifier, self.project_root, self.system_dirs
                )
            except Exception as exc:
                data = ResponseFileData(errors=[str(exc)])
            if data.errors:
                for error in data.errors:
                    self.logger.error("%s Parse Error : %s", identifier, error)
                    errors.append(f"{identifier}: {error}")
                continue
            resolved.append(data)
        return resolved, errors


def merge_other_arguments(response_files: Iterable[ResponseFileData]) -> OtherArguments:
    """Flatten free-form flags of every response file into ``flag -> values``."""
    merged: OtherArguments = {}
    for data in response_files:
        for argument in data.other_arguments:
            if not argument.startswith(("/", "-")):
                continue
            index = argument.find(":")
            if index > 0:
                key, value = argument[1:index], argument[index + 1 :]
            elif argument[1:].startswith(_WARN_AS_ERROR):
                key, value = _WARN_AS_ERROR, argument[len(_WARN_AS_ERROR) + 1 :]
            else:
                continue
            merged.setdefault(key, []).append(value)
    return merged


def language_version(unit: CompilationUnit, other_arguments: Mapping[str, Sequence[str]]) -> str:
    for value in other_arguments.get("langversion", ()):
        if value.strip():
            return value
    return unit.compiler_options.language_version


def ruleset_paths(
    unit: CompilationUnit,
    other_arguments: Mapping[str, Sequence[str]],
    project_root: Path,
) -> List[str]:
    candidates = [unit.compiler_options.ruleset_path, *other_arguments.get("ruleset", ())]
    return _dedupe(make_absolute(path, project_root) for path in candidates if path)


def analyzer_paths(
    unit: CompilationUnit,
    other_arguments: Mapping[str, Sequence[str]],
    project_root: Path,
) -> List[str]:
    from_responses = [
        part
        for value in (*other_arguments.get("analyzer", ()), *other_arguments.get("a", ()))
        for part in value.split(";")
    ]
    candidates = [*from_responses, *unit.compiler_options.analyzer_paths]
    return _dedupe(make_absolute(path, project_root) for path in candidates if path.strip())


def allow_unsafe(unit: CompilationUnit, response_files: Iterable[ResponseFileData]) -> bool:
    return unit.compiler_options.allow_unsafe or any(data.unsafe for data in response_files)


def make_absolute(path: str, project_root: Path) -> str:
    normalised = path.strip().replace("\\", "/")
    if os.path.isabs(normalised):
        return os.path.normpath(normalised)
    return os.path.normpath(os.path.join(str(project_root), normalised))


def _dedupe(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


__all__ = [
    "OtherArguments",
    "ResponseFileResolver",
    "allow_unsafe",
    "analyzer_paths",
    "language_version",
    "make_absolute",
    "merge_other_arguments",
    "ruleset_paths",
]

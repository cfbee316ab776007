"""File extension classification for project generation."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import Callable, Dict, FrozenSet, Iterable, Optional


class ScriptingLanguage(Enum):
    """Language class of a file extension."""

    NONE = 0
    SOURCE = 1


_BUILTIN_EXTENSIONS: Dict[str, ScriptingLanguage] = {
    "cginc": ScriptingLanguage.NONE,
    "compute": ScriptingLanguage.NONE,
    "cs": ScriptingLanguage.SOURCE,
    "glslinc": ScriptingLanguage.NONE,
    "hlsl": ScriptingLanguage.NONE,
    "raytrace": ScriptingLanguage.NONE,
    "shader": ScriptingLanguage.NONE,
    "template": ScriptingLanguage.NONE,
    "uss": ScriptingLanguage.NONE,
    "uxml": ScriptingLanguage.NONE,
}

# Always recognised on top of the builtin table and the configured extras.
DEFAULT_EXTRA_EXTENSIONS: FrozenSet[str] = frozenset({"jslib", "json", "log"})

BINARY_REFERENCE_EXTENSION = ".dll"
DEPENDENCY_MANIFEST_EXTENSION = ".asmdef"

# Reimporting one of these always requires a resync.
REIMPORT_SYNC_EXTENSIONS: FrozenSet[str] = frozenset(
    {BINARY_REFERENCE_EXTENSION, DEPENDENCY_MANIFEST_EXTENSION}
)


def extension_of(path: str) -> str:
    """Return the dotted extension of ``path`` (``""`` when there is none)."""
    return PurePath(path.replace("\\", "/")).suffix


def _normalise(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


class ExtensionClassifier:
    """Classifies extensions as source or non-source and decides file eligibility.

    Caller-supplied extensions widen the set of recognised files but never turn a
    file into source: only the builtin table knows about the source language.
    """

    def __init__(
        self,
        extra_extensions: Iterable[str] = (),
        *,
        is_excluded: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._extra: FrozenSet[str] = frozenset()
        self._is_excluded = is_excluded or (lambda _path: False)
        self.reload(extra_extensions)

    @property
    def extra_extensions(self) -> FrozenSet[str]:
        return self._extra

    def reload(self, extra_extensions: Iterable[str]) -> None:
        """Replace the caller-supplied extension set."""
        self._extra = frozenset(
            ext for ext in (_normalise(item) for item in extra_extensions) if ext
        )

    def classify(self, extension: str) -> ScriptingLanguage:
        return _BUILTIN_EXTENSIONS.get(_normalise(extension), ScriptingLanguage.NONE)

    def is_supported_extension(self, extension: str) -> bool:
        key = _normalise(extension)
        return key in _BUILTIN_EXTENSIONS or key in DEFAULT_EXTRA_EXTENSIONS or key in self._extra

    def has_valid_extension(self, path: str) -> bool:
        extension = extension_of(path)
        # Binaries are not sources but still take part in the solution.
        if extension == BINARY_REFERENCE_EXTENSION:
            return True
        if path.lower().endswith(DEPENDENCY_MANIFEST_EXTENSION):
            return True
        return self.is_supported_extension(extension)

    def is_eligible(self, path: str) -> bool:
        """Return True when ``path`` belongs in the generated solution."""
        return not self._is_excluded(path) and self.has_valid_extension(path)

    def is_source(self, path: str) -> bool:
        return self.is_eligible(path) and (
            self.classify(extension_of(path)) is ScriptingLanguage.SOURCE
        )

    def is_asset(self, path: str) -> bool:
        """Return True for recognised non-source files that become plain includes."""
        extension = extension_of(path)
        return (
            self.is_supported_extension(extension)
            and self.classify(extension) is ScriptingLanguage.NONE
        )


def should_sync_on_reimport(path: str) -> bool:
    return extension_of(path) in REIMPORT_SYNC_EXTENSIONS


__all__ = [
    "BINARY_REFERENCE_EXTENSION",
    "DEFAULT_EXTRA_EXTENSIONS",
    "DEPENDENCY_MANIFEST_EXTENSION",
    "ExtensionClassifier",
    "REIMPORT_SYNC_EXTENSIONS",
    "ScriptingLanguage",
    "extension_of",
    "should_sync_on_reimport",
]

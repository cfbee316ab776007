"""Post-generation hooks applied to rendered artifacts before they are written."""

from __future__ import annotations

from enum import Enum
from importlib import metadata
from typing import Callable, Dict, Iterable, List, Optional

from ..logging import get_logger

_ENTRY_POINT_GROUP = "slnsync.hooks"

Transform = Callable[[str, str], Optional[str]]
Listener = Callable[[], None]


class HookKind(str, Enum):
    """Artifact kinds a hook can be registered for."""

    PROJECT = "project"
    SOLUTION = "solution"


class HookChain:
    """Ordered content transformers keyed by artifact kind.

    Each hook receives the path and the running content; returning a string
    replaces the content for the next hook, returning ``None`` keeps it.
    """

    def __init__(self) -> None:
        self._hooks: Dict[HookKind, List[Transform]] = {kind: [] for kind in HookKind}
        self._listeners: List[Listener] = []
        self.logger = get_logger("hooks")

    def register(self, kind: HookKind | str, transform: Transform) -> None:
        self._hooks[HookKind(kind)].append(transform)

    def register_listener(self, listener: Listener) -> None:
        """Register a callback fired after every completed full sync."""
        self._listeners.append(listener)

    def hooks_for(self, kind: HookKind | str) -> List[Transform]:
        return list(self._hooks[HookKind(kind)])

    def apply(self, kind: HookKind | str, path: str, content: str) -> str:
        for transform in self._hooks[HookKind(kind)]:
            try:
                result = transform(path, content)
            except Exception:
                self.logger.exception(
                    "Post-generation hook %s failed for %s", _hook_name(transform), path
                )
                continue
            if isinstance(result, str):
                content = result
        return content

    def notify_generated(self) -> None:
        for listener in self._listeners:
            try:
                listener()
            except Exception:
                self.logger.exception("Post-sync listener %s failed", _hook_name(listener))

    def load_entry_points(self) -> int:
        """Let installed plugins register themselves; returns the number loaded."""
        loaded = 0
        for entry in _iter_entry_points():
            try:
                register = entry.load()
                register(self)
            except Exception:
                self.logger.exception("Failed to load hook entry point '%s'", entry.name)
                continue
            loaded += 1
        return loaded


def _hook_name(func: Callable[..., object]) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = ["HookChain", "HookKind", "Listener", "Transform"]

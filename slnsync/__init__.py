"""Incremental solution and project file synchronisation."""

from .config import ConfigError, SyncConfig, load_config
from .engine import SyncEngine
from .postproc import HookChain, HookKind
from .providers import GraphProvider, ManifestGraphProvider

__all__ = [
    "ConfigError",
    "GraphProvider",
    "HookChain",
    "HookKind",
    "ManifestGraphProvider",
    "SyncConfig",
    "SyncEngine",
    "load_config",
]

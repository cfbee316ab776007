"""Compilation-unit graph providers."""

from .base import GraphProvider
from .manifest import (
    BINARY_SUFFIX,
    DEFAULT_GRAPH_FILE,
    ManifestError,
    ManifestGraphProvider,
    PackageInfo,
)

__all__ = [
    "BINARY_SUFFIX",
    "DEFAULT_GRAPH_FILE",
    "GraphProvider",
    "ManifestError",
    "ManifestGraphProvider",
    "PackageInfo",
]

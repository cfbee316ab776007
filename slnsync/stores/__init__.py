"""Persistence helpers for generated artifacts."""

from .files import FileStore

__all__ = ["FileStore"]

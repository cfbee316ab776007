"""Stable identifiers for generated projects and solutions."""

from __future__ import annotations

import hashlib
import uuid

SOLUTION_PROJECT_TYPE_ID = "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC"

_SALT = "salt"


def project_identifier(project_space_name: str, unit_name: str) -> str:
    """Return the identifier of ``unit_name``'s project.

    The value depends only on the unit name, so it stays stable across runs and
    processes. ``project_space_name`` is accepted for symmetry with the solution
    lookup and does not take part in the hash.
    """
    digest = hashlib.md5(f"{unit_name}{_SALT}".encode("utf-8")).digest()
    # .NET builds GUIDs from raw bytes with little-endian leading fields.
    return str(uuid.UUID(bytes_le=digest))


def solution_type_identifier() -> str:
    """Return the project-type identifier shared by every solution entry."""
    return SOLUTION_PROJECT_TYPE_ID


__all__ = ["SOLUTION_PROJECT_TYPE_ID", "project_identifier", "solution_type_identifier"]

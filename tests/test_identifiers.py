"""Tests for slnsync.identifiers."""

from __future__ import annotations

import hashlib
import re
import uuid

from slnsync.identifiers import (
    SOLUTION_PROJECT_TYPE_ID,
    project_identifier,
    solution_type_identifier,
)

_GUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def test_project_identifier_is_stable_and_guid_shaped() -> None:
    first = project_identifier("Game", "Core")

    assert _GUID.match(first)
    assert project_identifier("Game", "Core") == first
    assert project_identifier("OtherSolution", "Core") == first
    assert project_identifier("Game", "Game") != first


def test_project_identifier_uses_dotnet_byte_order() -> None:
    digest = hashlib.md5(b"Coresalt").digest()
    identifier = uuid.UUID(project_identifier("Game", "Core"))

    assert identifier.bytes_le == digest
    # The last eight bytes are stored in order, the leading fields are swapped.
    assert identifier.bytes[8:] == digest[8:]


def test_solution_type_identifier_is_constant() -> None:
    assert solution_type_identifier() == SOLUTION_PROJECT_TYPE_ID
    assert SOLUTION_PROJECT_TYPE_ID == "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC"

"""Tests for response-file resolution and argument precedence."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from slnsync.models import ResponseFileData
from slnsync.responses import (
    ResponseFileResolver,
    allow_unsafe,
    analyzer_paths,
    language_version,
    make_absolute,
    merge_other_arguments,
    ruleset_paths,
)
from tests._fixtures.graph import InMemoryGraphProvider, make_unit


def test_resolver_skips_files_with_errors(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    good = ResponseFileData(defines=["GOOD"])
    provider = InMemoryGraphProvider(
        response_files={
            "good.rsp": good,
            "bad.rsp": ResponseFileData(errors=["Reference file not found: X.dll"]),
        }
    )
    unit = make_unit("Core", ["Assets/Core/A.cs"], response_files=["bad.rsp", "good.rsp"])

    with caplog.at_level(logging.ERROR, logger="slnsync"):
        resolved, errors = ResponseFileResolver(provider, tmp_path).resolve(unit)

    assert resolved == [good]
    assert errors == ["bad.rsp: Reference file not found: X.dll"]
    assert "bad.rsp Parse Error : Reference file not found: X.dll" in caplog.text


def test_resolver_turns_provider_failures_into_errors(tmp_path: Path) -> None:
    class FailingProvider(InMemoryGraphProvider):
        def resolve_response_file(self, identifier, project_root, system_dirs):  # type: ignore[override]
            raise OSError("permission denied")

    unit = make_unit("Core", ["Assets/Core/A.cs"], response_files=["csc.rsp"])
    resolved, errors = ResponseFileResolver(FailingProvider(), tmp_path).resolve(unit)

    assert resolved == []
    assert errors == ["csc.rsp: permission denied"]


def test_merge_other_arguments_keeps_every_value() -> None:
    merged = merge_other_arguments(
        [
            ResponseFileData(other_arguments=["-nowarn:0169", "-warnaserror+", "loose.cs"]),
            ResponseFileData(other_arguments=["/nowarn:0649", "-langversion:latest"]),
        ]
    )

    assert merged == {
        "nowarn": ["0169", "0649"],
        "warnaserror": ["+"],
        "langversion": ["latest"],
    }


def test_language_version_prefers_response_files() -> None:
    unit = make_unit("Core", language_version="8.0")

    assert language_version(unit, {"langversion": ["", "9.0"]}) == "9.0"
    assert language_version(unit, {}) == "8.0"


def test_ruleset_paths_put_unit_first_and_dedupe(tmp_path: Path) -> None:
    unit = make_unit("Core", ruleset_path="Assets/csc.ruleset")
    other = {"ruleset": ["Assets/csc.ruleset", "/rules/strict.ruleset"]}

    assert ruleset_paths(unit, other, tmp_path) == [
        os.path.join(str(tmp_path), "Assets", "csc.ruleset"),
        "/rules/strict.ruleset",
    ]


def test_analyzer_paths_merge_both_flags_then_unit_paths(tmp_path: Path) -> None:
    unit = make_unit("Core", analyzer_paths=["Analyzers/A.dll", "Analyzers/D.dll"])
    other = {"analyzer": ["Analyzers/A.dll;Analyzers/B.dll"], "a": ["Analyzers/C.dll"]}

    assert analyzer_paths(unit, other, tmp_path) == [
        os.path.join(str(tmp_path), "Analyzers", name) for name in ("A.dll", "B.dll", "C.dll", "D.dll")
    ]


def test_allow_unsafe_from_unit_or_any_response_file() -> None:
    plain = make_unit("Core")

    assert allow_unsafe(plain, [ResponseFileData(), ResponseFileData(unsafe=True)]) is True
    assert allow_unsafe(plain, [ResponseFileData()]) is False
    assert allow_unsafe(make_unit("Core", allow_unsafe=True), []) is True


def test_make_absolute_normalises_separators(tmp_path: Path) -> None:
    assert make_absolute("Assets\\Core\\..\\Rules\\a.ruleset", tmp_path) == os.path.join(
        str(tmp_path), "Assets", "Rules", "a.ruleset"
    )
    assert make_absolute("/abs//path/x.dll", tmp_path) == "/abs/path/x.dll"

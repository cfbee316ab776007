"""Tests for the write-if-changed artifact store."""

from __future__ import annotations

from pathlib import Path

from slnsync.stores import FileStore


def test_write_if_changed_creates_parents_and_skips_identical(tmp_path: Path) -> None:
    store = FileStore()
    target = tmp_path / "CSharpProjFolders" / "Core" / "Core.csproj"

    assert store.write_if_changed(target, "<Project />\n") is True
    assert target.read_text(encoding="utf-8") == "<Project />\n"
    mtime = target.stat().st_mtime_ns

    assert store.write_if_changed(target, "<Project />\n") is False
    assert target.stat().st_mtime_ns == mtime


def test_line_endings_are_written_verbatim(tmp_path: Path) -> None:
    store = FileStore()
    target = tmp_path / "Game.sln"

    assert store.write_if_changed(target, "\r\nGlobal\r\nEndGlobal\r\n") is True
    assert target.read_bytes() == b"\r\nGlobal\r\nEndGlobal\r\n"
    assert store.write_if_changed(target, "\r\nGlobal\r\nEndGlobal\r\n") is False
    assert store.write_if_changed(target, "\nGlobal\nEndGlobal\n") is True


def test_unreadable_file_is_rewritten(tmp_path: Path) -> None:
    target = tmp_path / "Core.csproj"
    target.write_bytes(b"\xff\xfe\x00broken")

    assert FileStore().write_if_changed(target, "fresh") is True
    assert target.read_text(encoding="utf-8") == "fresh"


def test_write_failure_reports_no_write(tmp_path: Path) -> None:
    blocker = tmp_path / "CSharpProjFolders"
    blocker.write_text("not a directory", encoding="utf-8")

    assert FileStore().write_if_changed(blocker / "Core" / "Core.csproj", "x") is False

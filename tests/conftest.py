from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from slnsync.config import SyncConfig, VerifyConfig
from tests._fixtures.graph import InMemoryGraphProvider, RecordingFileStore


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Provide an empty project directory named after the solution."""
    root = tmp_path / "Game"
    root.mkdir()
    return root


@pytest.fixture
def sync_config(project_root: Path) -> SyncConfig:
    """Default configuration with build verification switched off."""
    return SyncConfig(root=project_root, verify=VerifyConfig(enabled=False))


@pytest.fixture
def provider() -> InMemoryGraphProvider:
    return InMemoryGraphProvider()


@pytest.fixture
def store() -> RecordingFileStore:
    return RecordingFileStore()


@pytest.fixture(autouse=True)
def _reset_slnsync_logger() -> Iterator[None]:
    """Undo CLI logging setup so caplog keeps seeing slnsync records."""
    yield
    logger = logging.getLogger("slnsync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

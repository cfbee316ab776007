"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from slnsync.service import create_app


class _StubEngine:
    def __init__(self, written: int = 2, error: Optional[str] = None) -> None:
        self.written = written
        self.error = error
        self.last_written = 0
        self.last_error: Optional[str] = None
        self.sync_calls = 0
        self.incremental_calls: list[tuple[list[str], list[str]]] = []

    def _finish(self) -> bool:
        self.last_error = self.error
        self.last_written = 0 if self.error else self.written
        return self.last_written > 0

    def sync(self) -> bool:
        self.sync_calls += 1
        self._finish()
        return self.error is None

    def sync_if_needed(self, affected: list[str], reimported: list[str]) -> bool:
        self.incremental_calls.append((list(affected), list(reimported)))
        return self._finish()


@pytest.fixture
def engine() -> _StubEngine:
    return _StubEngine()


@pytest.fixture
def client(engine: _StubEngine) -> TestClient:
    requests: list[tuple[str, Optional[str]]] = []

    def factory(path: str, graph: Optional[str]) -> _StubEngine:
        requests.append((path, graph))
        return engine

    app = create_app(factory)  # type: ignore[arg-type]
    app.state.requests = requests
    return TestClient(app)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_sync_endpoint(client: TestClient, engine: _StubEngine, tmp_path: Path) -> None:
    response = client.post("/sync", json={"path": str(tmp_path), "graph": "graph.yml"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "written": 2, "error": None}
    assert engine.sync_calls == 1
    assert client.app.state.requests == [(str(tmp_path), "graph.yml")]  # type: ignore[attr-defined]


def test_sync_reports_zero_when_nothing_changed(
    client: TestClient, engine: _StubEngine, tmp_path: Path
) -> None:
    engine.written = 0

    response = client.post("/sync", json={"path": str(tmp_path)})

    assert response.json() == {"status": "ok", "written": 0, "error": None}


def test_sync_if_needed_endpoint(client: TestClient, engine: _StubEngine, tmp_path: Path) -> None:
    response = client.post(
        "/sync-if-needed",
        json={"path": str(tmp_path), "affected": ["Assets/A.cs"], "reimported": ["x.dll"]},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "written": 2, "error": None}
    assert engine.incremental_calls == [(["Assets/A.cs"], ["x.dll"])]


def test_sync_if_needed_reports_skipped(client: TestClient, engine: _StubEngine, tmp_path: Path) -> None:
    engine.written = 0

    response = client.post("/sync-if-needed", json={"path": str(tmp_path)})

    assert response.json() == {"status": "skipped", "written": 0, "error": None}


@pytest.mark.parametrize("endpoint", ["/sync", "/sync-if-needed"])
def test_engine_failure_is_reported_as_failed(
    client: TestClient, engine: _StubEngine, tmp_path: Path, endpoint: str
) -> None:
    engine.error = "graph snapshot missing"

    response = client.post(endpoint, json={"path": str(tmp_path), "affected": ["Assets/A.cs"]})

    assert response.status_code == 200
    assert response.json() == {"status": "failed", "written": 0, "error": "graph snapshot missing"}


def test_default_factory_rejects_missing_directory(tmp_path: Path) -> None:
    client = TestClient(create_app(), raise_server_exceptions=False)

    response = client.post("/sync", json={"path": str(tmp_path / "absent")})

    assert response.status_code == 404

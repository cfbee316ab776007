"""FastAPI application entrypoint for slnsync service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, load_config
from ..engine import SyncEngine
from ..postproc import HookChain
from ..providers import DEFAULT_GRAPH_FILE, ManifestGraphProvider

EngineFactory = Callable[[str, Optional[str]], SyncEngine]


class SyncRequest(BaseModel):
    path: str
    graph: Optional[str] = None


class SyncIfNeededRequest(BaseModel):
    path: str
    graph: Optional[str] = None
    affected: List[str] = []
    reimported: List[str] = []


class SyncResponse(BaseModel):
    status: str
    written: int
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _response(engine: SyncEngine, status: str) -> SyncResponse:
    """Report the artifact count of the last run, or its failure."""
    if engine.last_error:
        return SyncResponse(status="failed", written=0, error=engine.last_error)
    return SyncResponse(status=status, written=engine.last_written)


def _default_engine(path: str, graph: Optional[str]) -> SyncEngine:
    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Project directory not found: {root}")
    config = load_config(root)
    provider = ManifestGraphProvider(
        Path(graph) if graph else root / DEFAULT_GRAPH_FILE,
        root,
        included_package_sources=config.packages.include,
    )
    hooks = HookChain()
    hooks.load_entry_points()
    return SyncEngine(root, provider, config=config, hooks=hooks)


def create_app(engine_factory: EngineFactory = _default_engine) -> FastAPI:
    """Create the FastAPI application exposing slnsync operations."""
    app = FastAPI(title="slnsync Service", version="1.0.0")
    # Sync calls against one project directory must not overlap.
    lock = asyncio.Lock()

    async def _run(func: Callable[[], bool]) -> bool:
        async with lock:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, func)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/sync", response_model=SyncResponse)
    async def sync(payload: SyncRequest) -> SyncResponse:
        engine = engine_factory(payload.path, payload.graph)
        await _run(engine.sync)
        return _response(engine, "ok")

    @app.post("/sync-if-needed", response_model=SyncResponse)
    async def sync_if_needed(payload: SyncIfNeededRequest) -> SyncResponse:
        engine = engine_factory(payload.path, payload.graph)
        written = await _run(
            lambda: engine.sync_if_needed(payload.affected, payload.reimported)
        )
        return _response(engine, "ok" if written else "skipped")

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]

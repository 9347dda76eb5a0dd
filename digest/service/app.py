"""FastAPI application entrypoint for digest service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigParseError, UsageError
from ..orchestrator import DigestOutcome, Orchestrator


class DigestRequest(BaseModel):
    path: str
    exclude_ext: List[str] = []
    exclude_dir: List[str] = []


class DigestResponse(BaseModel):
    root: str
    document: str
    files: List[str]
    warnings: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the digest pipeline."""
    app = FastAPI(title="Digest Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/digest", response_model=DigestResponse)
    async def digest(
        payload: DigestRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> DigestResponse:
        def _run() -> DigestOutcome:
            return orchestrator.run(
                payload.path,
                exclude_ext=payload.exclude_ext,
                exclude_dir=payload.exclude_dir,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        return DigestResponse(
            root=str(outcome.root),
            document=outcome.document.decode("utf-8"),
            files=outcome.files,
            warnings=[str(warning) for warning in outcome.warnings],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(UsageError)
    async def usage_error_handler(_: Any, exc: UsageError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigParseError)
    async def config_error_handler(_: Any, exc: ConfigParseError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)

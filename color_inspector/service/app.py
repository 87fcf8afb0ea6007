"""FastAPI application entrypoint for color-inspector service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..models import Inventory
from ..orchestrator import ColorInspector


class ScanRequest(BaseModel):
    root: str
    workspace: Optional[str] = None
    max_files: Optional[int] = Field(default=None, ge=1)


class ImportItem(BaseModel):
    file: str
    colors: int


class ScanResponse(BaseModel):
    root: str
    total_colors: int
    truncated: bool
    files: List[str]
    imports: List[ImportItem]
    groups: List[Dict[str, Any]]


class HealthResponse(BaseModel):
    status: str


def _default_inspector() -> ColorInspector:
    return ColorInspector()


def create_app(
    inspector_factory: Callable[[], ColorInspector] = _default_inspector,
) -> FastAPI:
    """Create the FastAPI application exposing color scans."""

    app = FastAPI(title="Color Inspector Service", version="1.0.0")

    async def get_inspector() -> ColorInspector:
        # A fresh inspector per request keeps passes independent.
        return inspector_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan", response_model=ScanResponse)
    async def scan(
        payload: ScanRequest,
        inspector: ColorInspector = Depends(get_inspector),
    ) -> ScanResponse:
        def _run_scan() -> Inventory:
            return inspector.scan(
                payload.root, payload.workspace, max_files=payload.max_files
            )

        loop = asyncio.get_running_loop()
        inventory = await loop.run_in_executor(None, _run_scan)
        return ScanResponse(**inventory.to_dict())

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)

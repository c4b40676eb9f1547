"""FastAPI application entrypoint for testgen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

try:  # pragma: no cover - optional dependency
    from fastapi import Body, Depends, FastAPI
    from fastapi.responses import JSONResponse, Response

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Body = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    Response = None  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..orchestrator import Orchestrator
from .protocol import ToolServer

_T = TypeVar("_T")

_ERROR_STATUS: Tuple[Tuple[Type[Exception], int], ...] = (
    (FileNotFoundError, 404),
    (RuntimeError, 400),
)


class ComponentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    project_root: str = Field(default=".", alias="projectRoot")


class GenerateRequest(ComponentRequest):
    output_path: Optional[str] = Field(default=None, alias="outputPath")
    verify: bool = True


class GenerateResponse(BaseModel):
    status: str
    test_path: str
    iterations: int
    test_source: str
    diagnostics: str = ""
    history: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


async def _run_blocking(call: Callable[[], _T]) -> _T:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return call()
    return await loop.run_in_executor(None, call)


def _require_fastapi() -> None:
    if not _FASTAPI_AVAILABLE:  # pragma: no cover - exercised without the service extra
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install testgen[service]`."
        )


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing testgen operations."""
    _require_fastapi()
    app = FastAPI(title="TestGen Service", version="1.0.0")
    server = ToolServer(orchestrator_factory)

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/rpc")
    async def rpc(payload: Any = Body(...)) -> Response:
        response = await _run_blocking(lambda: server.handle_payload(payload))
        if response is None:
            return Response(status_code=204)
        return JSONResponse(content=response)

    @app.post("/analyze")
    async def analyze(
        payload: ComponentRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        model = await _run_blocking(
            lambda: orchestrator.analyze(payload.file_path, payload.project_root)
        )
        return model.to_dict()

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        outcome = await _run_blocking(
            lambda: orchestrator.generate_tests(
                payload.file_path,
                payload.project_root,
                payload.output_path,
                verify=payload.verify,
            )
        )
        return GenerateResponse(
            status=outcome.terminal.value if outcome.terminal is not None else "skipped",
            test_path=str(outcome.test_path),
            iterations=outcome.iterations,
            test_source=outcome.test_source,
            diagnostics=outcome.diagnostics,
            history=outcome.history,
        )

    for exc_type, status_code in _ERROR_STATUS:
        app.add_exception_handler(exc_type, _detail_handler(status_code))

    return app


def _detail_handler(status_code: int) -> Callable[[Any, Exception], Awaitable[JSONResponse]]:
    async def _handler(_: Any, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return _handler


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    _require_fastapi()
    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]

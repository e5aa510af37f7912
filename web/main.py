"""FastAPI application for supply-chain data entry and questions."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import database
from core.env import AskSettings
from core.logging import get_logger
from llm.llm_service import CompletionClient, build_langfuse_client
from services.ask_service import AskService
from web import routers
from web.deps import AskServiceUnavailable

logger = get_logger(__name__)


def build_ask_service(settings: Optional[AskSettings] = None) -> AskService:
    """Wire the ask pipeline to the process-wide engine and an LLM client."""
    settings = settings or AskSettings.from_env()
    client = CompletionClient.from_settings(settings, tracer=build_langfuse_client())
    logger.info("Ask pipeline ready (model=%s, max_tokens=%d).", settings.model, settings.max_tokens)
    return AskService(
        session_factory=database.SessionLocal,
        completion_client=client,
        tolerate_source_failures=settings.tolerate_source_failures,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, "ask_service", None) is None:
        app.state.ask_service = build_ask_service()
    try:
        yield
    finally:
        database.engine.dispose()


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "invalid_request", "details": jsonable_encoder(exc.errors())},
    )


async def ask_unavailable_handler(_request: Request, exc: AskServiceUnavailable) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"error": str(exc)})


def create_app(*, ask_service: Optional[AskService] = None) -> FastAPI:
    app = FastAPI(
        title="Supply Chain Copilot API",
        description="Record suppliers, quotes, purchase orders and costs; ask questions about them.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.ask_service = ask_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(AskServiceUnavailable, ask_unavailable_handler)

    @app.get("/", summary="Health Check", tags=["Default"])
    def health_check():
        """Liveness check."""
        return {"status": "ok", "message": "Supply Chain Copilot API is running."}

    @app.get("/healthz", include_in_schema=False)
    def readiness_check():
        db_ok, db_error = routers.health.ping_database()
        payload = {"status": "ok" if db_ok else "unhealthy", "database": {"ok": db_ok}}
        if db_error:
            payload["database"]["error"] = db_error
        status_code = status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(status_code=status_code, content=payload)

    app.include_router(routers.ask.router, prefix="/api/v1")
    app.include_router(routers.records.router, prefix="/api/v1")
    app.include_router(routers.documents.router, prefix="/api/v1")
    app.include_router(routers.health.router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("web.main:app", host="0.0.0.0", port=8000, reload=True)

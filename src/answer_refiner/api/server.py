"""HTTP surface for the answer refiner.

Endpoints:
    GET  /health            - Health check and available styles
    POST /refine-ai-answer  - Refine an answer under a hard length limit
    POST /refine            - Alias of /refine-ai-answer
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from answer_refiner.config import AppConfig, load_config
from answer_refiner.errors import RefinerError
from answer_refiner.pipeline.orchestrator import AnswerRefiner, build_refiner
from answer_refiner.pipeline.styles import list_style_keys

logger = logging.getLogger(__name__)

REFINE_PATHS = ("/refine-ai-answer", "/refine")
CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(
    refiner: AnswerRefiner | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Build the FastAPI app; the refiner is wired from config unless injected."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if app.state.refiner is None:
            owned = app.state.refiner = build_refiner(config or load_config())
        yield
        if owned is not None:
            await owned.aclose()

    app = FastAPI(
        title="Answer Refiner API",
        version="0.1.0",
        description="Rewrites application answers in a chosen style within a hard length limit.",
        lifespan=lifespan,
    )
    app.state.refiner = refiner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=CORS_HEADERS,
    )

    @app.exception_handler(RefinerError)
    async def _refiner_error(request: Request, exc: RefinerError) -> JSONResponse:
        logger.info("%s %s -> %d %s: %s", request.method, request.url.path,
                    exc.status_code, exc.kind, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error handling %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "InternalError",
                "message": "An unexpected error occurred",
                "details": type(exc).__name__,
            },
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "styles": list_style_keys()}

    async def refine_answer(request: Request) -> JSONResponse:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw else None
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            # Left for the validator so a missing Authorization header still wins
            payload = None

        result = await app.state.refiner.refine(payload, request.headers.get("authorization"))
        return JSONResponse(status_code=200, content=result.to_response())

    async def method_not_allowed(request: Request) -> JSONResponse:
        return JSONResponse(
            status_code=405,
            content={"error": "MethodNotAllowed", "message": "Only POST requests are supported"},
        )

    for path in REFINE_PATHS:
        app.add_api_route(path, refine_answer, methods=["POST"])
        app.add_api_route(path, method_not_allowed, methods=["GET", "PUT", "PATCH", "DELETE"],
                          include_in_schema=False)

    return app

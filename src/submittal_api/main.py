from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from submittal_api import __version__
from submittal_api.api.routes import build_packets_router
from submittal_api.errors import ApiError
from submittal_api.schemas import ErrorEnvelope
from submittal_api.services import DocumentFetcher, PacketAssembler, PageRenderer
from submittal_api.settings import (
    Settings,
    configure_package_logging,
    is_hardened_environment,
    load_settings,
)
from submittal_api.telemetry import RequestMetrics, generate_trace_id

LOGGER = logging.getLogger(__name__)


def build_packet_assembler(settings: Settings) -> PacketAssembler:
    fetcher = DocumentFetcher(
        content_origin=settings.content_origin,
        user_agent=settings.fetch_user_agent,
        timeout_seconds=settings.fetch_timeout_seconds,
        max_bytes=settings.fetch_max_bytes,
    )
    return PacketAssembler(fetcher=fetcher, renderer=PageRenderer(settings.brand))


def create_app(
    settings: Settings | None = None,
    *,
    assembler: PacketAssembler | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_package_logging(settings)
    hardened_environment = is_hardened_environment(settings.environment)
    assembler = assembler or build_packet_assembler(settings)
    request_metrics = RequestMetrics()

    app = FastAPI(title=settings.app_name, version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=["x-trace-id", "x-packet-page-count", "Content-Disposition"],
        max_age=600,
    )

    @app.middleware("http")
    async def trace_middleware(request: Request, call_next):
        request.state.trace_id = generate_trace_id()
        start_time = time.perf_counter()
        status_code = 500
        is_packet_request = request.url.path in {"/generate-packet", "/api/packets"}
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["x-trace-id"] = request.state.trace_id
            return response
        finally:
            if is_packet_request:
                request_metrics.record_api_response(
                    status_code=status_code,
                    duration_seconds=time.perf_counter() - start_time,
                )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        trace_id = getattr(request.state, "trace_id", generate_trace_id())
        details = None
        if not hardened_environment:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
                for error in exc.errors()
            )
        payload = ErrorEnvelope(
            error={
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "trace_id": trace_id,
                "details": details,
            }
        )
        return JSONResponse(
            status_code=422,
            content=payload.model_dump(),
            headers={"x-trace-id": trace_id},
        )

    @app.exception_handler(ApiError)
    async def api_exception_handler(request: Request, exc: ApiError):
        trace_id = getattr(request.state, "trace_id", generate_trace_id())
        payload = ErrorEnvelope(
            error={
                "code": exc.code,
                "message": exc.message,
                "trace_id": trace_id,
                "policy_reason": exc.policy_reason,
            }
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=payload.model_dump(),
            headers={"x-trace-id": trace_id},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        trace_id = getattr(request.state, "trace_id", generate_trace_id())
        LOGGER.exception("Unhandled API exception", exc_info=exc)
        payload = ErrorEnvelope(
            error={
                "code": "PACKET_GENERATION_FAILED",
                "message": "Failed to generate packet",
                "trace_id": trace_id,
                "details": None if hardened_environment else (str(exc) or "Unknown error"),
            }
        )
        return JSONResponse(
            status_code=500,
            content=payload.model_dump(),
            headers={"x-trace-id": trace_id},
        )

    app.include_router(
        build_packets_router(
            assembler=assembler,
            request_metrics=request_metrics,
            max_documents=settings.packet_max_documents,
            expose_error_details=not hardened_environment,
        )
    )

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "PDF Packet Generator"

    @app.get("/healthz", tags=["health"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/ops/metrics", tags=["ops"])
    async def ops_metrics() -> dict[str, object]:
        return {"request_metrics": request_metrics.snapshot()}

    return app


app = create_app()

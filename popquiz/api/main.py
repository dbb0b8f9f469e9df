"""FastAPI application entrypoint, middleware, and error handlers."""

import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, Response

from popquiz.api.routes.calculations import router as calculations_router
from popquiz.api.routes.exports import router as exports_router
from popquiz.core.config import settings
from popquiz.core.errors import AppError, UnexpectedError
from popquiz.core.logging import bind_context, clear_context, configure_logging, get_logger
from popquiz.core.schemas import HealthPublic

configure_logging(
    log_level=settings.log_level,
    log_format=settings.log_format,
    service_name=settings.service_name,
    environment=settings.environment,
)

INDEX_PAGE = Path(__file__).resolve().parent.parent / "web" / "index.html"

app = FastAPI(title="Pop Quiz 'Best Of' Calculator")
logger = get_logger(__name__)

app.include_router(calculations_router)
app.include_router(exports_router)


def _elapsed_ms(started_at: float) -> float:
    return round((time.perf_counter() - started_at) * 1000, 2)


def _detail_response(error: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": jsonable_encoder(error.detail)},
    )


@app.middleware("http")
async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Emit started/completed/failed events around each request, with its duration."""
    clear_context()
    bind_context(http_method=request.method, http_path=request.url.path)
    started_at = time.perf_counter()
    logger.info("http.request.started")
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("http.request.failed", duration_ms=_elapsed_ms(started_at))
        raise
    else:
        logger.info(
            "http.request.completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started_at),
        )
        return response
    finally:
        clear_context()


app.add_middleware(
    CorrelationIdMiddleware,
    header_name="X-Request-ID",
    update_request_header=True,
)


@app.exception_handler(AppError)
async def handle_app_error(_request: Request, exc: AppError) -> JSONResponse:
    """Render a user-correctable error as the message shown in the page's banner."""
    logger.info("app.request_rejected", status_code=exc.status_code, detail=exc.detail)
    return _detail_response(exc)


@app.exception_handler(Exception)
async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("app.unhandled_exception", exc_info=exc)
    return _detail_response(UnexpectedError())


@app.get("/", response_class=HTMLResponse)
def read_index() -> HTMLResponse:
    """Serve the single-page calculator UI."""
    return HTMLResponse(INDEX_PAGE.read_text(encoding="utf-8"))


@app.get("/health", response_model=HealthPublic)
def read_health() -> HealthPublic:
    return HealthPublic(status="ok")

"""FastAPI entry point for the TCG pricing backend."""

from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .card_routes import router as card_router
from .errors import ConfigurationError
from .schemas import HealthStatus
from .settings import Settings, settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # Presence only, never the key itself
    logger.info("JUSTTCG_API_KEY present: %s", bool(settings.justtcg_api_key))
    logger.info("Image fallback enabled: %s", settings.image_fallback_enabled)
    yield
    logger.info("Shutting down application...")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration for every request."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(card_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=500)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"error": "Invalid request parameters", "detail": jsonable_encoder(exc.errors())},
        status_code=400,
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse({"error": "Server error"}, status_code=500)


@app.get("/api/health", response_model=HealthStatus)
async def health():
    return HealthStatus(status="ok", message="TCG Backend is running")


def run(config: Settings | None = None) -> None:
    """Run the development server using HOST, PORT and TCG_BACKEND_RELOAD."""

    import uvicorn

    config = config or settings
    logger.info("TCG Backend running on port %d", config.port)
    logger.info("Health -> http://localhost:%d/api/health", config.port)
    uvicorn.run("tcg_backend.main:app", host=config.host.strip() or "0.0.0.0", port=config.port, reload=config.reload)


if __name__ == "__main__":
    run()

"""
api/main.py -- FastAPI application entry point for the classifieds API.

Run with:  python main.py
           uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers; every origin is allowed
  2. log_requests   -- one log line per request with status and latency

Lifespan builds every collaborator from Settings exactly once -- stores,
password hasher, token issuer, Google verifier, and the two services -- and
attaches them to app.state. Nothing below reads configuration at import time,
so tests can swap the lifespan and inject their own services.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ads.service import ListingService
from ads.store import AdStore
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.ads import router as ads_router
from api.routes.auth import router as auth_router
from auth.google import GoogleVerifier
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import Settings, get_settings
from core.errors import ClassifiedsError

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("classifieds.api")


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------


def build_services(app: FastAPI, settings: Settings) -> None:
    """Construct stores and services from settings and attach them to app.state."""
    app.state.user_store = UserStore(settings.database_url)
    app.state.ad_store = AdStore(settings.database_url)
    app.state.token_issuer = TokenIssuer(settings.secret_key, settings.token_expire_seconds)

    google: GoogleVerifier | None = None
    if settings.google_client_id:
        google = GoogleVerifier(settings.google_client_id, certs_url=settings.google_certs_url)
    else:
        logger.warning("GOOGLE_CLIENT_ID not set -- POST /auth/google will reject every token")

    app.state.auth_service = AuthService(
        app.state.user_store,
        PasswordHasher(settings.bcrypt_rounds),
        app.state.token_issuer,
        google,
    )
    app.state.listing_service = ListingService(app.state.ad_store)
    logger.info("User store ready (%d accounts)", app.state.user_store.count_users())


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Everything before yield runs on startup; everything after on shutdown."""
    logger.info("Classifieds API starting up")
    build_services(app, get_settings())
    logger.info("Stores and services initialized")

    yield

    app.state.user_store.close()
    app.state.ad_store.close()
    logger.info("Classifieds API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Classifieds API",
    description="Account signup/login (password and Google) and classified ad listings.",
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

# Any origin may call the API; the session token travels in a header, not a
# cookie, so there is no ambient credential for a foreign page to ride on.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])
app.include_router(ads_router, tags=["Ads"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(ClassifiedsError)
async def classifieds_error_handler(request: Request, exc: ClassifiedsError) -> JSONResponse:
    """Render a domain error with the status and code it declares."""
    return _error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when request body or query params fail validation."""
    return _error_response(422, "validation_error", "Request validation failed.", str(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return a structured error for all FastAPI/Starlette HTTP exceptions (404, 405, ...)."""
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)

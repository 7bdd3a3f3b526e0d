"""Focus App API - accounts, email verification and profile images."""

import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import get_settings
from app.exceptions import AppError, ValidationFailed
from app.rate_limit import limiter
from app.routers import auth_router, email_verification_router, users_router

# Logging
logger = logging.getLogger("focus_app")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()
for warning in settings.validate():
    logger.warning(warning)

app = FastAPI(title="Focus App API", version="1.0.0")
app.state.limiter = limiter


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    MAX_BODY_SIZE = 3 * 1024 * 1024  # 3MB (above the 2MB profile image limit plus multipart overhead)

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.MAX_BODY_SIZE:
            return JSONResponse(status_code=413, content={"message": "Request body too large", "data": {}})
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PATHS = {"/auth/register", "/auth/login", "/auth/logout", "/user/profile-image", "/email/verify/"}

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        path = request.url.path
        if any(path.startswith(p) for p in self.AUDIT_PATHS):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                request.method,
                path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)

# Public storage disk (profile images)
Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.STORAGE_URL, StaticFiles(directory=settings.STORAGE_DIR), name="storage")

# API routers
app.include_router(auth_router)
app.include_router(email_verification_router)
app.include_router(users_router)


# --- Error handlers: every error is rendered as {"message", "data"[, "errors"]} ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors."""
    content = {"message": exc.message, "data": {}}
    if isinstance(exc, ValidationFailed):
        content["errors"] = exc.errors
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies as field-keyed validation errors."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "body"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value."))
    return JSONResponse(
        status_code=422,
        content={"message": ValidationFailed.message, "data": {}, "errors": errors},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded."""
    return JSONResponse(
        status_code=429,
        content={"message": "Too many attempts. Please try again later.", "data": {}},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render framework HTTP errors (404 routes, 405 methods) in the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "data": {}},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors; never expose their details."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error. Please try again.", "data": {}})


# --- Health check ---
@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"message": "ok", "data": {"app": "focus-app", "version": "1.0.0"}}

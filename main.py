"""SiteCMS - content management backend for the business website."""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from sitecms.config import get_settings
from sitecms.errors import CMSError
from sitecms.rate_limit import limiter
from sitecms.routers import (
    auth_router,
    blogs_router,
    courses_router,
    services_router,
    stories_router,
    students_router,
    testimonials_router,
)
from sitecms.services.media import build_media_store
from sitecms.services.notifier import build_notifier

# Logging
logger = logging.getLogger("sitecms")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the external collaborators once and share them through ``app.state``."""
    for warning in settings.validate():
        logger.warning("Config: %s", warning)
    app.state.media_store = build_media_store(settings)
    app.state.notifier = build_notifier(settings)
    logger.info("SiteCMS started (%s)", settings.APP_ENV)
    yield
    logger.info("SiteCMS stopped")


app = FastAPI(title="SiteCMS", version="0.1.0", lifespan=lifespan)
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
    MAX_BODY_SIZE = (settings.MAX_UPLOAD_SIZE_MB + 5) * 1024 * 1024  # slightly above max upload

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.MAX_BODY_SIZE:
            return JSONResponse(status_code=413, content={"detail": "Request body too large"})
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PATHS = (
        "/api/auth/",
        "/api/students",
        "/blogs",
        "/courses",
        "/services",
        "/testimonials",
        "/student-success-stories",
    )

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        path = request.url.path
        method = request.method
        if method in ("POST", "PUT", "DELETE") and path.startswith(self.AUDIT_PATHS):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                method,
                path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Locally stored media
if settings.MEDIA_BACKEND != "s3":
    app.mount("/media", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="media")

# API routers
app.include_router(auth_router)
app.include_router(blogs_router)
app.include_router(courses_router)
app.include_router(services_router)
app.include_router(students_router)
app.include_router(testimonials_router)
app.include_router(stories_router)


# --- Error handlers ---
@app.exception_handler(CMSError)
async def cms_error_handler(request: Request, exc: CMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{location}: {errors[0].get('msg')}" if location else str(errors[0].get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"detail": message})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content={"detail": "Rate limit exceeded. Try again later."})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "sitecms", "version": "0.1.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)

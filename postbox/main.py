"""Main FastAPI application"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
import logging
import traceback
import time

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from postbox.config import settings
from postbox.core.database import RecordStore
from postbox.core.exceptions import AuthorizationError, BaseAPIException
from postbox.api.v1 import auth, posts, users, webhooks
from postbox.schemas.response import ErrorResponse

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "postbox_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "postbox_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def configure_logging() -> None:
    """Stream logging, plus a log file when LOG_FILE is set"""
    handlers = [logging.StreamHandler()]
    log_file = settings.get_log_file()
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def _error_body(request: Request, message: str, details=None) -> dict:
    return ErrorResponse(
        error=message,
        details=details,
        path=request.url.path,
        timestamp=datetime.now(timezone.utc).isoformat()
    ).model_dump()


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """
    Build the application around one RecordStore

    Args:
        store: Store to serve; defaults to one at settings.DATABASE_PATH

    Returns:
        Configured FastAPI app
    """
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None
    )
    app.state.store = store or RecordStore(settings.get_database_path())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_metrics(request: Request, call_next):
        """Count requests and log slow ones"""
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        REQUEST_COUNT.labels(request.method, request.url.path, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(request.method, request.url.path).observe(duration)

        if duration > 1.0:
            logger.warning(
                "Slow request: %s %s took %.2fs",
                request.method,
                request.url.path,
                duration,
            )

        return response

    @app.exception_handler(BaseAPIException)
    async def api_exception_handler(request: Request, exc: BaseAPIException):
        """Handle custom API exceptions"""
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"API Exception: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "details": exc.details,
                "path": request.url.path,
                "method": request.method
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.message, exc.details)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors"""
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"]
            })

        logger.warning(
            f"Validation error: {errors}",
            extra={"path": request.url.path, "method": request.method}
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(request, "Validation failed", {"errors": errors})
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        logger.critical(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "traceback": traceback.format_exc()
            }
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "An unexpected error occurred.")
        )

    @app.on_event("startup")
    async def startup_event():
        """Validate settings and make sure the document exists"""
        settings.validate_security_settings()
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        try:
            app.state.store.initialize()
        except BaseAPIException as e:
            logger.error(f"Failed to initialize store: {e.message}")
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {settings.APP_NAME}")

    @app.get("/api/healthz", response_class=PlainTextResponse)
    def health_check():
        """Readiness check"""
        return "OK"

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/admin/reset")
    def reset():
        """Wipe the document; only available in debug mode"""
        if not settings.DEBUG:
            raise AuthorizationError("Reset is only available in debug mode")
        app.state.store.reset()
        return {"success": True, "message": "Store reset"}

    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
    app.include_router(webhooks.router, prefix="/api/webhooks", tags=["Webhooks"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "postbox.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )

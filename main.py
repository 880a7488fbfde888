"""FastAPI application entrypoint for the equipment lending service."""
import time
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from lending.api.dependencies import get_repository
from lending.api.routes import router
from lending.api.schemas import ErrorResponse
from lending.core.logging import get_logger, setup_logging
from lending.core.config import settings

# Initialize structured logging
log_format = settings.log_json or settings.environment == "production"
setup_logging(level=settings.log_level, json_format=log_format)
logger = get_logger(__name__)

# Application metadata
APP_VERSION = "1.0.0"
APP_NAME = "Equipment Lending Service"

app = FastAPI(
    title=APP_NAME,
    description="Register, lend, return and dispose of shared equipment",
    version=APP_VERSION,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with timing and status code."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Request failed: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round(duration_ms, 2),
                "error_type": type(e).__name__,
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "detail": "Internal server error", "request_id": request_id}
        )

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"Request completed: {request.method} {request.url.path}",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
    )

    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request bodies FastAPI could not parse in the usual error shape."""
    problems = []
    for error in exc.errors():
        # Drop the leading "body" / "path" segment
        field = ".".join(str(part) for part in error["loc"][1:])
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])

    logger.info(
        f"Request rejected: {request.method} {request.url.path}",
        extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(error="invalid_request", detail="; ".join(problems)).model_dump()
    )


app.include_router(router, prefix=settings.api_prefix)


@app.get("/")
def root():
    """Root endpoint with basic service info."""
    return {
        "service": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
        "environment": settings.environment
    }


@app.get("/health")
def health_check():
    """Liveness probe. Returns 200 while the process is serving."""
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "checks": {
            "api": "ok",
            "repository_backend": settings.repository_backend
        }
    }


@app.get("/ready")
def readiness_check():
    """Readiness probe: reports which repository is actually in use."""
    checks = {}

    try:
        checks["repository"] = type(get_repository()).__name__
    except RuntimeError as e:
        logger.error(f"Repository unavailable: {e}")
        checks["repository"] = "unavailable"

    if settings.repository_backend == "redis":
        from lending.infrastructure.redis import get_redis_client
        client = get_redis_client()
        checks["redis"] = "ok" if client is not None else "fallback_memory"

    all_ok = checks["repository"] != "unavailable" and checks.get("redis", "ok") == "ok"

    return {
        "status": "ready" if all_ok else "degraded",
        "checks": checks
    }

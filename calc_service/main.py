import time
from contextlib import asynccontextmanager
from typing import Annotated

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .logging_config import configure_logging
from .breaker import CircuitBreaker, ServiceUnavailableError, build_circuit_breaker
from .dependencies import get_circuit_breaker
from .validation import ValidationError
from .operations import DomainError, router as operations_router
from .middleware import RequestLoggingMiddleware
from .utils import generate_error_reference, utc_timestamp

settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger("app")

PROCESS_STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"{settings.APP_NAME} running on port {settings.PORT}",
        host=settings.HOST,
        port=settings.PORT,
        protected_operations=sorted(settings.protected_operations),
    )
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Process-wide breaker shared by every request
app.state.circuit_breaker = build_circuit_breaker(
    failure_threshold=settings.BREAKER_FAILURE_THRESHOLD,
    recovery_timeout=settings.BREAKER_RECOVERY_TIMEOUT_SECONDS,
    protected_operations=settings.protected_operations,
)

app.add_middleware(RequestLoggingMiddleware)


# Global exception handlers
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=exc.to_body())


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=400, content=exc.to_body())


@app.exception_handler(ServiceUnavailableError)
async def service_unavailable_handler(request: Request, exc: ServiceUnavailableError):
    headers = None
    if exc.retry_after is not None:
        headers = {"Retry-After": str(int(exc.retry_after) + 1)}
    return JSONResponse(status_code=503, content=exc.to_body(), headers=headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    reference = generate_error_reference()
    logger.error(
        "System error occurred",
        error=str(exc),
        path=request.url.path,
        params=dict(request.query_params),
        reference=reference,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "reference": reference,
            "support": f"contact {settings.SUPPORT_CONTACT}",
        },
    )


@app.get("/health")
async def health_check(
    breaker: Annotated[CircuitBreaker, Depends(get_circuit_breaker)],
):
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "uptime": time.monotonic() - PROCESS_STARTED_AT,
        "timestamp": utc_timestamp(),
        "circuit_breaker": breaker.snapshot(),
    }

# Include routers
app.include_router(operations_router)


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()

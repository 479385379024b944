"""Request logging middleware."""

from typing import Callable

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger("requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every incoming request before it is dispatched."""

    async def dispatch(self, request: Request, call_next: Callable):
        logger.info(
            "Request received",
            method=request.method,
            url=str(request.url),
            ip=request.client.host if request.client else None,
            headers=dict(request.headers),
        )
        return await call_next(request)

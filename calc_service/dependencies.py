"""Global dependencies for the application."""

from typing import Any

import structlog
from fastapi import Request

from .breaker import CircuitBreaker


async def get_circuit_breaker(request: Request) -> CircuitBreaker:
    """Dependency to get the process-wide circuit breaker.

    The breaker is created in main.py alongside the app and shared across
    requests so that failures from any request count towards the same state.

    Args:
        request: The FastAPI request object.

    Returns:
        The application's CircuitBreaker instance.
    """
    return request.app.state.circuit_breaker


def bind_request(log: Any, request: Request) -> Any:
    """Bind method, url and raw query parameters of a request to a logger."""
    return log.bind(
        method=request.method,
        url=str(request.url),
        params=dict(request.query_params),
    )


def request_logger(name: str):
    """Build a dependency returning a named logger bound to the current request.

    Args:
        name: Logger name, usually the calling module's area.

    Returns:
        An async dependency callable for use with ``Depends``.
    """

    async def dependency(request: Request) -> Any:
        return bind_request(structlog.get_logger(name), request)

    return dependency

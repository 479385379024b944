"""Circuit breaker module - Guarded execution of operations."""

from .breaker import (
    DEFAULT_PROTECTED_OPERATIONS,
    BreakerConfig,
    BreakerResult,
    BreakerState,
    CallStatus,
    CircuitBreaker,
    build_circuit_breaker,
)
from .exceptions import ServiceUnavailableError, BreakerOpenError, OperationFailedError


__all__ = [
    "DEFAULT_PROTECTED_OPERATIONS",
    "BreakerConfig",
    "BreakerResult",
    "BreakerState",
    "CallStatus",
    "CircuitBreaker",
    "build_circuit_breaker",
    "ServiceUnavailableError",
    "BreakerOpenError",
    "OperationFailedError",
]

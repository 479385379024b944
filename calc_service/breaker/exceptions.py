"""Exceptions for guarded operation execution."""

from calc_service.exceptions import CalculatorError


class ServiceUnavailableError(CalculatorError):
    """Base exception for transient failures of guarded operations."""

    status_code = 503

    def __init__(self, operation: str, code: str, retry_after: float | None = None):
        super().__init__(
            message="Service temporarily unavailable",
            code=code,
            fallback="Try again later",
        )
        self.operation = operation
        self.retry_after = retry_after


class BreakerOpenError(ServiceUnavailableError):
    """Raised when the circuit breaker rejects a call without running it.

    Attributes:
        operation: Name of the rejected operation.
        retry_after: Seconds until the breaker admits a trial call.
    """

    def __init__(self, operation: str, retry_after: float):
        super().__init__(operation, code="BREAKER_OPEN", retry_after=retry_after)


class OperationFailedError(ServiceUnavailableError):
    """Raised when a guarded computation fails inside the breaker.

    Attributes:
        operation: Name of the failed operation.
        reason: Description of the underlying failure (never sent to clients).
    """

    def __init__(self, operation: str, reason: str):
        super().__init__(operation, code="OPERATION_FAILED")
        self.reason = reason

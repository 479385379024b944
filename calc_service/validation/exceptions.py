"""Exceptions raised while validating query operands."""

from typing import Any

from calc_service.exceptions import CalculatorError


class ValidationError(CalculatorError):
    """Base exception for rejected request parameters."""

    status_code = 400


class MissingParameterError(ValidationError):
    """Raised when a required operand is absent from the query.

    Attributes:
        missing: Names of the absent parameters.
    """

    def __init__(self, missing: list[str], message: str, **hint: Any):
        super().__init__(message=message, code="MISSING_PARAMETER", **hint)
        self.missing = missing


class InvalidNumberError(ValidationError):
    """Raised when an operand is not a valid numeric literal.

    Attributes:
        received: The raw value(s) exactly as they were sent.
    """

    def __init__(self, message: str, received: Any):
        super().__init__(message=message, code="INVALID_NUMBER", received=received)
        self.received = received

"""Base exception for the calculator service."""

from typing import Any


class CalculatorError(Exception):
    """Base exception for all calculator service errors.

    Attributes:
        message: Client-facing error message.
        code: Machine-readable error code.
        details: Extra fields merged into the JSON error body.
    """

    status_code: int = 500

    def __init__(self, message: str, code: str | None = None, **details: Any):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        """Render the JSON body returned to the client."""
        return {"error": self.message, **self.details}

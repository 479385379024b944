"""Pydantic schemas for operation results."""

import math
from typing import Any

from pydantic import BaseModel, Field

from calc_service.utils import utc_timestamp


class OperationResult(BaseModel):
    """Successful outcome of an arithmetic operation.

    Attributes:
        operation: Operation name (e.g. "addition").
        operands: Operand values keyed by their response field names.
        result: Computed value.
        timestamp: ISO-8601 UTC time the result was produced.
    """

    operation: str = Field(..., description="Operation name")
    operands: dict[str, float] = Field(..., description="Operands by field name")
    result: float = Field(..., description="Computed value")
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO-8601 timestamp")

    def to_body(self) -> dict[str, Any]:
        """Flatten into the response body. Non-finite results become null."""
        return {
            "operation": self.operation,
            **self.operands,
            "result": self.result if math.isfinite(self.result) else None,
            "timestamp": self.timestamp,
        }


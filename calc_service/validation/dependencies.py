"""FastAPI dependencies that turn query strings into operands."""

from typing import NamedTuple

import structlog
from fastapi import Request

from calc_service.dependencies import bind_request

from .numbers import validate_operands

logger = structlog.get_logger("validation")


class TwoOperands(NamedTuple):
    """Validated operands for binary operations."""

    num1: float
    num2: float


async def two_operands(request: Request) -> TwoOperands:
    """Require ``num1`` and ``num2`` query parameters.

    Raises:
        MissingParameterError: If either parameter is absent.
        InvalidNumberError: If either value is not numeric.
    """
    num1, num2 = validate_operands(
        request.query_params,
        ("num1", "num2"),
        example=f"{request.url.path}?num1=5&num2=3",
        log=bind_request(logger, request),
    )
    return TwoOperands(num1=num1, num2=num2)


async def single_operand(request: Request) -> float:
    """Require the ``num`` query parameter."""
    (num,) = validate_operands(
        request.query_params,
        ("num",),
        example=f"{request.url.path}?num=25",
        log=bind_request(logger, request),
    )
    return num

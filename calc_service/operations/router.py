"""FastAPI router for arithmetic endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from calc_service.breaker import CircuitBreaker
from calc_service.dependencies import get_circuit_breaker, request_logger
from calc_service.validation import TwoOperands, single_operand, two_operands

from .service import add, divide, modulo, multiply, power, square_root, subtract


router = APIRouter(tags=["operations"])

Operands = Annotated[TwoOperands, Depends(two_operands)]
Breaker = Annotated[CircuitBreaker, Depends(get_circuit_breaker)]
RequestLog = Annotated[Any, Depends(request_logger("operations"))]


@router.get("/add")
async def add_endpoint(operands: Operands, breaker: Breaker, log: RequestLog) -> dict[str, Any]:
    """Add ``num1`` and ``num2``."""
    return add(operands.num1, operands.num2, breaker, log).to_body()


@router.get("/subtract")
async def subtract_endpoint(operands: Operands, breaker: Breaker, log: RequestLog) -> dict[str, Any]:
    """Subtract ``num2`` from ``num1``."""
    return subtract(operands.num1, operands.num2, breaker, log).to_body()


@router.get("/multiply")
async def multiply_endpoint(operands: Operands, breaker: Breaker, log: RequestLog) -> dict[str, Any]:
    """Multiply ``num1`` by ``num2``."""
    return multiply(operands.num1, operands.num2, breaker, log).to_body()


@router.get("/divide")
async def divide_endpoint(operands: Operands, breaker: Breaker, log: RequestLog) -> dict[str, Any]:
    """Divide ``num1`` by a non-zero ``num2``."""
    return divide(operands.num1, operands.num2, breaker, log).to_body()


@router.get("/power")
async def power_endpoint(operands: Operands, breaker: Breaker, log: RequestLog) -> dict[str, Any]:
    """Raise ``num1`` to the power ``num2``."""
    return power(operands.num1, operands.num2, breaker, log).to_body()


@router.get("/modulo")
async def modulo_endpoint(operands: Operands, breaker: Breaker, log: RequestLog) -> dict[str, Any]:
    """Remainder of ``num1`` divided by a non-zero ``num2``."""
    return modulo(operands.num1, operands.num2, breaker, log).to_body()


@router.get("/sqrt")
async def sqrt_endpoint(
    num: Annotated[float, Depends(single_operand)],
    breaker: Breaker,
    log: RequestLog,
) -> dict[str, Any]:
    """Square root of a non-negative ``num``."""
    return square_root(num, breaker, log).to_body()

"""Arithmetic operation handlers with domain checks and guarded execution.

Every handler takes an optional ``log``. The router passes a logger bound to
the request (method, url, raw query parameters) so failure records carry the
request context; the module logger is used otherwise.
"""

import math
from typing import Any, Callable

import structlog

from calc_service.breaker import (
    BreakerOpenError,
    CallStatus,
    CircuitBreaker,
    OperationFailedError,
)

from .exceptions import DivisionByZeroError, ModuloByZeroError, NegativeRadicandError
from .schemas import OperationResult

logger = structlog.get_logger("operations")


def ieee_pow(base: float, exponent: float) -> float:
    """Raise ``base`` to ``exponent`` with IEEE-754 results instead of errors.

    ``math.pow`` raises where IEEE-754 defines a value: overflow yields an
    infinity, a zero base with a negative exponent yields an infinity, and a
    negative base with a fractional exponent yields NaN.
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        pass
    except ValueError:
        if base != 0:
            return math.nan

    odd_integer = exponent.is_integer() and math.fmod(exponent, 2) != 0
    negative = odd_integer and math.copysign(1.0, base) < 0
    return -math.inf if negative else math.inf


def execute(
    operation: str,
    compute: Callable[[], float],
    breaker: CircuitBreaker,
    log: Any = None,
) -> float:
    """Run a computation, through the breaker if the operation is protected.

    Raises:
        BreakerOpenError: If the breaker rejected the call.
        OperationFailedError: If the computation failed inside the breaker.
    """
    log = log or logger
    if not breaker.guards(operation):
        return compute()

    outcome = breaker.call(compute)
    if outcome.status is CallStatus.rejected:
        exc = BreakerOpenError(operation, retry_after=outcome.retry_after)
        log.warning(
            "Circuit breaker rejected operation",
            operation=operation,
            error=exc.code,
            retry_after=outcome.retry_after,
        )
        raise exc
    if outcome.status is CallStatus.failed:
        exc = OperationFailedError(operation, reason=str(outcome.error))
        log.error(
            "Operation failed inside circuit breaker",
            operation=operation,
            error=exc.code,
            reason=repr(outcome.error),
        )
        raise exc
    return outcome.value


def _complete(
    operation: str,
    summary: str,
    operands: dict[str, float],
    result: float,
    log: Any = None,
) -> OperationResult:
    (log or logger).info(summary, operation=operation, result=result, **operands)
    return OperationResult(operation=operation, operands=operands, result=result)


def add(num1: float, num2: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    result = execute("addition", lambda: num1 + num2, breaker, log)
    return _complete(
        "addition", f"Addition: {num1} + {num2} = {result}", {"num1": num1, "num2": num2}, result, log
    )


def subtract(num1: float, num2: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    result = execute("subtraction", lambda: num1 - num2, breaker, log)
    return _complete(
        "subtraction", f"Subtraction: {num1} - {num2} = {result}", {"num1": num1, "num2": num2}, result, log
    )


def multiply(num1: float, num2: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    result = execute("multiplication", lambda: num1 * num2, breaker, log)
    return _complete(
        "multiplication",
        f"Multiplication: {num1} * {num2} = {result}",
        {"num1": num1, "num2": num2},
        result,
        log,
    )


def divide(num1: float, num2: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    """Divide ``num1`` by ``num2``.

    Raises:
        DivisionByZeroError: If ``num2`` is zero. Checked before the breaker,
            so it never counts as a breaker failure.
    """
    if num2 == 0:
        exc = DivisionByZeroError()
        (log or logger).error("Division by zero attempted", error=exc.code, num1=num1, num2=num2)
        raise exc

    result = execute("division", lambda: num1 / num2, breaker, log)
    return _complete(
        "division", f"Division: {num1} / {num2} = {result}", {"num1": num1, "num2": num2}, result, log
    )


def power(base: float, exponent: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    result = execute("exponentiation", lambda: ieee_pow(base, exponent), breaker, log)
    return _complete(
        "exponentiation",
        f"Exponentiation: {base}^{exponent} = {result}",
        {"base": base, "exponent": exponent},
        result,
        log,
    )


def modulo(dividend: float, divisor: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    """Truncated remainder: the result takes the sign of the dividend.

    Raises:
        ModuloByZeroError: If ``divisor`` is zero.
    """
    if divisor == 0:
        exc = ModuloByZeroError()
        (log or logger).error(
            "Modulo by zero attempted", error=exc.code, dividend=dividend, divisor=divisor
        )
        raise exc

    result = execute("modulo", lambda: math.fmod(dividend, divisor), breaker, log)
    return _complete(
        "modulo",
        f"Modulo: {dividend} % {divisor} = {result}",
        {"dividend": dividend, "divisor": divisor},
        result,
        log,
    )


def square_root(radicand: float, breaker: CircuitBreaker, log: Any = None) -> OperationResult:
    """Principal square root.

    Raises:
        NegativeRadicandError: If ``radicand`` is negative.
    """
    if radicand < 0:
        exc = NegativeRadicandError(radicand)
        (log or logger).error(
            "Square root of negative number attempted", error=exc.code, radicand=radicand
        )
        raise exc

    result = execute("square_root", lambda: math.sqrt(radicand), breaker, log)
    return _complete(
        "square_root", f"Square root: √{radicand} = {result}", {"radicand": radicand}, result, log
    )

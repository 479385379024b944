"""Numeric literal grammar and operand validation."""

import math
import re
from typing import Any, Mapping, Sequence

import structlog

from .exceptions import InvalidNumberError, MissingParameterError

logger = structlog.get_logger("validation")

# sign, digits with optional fraction (or a bare fraction), optional exponent
NUMERIC_RE = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


def is_numeric_literal(value: str) -> bool:
    """Check whether a raw string is a plain decimal numeric literal.

    Accepts signed integers, decimals and scientific notation written with
    ASCII digits. Rejects empty strings, surrounding whitespace, ``NaN``,
    ``Infinity``, hex literals, digit separators and non-ASCII digits.
    """
    return bool(NUMERIC_RE.fullmatch(value))


def parse_operand(value: str) -> float | None:
    """Parse a raw string into a finite float.

    Returns:
        The parsed value, or None if the string is not a numeric literal or
        overflows to infinity.
    """
    if not is_numeric_literal(value):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def _describe(names: Sequence[str]) -> str:
    if len(names) == 1:
        return names[0]
    return "Both " + " and ".join(names)


def validate_operands(
    params: Mapping[str, str],
    names: Sequence[str],
    example: str,
    log: Any = None,
) -> tuple[float, ...]:
    """Extract and validate the named operands from raw query parameters.

    All names are checked for presence before any value is parsed, so a
    missing parameter is reported even when another value is malformed.

    Args:
        params: Raw query parameters.
        names: Required parameter names, in operand order.
        example: Usage example echoed back when a parameter is missing.
        log: Logger to report failures on (module logger by default).

    Returns:
        The parsed operands in the order of ``names``.

    Raises:
        MissingParameterError: If any required parameter is absent.
        InvalidNumberError: If any value is not a finite numeric literal.
    """
    log = log or logger
    single = len(names) == 1
    raw = {name: params.get(name) for name in names}

    missing = [name for name, value in raw.items() if value is None]
    if missing:
        log.error("Missing parameters", missing=missing, params=raw)
        if single:
            raise MissingParameterError(
                missing, f"{names[0]} parameter is required", example=example
            )
        raise MissingParameterError(
            missing,
            f"{_describe(names)} are required",
            suggestion=f"Example: {example}",
        )

    parsed = [parse_operand(raw[name]) for name in names]
    if any(value is None for value in parsed):
        log.error("Invalid parameters", params=raw)
        if single:
            raise InvalidNumberError(f"{names[0]} must be a valid number", raw[names[0]])
        raise InvalidNumberError(f"{_describe(names)} must be valid numbers", raw)

    return tuple(parsed)

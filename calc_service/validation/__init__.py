"""Validation module - Query operand parsing."""

from .numbers import NUMERIC_RE, is_numeric_literal, parse_operand, validate_operands
from .exceptions import ValidationError, MissingParameterError, InvalidNumberError
from .dependencies import TwoOperands, two_operands, single_operand


__all__ = [
    "NUMERIC_RE",
    "is_numeric_literal",
    "parse_operand",
    "validate_operands",
    "ValidationError",
    "MissingParameterError",
    "InvalidNumberError",
    "TwoOperands",
    "two_operands",
    "single_operand",
]

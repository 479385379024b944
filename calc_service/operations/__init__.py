"""Operations module - Arithmetic endpoints."""

from .router import router
from .schemas import OperationResult
from .exceptions import DomainError, DivisionByZeroError, ModuloByZeroError, NegativeRadicandError

__all__ = [
    "router",
    "OperationResult",
    "DomainError",
    "DivisionByZeroError",
    "ModuloByZeroError",
    "NegativeRadicandError",
]

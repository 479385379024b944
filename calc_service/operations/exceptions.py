"""Domain errors for arithmetic operations."""

from calc_service.exceptions import CalculatorError


class DomainError(CalculatorError):
    """Base exception for operands outside an operation's domain."""

    status_code = 400


class DivisionByZeroError(DomainError):
    """Raised when dividing by zero."""

    def __init__(self):
        super().__init__(
            message="Division by zero is not allowed",
            code="DIVISION_BY_ZERO",
            suggestion="Provide non-zero denominator",
        )


class ModuloByZeroError(DomainError):
    """Raised when taking a remainder modulo zero."""

    def __init__(self):
        super().__init__(
            message="Modulo by zero is undefined",
            code="MODULO_BY_ZERO",
            suggestion="Provide non-zero modulus",
        )


class NegativeRadicandError(DomainError):
    """Raised when taking the square root of a negative number.

    Attributes:
        radicand: The rejected operand.
    """

    def __init__(self, radicand: float):
        super().__init__(
            message="Square root of negative numbers is not real",
            code="NEGATIVE_RADICAND",
            suggestion="Provide non-negative number",
            received=radicand,
        )
        self.radicand = radicand

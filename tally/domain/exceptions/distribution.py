from decimal import Decimal

from .base import DomainException


class DistributionError(DomainException):
    pass


class InvalidDistributionError(DistributionError, ValueError):
    """Raised when the part count or the weight vector is unusable."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid distribution: {reason}")


class ResidualRedistributionError(DistributionError):
    """
    Raised when the residual cannot be handed out within the iteration limit.

    Totals finer than the scale are rejected up front, so this only happens
    when the values being reconciled are too far from their target total.
    """

    def __init__(self, residual: Decimal, iterations: int, scale: int):
        self.residual = residual
        self.iterations = iterations
        self.scale = scale

        super().__init__(
            f"Residual {residual} left after {iterations} redistribution steps "
            f"at scale {scale}"
        )

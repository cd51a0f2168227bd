"""
Exact decimal arithmetic used by every calculation in the domain.

Addition, subtraction and multiplication run under an unbounded-precision
context so their results are never rounded. Division is the only operation
with a finite result length: the quotient is truncated to a fixed number of
fractional digits.
"""

from collections.abc import Iterable
from contextlib import AbstractContextManager
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_DOWN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Union

from tally.domain.exceptions import DivisionByZeroError, InvalidAmountError

DecimalLike = Union[Decimal, int, str, float]

DEFAULT_DIVISION_PRECISION = 20

HUNDRED = Decimal(100)

_EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def exact() -> AbstractContextManager[Context]:
    """
    Context manager for exact arithmetic with plain operators.

    Never divide inside it: a non-terminating quotient has no finite result.
    """
    return localcontext(_EXACT_CONTEXT)


def to_decimal(value: DecimalLike) -> Decimal:
    """
    Read a value as an exact decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.

    :raises InvalidAmountError: for booleans, non-finite values and unparseable input
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidAmountError(value, "booleans are not amounts")
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = _parse(str(value), value)
    elif isinstance(value, str):
        result = _parse(value.strip(), value)
    else:
        raise InvalidAmountError(value, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmountError(value, "value must be finite")

    return result


def _parse(text: str, original: DecimalLike) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(original) from None


def add(a: DecimalLike, b: DecimalLike) -> Decimal:
    return _EXACT_CONTEXT.add(to_decimal(a), to_decimal(b))


def subtract(a: DecimalLike, b: DecimalLike) -> Decimal:
    return _EXACT_CONTEXT.subtract(to_decimal(a), to_decimal(b))


def multiply(a: DecimalLike, b: DecimalLike) -> Decimal:
    return _EXACT_CONTEXT.multiply(to_decimal(a), to_decimal(b))


def total(values: Iterable[DecimalLike]) -> Decimal:
    """Exact sum; ``Decimal(0)`` for an empty iterable."""
    result = Decimal(0)
    for value in values:
        result = _EXACT_CONTEXT.add(result, to_decimal(value))
    return result


def divide(
    dividend: DecimalLike,
    divisor: DecimalLike,
    precision: int = DEFAULT_DIVISION_PRECISION,
) -> Decimal:
    """
    Divide, truncating the quotient to ``precision`` fractional digits.

    :param dividend: Value to divide
    :param divisor: Value to divide by
    :param precision: Number of fractional digits kept in the quotient

    :return: Quotient with exactly ``precision`` fractional digits

    :raises DivisionByZeroError: if the divisor is zero
    """
    if precision < 0:
        raise ValueError(f"Division precision cannot be negative: {precision}")

    dividend = to_decimal(dividend)
    divisor = to_decimal(divisor)

    if divisor == 0:
        raise DivisionByZeroError(dividend)

    integer_digits = max(dividend.adjusted() - divisor.adjusted(), 0) + 1
    context = Context(
        prec=integer_digits + precision + 2,
        rounding=ROUND_DOWN,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
        traps=[InvalidOperation, Overflow],
    )

    quotient = context.divide(dividend, divisor)

    return quotient.quantize(Decimal(1).scaleb(-precision), context=context)


def percentage(base: DecimalLike, rate: DecimalLike) -> Decimal:
    """``base * rate / 100``, exact."""
    return multiply(base, rate).scaleb(-2, context=_EXACT_CONTEXT)


def percentage_of(
    part: DecimalLike,
    whole: DecimalLike,
    precision: int = DEFAULT_DIVISION_PRECISION,
) -> Decimal:
    """What percent ``part`` is of ``whole``."""
    return divide(multiply(part, HUNDRED), whole, precision)


def clamp(value: DecimalLike, low: DecimalLike, high: DecimalLike) -> Decimal:
    value, low, high = to_decimal(value), to_decimal(low), to_decimal(high)

    if low > high:
        raise ValueError(f"Empty clamp range: [{low}, {high}]")

    return min(max(value, low), high)

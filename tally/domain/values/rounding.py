from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union


class RoundingMode(str, Enum):
    """
    Tie-break policies for rounding to a fixed scale.

    ``UP``/``DOWN`` round away from/towards zero, ``CEILING``/``FLOOR`` towards
    positive/negative infinity. The ``HALF_*`` modes round to the nearest
    value and only differ on an exact tie.
    """

    UP = "UP"
    DOWN = "DOWN"
    CEILING = "CEILING"
    FLOOR = "FLOOR"
    HALF_UP = "HALF_UP"
    HALF_DOWN = "HALF_DOWN"
    HALF_EVEN = "HALF_EVEN"
    HALF_CEILING = "HALF_CEILING"
    HALF_FLOOR = "HALF_FLOOR"

    @property
    def is_tie_mode(self) -> bool:
        return self.value.startswith("HALF_")

    @classmethod
    def parse(cls, value: Union["RoundingMode", str]) -> "RoundingMode":
        """
        Resolve a mode from its name.

        Accepts member names in any case and the ``ROUND_``-prefixed
        spellings, including ``ROUND_CEIL`` and ``ROUND_HALF_FLOOR``.
        """
        if isinstance(value, RoundingMode):
            return value

        name = value.strip().upper()
        if name.startswith("ROUND_"):
            name = name[len("ROUND_"):]
        name = _ALIASES.get(name, name)

        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown rounding mode: {value}") from None


_ALIASES = {
    "CEIL": "CEILING",
    "HALF_CEIL": "HALF_CEILING",
}

DEFAULT_ROUNDING_MODE = RoundingMode.HALF_EVEN

DEFAULT_SCALE = 2


@dataclass(frozen=True)
class RoundingAdjustment:
    """Audit record of a single rounding: what went in, what came out, and the delta."""

    original: Decimal
    rounded: Decimal
    adjustment: Decimal
    scale: int
    mode: RoundingMode

    @property
    def has_adjustment(self) -> bool:
        return self.adjustment != 0


@dataclass(frozen=True)
class TotalAdjustment:
    """Rounding drift of a list of values, per item and for the sum."""

    original_total: Decimal
    rounded_total: Decimal
    per_item_adjustments: tuple[RoundingAdjustment, ...]
    total_adjustment: Decimal
    adjustment_from_rounding_sum: Decimal

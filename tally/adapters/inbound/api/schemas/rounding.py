from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tally.domain.values import RoundingAdjustment

from .common import validate_currency_code, validate_rounding_mode


class RoundRequest(BaseModel):
    value: Decimal = Field(
        ..., description="The value to round.", examples=["123.455"]
    )
    scale: Optional[int] = Field(
        default=None,
        ge=0,
        le=18,
        description="Fractional digits to keep. Defaults to the currency scale.",
        examples=[2],
    )
    mode: Optional[str] = Field(
        default=None,
        description="Rounding mode. Defaults to the currency rounding mode.",
        examples=["HALF_EVEN", "ROUND_HALF_UP"],
    )
    currency: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Currency whose scale and mode apply.",
        examples=["INR"],
    )

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: Optional[str]) -> Optional[str]:
        return validate_rounding_mode(v)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class RoundResponse(BaseModel):
    original: Decimal = Field(..., description="The value as received.", examples=["123.455"])
    rounded: Decimal = Field(..., description="The rounded value.", examples=["123.46"])
    adjustment: Decimal = Field(
        ..., description="Signed delta rounded - original.", examples=["0.005"]
    )
    scale: int = Field(..., description="Fractional digits kept.", examples=[2])
    mode: str = Field(..., description="Rounding mode applied.", examples=["HALF_EVEN"])
    has_adjustment: bool = Field(..., description="Did rounding change the value?")

    @classmethod
    def from_adjustment(cls, adjustment: RoundingAdjustment) -> "RoundResponse":
        return cls(
            original=adjustment.original,
            rounded=adjustment.rounded,
            adjustment=adjustment.adjustment,
            scale=adjustment.scale,
            mode=adjustment.mode.value,
            has_adjustment=adjustment.has_adjustment,
        )


class SmallestUnitRequest(BaseModel):
    amount: Decimal = Field(
        ..., description="Amount in major units.", examples=["123.45"]
    )
    currency: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Currency deciding the minor unit.",
        examples=["INR"],
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class SmallestUnitResponse(BaseModel):
    currency: str = Field(..., examples=["INR"])
    amount: Decimal = Field(..., description="Amount in major units.", examples=["123.45"])
    units: Decimal = Field(
        ..., description="Amount in minor units, rounded to a whole unit.", examples=["12345"]
    )
    smallest_unit: str = Field(..., description="Name of the minor unit.", examples=["paise"])
    scale: int = Field(..., examples=[2])

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import validate_currency_code


class DistributeRequest(BaseModel):
    total: Decimal = Field(..., description="Amount to split.", examples=["10.00"])
    parts: int = Field(..., ge=1, description="Number of equal shares.", examples=[3])
    currency: Optional[str] = Field(
        default=None, max_length=20, description="Currency of the total.", examples=["INR"]
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class AllocateRequest(BaseModel):
    total: Decimal = Field(..., description="Amount to split.", examples=["1000.00"])
    weights: list[Decimal] = Field(
        ...,
        min_length=1,
        description="Relative weight of each share.",
        examples=[["3", "2", "1"]],
    )
    currency: Optional[str] = Field(
        default=None, max_length=20, description="Currency of the total.", examples=["INR"]
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class AllocationResponse(BaseModel):
    currency: str = Field(..., examples=["INR"])
    total: Decimal = Field(..., description="The distributed total.", examples=["10.00"])
    parts: list[Decimal] = Field(
        ...,
        description="Shares in input order; they always sum to the total.",
        examples=[["3.34", "3.33", "3.33"]],
    )

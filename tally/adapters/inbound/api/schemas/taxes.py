from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import validate_currency_code


class GSTRequest(BaseModel):
    base_amount: Decimal = Field(..., description="Amount before tax.", examples=["1000.00"])
    gst_rate: Decimal = Field(
        ..., ge=0, le=100, description="Combined GST rate in percent.", examples=["18"]
    )
    currency: Optional[str] = Field(default=None, max_length=20, examples=["INR"])

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class GSTResponse(BaseModel):
    gst_amount: Decimal = Field(..., examples=["180.00"])
    cgst: Decimal = Field(..., examples=["90.00"])
    sgst: Decimal = Field(..., examples=["90.00"])
    total_with_gst: Decimal = Field(..., examples=["1180.00"])


class TaxSplitRequest(BaseModel):
    tax_amount: Decimal = Field(..., description="Tax to split.", examples=["181.00"])
    currency: Optional[str] = Field(default=None, max_length=20, examples=["INR"])

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class TaxSplitResponse(BaseModel):
    cgst: Decimal = Field(..., description="Central half, rounded.", examples=["90.50"])
    sgst: Decimal = Field(..., description="State half, the exact remainder.", examples=["90.50"])

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tally.domain.models import (
    EnteredTotalLineItemResult,
    LineItemInput,
    LineItemResult,
)

from .common import validate_currency_code


class LineItemRequest(BaseModel):
    unit_price: Decimal = Field(..., description="Price of one unit before tax.", examples=["1000"])
    quantity: Decimal = Field(
        ..., description="Quantity; floored and clamped to at least 1.", examples=[2]
    )
    tax_rate: Decimal = Field(
        ..., description="Tax rate in percent; clamped to [0, 100].", examples=["18"]
    )
    discount_amount: Decimal = Field(
        default=Decimal(0), description="Flat discount on the line.", examples=["0"]
    )
    currency: Optional[str] = Field(default=None, max_length=20, examples=["INR"])

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)

    def to_input(self) -> LineItemInput:
        return LineItemInput(
            unit_price=self.unit_price,
            quantity=self.quantity,
            tax_rate=self.tax_rate,
            discount_amount=self.discount_amount,
            currency=self.currency,
        )


class LineItemFromTotalRequest(BaseModel):
    total: Decimal = Field(
        ..., description="Tax-inclusive total entered by the user.", examples=["1180.00"]
    )
    quantity: Decimal = Field(..., examples=[1])
    tax_rate: Decimal = Field(..., examples=["18"])
    discount_amount: Decimal = Field(default=Decimal(0), examples=["0"])
    currency: Optional[str] = Field(default=None, max_length=20, examples=["INR"])

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class LineItemInputResponse(BaseModel):
    unit_price: Decimal = Field(..., examples=["1000"])
    quantity: int = Field(..., examples=[2])
    discount_amount: Decimal = Field(
        ..., description="Discount actually applied.", examples=["0"]
    )
    tax_rate: Decimal = Field(..., examples=["18"])


class LineItemAmountsResponse(BaseModel):
    gross_amount: Decimal = Field(..., examples=["2000.00"])
    taxable_amount: Decimal = Field(..., examples=["2000.00"])
    tax_amount: Decimal = Field(..., examples=["360.00"])
    total: Decimal = Field(..., examples=["2360.00"])


class LineItemResponse(BaseModel):
    input: LineItemInputResponse
    calculated: LineItemAmountsResponse
    rounding_adjustment: Decimal = Field(
        ...,
        description="Amount booked so that total == taxable + tax + adjustment.",
        examples=["0.00"],
    )
    has_adjustment: bool
    currency: str = Field(..., examples=["INR"])
    scale: int = Field(..., examples=[2])
    validation_errors: list[str] = Field(
        default_factory=list,
        description="Inputs that were clamped before calculating.",
        examples=[["Quantity must be at least 1"]],
    )
    exact_unit_price: Optional[Decimal] = Field(
        default=None,
        description="Back-solved unit price (entered-total lines only).",
        examples=["282.4866666666"],
    )
    displayed_unit_price: Optional[Decimal] = Field(
        default=None,
        description="Unit price rounded for display (entered-total lines only).",
        examples=["282.49"],
    )
    recomputed_total: Optional[Decimal] = Field(
        default=None,
        description="Total recomputed from the displayed unit price (entered-total lines only).",
        examples=["1000.01"],
    )


class LineItemMapper:
    @staticmethod
    def map_result_to_response(result: LineItemResult) -> LineItemResponse:
        response = LineItemResponse(
            input=LineItemInputResponse(
                unit_price=result.input.unit_price,
                quantity=result.input.quantity,
                discount_amount=result.input.discount_amount,
                tax_rate=result.input.tax_rate,
            ),
            calculated=LineItemAmountsResponse(
                gross_amount=result.calculated.gross_amount,
                taxable_amount=result.calculated.taxable_amount,
                tax_amount=result.calculated.tax_amount,
                total=result.calculated.total,
            ),
            rounding_adjustment=result.rounding_adjustment,
            has_adjustment=result.has_adjustment,
            currency=result.currency,
            scale=result.scale,
            validation_errors=list(result.validation_errors),
        )

        if isinstance(result, EnteredTotalLineItemResult):
            response.exact_unit_price = result.exact_unit_price
            response.displayed_unit_price = result.displayed_unit_price
            response.recomputed_total = result.recomputed_total

        return response

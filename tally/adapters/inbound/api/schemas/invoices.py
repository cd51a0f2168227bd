from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from tally.app.queries import (
    CalculateInvoiceQuery,
    DerivedLine,
    EnteredTotalLine,
    InvoiceLine,
)
from tally.domain.models import Invoice, LineItemInput

from .common import validate_currency_code
from .line_items import LineItemMapper, LineItemResponse


class DerivedLineRequest(BaseModel):
    mode: Literal["derived"]
    unit_price: Decimal = Field(..., examples=["1000"])
    quantity: Decimal = Field(..., examples=[2])
    tax_rate: Decimal = Field(..., examples=["18"])
    discount_amount: Decimal = Field(default=Decimal(0), examples=["0"])
    currency: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Must match the invoice currency when given.",
        examples=["INR"],
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class EnteredTotalLineRequest(BaseModel):
    mode: Literal["entered_total"]
    total: Decimal = Field(..., examples=["1180.00"])
    quantity: Decimal = Field(..., examples=[1])
    tax_rate: Decimal = Field(..., examples=["18"])
    discount_amount: Decimal = Field(default=Decimal(0), examples=["0"])


InvoiceLineRequest = Annotated[
    Union[DerivedLineRequest, EnteredTotalLineRequest], Field(discriminator="mode")
]


class InvoiceRequest(BaseModel):
    currency: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Invoice currency. Defaults to the configured default currency.",
        examples=["INR"],
    )
    lines: list[InvoiceLineRequest] = Field(
        default_factory=list, max_length=10_000, description="Invoice lines in order."
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return validate_currency_code(v)


class IntegrityResponse(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    expected_grand_total: Decimal = Field(..., examples=["4897.00"])
    actual_grand_total: Decimal = Field(..., examples=["4897.00"])
    difference: Decimal = Field(..., examples=["0.00"])


class InvoiceResponse(BaseModel):
    currency: str = Field(..., examples=["INR"])
    total_taxable: Decimal = Field(..., examples=["4150.00"])
    total_tax: Decimal = Field(..., examples=["747.00"])
    total_before_adjustment: Decimal = Field(..., examples=["4897.00"])
    total_adjustment: Decimal = Field(..., examples=["0.00"])
    grand_total: Decimal = Field(
        ..., description="Always the sum of the line totals.", examples=["4897.00"]
    )
    item_count: int = Field(..., examples=[3])
    has_adjustments: bool
    items: list[LineItemResponse]
    integrity: IntegrityResponse
    warnings: list[str] = Field(
        default_factory=list,
        description="Clamped inputs, prefixed with their line number.",
        examples=[["Line item 2: Discount cannot be negative"]],
    )


class InvoiceQueryMapper:
    @staticmethod
    def map_request_to_query(request: InvoiceRequest) -> CalculateInvoiceQuery:
        lines: list[InvoiceLine] = []

        for line in request.lines:
            if isinstance(line, EnteredTotalLineRequest):
                lines.append(
                    EnteredTotalLine(
                        total=line.total,
                        quantity=line.quantity,
                        tax_rate=line.tax_rate,
                        discount_amount=line.discount_amount,
                    )
                )
            else:
                lines.append(
                    DerivedLine(
                        LineItemInput(
                            unit_price=line.unit_price,
                            quantity=line.quantity,
                            tax_rate=line.tax_rate,
                            discount_amount=line.discount_amount,
                            currency=line.currency,
                        )
                    )
                )

        return CalculateInvoiceQuery(lines=tuple(lines), currency=request.currency)

    @staticmethod
    def map_invoice_to_response(invoice: Invoice) -> InvoiceResponse:
        aggregation = invoice.aggregation
        integrity = invoice.integrity

        return InvoiceResponse(
            currency=aggregation.currency,
            total_taxable=aggregation.total_taxable,
            total_tax=aggregation.total_tax,
            total_before_adjustment=aggregation.total_before_adjustment,
            total_adjustment=aggregation.total_adjustment,
            grand_total=aggregation.grand_total,
            item_count=aggregation.item_count,
            has_adjustments=aggregation.has_adjustments,
            items=[LineItemMapper.map_result_to_response(item) for item in aggregation.items],
            integrity=IntegrityResponse(
                is_valid=integrity.is_valid,
                errors=list(integrity.errors),
                expected_grand_total=integrity.expected_grand_total,
                actual_grand_total=integrity.actual_grand_total,
                difference=integrity.difference,
            ),
            warnings=list(invoice.warnings),
        )

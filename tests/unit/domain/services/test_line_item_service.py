from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tally.domain.exceptions import InvalidAmountError
from tally.domain.models import LineItemInput
from tally.domain.services.line_item_service import LineItemPolicy, LineItemService
from tally.domain.services.rounding_service import RoundingService


@pytest.fixture
def service():
    return LineItemService(RoundingService())


def test_calculate_derived_line(service):
    result = service.calculate(
        LineItemInput(unit_price="100", quantity=2, tax_rate="18", discount_amount="10")
    )

    assert result.calculated.gross_amount == Decimal("200.00")
    assert result.calculated.taxable_amount == Decimal("190.00")
    assert result.calculated.tax_amount == Decimal("34.20")
    assert result.calculated.total == Decimal("224.20")
    assert str(result.rounding_adjustment) == "0.00"
    assert result.has_adjustment is False
    assert result.currency == "INR"
    assert result.scale == 2
    assert result.validation_errors == ()


def test_calculate_uses_currency_scale(service):
    result = service.calculate(
        LineItemInput(unit_price="99.5", quantity=3, tax_rate="10", currency="jpy")
    )

    # 298.5 is a tie and rounds to the even neighbour
    assert result.calculated.gross_amount == Decimal("298")
    assert result.calculated.tax_amount == Decimal("30")
    assert result.calculated.total == Decimal("328")
    assert result.currency == "JPY"
    assert result.scale == 0


def test_discount_is_capped_at_gross(service):
    result = service.calculate(
        LineItemInput(unit_price="10", quantity=1, tax_rate="18", discount_amount="50")
    )

    assert result.input.discount_amount == Decimal("10.00")
    assert result.calculated.taxable_amount == Decimal("0.00")
    assert result.calculated.total == Decimal("0.00")


def test_invalid_inputs_are_clamped_with_messages(service):
    validated = service.validate(
        LineItemInput(unit_price="-5", quantity=0, tax_rate="150", discount_amount="-1")
    )

    assert validated.unit_price == 0
    assert validated.quantity == 1
    assert validated.discount_amount == 0
    assert validated.tax_rate == 100
    assert validated.is_valid is False
    assert validated.errors == (
        "Unit price cannot be negative",
        "Quantity must be at least 1",
        "Discount cannot be negative",
        "Tax rate cannot exceed 100%",
    )


def test_negative_tax_rate_is_clamped_to_zero(service):
    result = service.calculate(LineItemInput(unit_price="10", quantity=1, tax_rate="-5"))

    assert result.input.tax_rate == 0
    assert result.calculated.total == Decimal("10.00")
    assert result.validation_errors == ("Tax rate cannot be negative",)


def test_fractional_quantity_is_floored(service):
    validated = service.validate(LineItemInput(unit_price="10", quantity="2.7", tax_rate="0"))

    assert validated.quantity == 2
    assert validated.is_valid


def test_quantity_is_capped(service):
    result = service.calculate(
        LineItemInput(unit_price="1", quantity="1e999999", tax_rate="0")
    )

    assert result.input.quantity == 9007199254740991
    assert result.calculated.total == Decimal("9007199254740991.00")
    assert result.validation_errors == ("Quantity cannot exceed 9007199254740991",)


def test_quantity_cap_follows_policy():
    service = LineItemService(RoundingService(), LineItemPolicy(max_quantity=1000))

    validated = service.validate(LineItemInput(unit_price="1", quantity=1001, tax_rate="0"))

    assert validated.quantity == 1000
    assert validated.errors == ("Quantity cannot exceed 1000",)


def test_unparseable_input_raises(service):
    with pytest.raises(InvalidAmountError):
        service.calculate(LineItemInput(unit_price="abc", quantity=1, tax_rate="18"))


def test_entered_total_without_drift(service):
    result = service.calculate_from_total("1180", 1, "18")

    assert result.calculated.taxable_amount == Decimal("1000.00")
    assert result.calculated.tax_amount == Decimal("180.00")
    assert result.calculated.total == Decimal("1180.00")
    assert result.displayed_unit_price == Decimal("1000.00")
    assert result.rounding_adjustment == 0


def test_entered_total_books_drift_as_adjustment(service):
    # Given a total that no two-decimal unit price can reproduce
    # When the line is back-solved
    result = service.calculate_from_total("1000", 3, "18")

    # Then the entered total is kept and the drift is the adjustment
    assert result.exact_unit_price == Decimal("282.4866666666")
    assert result.displayed_unit_price == Decimal("282.49")
    assert result.input.unit_price == Decimal("282.49")
    assert result.recomputed_total == Decimal("1000.01")
    assert result.calculated.total == Decimal("1000.00")
    assert result.calculated.taxable_amount == Decimal("847.47")
    assert result.calculated.tax_amount == Decimal("152.54")
    assert result.rounding_adjustment == Decimal("-0.01")
    assert result.has_adjustment


def test_entered_total_that_needs_no_adjustment(service):
    result = service.calculate_from_total("5000", 3, "18")

    assert result.displayed_unit_price == Decimal("1412.43")
    assert result.calculated.taxable_amount == Decimal("4237.29")
    assert result.calculated.tax_amount == Decimal("762.71")
    assert result.recomputed_total == Decimal("5000.00")
    assert result.rounding_adjustment == 0
    assert result.has_adjustment is False


def test_negative_entered_total_is_clamped_to_zero(service):
    result = service.calculate_from_total("-100", 1, "18")

    assert result.calculated.total == Decimal("0.00")
    assert result.recomputed_total == Decimal("0.00")
    assert result.rounding_adjustment == 0
    assert result.validation_errors == ("Total cannot be negative",)


def test_negative_total_message_comes_before_input_clamps(service):
    result = service.calculate_from_total("-1", 0, "150")

    assert result.validation_errors == (
        "Total cannot be negative",
        "Quantity must be at least 1",
        "Tax rate cannot exceed 100%",
    )


def test_entered_total_clamps_inputs(service):
    result = service.calculate_from_total("118", 0, "18", discount_amount="-3")

    assert result.input.quantity == 1
    assert result.input.discount_amount == 0
    assert result.validation_errors == (
        "Quantity must be at least 1",
        "Discount cannot be negative",
    )


def test_entered_total_with_discount(service):
    result = service.calculate_from_total("1180", 2, "18", discount_amount="100")

    assert result.calculated.gross_amount == Decimal("1100.00")
    assert result.displayed_unit_price == Decimal("550.00")
    assert result.calculated.total == Decimal("1180.00")
    assert result.rounding_adjustment == 0


@given(
    total=st.decimals(
        min_value=0, max_value=10**7, allow_nan=False, allow_infinity=False, places=2
    ),
    quantity=st.integers(min_value=1, max_value=1000),
    rate=st.sampled_from(["0", "5", "12", "18", "28"]),
)
def test_entered_total_line_always_foots(total, quantity, rate):
    service = LineItemService(RoundingService())

    result = service.calculate_from_total(total, quantity, rate)
    amounts = result.calculated

    assert amounts.total == total
    assert amounts.total == amounts.taxable_amount + amounts.tax_amount + result.rounding_adjustment


def test_policy_validation():
    with pytest.raises(ValueError):
        LineItemPolicy(unit_price_precision=30, division_precision=20)
    with pytest.raises(ValueError):
        LineItemPolicy(unit_price_precision=-1)
    with pytest.raises(ValueError):
        LineItemPolicy(max_quantity=0)

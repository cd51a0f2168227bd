from dataclasses import replace
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tally.domain.exceptions import CurrencyMismatchError
from tally.domain.models import (
    LedgerEntry,
    LineItemAmounts,
    LineItemInput,
    LineItemResult,
    SanitizedLineItem,
)
from tally.domain.services.invoice_service import InvoiceService
from tally.domain.services.line_item_service import LineItemService
from tally.domain.services.rounding_service import RoundingService


@pytest.fixture
def rounding():
    return RoundingService()


@pytest.fixture
def service(rounding):
    return InvoiceService(rounding)


@pytest.fixture
def lines(rounding):
    return LineItemService(rounding)


def derived(lines, unit_price, quantity, tax_rate, currency=None):
    return lines.calculate(
        LineItemInput(
            unit_price=unit_price, quantity=quantity, tax_rate=tax_rate, currency=currency
        )
    )


def test_aggregate_sums_columns(service, lines):
    items = [derived(lines, "1000", 2, "18"), derived(lines, "2150", 1, "18")]

    invoice = service.aggregate(items)

    assert invoice.total_taxable == Decimal("4150.00")
    assert invoice.total_tax == Decimal("747.00")
    assert invoice.total_before_adjustment == Decimal("4897.00")
    assert invoice.total_adjustment == 0
    assert invoice.grand_total == Decimal("4897.00")
    assert invoice.item_count == 2
    assert invoice.has_adjustments is False
    assert invoice.currency == "INR"


def test_aggregate_carries_entered_total_adjustment(service, lines):
    items = [derived(lines, "1000", 2, "18"), lines.calculate_from_total("1000", 3, "18")]

    invoice = service.aggregate(items)

    assert invoice.total_taxable == Decimal("2847.47")
    assert invoice.total_tax == Decimal("512.54")
    assert invoice.total_before_adjustment == Decimal("3360.01")
    assert invoice.total_adjustment == Decimal("-0.01")
    assert invoice.grand_total == Decimal("3360.00")
    assert service.verify_integrity(invoice).is_valid


def test_aggregate_absorbs_column_drift_into_adjustment(service):
    item = LineItemResult(
        input=SanitizedLineItem(
            unit_price=Decimal("10.00"),
            quantity=1,
            discount_amount=Decimal("0"),
            tax_rate=Decimal("10"),
        ),
        calculated=LineItemAmounts(
            gross_amount=Decimal("10.00"),
            taxable_amount=Decimal("10.00"),
            tax_amount=Decimal("1.00"),
            total=Decimal("11.01"),
        ),
        rounding_adjustment=Decimal("0.00"),
        currency="INR",
        scale=2,
    )

    invoice = service.aggregate([item])

    assert invoice.grand_total == Decimal("11.01")
    assert invoice.total_adjustment == Decimal("0.01")


def test_aggregate_defaults_to_first_item_currency(service, lines):
    invoice = service.aggregate([derived(lines, "10", 1, "0", "usd")])

    assert invoice.currency == "USD"


def test_aggregate_rejects_mixed_currencies(service, lines):
    items = [derived(lines, "10", 1, "0", "INR"), derived(lines, "10", 1, "0", "USD")]

    with pytest.raises(CurrencyMismatchError, match="INR and USD"):
        service.aggregate(items)


def test_aggregate_rejects_item_in_other_currency_than_requested(service, lines):
    with pytest.raises(CurrencyMismatchError):
        service.aggregate([derived(lines, "10", 1, "0", "INR")], currency="EUR")


def test_aggregate_empty_invoice(service):
    invoice = service.aggregate([])

    assert str(invoice.grand_total) == "0.00"
    assert invoice.item_count == 0
    assert invoice.currency == "INR"
    assert str(service.aggregate([], currency="JPY").grand_total) == "0"


def test_verify_integrity_on_valid_invoice(service, lines):
    invoice = service.aggregate([derived(lines, "1000", 2, "18")])

    report = service.verify_integrity(invoice)

    assert report.is_valid
    assert report.errors == ()
    assert report.difference == 0


def test_verify_integrity_reports_wrong_grand_total(service, lines):
    invoice = service.aggregate(
        [derived(lines, "1000", 2, "18"), derived(lines, "2150", 1, "18")]
    )

    report = service.verify_integrity(replace(invoice, grand_total=Decimal("1.00")))

    assert not report.is_valid
    assert report.errors == ("Grand total (1.00) != sum of line totals (4897.00)",)
    assert report.expected_grand_total == Decimal("4897.00")
    assert report.difference == Decimal("-4896.00")


def test_verify_integrity_reports_broken_line(service, lines):
    item = derived(lines, "1000", 2, "18")
    broken = replace(item, calculated=replace(item.calculated, total=Decimal("9.99")))
    invoice = replace(service.aggregate([item]), items=(broken,))

    report = service.verify_integrity(invoice)

    assert report.errors[0] == (
        "Line item 1: total (9.99) != taxable + tax + adjustment (2360.00)"
    )
    assert len(report.errors) == 2


def test_ledger_total_counts_active_entries(service):
    entries = [
        LedgerEntry(Decimal("100"), "CREDIT"),
        LedgerEntry(Decimal("30"), "debit"),
        LedgerEntry(Decimal("50"), "CREDIT", is_active=False),
    ]

    assert service.ledger_total(entries) == Decimal("70.00")
    assert str(service.ledger_total(None)) == "0.00"


_rates = st.sampled_from(["0", "5", "12", "18", "28"])
_derived_lines = st.tuples(
    st.just("derived"),
    st.decimals(min_value=0, max_value=10**6, allow_nan=False, allow_infinity=False, places=2),
    st.integers(min_value=1, max_value=100),
    _rates,
)
_entered_lines = st.tuples(
    st.just("entered"),
    st.decimals(min_value=0, max_value=10**7, allow_nan=False, allow_infinity=False, places=2),
    st.integers(min_value=1, max_value=100),
    _rates,
)


@given(specs=st.lists(st.one_of(_derived_lines, _entered_lines), min_size=1, max_size=10))
def test_mixed_invoice_always_foots(specs):
    rounding = RoundingService()
    lines = LineItemService(rounding)
    service = InvoiceService(rounding)

    items = []
    for mode, amount, quantity, rate in specs:
        if mode == "derived":
            items.append(derived(lines, amount, quantity, rate))
        else:
            items.append(lines.calculate_from_total(amount, quantity, rate))

    invoice = service.aggregate(items)

    assert invoice.grand_total == sum(item.calculated.total for item in items)
    assert invoice.item_count == len(items)
    assert service.verify_integrity(invoice).is_valid

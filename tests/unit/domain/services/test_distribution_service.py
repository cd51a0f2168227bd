from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tally.domain.exceptions import (
    DivisionByZeroError,
    InvalidDistributionError,
    ResidualRedistributionError,
)
from tally.domain.services.distribution_service import (
    DistributionPolicy,
    DistributionService,
)
from tally.domain.services.rounding_service import RoundingService
from tally.domain.values import Money


@pytest.fixture
def service():
    return DistributionService(RoundingService())


def decimals(values):
    return [Decimal(v) for v in values]


def test_distribute_gives_residual_to_first_parts(service):
    assert service.distribute("10", 3) == decimals(["3.34", "3.33", "3.33"])
    assert service.distribute("100", 3) == decimals(["33.34", "33.33", "33.33"])


def test_distribute_negative_total(service):
    assert service.distribute("-10", 3) == decimals(["-3.34", "-3.33", "-3.33"])


def test_distribute_takes_back_over_rounded_residual(service):
    # each share rounds up to 0.02, so one unit is taken back from the first part
    assert service.distribute("0.05", 3) == decimals(["0.01", "0.02", "0.02"])


def test_distribute_uses_currency_scale(service):
    assert service.distribute("100", 3, "JPY") == decimals(["34", "33", "33"])
    assert service.distribute("1", 3, "KWD") == decimals(["0.334", "0.333", "0.333"])


def test_distribute_single_part_returns_total(service):
    assert service.distribute("12.34", 1) == decimals(["12.34"])


@pytest.mark.parametrize("parts", [0, -1])
def test_distribute_rejects_non_positive_parts(service, parts):
    with pytest.raises(InvalidDistributionError):
        service.distribute("10", parts)


def test_distribute_rejects_too_many_parts():
    service = DistributionService(RoundingService(), DistributionPolicy(max_parts=5))

    with pytest.raises(InvalidDistributionError, match="cannot exceed 5"):
        service.distribute("10", 6)


@given(
    total=st.decimals(
        min_value=-(10**9), max_value=10**9, allow_nan=False, allow_infinity=False, places=2
    ),
    parts=st.integers(min_value=1, max_value=50),
)
def test_distribute_conserves_total_and_stays_even(total, parts):
    service = DistributionService(RoundingService())

    shares = service.distribute(total, parts)

    assert len(shares) == parts
    assert sum(shares) == total
    assert max(shares) - min(shares) <= Decimal("0.01")


def test_allocate_by_weight(service):
    assert service.allocate("100", [50, 30, 20]) == decimals(["50.00", "30.00", "20.00"])
    assert service.allocate("10", [1, 2]) == decimals(["3.33", "6.67"])
    assert service.allocate("100", [1, 1, 1]) == decimals(["33.34", "33.33", "33.33"])


def test_allocate_zero_weight_gets_nothing(service):
    assert service.allocate("10", [0, 1]) == decimals(["0.00", "10.00"])


@given(
    total=st.decimals(
        min_value=0, max_value=10**7, allow_nan=False, allow_infinity=False, places=2
    ),
    weights=st.lists(st.integers(min_value=1, max_value=1000), min_size=1, max_size=20),
)
def test_allocate_conserves_total(total, weights):
    service = DistributionService(RoundingService())

    assert sum(service.allocate(total, weights)) == total


def test_allocate_rejects_empty_weights(service):
    with pytest.raises(InvalidDistributionError, match="empty"):
        service.allocate("10", [])


def test_allocate_rejects_negative_weights(service):
    with pytest.raises(InvalidDistributionError, match="negative"):
        service.allocate("10", [1, -1])


def test_allocate_zero_weight_sum_is_a_division_by_zero(service):
    with pytest.raises(DivisionByZeroError):
        service.allocate("10", [0, 0])


def test_money_variants_keep_currency(service):
    parts = service.distribute_money(Money.of("100", "JPY"), 3)

    assert [p.amount for p in parts] == decimals(["34", "33", "33"])
    assert all(str(p.currency) == "JPY" for p in parts)

    allocated = service.allocate_money(Money.of("10", "USD"), ["1", "3"])
    assert [p.amount for p in allocated] == decimals(["2.50", "7.50"])


def test_distribute_rounding_adjustment_foots_to_target(service):
    values = ["33.333", "33.333", "33.333"]

    assert service.distribute_rounding_adjustment(values, "100.00") == decimals(
        ["33.34", "33.33", "33.33"]
    )
    assert service.distribute_rounding_adjustment([], "1") == []


def test_target_finer_than_scale_is_rejected(service):
    with pytest.raises(InvalidDistributionError, match="more fractional digits"):
        service.distribute_rounding_adjustment(["1", "2"], "3.005", scale=2)


def test_target_out_of_reach_raises_residual_error(service):
    # 97.00 apart is 9700 minor units, far beyond 10 steps per part
    with pytest.raises(ResidualRedistributionError) as exc_info:
        service.distribute_rounding_adjustment(["1", "2"], "100.00", scale=2)

    assert exc_info.value.iterations == 20
    assert exc_info.value.scale == 2


def test_policy_validation():
    with pytest.raises(ValueError):
        DistributionPolicy(max_parts=0)
    with pytest.raises(ValueError):
        DistributionPolicy(iterations_per_part=0)


def test_allocate_three_two_one(service):
    shares = service.allocate("1000", [3, 2, 1])

    assert shares == decimals(["500.00", "333.33", "166.67"])
    assert sum(shares) == Decimal("1000")


@pytest.mark.parametrize(
    "total, currency",
    [("10.005", "INR"), ("100.5", "JPY"), ("1.0001", "KWD")],
)
def test_distribute_rejects_total_finer_than_currency_scale(service, total, currency):
    with pytest.raises(InvalidDistributionError, match="more fractional digits"):
        service.distribute(total, 3, currency)


def test_allocate_rejects_total_finer_than_currency_scale(service):
    with pytest.raises(InvalidDistributionError, match="more fractional digits"):
        service.allocate("1000.001", [3, 2, 1])


def test_trailing_zeros_beyond_scale_are_accepted(service):
    assert service.distribute("10.000", 3) == decimals(["3.34", "3.33", "3.33"])
    assert service.distribute("100.0", 3, "JPY") == decimals(["34", "33", "33"])

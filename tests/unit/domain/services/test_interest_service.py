from decimal import Decimal

import pytest

from tally.domain.services.interest_service import InterestPolicy, InterestService
from tally.domain.services.rounding_service import RoundingService


@pytest.fixture
def service():
    return InterestService()


def test_simple_interest(service):
    assert service.simple_interest("1000", "10", "2") == Decimal("200")
    assert service.simple_interest("1000", "7.5", "0.5") == Decimal("37.5")


def test_compound_interest_yearly(service):
    assert service.compound_interest("1000", "10", "2") == Decimal("210")


def test_compound_interest_monthly(service):
    interest = service.compound_interest("1000", "12", "1", frequency=12)

    assert RoundingService().round(interest) == Decimal("126.83")


def test_partial_periods_are_not_compounded(service):
    assert service.compound_interest("1000", "10", "0.5") == 0
    assert service.compound_interest("1000", "10", "1.9") == Decimal("100")


def test_long_horizon_stays_bounded(service):
    interest = service.compound_interest("1000", "5", "100", frequency=365)

    assert interest > 0
    assert len(interest.as_tuple().digits) <= 80


def test_frequency_must_be_positive(service):
    with pytest.raises(ValueError):
        service.compound_interest("1000", "10", "1", frequency=0)


def test_policy_validation():
    with pytest.raises(ValueError):
        InterestPolicy(working_precision=0)

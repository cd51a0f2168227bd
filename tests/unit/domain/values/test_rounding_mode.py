import pytest

from tally.domain.values import DEFAULT_ROUNDING_MODE, RoundingMode


def test_default_mode_is_bankers_rounding():
    assert DEFAULT_ROUNDING_MODE is RoundingMode.HALF_EVEN


@pytest.mark.parametrize(
    "name, expected",
    [
        ("HALF_EVEN", RoundingMode.HALF_EVEN),
        ("half_up", RoundingMode.HALF_UP),
        ("ROUND_UP", RoundingMode.UP),
        ("ROUND_CEIL", RoundingMode.CEILING),
        ("round_half_ceil", RoundingMode.HALF_CEILING),
        ("ROUND_HALF_FLOOR", RoundingMode.HALF_FLOOR),
        (" floor ", RoundingMode.FLOOR),
        (RoundingMode.DOWN, RoundingMode.DOWN),
    ],
)
def test_parse_accepts_names_and_legacy_spellings(name, expected):
    assert RoundingMode.parse(name) is expected


def test_parse_rejects_unknown_mode():
    with pytest.raises(ValueError, match="Unknown rounding mode"):
        RoundingMode.parse("HALF_SIDEWAYS")


def test_tie_modes():
    tie_modes = {mode for mode in RoundingMode if mode.is_tie_mode}

    assert len(RoundingMode) == 9
    assert tie_modes == {
        RoundingMode.HALF_UP,
        RoundingMode.HALF_DOWN,
        RoundingMode.HALF_EVEN,
        RoundingMode.HALF_CEILING,
        RoundingMode.HALF_FLOOR,
    }

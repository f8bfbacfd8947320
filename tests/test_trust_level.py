import pytest
from hypothesis import given
from hypothesis import strategies as st

from celestia_types.errors import VerificationError
from celestia_types.trust_level import DEFAULT_TRUST_LEVEL, TrustLevelRatio


def test_default_trust_level_third():
    assert DEFAULT_TRUST_LEVEL == TrustLevelRatio(1, 3)
    assert DEFAULT_TRUST_LEVEL.voting_power_needed(300) == 100


def test_two_thirds_rounds_down():
    assert TrustLevelRatio(2, 3).voting_power_needed(10) == 6


def test_overflow_raises():
    with pytest.raises(VerificationError, match="overflow"):
        TrustLevelRatio(2, 3).voting_power_needed(2**63)


def test_zero_denominator_raises():
    with pytest.raises(VerificationError, match="division"):
        TrustLevelRatio(1, 0).voting_power_needed(10)


@given(
    st.integers(min_value=1, max_value=10),
    st.integers(min_value=1, max_value=10),
    st.integers(min_value=0, max_value=2**40),
)
def test_needed_bounds(numerator, denominator, total):
    needed = TrustLevelRatio(numerator, denominator).voting_power_needed(total)
    assert needed * denominator <= numerator * total
    assert (needed + 1) * denominator > numerator * total
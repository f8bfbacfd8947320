"""Fractions of voting power required to trust a commit."""

from dataclasses import dataclass

from .errors import VerificationError

_U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class TrustLevelRatio:
    """A trust level expressed as numerator / denominator."""

    numerator: int
    denominator: int

    def voting_power_needed(self, total_voting_power: int) -> int:
        """Return the voting power needed out of total_voting_power."""
        product = self.numerator * int(total_voting_power)
        if product > _U64_MAX:
            raise VerificationError(
                "u64 overflow while calculating voting power needed"
            )
        if self.denominator == 0:
            raise VerificationError(
                "division error while calculating voting power needed"
            )
        return product // self.denominator


DEFAULT_TRUST_LEVEL = TrustLevelRatio(1, 3)
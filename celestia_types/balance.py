"""Account balance: a denomination and an unsigned 256-bit amount."""

import re
import string
from dataclasses import dataclass
from typing import Any

from .errors import DecodeError, InvalidBalanceAmountError, InvalidBalanceDenominationError

_U256_LIMIT = 2**256
_DENOM_RE = re.compile(r"[A-Za-z][A-Za-z0-9/:._\-]*")

_RADIX_PREFIXES = {
    "0x": (16, set(string.hexdigits)),
    "0o": (8, set("01234567")),
    "0b": (2, set("01")),
}
_DECIMAL_DIGITS = set(string.digits)


def validate_denom(denom: str) -> None:
    """Raise InvalidBalanceDenominationError unless denom is a valid coin denomination."""
    if not 3 <= len(denom.encode("utf-8")) <= 128 or not _DENOM_RE.fullmatch(denom):
        raise InvalidBalanceDenominationError(denom)


def _parse_amount(text: str) -> int:
    base, digits, body = 10, _DECIMAL_DIGITS, text
    prefix = text[:2].lower()
    if prefix in _RADIX_PREFIXES:
        base, digits = _RADIX_PREFIXES[prefix]
        body = text[2:]
    if not body or not set(body) <= digits:
        raise InvalidBalanceAmountError(text)
    value = int(body, base)
    if value >= _U256_LIMIT:
        raise InvalidBalanceAmountError(text)
    return value


@dataclass
class Balance:
    denom: str
    amount: int

    def validate(self) -> None:
        validate_denom(self.denom)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Balance":
        try:
            denom = data["denom"]
            amount = data["amount"]
        except (KeyError, TypeError) as exc:
            raise DecodeError(f"missing field: {exc}") from exc
        if not isinstance(denom, str) or not isinstance(amount, str):
            raise DecodeError("denom and amount must be strings")
        validate_denom(denom)
        return cls(denom, _parse_amount(amount))

    def to_dict(self) -> dict[str, str]:
        self.validate()
        if not 0 <= self.amount < _U256_LIMIT:
            raise InvalidBalanceAmountError(str(self.amount))
        return {"denom": self.denom, "amount": str(self.amount)}
"""Shares and the namespaced rows returned when querying shares by namespace."""

import base64
import binascii
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

from .consts import NS_SIZE, SHARE_SIZE
from .errors import DecodeError, InvalidShareSizeError, MissingFieldError, WrongProofTypeError
from .nmt import Namespace, NamespaceProof


def _b64decode(text: Any) -> bytes:
    if not isinstance(text, str):
        raise DecodeError(f"expected a base64 string, got {text!r}")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise DecodeError(f"invalid base64: {exc}") from exc


@dataclass(frozen=True)
class Share:
    """A share of SHARE_SIZE bytes: namespace, info byte, optional length, data."""

    data: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.data)
        if len(raw) != SHARE_SIZE:
            raise InvalidShareSizeError(len(raw))
        object.__setattr__(self, "data", raw)

    @classmethod
    def from_raw(cls, data: bytes) -> "Share":
        """Build a share, checking its size and the namespace it starts with."""
        raw = bytes(data)
        if len(raw) != SHARE_SIZE:
            raise InvalidShareSizeError(len(raw))
        Namespace.from_raw(raw[:NS_SIZE])
        return cls(raw)

    def namespace(self) -> Namespace:
        return Namespace(self.data[:NS_SIZE])

    def payload(self) -> bytes:
        """Everything after the namespace."""
        return self.data[NS_SIZE:]

    def to_bytes(self) -> bytes:
        return self.data

    def __bytes__(self) -> bytes:
        return self.data


@dataclass
class NamespacedRow:
    """Shares of one namespace in one row, with the proof of their inclusion."""

    shares: list[Share]
    proof: NamespaceProof

    @classmethod
    def from_raw(
        cls, shares: Iterable[bytes], proof: Optional[NamespaceProof]
    ) -> "NamespacedRow":
        parsed = [Share.from_raw(item) for item in shares]
        if proof is None:
            raise MissingFieldError("proof")
        if not parsed and not proof.is_of_absence():
            raise WrongProofTypeError()
        return cls(parsed, proof)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NamespacedRow":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        raw_shares = data.get("shares") or []
        if not isinstance(raw_shares, list):
            raise DecodeError("shares must be a list")
        raw_proof = data.get("proof")
        proof = NamespaceProof.from_dict(raw_proof) if raw_proof is not None else None
        return cls.from_raw((_b64decode(item) for item in raw_shares), proof)

    def to_dict(self) -> dict[str, Any]:
        return {
            "shares": [base64.b64encode(share.data).decode("ascii") for share in self.shares],
            "proof": self.proof.to_dict(),
        }


@dataclass
class NamespacedShares:
    """All rows holding shares of a namespace."""

    rows: list[NamespacedRow] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[list[Any]]) -> "NamespacedShares":
        if data is None:
            return cls([])
        if not isinstance(data, list):
            raise DecodeError(f"expected a list of rows, got {data!r}")
        return cls([NamespacedRow.from_dict(item) for item in data])

    def to_dict(self) -> Optional[list[dict[str, Any]]]:
        """The rows as a list, or None when there are none."""
        if not self.rows:
            return None
        return [row.to_dict() for row in self.rows]
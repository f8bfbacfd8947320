"""The fraud proof interface and its wire envelope."""

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from .errors import DecodeError


class FraudProof(ABC):
    """A proof that a block was produced dishonestly."""

    TYPE: ClassVar[str]

    @abstractmethod
    def header_hash(self) -> bytes:
        """Hash of the block the proof is about."""

    @abstractmethod
    def height(self) -> int:
        """Height of the block the proof is about."""

    @abstractmethod
    def validate(self, header: Any) -> None:
        """Raise an Error unless the proof holds against header."""


@dataclass
class RawFraudProof:
    """A fraud proof tagged with its type, its body encoded as protobuf."""

    proof_type: str
    data: bytes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawFraudProof":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        try:
            proof_type = data["proof_type"]
            body = data["data"]
        except KeyError as exc:
            raise DecodeError(f"missing field: {exc}") from exc
        if not isinstance(proof_type, str):
            raise DecodeError(f"invalid proof_type: {proof_type!r}")
        if not isinstance(body, str):
            raise DecodeError(f"expected a base64 string, got {body!r}")
        try:
            raw = base64.b64decode(body, validate=True)
        except binascii.Error as exc:
            raise DecodeError(f"invalid base64: {exc}") from exc
        return cls(proof_type, raw)

    def to_dict(self) -> dict[str, Any]:
        return {
            "proof_type": self.proof_type,
            "data": base64.b64encode(self.data).decode("ascii"),
        }
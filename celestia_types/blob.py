"""Blobs of namespaced data and options for submitting them."""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Optional

from .commitment import Commitment, split_blob_to_shares
from .consts import SHARE_VERSION_ZERO
from .errors import DecodeError, ValidationError
from .nmt import Namespace
from .serializers import option_from_negative_one, option_to_negative_one


def _optional_u64(value: Any, name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 2**64:
        raise DecodeError(f"invalid {name}: {value!r}")
    return value


@dataclass(frozen=True)
class SubmitOptions:
    """Fee and gas limit for a blob submission; None lets the node choose."""

    fee: Optional[int] = None
    gas_limit: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {"Fee": option_to_negative_one(self.fee), "GasLimit": self.gas_limit}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubmitOptions":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        if "Fee" not in data:
            raise DecodeError("missing field: Fee")
        fee = option_from_negative_one(data["Fee"])
        gas_limit = _optional_u64(data.get("GasLimit"), "GasLimit")
        return cls(fee, gas_limit)


@dataclass
class RawBlob:
    """Wire form of a blob, without its commitment."""

    namespace_id: bytes
    namespace_version: int
    data: bytes
    share_version: int


def _b64decode(text: Any) -> bytes:
    if not isinstance(text, str):
        raise DecodeError(f"expected a base64 string, got {text!r}")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise DecodeError(f"invalid base64: {exc}") from exc


@dataclass
class Blob:
    """Data submitted under a namespace, with its share commitment."""

    namespace: Namespace
    data: bytes
    share_version: int
    commitment: Commitment

    @classmethod
    def new(cls, namespace: Namespace, data: bytes) -> "Blob":
        data = bytes(data)
        commitment = Commitment.from_blob(namespace, SHARE_VERSION_ZERO, data)
        return cls(namespace, data, SHARE_VERSION_ZERO, commitment)

    def validate(self) -> None:
        """Raise ValidationError if the commitment does not match the data."""
        computed = Commitment.from_blob(self.namespace, self.share_version, self.data)
        if self.commitment != computed:
            raise ValidationError("blob commitment != locally computed commitment")

    def to_shares(self) -> list[bytes]:
        return split_blob_to_shares(self.namespace, self.share_version, self.data)

    @classmethod
    def from_raw(cls, raw: RawBlob) -> "Blob":
        namespace = Namespace.new(raw.namespace_version & 0xFF, raw.namespace_id)
        share_version = raw.share_version & 0xFF
        data = bytes(raw.data)
        commitment = Commitment.from_blob(namespace, share_version, data)
        return cls(namespace, data, share_version, commitment)

    def to_raw(self) -> RawBlob:
        return RawBlob(
            namespace_id=self.namespace.id(),
            namespace_version=self.namespace.version(),
            data=bytes(self.data),
            share_version=self.share_version,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Blob":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        try:
            namespace = Namespace.from_base64(data["namespace"])
            payload = _b64decode(data["data"])
            share_version = data["share_version"]
            commitment = Commitment.from_base64(data["commitment"])
        except KeyError as exc:
            raise DecodeError(f"missing field: {exc}") from exc
        if isinstance(share_version, bool) or not isinstance(share_version, int) or not (
            0 <= share_version <= 0xFF
        ):
            raise DecodeError(f"invalid share_version: {share_version!r}")
        return cls(namespace, payload, share_version, commitment)

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace.to_base64(),
            "data": base64.b64encode(self.data).decode("ascii"),
            "share_version": self.share_version,
            "commitment": self.commitment.to_base64(),
        }
"""Axes and the extended data square."""

import base64
import binascii
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from .errors import DecodeError, InvalidAxisError


class Axis(IntEnum):
    ROW = 0
    COL = 1

    @classmethod
    def from_int(cls, value: int) -> "Axis":
        """Return the axis for value, or raise InvalidAxisError."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidAxisError(value) from None


def _b64decode(text: Any) -> bytes:
    if not isinstance(text, str):
        raise DecodeError(f"expected a base64 string, got {text!r}")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise DecodeError(f"invalid base64: {exc}") from exc


@dataclass
class ExtendedDataSquare:
    """A square of shares together with the codec that extended it."""

    data_square: list[bytes] = field(default_factory=list)
    codec: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtendedDataSquare":
        try:
            square = data["data_square"]
            codec = data["codec"]
        except (KeyError, TypeError) as exc:
            raise DecodeError(f"missing field: {exc}") from exc
        if not isinstance(square, list) or not isinstance(codec, str):
            raise DecodeError("malformed extended data square")
        return cls([_b64decode(item) for item in square], codec)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_square": [base64.b64encode(item).decode("ascii") for item in self.data_square],
            "codec": self.codec,
        }
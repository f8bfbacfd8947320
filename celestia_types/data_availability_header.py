"""Row and column roots of the extended data square."""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Optional

from .consts import MAX_EXTENDED_SQUARE_WIDTH, MIN_EXTENDED_SQUARE_WIDTH
from .errors import DecodeError, ValidateBasic, ValidationError
from .hashes import simple_hash_from_byte_vectors
from .nmt import NamespacedHash


def _decode_roots(data: dict[str, Any], key: str) -> list[NamespacedHash]:
    items = data.get(key) or []
    if not isinstance(items, list):
        raise DecodeError(f"{key} must be a list")
    roots = []
    for item in items:
        if not isinstance(item, str):
            raise DecodeError(f"expected a base64 string, got {item!r}")
        try:
            raw = base64.b64decode(item, validate=True)
        except binascii.Error as exc:
            raise DecodeError(f"invalid base64: {exc}") from exc
        roots.append(NamespacedHash.from_raw(raw))
    return roots


def _encode_roots(roots: list[NamespacedHash]) -> list[str]:
    return [base64.b64encode(root.to_bytes()).decode("ascii") for root in roots]


@dataclass
class DataAvailabilityHeader(ValidateBasic):
    """Namespaced merkle roots of every row and column of the extended square."""

    row_roots: list[NamespacedHash] = field(default_factory=list)
    column_roots: list[NamespacedHash] = field(default_factory=list)

    def row_root(self, row: int) -> Optional[NamespacedHash]:
        return self.row_roots[row] if 0 <= row < len(self.row_roots) else None

    def column_root(self, column: int) -> Optional[NamespacedHash]:
        if 0 <= column < len(self.column_roots):
            return self.column_roots[column]
        return None

    def hash(self) -> bytes:
        """Merkle root over all row roots followed by all column roots."""
        return simple_hash_from_byte_vectors(
            root.to_bytes() for root in [*self.row_roots, *self.column_roots]
        )

    def validate_basic(self) -> None:
        rows, columns = len(self.row_roots), len(self.column_roots)
        if columns != rows:
            raise ValidationError(
                f"column_roots len ({columns}) != row_roots len ({rows})"
            )
        if rows < MIN_EXTENDED_SQUARE_WIDTH:
            raise ValidationError(
                f"row_roots len ({rows}) < minimum ({MIN_EXTENDED_SQUARE_WIDTH})"
            )
        if rows > MAX_EXTENDED_SQUARE_WIDTH:
            raise ValidationError(
                f"row_roots len ({rows}) > maximum ({MAX_EXTENDED_SQUARE_WIDTH})"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DataAvailabilityHeader":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        return cls(_decode_roots(data, "row_roots"), _decode_roots(data, "column_roots"))

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "row_roots": _encode_roots(self.row_roots),
            "column_roots": _encode_roots(self.column_roots),
        }
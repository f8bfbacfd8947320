"""The share info byte: 7 bits of version and a sequence-start flag."""

from dataclasses import dataclass

from .consts import MAX_SHARE_VERSION
from .errors import MaxShareVersionExceededError


@dataclass(frozen=True)
class InfoByte:
    """Upper seven bits hold the share version, the lowest bit marks a sequence start."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"info byte out of range: {self.value}")

    @classmethod
    def from_parts(cls, version: int, is_sequence_start: bool) -> "InfoByte":
        if version > MAX_SHARE_VERSION:
            raise MaxShareVersionExceededError(version)
        if version < 0:
            raise ValueError(f"share version must not be negative: {version}")
        return cls((version << 1) | (1 if is_sequence_start else 0))

    def version(self) -> int:
        return self.value >> 1

    def is_sequence_start(self) -> bool:
        return self.value % 2 == 1

    def as_u8(self) -> int:
        return self.value
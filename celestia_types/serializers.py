"""Encoding of optional unsigned integers with -1 standing for absence."""

from .errors import DecodeError

_U64_MAX = 2**64 - 1


def option_to_negative_one(value: int | None) -> int:
    """Encode an optional u64, writing None as -1."""
    if value is None:
        return -1
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer or None, got {type(value).__name__}")
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"value out of u64 range: {value}")
    return value


def option_from_negative_one(value: int | None) -> int | None:
    """Decode an optional u64 where any negative number means None."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"expected an integer, got {value!r}")
    if value < 0:
        return None
    if value > _U64_MAX:
        raise DecodeError(f"value out of u64 range: {value}")
    return value
"""Extended headers: a block header bundled with its commit, validators and DAH."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Union

from .block import Commit, Header, Timestamp
from .data_availability_header import DataAvailabilityHeader
from .errors import DecodeError, MissingFieldError, ValidationError, VerificationError
from .trust_level import DEFAULT_TRUST_LEVEL
from .validator_set import ValidatorSet

VERIFY_CLOCK_DRIFT_SECONDS = 10
"""How far into the future an untrusted header's time may lie."""

_PARTS = (
    ("header", "header"),
    ("commit", "commit"),
    ("validator_set", "validator set"),
    ("dah", "data availability header"),
)


@dataclass
class ExtendedHeader:
    """A block header with the commit, validator set and DAH that back it."""

    header: Header
    commit: Commit
    validator_set: ValidatorSet
    dah: DataAvailabilityHeader

    def __str__(self) -> str:
        return f"hash: {self.hash().hex().upper()}; height: {self.height()}"

    @classmethod
    def decode_and_validate(
        cls, data: Union[bytes, bytearray, memoryview, str]
    ) -> "ExtendedHeader":
        """Decode a JSON encoded header and then validate it."""
        try:
            text = bytes(data).decode("utf-8") if not isinstance(data, str) else data
            parsed = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"invalid extended header encoding: {exc}") from exc
        header = cls.from_dict(parsed)
        header.validate()
        return header

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtendedHeader":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        for key, name in _PARTS:
            if data.get(key) is None:
                raise MissingFieldError(name)
        return cls(
            header=Header.from_dict(data["header"]),
            commit=Commit.from_dict(data["commit"]),
            validator_set=ValidatorSet.from_dict(data["validator_set"]),
            dah=DataAvailabilityHeader.from_dict(data["dah"]),
        )

    def chain_id(self) -> str:
        return self.header.chain_id

    def height(self) -> int:
        return self.header.height

    def time(self) -> Timestamp:
        return self.header.time

    def hash(self) -> bytes:
        return self.commit.block_id.hash

    def last_header_hash(self) -> bytes:
        """Hash of the previous block, or empty bytes when there is none."""
        last = self.header.last_block_id
        return last.hash if last is not None else b""

    def validate(self) -> None:
        """Raise an Error unless the header is internally consistent."""
        self.header.validate_basic()
        self.commit.validate_basic()
        self.validator_set.validate_basic()

        validators_hash = self.validator_set.hash()
        if validators_hash != self.header.validators_hash:
            raise ValidationError(
                f"validator_set hash ({validators_hash.hex().upper()}) != "
                f"header validators_hash ({self.header.validators_hash.hex().upper()})"
            )

        dah_hash = self.dah.hash()
        if dah_hash != self.header.data_hash:
            raise ValidationError(
                f"dah hash ({dah_hash.hex().upper()}) != "
                f"header dah hash ({self.header.data_hash.hex().upper()})"
            )

        if self.commit.height != self.height():
            raise ValidationError(
                f"commit height ({self.commit.height}) != header height ({self.height()})"
            )

        header_hash = self.header.hash()
        if self.commit.block_id.hash != header_hash:
            raise ValidationError(
                f"commit block_id hash ({self.commit.block_id.hash.hex().upper()}) != "
                f"header hash ({header_hash.hex().upper()})"
            )

        self.validator_set.verify_commit_light(self.header.chain_id, self.height(), self.commit)
        self.dah.validate_basic()

    def verify(self, untrusted: "ExtendedHeader") -> None:
        """Raise VerificationError unless untrusted can be trusted from this header."""
        if untrusted.height() <= self.height():
            raise VerificationError(
                f"untrusted header height({untrusted.height()}) <= "
                f"current trusted header({self.height()})"
            )

        if untrusted.chain_id() != self.chain_id():
            raise VerificationError(
                f"untrusted header has different chain {untrusted.chain_id()}, "
                f"not {self.chain_id()}"
            )

        if not untrusted.time().after(self.time()):
            raise VerificationError(
                f"untrusted header time ({untrusted.time()}) must be after "
                f"current trusted header ({self.time()})"
            )

        now = Timestamp.now()
        valid_until = Timestamp(now.seconds + VERIFY_CLOCK_DRIFT_SECONDS, now.nanos)
        if not untrusted.time().before(valid_until):
            raise VerificationError(
                f"new untrusted header has a time from the future {untrusted.time()} "
                f"(now: {now}, clock_drift: {VERIFY_CLOCK_DRIFT_SECONDS}s)"
            )

        # Adjacent headers only need the hash links checked, not the signatures.
        if self.height() + 1 == untrusted.height():
            if untrusted.header.validators_hash != self.header.next_validators_hash:
                raise VerificationError(
                    "expected old header next validators "
                    f"({self.header.next_validators_hash.hex().upper()}) to match those "
                    f"from new header ({untrusted.header.validators_hash.hex().upper()})"
                )
            if untrusted.last_header_hash() != self.hash():
                raise VerificationError(
                    f"expected new header to point to last header hash "
                    f"({self.hash().hex().upper()}), but got "
                    f"{untrusted.last_header_hash().hex().upper()}"
                )
            return

        self.validator_set.verify_commit_light_trusting(
            self.chain_id(), untrusted.commit, DEFAULT_TRUST_LEVEL
        )

    def verify_range(self, untrusted: Sequence["ExtendedHeader"]) -> None:
        """Verify a chain of untrusted headers, each adjacent to the one before.

        The first header need not be adjacent to this one. Headers are not
        validated here.
        """
        trusted = self
        for position, candidate in enumerate(untrusted):
            if position and trusted.height() + 1 != candidate.height():
                raise VerificationError(
                    f"untrusted header height ({candidate.height()}) not adjacent "
                    f"to the current trusted ({trusted.height()})"
                )
            trusted.verify(candidate)
            trusted = candidate

    def verify_adjacent_range(self, untrusted: Sequence["ExtendedHeader"]) -> None:
        """Verify a chain of untrusted headers that must start right after this one."""
        if not untrusted:
            return
        first = untrusted[0]
        if self.height() + 1 != first.height():
            raise VerificationError(
                f"untrusted header height ({first.height()}) not adjacent "
                f"to the current trusted ({self.height()})"
            )
        self.verify_range(untrusted)
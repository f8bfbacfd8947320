"""Block headers, commits and commit signatures."""

import base64
import binascii
import calendar
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Optional

from .consts import BLOCK_PROTOCOL, MAX_CHAIN_ID_LEN
from .errors import (
    DecodeError,
    InvalidSignatureIndexError,
    UnexpectedAbsentSignatureError,
    ValidateBasic,
    ValidationError,
)
from .hashes import simple_hash_from_byte_vectors

GENESIS_HEIGHT = 1
SIGNATURE_LENGTH = 64

_PRECOMMIT_TYPE = 2
_NANOS_PER_SECOND = 1_000_000_000
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?([Zz]|[+-]\d{2}:\d{2})"
)


def _varint(value: int) -> bytes:
    if value < 0:
        value += 1 << 64
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _tag(number: int, wire_type: int) -> bytes:
    return _varint((number << 3) | wire_type)


def _varint_field(number: int, value: int) -> bytes:
    return b"" if value == 0 else _tag(number, 0) + _varint(value)


def _sfixed64_field(number: int, value: int) -> bytes:
    if value == 0:
        return b""
    return _tag(number, 1) + value.to_bytes(8, "little", signed=True)


def _bytes_field(number: int, value: bytes) -> bytes:
    if not value:
        return b""
    return _tag(number, 2) + _varint(len(value)) + value


def _message_field(number: int, payload: bytes) -> bytes:
    return _tag(number, 2) + _varint(len(payload)) + payload


def _int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise DecodeError(f"invalid {name}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise DecodeError(f"invalid {name}: {value!r}")


def _hex(value: Any, name: str) -> bytes:
    if value is None:
        return b""
    if not isinstance(value, str):
        raise DecodeError(f"invalid {name}: {value!r}")
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise DecodeError(f"invalid hex in {name}: {exc}") from exc


def _b64(value: Any, name: str) -> bytes:
    if not isinstance(value, str):
        raise DecodeError(f"invalid {name}: {value!r}")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as exc:
        raise DecodeError(f"invalid base64 in {name}: {exc}") from exc


def _require_dict(data: Any) -> dict:
    if not isinstance(data, dict):
        raise DecodeError(f"expected an object, got {data!r}")
    return data


@dataclass(frozen=True, order=True)
class Timestamp:
    """A point in time as seconds and nanoseconds since the Unix epoch."""

    seconds: int
    nanos: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanos < _NANOS_PER_SECOND:
            raise ValueError(f"nanos out of range: {self.nanos}")

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """Parse an RFC 3339 timestamp with up to nanosecond precision."""
        if not isinstance(text, str):
            raise DecodeError(f"expected a timestamp string, got {text!r}")
        match = _RFC3339.fullmatch(text)
        if match is None:
            raise DecodeError(f"invalid timestamp: {text!r}")
        year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
        try:
            datetime(year, month, day, hour, minute, second)
        except ValueError as exc:
            raise DecodeError(f"invalid timestamp: {text!r}") from exc
        seconds = calendar.timegm((year, month, day, hour, minute, second))
        offset = match.group(8)
        if offset not in ("Z", "z"):
            sign = 1 if offset[0] == "+" else -1
            seconds -= sign * (int(offset[1:3]) * 3600 + int(offset[4:6]) * 60)
        fraction = match.group(7) or ""
        nanos = int(fraction.ljust(9, "0")) if fraction else 0
        return cls(seconds, nanos)

    @classmethod
    def now(cls) -> "Timestamp":
        ns = time.time_ns()
        return cls(ns // _NANOS_PER_SECOND, ns % _NANOS_PER_SECOND)

    def after(self, other: "Timestamp") -> bool:
        return self > other

    def before(self, other: "Timestamp") -> bool:
        return self < other

    def _proto(self) -> bytes:
        return _varint_field(1, self.seconds) + _varint_field(2, self.nanos)

    def __str__(self) -> str:
        moment = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=self.seconds)
        text = moment.strftime("%Y-%m-%dT%H:%M:%S")
        if self.nanos:
            text += "." + f"{self.nanos:09d}".rstrip("0")
        return text + "Z"


class BlockIdFlag(IntEnum):
    ABSENT = 1
    COMMIT = 2
    NIL = 3


@dataclass(frozen=True)
class PartSetHeader:
    total: int = 0
    hash: bytes = b""

    def _proto(self) -> bytes:
        return _varint_field(1, self.total) + _bytes_field(2, self.hash)

    @classmethod
    def _from_dict(cls, data: Any) -> "PartSetHeader":
        data = _require_dict(data)
        return cls(_int(data.get("total", 0), "total"), _hex(data.get("hash"), "hash"))


@dataclass(frozen=True)
class BlockId:
    """Identifies a block by its hash and part set header."""

    hash: bytes = b""
    part_set_header: PartSetHeader = field(default_factory=PartSetHeader)

    def is_zero(self) -> bool:
        return (
            not self.hash
            and not self.part_set_header.hash
            and self.part_set_header.total == 0
        )

    def _proto(self) -> bytes:
        return _bytes_field(1, self.hash) + _message_field(2, self.part_set_header._proto())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BlockId":
        data = _require_dict(data)
        parts = data.get("parts", data.get("part_set_header", {}))
        return cls(_hex(data.get("hash"), "hash"), PartSetHeader._from_dict(parts or {}))


@dataclass(frozen=True)
class CommitSig(ValidateBasic):
    """One validator's vote inside a commit."""

    flag: BlockIdFlag
    validator_address: bytes = b""
    timestamp: Optional[Timestamp] = None
    signature: Optional[bytes] = None

    def validate_basic(self) -> None:
        if self.flag is BlockIdFlag.ABSENT:
            return
        if self.signature is None or not self.signature:
            raise ValidationError("no signature in commit sig")
        if len(self.signature) != SIGNATURE_LENGTH:
            raise ValidationError(
                f"signature ({list(self.signature)}) length != required ({SIGNATURE_LENGTH})"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommitSig":
        data = _require_dict(data)
        raw_flag = _int(data.get("block_id_flag"), "block_id_flag")
        try:
            flag = BlockIdFlag(raw_flag)
        except ValueError:
            raise DecodeError(f"invalid block_id_flag: {raw_flag}") from None
        if flag is BlockIdFlag.ABSENT:
            return cls(flag)
        timestamp = data.get("timestamp")
        if timestamp is None:
            raise DecodeError("missing field: timestamp")
        raw_signature = data.get("signature")
        signature = _b64(raw_signature, "signature") if raw_signature is not None else None
        return cls(
            flag,
            _hex(data.get("validator_address"), "validator_address"),
            Timestamp.parse(timestamp),
            signature or None,
        )


@dataclass
class Commit(ValidateBasic):
    """The set of votes that committed a block."""

    height: int
    round: int
    block_id: BlockId
    signatures: list[CommitSig] = field(default_factory=list)

    def validate_basic(self) -> None:
        if self.height >= GENESIS_HEIGHT:
            if self.block_id.is_zero():
                raise ValidationError("block_id is zero")
            if not self.signatures:
                raise ValidationError("no signatures in commit")
            for commit_sig in self.signatures:
                commit_sig.validate_basic()

    def vote_sign_bytes(self, chain_id: str, signature_idx: int) -> bytes:
        """Return the canonical precommit bytes signed by the given signature's validator."""
        if not 0 <= signature_idx < len(self.signatures):
            raise InvalidSignatureIndexError(signature_idx, self.height)
        sig = self.signatures[signature_idx]
        if sig.flag is BlockIdFlag.ABSENT:
            raise UnexpectedAbsentSignatureError()
        timestamp = sig.timestamp if sig.timestamp is not None else Timestamp(0)
        body = (
            _varint_field(1, _PRECOMMIT_TYPE)
            + _sfixed64_field(2, self.height)
            + _sfixed64_field(3, self.round)
        )
        if not self.block_id.is_zero():
            body += _message_field(4, self.block_id._proto())
        body += _message_field(5, timestamp._proto())
        body += _bytes_field(6, chain_id.encode("utf-8"))
        return _varint(len(body)) + body

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Commit":
        data = _require_dict(data)
        signatures = data.get("signatures") or []
        if not isinstance(signatures, list):
            raise DecodeError("signatures must be a list")
        return cls(
            _int(data.get("height", 0), "height"),
            _int(data.get("round", 0), "round"),
            BlockId.from_dict(data.get("block_id") or {}),
            [CommitSig.from_dict(item) for item in signatures],
        )


@dataclass(frozen=True)
class Version:
    block: int
    app: int = 0

    def _proto(self) -> bytes:
        return _varint_field(1, self.block) + _varint_field(2, self.app)


@dataclass
class Header(ValidateBasic):
    """A block header."""

    version: Version
    chain_id: str
    height: int
    time: Timestamp
    last_block_id: Optional[BlockId]
    last_commit_hash: bytes = b""
    data_hash: bytes = b""
    validators_hash: bytes = b""
    next_validators_hash: bytes = b""
    consensus_hash: bytes = b""
    app_hash: bytes = b""
    last_results_hash: bytes = b""
    evidence_hash: bytes = b""
    proposer_address: bytes = b""

    def hash(self) -> bytes:
        """Merkle root over the encoded header fields."""
        last_block_id = self.last_block_id or BlockId()
        fields = [
            self.version._proto(),
            _bytes_field(1, self.chain_id.encode("utf-8")),
            _varint_field(1, self.height),
            self.time._proto(),
            last_block_id._proto(),
            *(
                _bytes_field(1, value)
                for value in (
                    self.last_commit_hash,
                    self.data_hash,
                    self.validators_hash,
                    self.next_validators_hash,
                    self.consensus_hash,
                    self.app_hash,
                    self.last_results_hash,
                    self.evidence_hash,
                    self.proposer_address,
                )
            ),
        ]
        return simple_hash_from_byte_vectors(fields)

    def validate_basic(self) -> None:
        if self.version.block != BLOCK_PROTOCOL:
            raise ValidationError(
                f"version block ({self.version.block}) != block protocol ({BLOCK_PROTOCOL})"
            )
        if len(self.chain_id.encode("utf-8")) > MAX_CHAIN_ID_LEN:
            raise ValidationError(
                f"chain id ({self.chain_id}) len > maximum ({MAX_CHAIN_ID_LEN})"
            )
        if self.height == 0:
            raise ValidationError("height == 0")
        if self.height == GENESIS_HEIGHT and self.last_block_id is not None:
            raise ValidationError(f"last_block_id == Some() at height {GENESIS_HEIGHT}")
        if self.height != GENESIS_HEIGHT and self.last_block_id is None:
            raise ValidationError(f"last_block_id == None at height {self.height}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Header":
        data = _require_dict(data)
        version = _require_dict(data.get("version") or {})
        chain_id = data.get("chain_id")
        if not isinstance(chain_id, str):
            raise DecodeError(f"invalid chain_id: {chain_id!r}")
        if data.get("time") is None:
            raise DecodeError("missing field: time")
        raw_last = data.get("last_block_id")
        last_block_id = BlockId.from_dict(raw_last) if raw_last is not None else None
        if last_block_id is not None and last_block_id.is_zero():
            last_block_id = None
        hashes = {
            name: _hex(data.get(name), name)
            for name in (
                "last_commit_hash",
                "data_hash",
                "validators_hash",
                "next_validators_hash",
                "consensus_hash",
                "app_hash",
                "last_results_hash",
                "evidence_hash",
                "proposer_address",
            )
        }
        return cls(
            version=Version(
                _int(version.get("block", 0), "block"), _int(version.get("app", 0), "app")
            ),
            chain_id=chain_id,
            height=_int(data.get("height", 0), "height"),
            time=Timestamp.parse(data["time"]),
            last_block_id=last_block_id,
            **hashes,
        )
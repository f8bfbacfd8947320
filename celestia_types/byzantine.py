"""Bad encoding fraud proofs and their protobuf encoding."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from .consts import HASH_SIZE, NS_SIZE, SHARE_SIZE
from .errors import (
    DecodeError,
    InvalidNmtLeafSizeError,
    MissingFieldError,
    UnsupportedFraudProofTypeError,
    ValidationError,
    WrongProofTypeError,
)
from .fraud_proof import FraudProof, RawFraudProof
from .nmt import Namespace, NamespacedHash, NamespaceProof
from .rsmt2d import Axis
from .share import Share

MULTIHASH_NMT_CODEC_CODE = 0x7700
MULTIHASH_SHA256_NAMESPACE_FLAGGED_CODE = 0x7701
MULTIHASH_SHA256_NAMESPACE_FLAGGED_SIZE = 2 * NS_SIZE + HASH_SIZE

_U32_MASK = 0xFFFFFFFF
_I64_MAX = 2**63 - 1

_VARINT = 0
_FIXED64 = 1
_LENGTH_DELIMITED = 2
_FIXED32 = 5


def _encode_varint(value: int) -> bytes:
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


def _key(number: int, wire_type: int) -> bytes:
    return _encode_varint((number << 3) | wire_type)


def _varint_field(number: int, value: int) -> bytes:
    return b"" if value == 0 else _key(number, _VARINT) + _encode_varint(value)


def _bytes_field(number: int, value: bytes, always: bool = False) -> bytes:
    if not value and not always:
        return b""
    return _key(number, _LENGTH_DELIMITED) + _encode_varint(len(value)) + value


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    for shift in range(0, 70, 7):
        if pos >= len(data):
            raise DecodeError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if result >= 1 << 64:
                raise DecodeError("varint overflows 64 bits")
            return result, pos
    raise DecodeError("varint too long")


def _iter_fields(data: bytes) -> Iterator[tuple[int, int, Union[int, bytes]]]:
    pos = 0
    while pos < len(data):
        key, pos = _read_varint(data, pos)
        number, wire_type = key >> 3, key & 0x7
        if wire_type == _VARINT:
            value, pos = _read_varint(data, pos)
        elif wire_type in (_FIXED64, _FIXED32):
            width = 8 if wire_type == _FIXED64 else 4
            if pos + width > len(data):
                raise DecodeError("truncated fixed-width field")
            value, pos = data[pos:pos + width], pos + width
        elif wire_type == _LENGTH_DELIMITED:
            length, pos = _read_varint(data, pos)
            if pos + length > len(data):
                raise DecodeError("truncated length-delimited field")
            value, pos = data[pos:pos + length], pos + length
        else:
            raise DecodeError(f"unsupported wire type {wire_type}")
        yield number, wire_type, value


def _expect(wire_type: int, expected: int, name: str) -> None:
    if wire_type != expected:
        raise DecodeError(f"unexpected wire type {wire_type} for {name}")


def _signed64(value: int) -> int:
    return value - (1 << 64) if value >= 1 << 63 else value


def _signed32(value: int) -> int:
    return ((_signed64(value) + 2**31) % 2**32) - 2**31


def _encode_proof(proof: NamespaceProof) -> bytes:
    out = _varint_field(1, proof.start) + _varint_field(2, proof.end)
    for node in proof.siblings:
        out += _bytes_field(3, node.to_bytes(), always=True)
    if proof.leaf is not None:
        out += _bytes_field(4, proof.leaf.to_bytes())
    return out + _varint_field(5, int(proof.ignore_max_ns))


def _decode_proof(data: bytes) -> NamespaceProof:
    start = end = 0
    nodes: list[bytes] = []
    leaf_hash = b""
    ignored = False
    for number, wire_type, value in _iter_fields(data):
        if number == 1:
            _expect(wire_type, _VARINT, "start")
            start = _signed64(value)
        elif number == 2:
            _expect(wire_type, _VARINT, "end")
            end = _signed64(value)
        elif number == 3:
            _expect(wire_type, _LENGTH_DELIMITED, "nodes")
            nodes.append(value)
        elif number == 4:
            _expect(wire_type, _LENGTH_DELIMITED, "leaf_hash")
            leaf_hash = value
        elif number == 5:
            _expect(wire_type, _VARINT, "is_max_namespace_ignored")
            ignored = value != 0
    siblings = [NamespacedHash.from_raw(node) for node in nodes]
    leaf = NamespacedHash.from_raw(leaf_hash) if leaf_hash else None
    return NamespaceProof(siblings, start & _U32_MASK, end & _U32_MASK, ignored, leaf)


@dataclass(frozen=True)
class NmtLeaf:
    """A leaf of the namespaced merkle tree: namespace prepended to a share."""

    namespace: Namespace
    share: Share

    @classmethod
    def from_bytes(cls, data: bytes) -> "NmtLeaf":
        raw = bytes(data)
        if len(raw) != SHARE_SIZE + NS_SIZE:
            raise InvalidNmtLeafSizeError(len(raw))
        return cls(Namespace.from_raw(raw[:NS_SIZE]), Share.from_raw(raw[NS_SIZE:]))

    def to_bytes(self) -> bytes:
        return self.namespace.raw + self.share.to_bytes()


@dataclass
class ShareWithProof:
    """A leaf together with the proof of its inclusion in a row or column."""

    leaf: NmtLeaf
    proof: NamespaceProof

    @classmethod
    def _from_protobuf(cls, data: bytes) -> "ShareWithProof":
        leaf_bytes = b""
        proof_bytes: Optional[bytes] = None
        for number, wire_type, value in _iter_fields(data):
            if number == 1:
                _expect(wire_type, _LENGTH_DELIMITED, "data")
                leaf_bytes = value
            elif number == 2:
                _expect(wire_type, _LENGTH_DELIMITED, "proof")
                proof_bytes = value
        leaf = NmtLeaf.from_bytes(leaf_bytes)
        if proof_bytes is None:
            raise MissingFieldError("proof")
        proof = _decode_proof(proof_bytes)
        if proof.is_of_absence():
            raise WrongProofTypeError()
        return cls(leaf, proof)

    def _to_protobuf(self) -> bytes:
        return _bytes_field(1, self.leaf.to_bytes()) + _bytes_field(
            2, _encode_proof(self.proof), always=True
        )


@dataclass
class BadEncodingFraudProof(FraudProof):
    """Proof that a row or column of the extended square was badly encoded."""

    TYPE: ClassVar[str] = "badencoding"

    block_hash: bytes
    block_height: int
    # Every share of the row or column, each with its merkle proof.
    shares: list[ShareWithProof] = field(default_factory=list)
    # The row or column index where the bad encoding was detected.
    index: int = 0
    axis: Axis = Axis.ROW

    def header_hash(self) -> bytes:
        return self.block_hash

    def height(self) -> int:
        return self.block_height

    def validate(self, header: Any) -> None:
        """Raise ValidationError or RangeProofError unless the proof holds."""
        if header.height() != self.block_height:
            raise ValidationError(
                f"header height ({header.height()}) != fraud proof height ({self.block_height})"
            )
        row_roots = header.dah.row_roots
        column_roots = header.dah.column_roots
        if len(row_roots) != len(column_roots):
            raise ValidationError(
                f"dah rows len ({len(row_roots)}) != dah columns len ({len(column_roots)})"
            )
        if self.index >= len(row_roots):
            raise ValidationError(
                f"fraud proof index ({self.index}) >= dah rows len ({len(row_roots)})"
            )
        if len(self.shares) != len(row_roots):
            raise ValidationError(
                f"fraud proof shares len ({len(self.shares)}) != dah rows len ({len(row_roots)})"
            )

        roots = row_roots if self.axis is Axis.ROW else column_roots
        root = NamespacedHash.from_raw(roots[self.index].to_bytes())

        for share in self.shares:
            share.proof.verify_range(root, [share.leaf.share.to_bytes()], share.leaf.namespace)

    @classmethod
    def from_protobuf(cls, data: bytes) -> "BadEncodingFraudProof":
        header_hash = b""
        height = 0
        shares: list[ShareWithProof] = []
        index = 0
        axis_value = 0
        for number, wire_type, value in _iter_fields(bytes(data)):
            if number == 1:
                _expect(wire_type, _LENGTH_DELIMITED, "header_hash")
                header_hash = value
            elif number == 2:
                _expect(wire_type, _VARINT, "height")
                height = value
            elif number == 3:
                _expect(wire_type, _LENGTH_DELIMITED, "shares")
                shares.append(ShareWithProof._from_protobuf(value))
            elif number == 4:
                _expect(wire_type, _VARINT, "index")
                index = value & _U32_MASK
            elif number == 5:
                _expect(wire_type, _VARINT, "axis")
                axis_value = _signed32(value)
        if len(header_hash) not in (0, HASH_SIZE):
            raise DecodeError(f"invalid header hash length: {len(header_hash)}")
        if height > _I64_MAX:
            raise DecodeError(f"height out of range: {height}")
        return cls(header_hash, height, shares, index, Axis.from_int(axis_value))

    def to_protobuf(self) -> bytes:
        out = _bytes_field(1, self.block_hash) + _varint_field(2, self.block_height)
        for share in self.shares:
            out += _bytes_field(3, share._to_protobuf(), always=True)
        return out + _varint_field(4, self.index & _U32_MASK) + _varint_field(5, int(self.axis))


def parse_fraud_proof(raw: Union[RawFraudProof, dict[str, Any]]) -> FraudProof:
    """Decode a tagged fraud proof into the proof type it names."""
    if isinstance(raw, dict):
        raw = RawFraudProof.from_dict(raw)
    if raw.proof_type == BadEncodingFraudProof.TYPE:
        return BadEncodingFraudProof.from_protobuf(raw.data)
    raise UnsupportedFraudProofTypeError(raw.proof_type)


def encode_fraud_proof(proof: FraudProof) -> RawFraudProof:
    """Wrap a fraud proof in its tagged wire envelope."""
    if isinstance(proof, BadEncodingFraudProof):
        return RawFraudProof(BadEncodingFraudProof.TYPE, proof.to_protobuf())
    raise TypeError(f"unsupported fraud proof: {type(proof).__name__}")
"""Validators, validator sets and light verification of commits."""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .block import BlockIdFlag, Commit
from .errors import (
    DecodeError,
    NotEnoughVotingPowerError,
    ValidateBasic,
    ValidationError,
    VerificationError,
)
from .hashes import simple_hash_from_byte_vectors
from .trust_level import DEFAULT_TRUST_LEVEL, TrustLevelRatio

ED25519_KEY_TYPE = "tendermint/PubKeyEd25519"


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


def _length_delimited(number: int, payload: bytes) -> bytes:
    return _varint((number << 3) | 2) + _varint(len(payload)) + payload


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


@dataclass(frozen=True)
class Validator:
    """A validator with an Ed25519 public key and voting power."""

    address: bytes
    pub_key: bytes
    power: int
    proposer_priority: int = 0
    name: Optional[str] = None

    def verify_signature(self, message: bytes, signature: bytes) -> None:
        """Raise VerificationError unless signature signs message under pub_key."""
        try:
            key = Ed25519PublicKey.from_public_bytes(bytes(self.pub_key))
        except ValueError as exc:
            raise VerificationError(f"invalid public key: {exc}") from exc
        try:
            key.verify(bytes(signature), bytes(message))
        except InvalidSignature:
            raise VerificationError(
                f"signature verification failed for validator {self.address.hex().upper()}"
            ) from None

    def _hash_bytes(self) -> bytes:
        pub_key = _length_delimited(1, _length_delimited(1, self.pub_key))
        power = b"" if self.power == 0 else b"\x10" + _varint(self.power)
        return pub_key + power

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Validator":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        pub_key = data.get("pub_key")
        if not isinstance(pub_key, dict):
            raise DecodeError("missing field: pub_key")
        if pub_key.get("type") != ED25519_KEY_TYPE:
            raise DecodeError(f"unsupported public key type: {pub_key.get('type')!r}")
        value = pub_key.get("value")
        if not isinstance(value, str):
            raise DecodeError(f"invalid public key value: {value!r}")
        try:
            key_bytes = base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise DecodeError(f"invalid base64 public key: {exc}") from exc
        address = data.get("address")
        if not isinstance(address, str):
            raise DecodeError(f"invalid address: {address!r}")
        try:
            address_bytes = bytes.fromhex(address)
        except ValueError as exc:
            raise DecodeError(f"invalid address: {exc}") from exc
        power = data.get("voting_power", data.get("power", 0))
        return cls(
            address=address_bytes,
            pub_key=key_bytes,
            power=_int(power, "voting_power"),
            proposer_priority=_int(data.get("proposer_priority", 0), "proposer_priority"),
            name=data.get("name"),
        )


@dataclass
class ValidatorSet(ValidateBasic):
    """Validators ordered by voting power (descending) then address."""

    validators: list[Validator] = field(default_factory=list)
    proposer: Optional[Validator] = None

    def __post_init__(self) -> None:
        self.validators = sorted(self.validators, key=lambda v: (-v.power, v.address))

    def total_voting_power(self) -> int:
        return sum(validator.power for validator in self.validators)

    def hash(self) -> bytes:
        return simple_hash_from_byte_vectors(v._hash_bytes() for v in self.validators)

    def validate_basic(self) -> None:
        if not self.validators:
            raise ValidationError("validators is empty")
        if self.proposer is None:
            raise ValidationError("proposer is none")

    def _find(self, address: bytes) -> Optional[tuple[int, Validator]]:
        return next(
            (
                (index, validator)
                for index, validator in enumerate(self.validators)
                if validator.address == address
            ),
            None,
        )

    def verify_commit_light(self, chain_id: str, height: int, commit: Commit) -> None:
        """Check that more than 2/3 of this set's voting power signed commit."""
        if len(self.validators) != len(commit.signatures):
            raise VerificationError(
                f"validators signature len ({len(self.validators)}) "
                f"!= commit signatures len ({len(commit.signatures)})"
            )
        if height != commit.height:
            raise VerificationError(f"height ({height}) != commit height ({commit.height})")

        tallied = 0
        needed = TrustLevelRatio(2, 3).voting_power_needed(self.total_voting_power())

        for idx, (validator, commit_sig) in enumerate(zip(self.validators, commit.signatures)):
            if commit_sig.flag is not BlockIdFlag.COMMIT:
                continue
            if commit_sig.signature is None:
                raise VerificationError("No signature in CommitSig")
            vote_sign = commit.vote_sign_bytes(chain_id, idx)
            validator.verify_signature(vote_sign, commit_sig.signature)
            tallied += validator.power
            if tallied > needed:
                return

        raise NotEnoughVotingPowerError(tallied, needed)

    def verify_commit_light_trusting(
        self,
        chain_id: str,
        commit: Commit,
        trust_level: TrustLevelRatio = DEFAULT_TRUST_LEVEL,
    ) -> None:
        """Check that more than trust_level of this set's voting power signed commit."""
        seen: dict[int, int] = {}
        tallied = 0
        needed = trust_level.voting_power_needed(self.total_voting_power())

        for idx, commit_sig in enumerate(commit.signatures):
            if commit_sig.flag is not BlockIdFlag.COMMIT:
                continue
            if commit_sig.signature is None:
                raise VerificationError("No signature in CommitSig")
            found = self._find(commit_sig.validator_address)
            if found is None:
                continue
            val_idx, validator = found
            if val_idx in seen:
                raise VerificationError(
                    f"Double vote from {commit_sig.validator_address.hex().upper()} "
                    f"({seen[val_idx]} and {idx})"
                )
            seen[val_idx] = idx

            vote_sign = commit.vote_sign_bytes(chain_id, idx)
            validator.verify_signature(vote_sign, commit_sig.signature)
            tallied += validator.power
            if tallied > needed:
                return

        raise NotEnoughVotingPowerError(tallied, needed)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidatorSet":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        validators = data.get("validators") or []
        if not isinstance(validators, list):
            raise DecodeError("validators must be a list")
        proposer = data.get("proposer")
        return cls(
            [Validator.from_dict(item) for item in validators],
            Validator.from_dict(proposer) if proposer is not None else None,
        )
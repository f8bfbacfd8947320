"""Exception hierarchy and the basic-validation interface."""

from abc import ABC, abstractmethod

from .consts import MAX_SHARE_VERSION, SEQUENCE_LEN_BYTES


class Error(Exception):
    """Base class of every error raised by this package."""


class ValidationError(Error):
    """A structure failed its consistency checks."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class VerificationError(Error):
    """An untrusted structure could not be verified against a trusted one."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotEnoughVotingPowerError(VerificationError):
    """The signatures carried too little voting power."""

    def __init__(self, got: int, needed: int) -> None:
        super().__init__(f"Not enough voting power (got {got}, needed {needed})")
        self.got = got
        self.needed = needed


class UnsupportedNamespaceVersionError(Error):
    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported namespace version: {version}")
        self.version = version


class InvalidNamespaceSizeError(Error):
    def __init__(self) -> None:
        super().__init__("Invalid namespace size")


class InvalidNamespaceV0Error(Error):
    def __init__(self) -> None:
        super().__init__("Invalid namespace v0")


class MissingFieldError(Error):
    """A required part of a message (header, commit, proof, ...) is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing {field}")
        self.field = field


class WrongProofTypeError(Error):
    def __init__(self) -> None:
        super().__init__("Wrong proof type")


class UnsupportedShareVersionError(Error):
    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported share version: {version}")
        self.version = version


class InvalidShareSizeError(Error):
    def __init__(self, size: int) -> None:
        super().__init__(f"Invalid share size: {size}")
        self.size = size


class InvalidNmtLeafSizeError(Error):
    def __init__(self, size: int) -> None:
        super().__init__(f"Invalid nmt leaf size: {size}")
        self.size = size


class ShareSequenceLenExceededError(Error):
    def __init__(self, length: int) -> None:
        super().__init__(
            f"Sequence len must fit into {SEQUENCE_LEN_BYTES} bytes, got value {length}"
        )
        self.length = length


class InvalidNamespacedHashError(Error):
    def __init__(self, message: str = "Invalid namespaced hash") -> None:
        super().__init__(message)


class InvalidSignatureIndexError(Error):
    def __init__(self, index: int, height: int) -> None:
        super().__init__(
            f"Invalid index of signature in commit {index}, height {height}"
        )
        self.index = index
        self.height = height


class InvalidAxisError(Error):
    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid axis: {value}")
        self.value = value


class RangeProofError(Error):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Range proof verification failed: {reason}")
        self.reason = reason


class UnexpectedAbsentSignatureError(Error):
    def __init__(self) -> None:
        super().__init__("Unexpected absent commit signature")


class MaxShareVersionExceededError(Error):
    def __init__(self, version: int) -> None:
        super().__init__(
            f"Share version has to be at most {MAX_SHARE_VERSION}, got {version}"
        )
        self.version = version


class NmtError(Error):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Nmt error: {reason}")
        self.reason = reason


class InvalidBalanceDenominationError(Error):
    def __init__(self, denom: str) -> None:
        super().__init__(f"Invalid balance denomination: {denom}")
        self.denom = denom


class InvalidBalanceAmountError(Error):
    def __init__(self, amount: str) -> None:
        super().__init__(f"Invalid balance amount: {amount}")
        self.amount = amount


class UnsupportedFraudProofTypeError(Error):
    def __init__(self, proof_type: str) -> None:
        super().__init__(f"Unsupported fraud proof type: {proof_type}")
        self.proof_type = proof_type


class DecodeError(Error):
    """Malformed input that could not be decoded."""


class ValidateBasic(ABC):
    """Structures that can check their own internal consistency."""

    @abstractmethod
    def validate_basic(self) -> None:
        """Raise ValidationError if the structure is not consistent."""
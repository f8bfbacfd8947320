"""Celestia data types: namespaces, shares, blobs, commitments, headers, fraud proofs and balances."""

__version__ = "0.1.0"

__all__ = [
    "balance",
    "blob",
    "block",
    "byzantine",
    "commitment",
    "consts",
    "data_availability_header",
    "errors",
    "extended_header",
    "fraud_proof",
    "hashes",
    "info_byte",
    "nmt",
    "rsmt2d",
    "serializers",
    "share",
    "trust_level",
    "validator_set",
]
"""Protocol constants shared across the package."""

HASH_SIZE = 32

# Namespace layout
NS_VER_SIZE = 1
NS_ID_SIZE = 28
NS_SIZE = NS_VER_SIZE + NS_ID_SIZE
NS_ID_V0_SIZE = 10

# Genesis
MAX_CHAIN_ID_LEN = 50

# Version of all block data structures and processing.
BLOCK_PROTOCOL = 11

# Application constants (v1)
SUBTREE_ROOT_THRESHOLD = 64
SQUARE_SIZE_UPPER_BOUND = 128

# Global application constants
NAMESPACE_SIZE = NS_SIZE
"""Size of a namespace in bytes."""

SHARE_SIZE = 512
"""Size of a share in bytes."""

SHARE_INFO_BYTES = 1
"""Bytes reserved for the info byte (share version and sequence start flag)."""

SEQUENCE_LEN_BYTES = 4
"""Bytes reserved for the sequence length in the first share of a sequence."""

SHARE_VERSION_ZERO = 0
"""The first share version format."""

COMPACT_SHARE_RESERVED_BYTES = 4
"""Bytes reserved for the location of the first unit in a compact share."""

FIRST_COMPACT_SHARE_CONTENT_SIZE = (
    SHARE_SIZE
    - NAMESPACE_SIZE
    - SHARE_INFO_BYTES
    - SEQUENCE_LEN_BYTES
    - COMPACT_SHARE_RESERVED_BYTES
)

CONTINUATION_COMPACT_SHARE_CONTENT_SIZE = (
    SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES - COMPACT_SHARE_RESERVED_BYTES
)

FIRST_SPARSE_SHARE_CONTENT_SIZE = (
    SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES - SEQUENCE_LEN_BYTES
)

CONTINUATION_SPARSE_SHARE_CONTENT_SIZE = SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES

MIN_SQUARE_SIZE = 1
"""The smallest width of the data square before extension."""

MIN_SHARE_COUNT = MIN_SQUARE_SIZE * MIN_SQUARE_SIZE
"""The minimum number of shares in the data square before extension."""

MAX_SHARE_VERSION = 127
"""The maximum value a share version can take."""

# Data availability header
MAX_EXTENDED_SQUARE_WIDTH = SQUARE_SIZE_UPPER_BOUND * 2
MIN_EXTENDED_SQUARE_WIDTH = MIN_SQUARE_SIZE * 2

# Bech32 prefixes
_PREFIX_ACCOUNT = "celestia"
_PREFIX_PUBLIC = "pub"
_PREFIX_VALIDATOR = "val"
_PREFIX_OPERATOR = "oper"
_PREFIX_CONSENSUS = "cons"

BECH32_PREFIX_ACC_ADDR = _PREFIX_ACCOUNT
BECH32_PREFIX_ACC_PUB = BECH32_PREFIX_ACC_ADDR + _PREFIX_PUBLIC
BECH32_PREFIX_VAL_ADDR = _PREFIX_ACCOUNT + _PREFIX_VALIDATOR + _PREFIX_OPERATOR
BECH32_PREFIX_VAL_PUB = BECH32_PREFIX_VAL_ADDR + _PREFIX_PUBLIC
BECH32_PREFIX_CONS_ADDR = _PREFIX_ACCOUNT + _PREFIX_VALIDATOR + _PREFIX_CONSENSUS
BECH32_PREFIX_CONS_PUB = BECH32_PREFIX_CONS_ADDR + _PREFIX_PUBLIC
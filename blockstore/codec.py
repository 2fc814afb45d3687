"""
Block Codec - storage encoding for blocks and height keys.

Key layout
----------
- hash(32)                 -> encoded block (JSON)
- height:u64be (8)         -> hash(32)
- b"LatestBlock"           -> hash(32) of the current head

Heights are fixed-width big-endian so that the lexicographic order of height
keys matches numeric order; range scans over the engine rely on this.

The block encoding is JSON produced by the block model. It round-trips every
field but is not canonical: block identity comes from the header hash, never
from these bytes.
"""

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from blockstore.errors import DecodingError, EncodingError
from blockstore.types import Block, HASH_LENGTH, MAX_UINT64


# =============================================================================
# Constants
# =============================================================================

# Reserved key tracking the latest known full block's hash
LATEST_BLOCK_KEY = b"LatestBlock"

HEIGHT_KEY_LENGTH = 8

__all__ = [
    "HASH_LENGTH",
    "HEIGHT_KEY_LENGTH",
    "LATEST_BLOCK_KEY",
    "decode_block",
    "decode_block_height",
    "encode_block",
    "encode_block_height",
]


# =============================================================================
# Blocks
# =============================================================================


def encode_block(block: Block) -> bytes:
    """
    Serialize a block for storage.

    Raises:
        EncodingError: if the block's fields cannot be represented
    """
    try:
        return block.model_dump_json().encode("utf-8")
    except (PydanticSerializationError, AttributeError, TypeError, ValueError) as e:
        raise EncodingError(f"failed to encode block {block!r}: {e}") from e


def decode_block(data: bytes) -> Block:
    """
    Parse a stored block.

    Raises:
        DecodingError: if the bytes are not a valid encoded block
    """
    try:
        return Block.model_validate_json(data)
    except (ValidationError, UnicodeDecodeError, ValueError) as e:
        raise DecodingError(f"failed to decode block from {len(data)} bytes: {e}") from e


# =============================================================================
# Heights
# =============================================================================


def encode_block_height(height: int) -> bytes:
    """Encode a block height as an 8-byte big-endian key."""
    if not isinstance(height, int) or height < 0 or height > MAX_UINT64:
        raise EncodingError(f"block height {height!r} is not a uint64")
    return height.to_bytes(HEIGHT_KEY_LENGTH, byteorder="big")


def decode_block_height(key: bytes) -> int:
    """Inverse of encode_block_height()."""
    if len(key) != HEIGHT_KEY_LENGTH:
        raise DecodingError(f"height key must be {HEIGHT_KEY_LENGTH} bytes, got {len(key)}")
    return int.from_bytes(key, byteorder="big")

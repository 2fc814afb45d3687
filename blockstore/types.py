"""
Block data model.

Blocks are immutable once built: both models are frozen, so a block handed
to the store (and cached as the current head) can be shared between threads
without copying.

Bytes fields are carried as raw bytes in Python and as 0x-prefixed hex
strings in JSON, which is the form the storage codec writes.
"""

from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from blockstore.crypto import bytes_to_hex, compute_header_hash, hex_to_bytes


# =============================================================================
# Constants
# =============================================================================

HASH_LENGTH = 32
MAX_UINT64 = 2**64 - 1
ZERO_HASH = bytes(HASH_LENGTH)

_HASH_FIELDS = ("prev_block_hash", "state_root", "tx_root", "receipts_root")


def _to_bytes(value: Any) -> Any:
    """Accept hex strings and bytes-like values for bytes fields."""
    if isinstance(value, str):
        return hex_to_bytes(value)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


# =============================================================================
# Models
# =============================================================================


class BlockHeader(BaseModel):
    """
    Block header.

    Attributes:
        chain_id: Network identifier
        prev_block_hash: Header hash of the parent block
        state_root: State commitment after applying the block
        tx_root: Commitment to the block's transactions
        receipts_root: Commitment to the execution receipts
        height: Sequential block number (genesis is 0)
        timestamp: Unix timestamp (seconds)
        extra_data: Free-form producer data
    """

    model_config = ConfigDict(frozen=True)

    chain_id: str = ""
    prev_block_hash: bytes = ZERO_HASH
    state_root: bytes = ZERO_HASH
    tx_root: bytes = ZERO_HASH
    receipts_root: bytes = ZERO_HASH
    height: int = Field(default=0, ge=0, le=MAX_UINT64)
    timestamp: int = Field(default=0, ge=0, le=MAX_UINT64)
    extra_data: bytes = b""

    @field_validator(*_HASH_FIELDS, "extra_data", mode="before")
    @classmethod
    def _parse_bytes(cls, value: Any) -> Any:
        return _to_bytes(value)

    @field_validator(*_HASH_FIELDS)
    @classmethod
    def _check_hash_length(cls, value: bytes) -> bytes:
        if len(value) != HASH_LENGTH:
            raise ValueError(f"must be {HASH_LENGTH} bytes, got {len(value)}")
        return value

    @field_serializer(*_HASH_FIELDS, "extra_data", when_used="json")
    def _serialize_bytes(self, value: bytes) -> str:
        return bytes_to_hex(value)


class Block(BaseModel):
    """
    A block as stored by the block store.

    header_hash is the block's content identity. It is empty until computed;
    use with_header_hash() to fill it in.
    """

    model_config = ConfigDict(frozen=True)

    header: BlockHeader
    transactions: Tuple[bytes, ...] = ()
    header_hash: bytes = b""

    @field_validator("header_hash", mode="before")
    @classmethod
    def _parse_header_hash(cls, value: Any) -> Any:
        return _to_bytes(value)

    @field_validator("header_hash")
    @classmethod
    def _check_header_hash(cls, value: bytes) -> bytes:
        if value and len(value) != HASH_LENGTH:
            raise ValueError(f"must be empty or {HASH_LENGTH} bytes, got {len(value)}")
        return value

    @field_validator("transactions", mode="before")
    @classmethod
    def _parse_transactions(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(_to_bytes(tx) for tx in value)
        return value

    @field_serializer("header_hash", when_used="json")
    def _serialize_header_hash(self, value: bytes) -> str:
        return bytes_to_hex(value)

    @field_serializer("transactions", when_used="json")
    def _serialize_transactions(self, value: Tuple[bytes, ...]) -> list:
        return [bytes_to_hex(tx) for tx in value]

    @property
    def height(self) -> int:
        return self.header.height

    def with_header_hash(self) -> "Block":
        """Return a copy whose header_hash is computed from the header."""
        return self.model_copy(update={"header_hash": compute_header_hash(self.header)})

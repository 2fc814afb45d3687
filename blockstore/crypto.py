"""
Hashing primitives for the block store.

Design Notes:
-------------
Blocks are content-addressed by their header hash. The header hash is
Keccak-256 over a fixed-layout byte encoding of the header (not over the
storage encoding), so the identity of a block does not change if the storage
codec does.
"""

from typing import TYPE_CHECKING

from Crypto.Hash import keccak

if TYPE_CHECKING:
    from blockstore.types import Block, BlockHeader


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: header hashes (block identity).
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Block Identity
# =============================================================================


def header_content_bytes(header: "BlockHeader") -> bytes:
    """
    Compute the canonical byte representation of a header for hashing.

    Format: chain_id_len(2) || chain_id || prev_block_hash(32) ||
            state_root(32) || tx_root(32) || receipts_root(32) ||
            height(8) || timestamp(8) || extra_len(4) || extra_data
    """
    chain_id = header.chain_id.encode("utf-8")
    parts = [
        len(chain_id).to_bytes(2, byteorder="big"),
        chain_id,
        header.prev_block_hash,
        header.state_root,
        header.tx_root,
        header.receipts_root,
        header.height.to_bytes(8, byteorder="big"),
        header.timestamp.to_bytes(8, byteorder="big"),
        len(header.extra_data).to_bytes(4, byteorder="big"),
        header.extra_data,
    ]
    return b"".join(parts)


def compute_header_hash(header: "BlockHeader") -> bytes:
    """header_hash = Keccak256(header content bytes)"""
    return keccak256(header_content_bytes(header))


def block_hash(block: "Block") -> bytes:
    """
    Return the content identity of a block.

    A block that already carries its header hash is trusted as-is; otherwise
    the hash is computed from the header.
    """
    if block.header_hash:
        return block.header_hash
    return compute_header_hash(block.header)


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)

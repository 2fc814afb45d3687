"""
blockstore - block persistence for a blockchain node.

Stores immutable blocks keyed by header hash, indexes them by height and
tracks the current chain head across restarts, on top of a pluggable
key-value engine (durable SQLite or volatile memory).
"""

from blockstore.block_store import BlockStore, INIT_BLOCK_HEIGHT
from blockstore.config import BlockStoreConfig, PLUGIN_MEMDB, PLUGIN_SQLITE, load_config
from blockstore.errors import (
    BlockNotFoundError,
    BlockStoreError,
    ConfigError,
    DecodingError,
    EncodingError,
    EngineError,
    KeyNotFoundError,
)
from blockstore.types import Block, BlockHeader

__all__ = [
    "Block",
    "BlockHeader",
    "BlockNotFoundError",
    "BlockStore",
    "BlockStoreConfig",
    "BlockStoreError",
    "ConfigError",
    "DecodingError",
    "EncodingError",
    "EngineError",
    "INIT_BLOCK_HEIGHT",
    "KeyNotFoundError",
    "PLUGIN_MEMDB",
    "PLUGIN_SQLITE",
    "load_config",
]

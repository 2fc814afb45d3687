"""
Error types raised by the block store.

Every failure surfaced to callers derives from BlockStoreError so a node can
catch the whole family in one place. Messages carry the hash, height or key
involved so that a log line alone is enough to diagnose the failure.
"""

from typing import Optional


class BlockStoreError(Exception):
    """Base class for all block store failures."""


class ConfigError(BlockStoreError):
    """Unknown backend plugin or missing backend parameters."""


class EncodingError(BlockStoreError):
    """A block or height could not be serialized."""


class DecodingError(BlockStoreError):
    """Stored bytes do not parse as a block (corrupt, truncated or stale)."""


class EngineError(BlockStoreError):
    """The underlying key-value engine failed a put/get/delete."""

    def __init__(self, message: str, operation: str = "", key: Optional[bytes] = None):
        super().__init__(message)
        self.operation = operation
        self.key = key


class KeyNotFoundError(EngineError):
    """The requested key is absent from the engine."""

    def __init__(self, key: bytes):
        super().__init__(f"key 0x{key.hex()} not found", operation="get", key=key)


class BlockNotFoundError(BlockStoreError):
    """No resolvable block exists for the requested hash or height."""

    def __init__(
        self,
        message: str,
        block_hash: Optional[bytes] = None,
        height: Optional[int] = None,
    ):
        super().__init__(message)
        self.block_hash = block_hash
        self.height = height

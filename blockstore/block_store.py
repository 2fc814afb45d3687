"""
Block Store - durable block records, hash/height indexes and the chain head.

Write Sequence:
--------------
write_block() issues three single-key writes, in this order:

1. hash -> encoded block        (must succeed, else the write fails)
2. height -> hash               (must succeed, else the write fails; step 1
                                 is not rolled back)
3. b"LatestBlock" -> hash       (best effort: a failure is logged and the
                                 write still succeeds)

The in-memory current block is updated between steps 2 and 3, so after a
failed head-pointer write the process keeps serving the new head while a
restart recovers the previous one. Nodes rely on this to keep accepting
blocks when only the head pointer cannot be persisted.

Recovery:
--------
On construction the head pointer is read and resolved to a block. A missing,
dangling or undecodable pointer leaves the store with no current block
(height INIT_BLOCK_HEIGHT) instead of failing startup.
"""

import threading
from typing import Optional

from blockstore.codec import (
    HASH_LENGTH,
    LATEST_BLOCK_KEY,
    decode_block,
    encode_block,
    encode_block_height,
)
from blockstore.config import BlockStoreConfig
from blockstore.crypto import block_hash as compute_block_hash
from blockstore.crypto import bytes_to_hex
from blockstore.errors import BlockNotFoundError, DecodingError, EncodingError, EngineError
from blockstore.storage import DBStore, create_db_store
from blockstore.types import Block
from blockstore.utils.logger import get_logger

logger = get_logger("store")


# Block height reported before the genesis block is known
INIT_BLOCK_HEIGHT = 0


class BlockStore:
    """
    Persistence facade over a key-value engine.

    Thread-safe: engine operations are single-key and atomic in the backend,
    and the current block is one immutable reference swapped under a lock.
    """

    def __init__(self, config: Optional[BlockStoreConfig] = None, db_store: Optional[DBStore] = None):
        """
        Open the configured backend and recover the chain head.

        Args:
            config: Backend selection. Defaults to the in-memory backend.
            db_store: Already-open engine to use instead of config

        Raises:
            ConfigError: unknown backend plugin
            EngineError: the backend could not be opened
        """
        self.config = config or BlockStoreConfig()
        logger.info(f"Start creating block store, with config: {self.config}")

        self.store = db_store if db_store is not None else create_db_store(self.config)
        self._current_block: Optional[Block] = None
        self._lock = threading.Lock()

        self.load_latest_block()

    # =========================================================================
    # Recovery
    # =========================================================================

    def load_latest_block(self) -> Optional[Block]:
        """
        Reload the current block from the durable head pointer.

        Returns:
            The recovered block, or None if the head is unknown
        """
        logger.info("Start loading latest block from database")
        try:
            head_hash = self.store.get(LATEST_BLOCK_KEY)
        except EngineError as e:
            logger.warning(f"Failed to load latest block hash ({e}), current block set to None")
            self._record_current_block(None)
            return None

        try:
            latest = self.get_block_by_hash(head_hash)
        except BlockNotFoundError as e:
            logger.warning(
                f"Failed to load the latest block recorded in the database ({e}), current block set to None"
            )
            self._record_current_block(None)
            return None

        self._record_current_block(latest)
        return latest

    # =========================================================================
    # Write Path
    # =========================================================================

    def write_block(self, block: Block) -> None:
        """
        Persist a block and make it the current head.

        Raises:
            EncodingError: block could not be serialized (nothing written)
            EngineError: the block record or height index write failed
        """
        logger.info(f"Start writing block at height {block.header.height} to database")
        try:
            block_bytes = encode_block(block)
            height_key = encode_block_height(block.header.height)
        except EncodingError as e:
            logger.error(f"Failed to encode block at height {block.header.height}: {e}")
            raise

        block_hash = compute_block_hash(block)
        hash_hex = bytes_to_hex(block_hash)

        try:
            self.store.put(block_hash, block_bytes)
        except EngineError as e:
            logger.error(f"Failed to write block {hash_hex} to database: {e}")
            raise EngineError(
                f"failed to write block {hash_hex} to database: {e}", operation="put", key=block_hash
            ) from e

        try:
            self.store.put(height_key, block_hash)
        except EngineError as e:
            logger.error(f"Failed to record the mapping between block {hash_hex} and height {block.header.height}")
            raise EngineError(
                f"failed to record height {block.header.height} -> block {hash_hex}: {e}",
                operation="put",
                key=height_key,
            ) from e

        self._record_current_block(block)

        try:
            self.store.put(LATEST_BLOCK_KEY, block_hash)
        except EngineError as e:
            logger.warning(
                f"Failed to record latest block {hash_hex}: {e}. "
                f"A restart will recover the previous latest block"
            )

    def _record_current_block(self, block: Optional[Block]) -> None:
        with self._lock:
            self._current_block = block
        if block is not None:
            logger.debug(f"Update current block to height {block.header.height}")

    # =========================================================================
    # Read Path
    # =========================================================================

    def get_block_by_hash(self, block_hash: bytes) -> Block:
        """
        Get a block by its header hash.

        Raises:
            BlockNotFoundError: no record, or the record is unreadable
        """
        block_hash = bytes(block_hash)
        hash_hex = bytes_to_hex(block_hash)
        if len(block_hash) != HASH_LENGTH:
            raise BlockNotFoundError(
                f"failed to get block with hash {hash_hex}: expected {HASH_LENGTH} bytes",
                block_hash=block_hash,
            )

        try:
            block_bytes = self.store.get(block_hash)
        except EngineError as e:
            raise BlockNotFoundError(
                f"failed to get block with hash {hash_hex}: {e}", block_hash=block_hash
            ) from e

        try:
            return decode_block(block_bytes)
        except DecodingError as e:
            raise BlockNotFoundError(
                f"failed to decode block with hash {hash_hex} from database: {e}", block_hash=block_hash
            ) from e

    def get_block_by_height(self, height: int) -> Block:
        """
        Get the block recorded at a height.

        Raises:
            BlockNotFoundError: no index entry, or the indexed block is unreadable
        """
        try:
            block_hash = self.store.get(encode_block_height(height))
        except (EncodingError, EngineError) as e:
            raise BlockNotFoundError(f"failed to get block with height {height}: {e}", height=height) from e

        try:
            return self.get_block_by_hash(block_hash)
        except BlockNotFoundError as e:
            raise BlockNotFoundError(
                f"failed to get block with height {height}: {e}", block_hash=e.block_hash, height=height
            ) from e

    def has_block(self, block_hash: bytes) -> bool:
        """Check whether a readable block is stored under block_hash."""
        try:
            self.get_block_by_hash(block_hash)
        except BlockNotFoundError:
            return False
        return True

    # =========================================================================
    # Chain Head
    # =========================================================================

    def get_current_block(self) -> Optional[Block]:
        """Latest written (or recovered) block, None if none is known."""
        return self._current_block

    def get_current_height(self) -> int:
        """Height of the current block, INIT_BLOCK_HEIGHT if none is known."""
        current = self._current_block
        if current is None:
            return INIT_BLOCK_HEIGHT
        return current.header.height

    def get_current_block_hash(self) -> Optional[bytes]:
        current = self._current_block
        if current is None:
            return None
        return compute_block_hash(current)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Release the backend. The store must not be used afterwards."""
        self.store.close()
        logger.info("Block store closed")

    def __enter__(self) -> "BlockStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

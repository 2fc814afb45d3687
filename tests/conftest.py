"""Shared fixtures for block store tests."""

import pytest

from blockstore import Block, BlockHeader, BlockStore, BlockStoreConfig, PLUGIN_MEMDB, PLUGIN_SQLITE
from blockstore.crypto import hex_to_bytes, keccak256
from blockstore.errors import EngineError
from blockstore.storage import MemoryStore


STATE_ROOT = hex_to_bytes("0x5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c5a0b54d5dc17e0aadc383d2d")
BLOCK_HASH = hex_to_bytes("0xb3f9a62087cbe321e798966883cbc445d9b924a9bbf2e010957a537ea2da7f02")


def make_block(height: int, prev_block_hash: bytes = bytes(32), with_hash: bool = True) -> Block:
    """Build a block at height whose state root depends on the height."""
    header = BlockHeader(
        chain_id="testnet",
        prev_block_hash=prev_block_hash,
        state_root=keccak256(height.to_bytes(8, "big")),
        height=height,
        timestamp=1_700_000_000 + height,
    )
    block = Block(header=header, transactions=(b"tx-%d" % height,))
    return block.with_header_hash() if with_hash else block


def make_chain(length: int, start: int = 1) -> list:
    blocks = []
    prev = bytes(32)
    for height in range(start, start + length):
        block = make_block(height, prev_block_hash=prev)
        blocks.append(block)
        prev = block.header_hash
    return blocks


class FailingStore(MemoryStore):
    """In-memory engine that fails puts to selected keys."""

    def __init__(self):
        super().__init__()
        self.fail_put_keys = set()
        self.fail_all_puts = False
        self.fail_all_gets = False

    def put(self, key: bytes, value: bytes) -> None:
        if self.fail_all_puts or bytes(key) in self.fail_put_keys:
            raise EngineError(f"injected put failure for 0x{bytes(key).hex()}", operation="put", key=bytes(key))
        super().put(key, value)

    def get(self, key: bytes) -> bytes:
        if self.fail_all_gets:
            raise EngineError(f"injected get failure for 0x{bytes(key).hex()}", operation="get", key=bytes(key))
        return super().get(key)


@pytest.fixture
def block_factory():
    """Factory building a block at a given height."""
    return make_block


@pytest.fixture
def chain_factory():
    """Factory building a linked chain of blocks starting at height 1."""
    return make_chain


@pytest.fixture
def mock_block():
    """Block at height 1 carrying a fixed header hash."""
    header = BlockHeader(height=1, state_root=STATE_ROOT)
    return Block(header=header, header_hash=BLOCK_HASH)


@pytest.fixture
def memory_config():
    return BlockStoreConfig(plugin_name=PLUGIN_MEMDB)


@pytest.fixture
def sqlite_config(tmp_path):
    return BlockStoreConfig(plugin_name=PLUGIN_SQLITE, data_path=tmp_path / "blockstore")


@pytest.fixture
def block_store(memory_config):
    store = BlockStore(memory_config)
    yield store
    store.close()


@pytest.fixture
def failing_store():
    return FailingStore()

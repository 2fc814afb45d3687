import pytest

from blockstore import BlockStore, BlockStoreConfig, PLUGIN_SQLITE
from blockstore.codec import LATEST_BLOCK_KEY
from blockstore.storage import SQLiteStore


@pytest.fixture
def node_config(tmp_path):
    """Durable config rooted in a temporary node directory."""
    data_dir = tmp_path / "node_data"
    data_dir.mkdir()
    return BlockStoreConfig(plugin_name=PLUGIN_SQLITE, data_path=data_dir)


def test_head_survives_restart(node_config, chain_factory):
    """Test that the chain head and indexes are preserved across restarts."""
    chain = chain_factory(5)

    # 1. Start node A and write the chain
    store_a = BlockStore(node_config)
    assert store_a.get_current_block() is None
    for block in chain:
        store_a.write_block(block)
    store_a.close()

    # 2. Start node B over the same database
    store_b = BlockStore(node_config)
    assert store_b.get_current_block() == chain[-1]
    assert store_b.get_current_height() == 5
    for block in chain:
        assert store_b.get_block_by_height(block.header.height) == block
        assert store_b.get_block_by_hash(block.header_hash) == block

    # 3. Continue the chain and restart again
    (next_block,) = chain_factory(1, start=6)
    store_b.write_block(next_block)
    store_b.close()

    with BlockStore(node_config) as store_c:
        assert store_c.get_current_block() == next_block
        assert store_c.get_current_height() == 6


def test_memory_backend_is_not_durable(chain_factory):
    (block,) = chain_factory(1)
    store = BlockStore()
    store.write_block(block)
    assert BlockStore().get_current_block() is None


def test_corrupt_head_pointer_on_disk(node_config, chain_factory):
    """A dangling head pointer does not prevent startup."""
    raw = SQLiteStore(node_config.db_path)
    raw.put(LATEST_BLOCK_KEY, b"\xab" * 32)
    raw.close()

    store = BlockStore(node_config)
    assert store.get_current_block() is None
    assert store.get_current_height() == 0

    # The store keeps working and repairs the pointer on the next write
    (block,) = chain_factory(1)
    store.write_block(block)
    store.close()

    with BlockStore(node_config) as reopened:
        assert reopened.get_current_block() == block


def test_head_pointer_to_corrupt_record(node_config, chain_factory):
    """A head pointer resolving to undecodable bytes is treated as unknown."""
    (block,) = chain_factory(1)
    with BlockStore(node_config) as store:
        store.write_block(block)

    raw = SQLiteStore(node_config.db_path)
    raw.put(block.header_hash, b"\x00garbage")
    raw.close()

    with BlockStore(node_config) as store:
        assert store.get_current_block() is None
        assert store.get_current_height() == 0

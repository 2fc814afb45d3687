"""
Key-value backends for the block store.

- SQLiteStore: durable, file-backed (plugin "sqlite")
- MemoryStore: volatile, in-process (plugin "memorydb")
"""

from blockstore.storage.base import DBStore
from blockstore.storage.factory import SUPPORTED_PLUGINS, create_db_store
from blockstore.storage.memory_store import MemoryStore
from blockstore.storage.sqlite_adapter import SQLiteStore

__all__ = ["DBStore", "MemoryStore", "SQLiteStore", "SUPPORTED_PLUGINS", "create_db_store"]

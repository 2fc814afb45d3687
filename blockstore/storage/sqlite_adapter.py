import sqlite3
import threading
from pathlib import Path
from typing import List, Optional

from blockstore.errors import EngineError, KeyNotFoundError
from blockstore.storage.base import DBStore
from blockstore.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteStore(DBStore):
    """
    SQLite backend for durable storage.

    Keeps a single key-value table. Every put/delete commits on its own, so
    each write is durable as soon as the call returns.
    """

    def __init__(self, db_path: Path, timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._conn_local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._conn_lock = threading.Lock()
        self._closed = False

        # Ensure directory exists
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            self._close_connections()
            raise EngineError(f"failed to open sqlite store at {self.db_path}: {e}", operation="open") from e

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread. Every connection is tracked for close()."""
        if self._closed:
            raise EngineError(f"sqlite store at {self.db_path} is closed", operation="connect")
        conn: Optional[sqlite3.Connection] = getattr(self._conn_local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(
                self.db_path,
                timeout=self.timeout,
                check_same_thread=False,
            )
            with self._conn_lock:
                if self._closed:
                    conn.close()
                    raise EngineError(f"sqlite store at {self.db_path} is closed", operation="connect")
                self._connections.append(conn)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=FULL;")
            self._conn_local.conn = conn
        return conn

    def _init_schema(self):
        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key BLOB PRIMARY KEY,
                    value BLOB NOT NULL
                )
            """)

    # =========================================================================
    # Key-Value Operations
    # =========================================================================

    def put(self, key: bytes, value: bytes) -> None:
        try:
            conn = self._get_conn()
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                    (bytes(key), bytes(value)),
                )
        except sqlite3.Error as e:
            raise EngineError(f"put 0x{bytes(key).hex()} failed: {e}", operation="put", key=bytes(key)) from e

    def get(self, key: bytes) -> bytes:
        try:
            conn = self._get_conn()
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (bytes(key),)).fetchone()
        except sqlite3.Error as e:
            raise EngineError(f"get 0x{bytes(key).hex()} failed: {e}", operation="get", key=bytes(key)) from e
        if row is None:
            raise KeyNotFoundError(bytes(key))
        return bytes(row[0])

    def delete(self, key: bytes) -> None:
        try:
            conn = self._get_conn()
            with conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (bytes(key),))
        except sqlite3.Error as e:
            raise EngineError(f"delete 0x{bytes(key).hex()} failed: {e}", operation="delete", key=bytes(key)) from e

    def _close_connections(self) -> int:
        with self._conn_lock:
            connections, self._connections = self._connections, []
        for conn in connections:
            conn.close()
        return len(connections)

    def close(self) -> None:
        """Close the connections of every thread and refuse further use."""
        self._closed = True
        closed = self._close_connections()
        logger.debug(f"Closed sqlite store at {self.db_path} ({closed} connections)")

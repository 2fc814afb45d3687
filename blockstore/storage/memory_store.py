import threading
from typing import Dict

from blockstore.errors import KeyNotFoundError
from blockstore.storage.base import DBStore


class MemoryStore(DBStore):
    """
    Volatile in-process backend.

    Contents live only as long as the instance; two stores never share data.
    """

    def __init__(self):
        self._data: Dict[bytes, bytes] = {}
        self._lock = threading.Lock()

    def put(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self._data[bytes(key)] = bytes(value)

    def get(self, key: bytes) -> bytes:
        with self._lock:
            value = self._data.get(bytes(key))
        if value is None:
            raise KeyNotFoundError(bytes(key))
        return value

    def delete(self, key: bytes) -> None:
        with self._lock:
            self._data.pop(bytes(key), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

"""
Key-value engine interface.

The block store only needs single-key put/get/delete. Each operation must be
atomic on its own; no cross-key transaction is expected from a backend.
"""

from abc import ABC, abstractmethod

from blockstore.errors import KeyNotFoundError


class DBStore(ABC):
    """Low level database holding raw key/value byte strings."""

    @abstractmethod
    def put(self, key: bytes, value: bytes) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def get(self, key: bytes) -> bytes:
        """
        Return the value stored under key.

        Raises:
            KeyNotFoundError: if key is absent
            EngineError: if the engine fails
        """

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Remove key. Deleting an absent key is not an error."""

    def has(self, key: bytes) -> bool:
        try:
            self.get(key)
        except KeyNotFoundError:
            return False
        return True

    def close(self) -> None:
        """Release engine resources."""

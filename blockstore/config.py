"""
Block store configuration.

Selects the key-value backend and, for the durable backend, where its data
lives on disk. Values can be supplied directly or read from the environment
(optionally seeded from a .env file).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from blockstore.errors import ConfigError


# Backend plugins
PLUGIN_SQLITE = "sqlite"  # durable, file-backed
PLUGIN_MEMDB = "memorydb"  # volatile, process-local

# Environment variables read by load_config()
ENV_PLUGIN = "BLOCKSTORE_PLUGIN"
ENV_DATA_PATH = "BLOCKSTORE_DATA_PATH"
ENV_DB_NAME = "BLOCKSTORE_DB_NAME"
ENV_SQLITE_TIMEOUT = "BLOCKSTORE_SQLITE_TIMEOUT"


@dataclass
class BlockStoreConfig:
    """Backend selection parameters"""

    plugin_name: str = PLUGIN_MEMDB
    data_path: Optional[Path] = None  # directory holding the database file
    db_name: str = "blockstore.db"
    sqlite_timeout: float = 30.0  # seconds to wait on a locked database

    def __post_init__(self):
        if self.data_path is not None:
            self.data_path = Path(self.data_path).expanduser()

    @property
    def db_path(self) -> Optional[Path]:
        """Full path of the database file, if a data path is configured."""
        if self.data_path is None:
            return None
        return self.data_path / self.db_name


def load_config(env_file: Optional[Union[str, Path]] = None) -> BlockStoreConfig:
    """
    Load configuration from the environment.

    Args:
        env_file: Optional .env file to load first. Variables already set in
            the process environment take precedence over the file.

    Returns:
        BlockStoreConfig instance

    Raises:
        ConfigError: a variable holds a value of the wrong type
    """
    load_dotenv(dotenv_path=env_file)

    defaults = BlockStoreConfig()
    data_path = os.getenv(ENV_DATA_PATH)

    raw_timeout = os.getenv(ENV_SQLITE_TIMEOUT)
    try:
        timeout = float(raw_timeout) if raw_timeout is not None else defaults.sqlite_timeout
    except ValueError as e:
        raise ConfigError(f"{ENV_SQLITE_TIMEOUT} must be a number of seconds, got {raw_timeout!r}") from e

    return BlockStoreConfig(
        plugin_name=os.getenv(ENV_PLUGIN, defaults.plugin_name).strip().lower(),
        data_path=Path(data_path) if data_path else None,
        db_name=os.getenv(ENV_DB_NAME, defaults.db_name),
        sqlite_timeout=timeout,
    )

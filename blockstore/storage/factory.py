from blockstore.config import BlockStoreConfig, PLUGIN_MEMDB, PLUGIN_SQLITE
from blockstore.errors import ConfigError
from blockstore.storage.base import DBStore
from blockstore.storage.memory_store import MemoryStore
from blockstore.storage.sqlite_adapter import SQLiteStore
from blockstore.utils.logger import get_logger

logger = get_logger("storage.factory")

SUPPORTED_PLUGINS = (PLUGIN_SQLITE, PLUGIN_MEMDB)


def create_db_store(config: BlockStoreConfig) -> DBStore:
    """
    Open the backend named by config.plugin_name.

    Raises:
        ConfigError: unknown plugin, or durable plugin without a data path
        EngineError: the backend could not be opened
    """
    plugin = config.plugin_name
    if plugin == PLUGIN_SQLITE:
        if config.db_path is None:
            logger.error("The sqlite plugin requires a data path")
            raise ConfigError(f"plugin {PLUGIN_SQLITE!r} requires data_path to be set")
        logger.debug(f"Create file-based block store, with file path: {config.db_path}")
        return SQLiteStore(config.db_path, timeout=config.sqlite_timeout)
    if plugin == PLUGIN_MEMDB:
        logger.debug("Create memory-based block store")
        return MemoryStore()

    logger.error(f"Unsupported block store plugin: {plugin!r}")
    raise ConfigError(
        f"unsupported plugin type {plugin!r}, expected one of {', '.join(SUPPORTED_PLUGINS)}"
    )

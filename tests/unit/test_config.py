"""
Unit tests for configuration loading.
"""

import os
from pathlib import Path

import pytest

from blockstore.config import (
    ENV_DATA_PATH,
    ENV_DB_NAME,
    ENV_PLUGIN,
    ENV_SQLITE_TIMEOUT,
    BlockStoreConfig,
    PLUGIN_MEMDB,
    PLUGIN_SQLITE,
    load_config,
)
from blockstore.errors import ConfigError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate from any BLOCKSTORE_* variables and stray .env files."""
    for name in (ENV_PLUGIN, ENV_DATA_PATH, ENV_DB_NAME, ENV_SQLITE_TIMEOUT):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestBlockStoreConfig:
    def test_defaults(self):
        config = BlockStoreConfig()
        assert config.plugin_name == PLUGIN_MEMDB
        assert config.data_path is None
        assert config.db_path is None

    def test_data_path_coerced(self):
        config = BlockStoreConfig(plugin_name=PLUGIN_SQLITE, data_path="/var/lib/node")
        assert config.data_path == Path("/var/lib/node")
        assert config.db_path == Path("/var/lib/node/blockstore.db")

    def test_home_expanded_for_path_objects(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = BlockStoreConfig(plugin_name=PLUGIN_SQLITE, data_path=Path("~/chain"))
        assert config.data_path == tmp_path / "chain"
        assert "~" not in str(config.db_path)


class TestLoadConfig:
    def test_defaults_without_environment(self, clean_env):
        config = load_config(env_file=clean_env / "absent.env")
        assert config.plugin_name == PLUGIN_MEMDB
        assert config.data_path is None

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv(ENV_PLUGIN, " SQLite ")
        monkeypatch.setenv(ENV_DATA_PATH, str(clean_env / "chain"))
        monkeypatch.setenv(ENV_DB_NAME, "main.db")
        monkeypatch.setenv(ENV_SQLITE_TIMEOUT, "5")

        config = load_config(env_file=clean_env / "absent.env")
        assert config.plugin_name == PLUGIN_SQLITE
        assert config.db_path == clean_env / "chain" / "main.db"
        assert config.sqlite_timeout == 5.0

    def test_non_numeric_timeout_is_config_error(self, clean_env, monkeypatch):
        monkeypatch.setenv(ENV_SQLITE_TIMEOUT, "soon")
        with pytest.raises(ConfigError, match=ENV_SQLITE_TIMEOUT):
            load_config(env_file=clean_env / "absent.env")

    def test_reads_env_file(self, clean_env):
        env_file = clean_env / "node.env"
        env_file.write_text(f"{ENV_PLUGIN}=sqlite\n{ENV_DATA_PATH}={clean_env / 'data'}\n")

        try:
            config = load_config(env_file=env_file)
        finally:
            os.environ.pop(ENV_PLUGIN, None)
            os.environ.pop(ENV_DATA_PATH, None)

        assert config.plugin_name == PLUGIN_SQLITE
        assert config.data_path == clean_env / "data"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

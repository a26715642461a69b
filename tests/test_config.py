"""Tests for configuration loading."""

from pathlib import Path

import pytest

from tradesetup.config import DEFAULT_DB_PATH, Settings, load_config
from tradesetup.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path: Path):
    settings = load_config(tmp_path / "missing.toml")
    assert settings == Settings()
    assert settings.engine.macd_signal == "rolling"
    assert settings.market.limit == 100
    assert settings.storage.db_path == DEFAULT_DB_PATH


def test_partial_file_overrides(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[engine]\nmacd_signal = "single"\n\n'
        '[market]\ninterval = "4h"\n\n'
        f'[storage]\ndb_path = "{(tmp_path / "ts.db").as_posix()}"\n'
    )
    settings = load_config(path)
    assert settings.engine.macd_signal == "single"
    assert settings.market.interval == "4h"
    assert settings.market.limit == 100
    assert settings.storage.db_path == tmp_path / "ts.db"


def test_home_is_expanded(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text('[storage]\ndb_path = "~/ts.db"\n')
    assert load_config(path).storage.db_path == Path.home() / "ts.db"


def test_invalid_toml(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("[engine\nmacd_signal = ")
    with pytest.raises(ConfigError):
        load_config(path)


def test_invalid_value(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text('[engine]\nmacd_signal = "weekly"\n')
    with pytest.raises(ConfigError):
        load_config(path)

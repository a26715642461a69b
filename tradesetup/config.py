"""Configuration loading for TradeSetup.

Settings live in ``~/.config/tradesetup/config.toml``. Every key is
optional; a missing file yields the defaults.

Example config.toml:

    [engine]
    macd_signal = "rolling"

    [market]
    base_url = "https://api.binance.com/api/v3"
    interval = "1h"
    limit = 100
    timeout = 10.0

    [storage]
    db_path = "~/.config/tradesetup/tradesetup.db"
"""

from pathlib import Path
from typing import Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from tradesetup.errors import ConfigError

CONFIG_DIR = Path.home() / ".config" / "tradesetup"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "tradesetup.db"


class EngineSettings(BaseModel):
    macd_signal: Literal["rolling", "single"] = Field(
        default="rolling", description="MACD signal line mode"
    )

    model_config = {"frozen": True}


class MarketSettings(BaseModel):
    base_url: str = Field(default="https://api.binance.com/api/v3", description="REST base URL")
    interval: str = Field(default="1h", description="Kline interval")
    limit: int = Field(default=100, gt=0, le=1000, description="Candles per request")
    timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")

    model_config = {"frozen": True}


class StorageSettings(BaseModel):
    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database path")

    model_config = {"frozen": True}


class Settings(BaseModel):
    """Top-level application settings."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    market: MarketSettings = Field(default_factory=MarketSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    model_config = {"frozen": True}


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        config_path: Path to the config file (default ~/.config/tradesetup/config.toml).

    Returns:
        Validated settings; defaults when the file does not exist.

    Raises:
        ConfigError: If the file is not valid TOML or fails validation.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    if not path.exists():
        return Settings()

    try:
        data = toml.load(path)
    except toml.TomlDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    db_path = settings.storage.db_path.expanduser()
    return settings.model_copy(
        update={"storage": StorageSettings(db_path=db_path)}
    )

import os
from typing import Optional

import toml
from models import Config, ProviderConfig, ServerConfig

DEFAULT_CONFIG_PATH = "config.toml"


class ConfigError(Exception):
    pass


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from TOML file, falling back to defaults if absent."""
    config_path = config_path or os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    if not os.path.exists(config_path):
        return Config()

    try:
        with open(config_path, "r") as f:
            config_data = toml.load(f)

        server_config = ServerConfig(**config_data.get("server", {}))
        provider_config = ProviderConfig(**config_data.get("providers", {}))

        return Config(server=server_config, providers=provider_config)

    except Exception as e:
        raise ConfigError(f"Failed to load config: {e}") from e

"""Configuration loader for YAML files and environment variables."""

import os
import yaml
from pathlib import Path
from typing import Mapping, Optional

from .config_schema import AppConfig

DEFAULT_CONFIG_PATH = "config.yaml"
ENV_TOKEN = "NOTION_TOKEN"
ENV_DATABASE_ID = "NOTION_DATABASE_ID"


class ConfigLoader:
    """Load and validate configuration from YAML files and the environment."""

    @staticmethod
    def load_config(
        path: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        require_credentials: bool = True,
    ) -> AppConfig:
        """
        Load configuration from YAML file, then overlay environment variables.

        The YAML file is optional when no path is given explicitly; the
        default ``config.yaml`` is read only if it exists.

        Args:
            path: Path to configuration file
            env: Environment mapping (defaults to os.environ)
            require_credentials: Whether a Notion token and database id are required

        Returns:
            Validated AppConfig instance

        Raises:
            FileNotFoundError: If an explicitly given config file doesn't exist
            ConfigError: If credentials are required but missing
        """
        env = os.environ if env is None else env
        config_dict = {}

        config_path = Path(path or DEFAULT_CONFIG_PATH)
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}
        elif path is not None:
            raise FileNotFoundError(f"Configuration file not found: {path}")

        notion = dict(config_dict.get("notion") or {})
        if env.get(ENV_TOKEN):
            notion["api_key"] = env[ENV_TOKEN]
        if env.get(ENV_DATABASE_ID):
            notion["database_id"] = env[ENV_DATABASE_ID]
        config_dict["notion"] = notion

        config = AppConfig(**config_dict)
        if require_credentials:
            config.validate()

        return config


def load_config(
    path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    require_credentials: bool = True,
) -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Path to configuration file
        env: Environment mapping (defaults to os.environ)
        require_credentials: Whether a Notion token and database id are required

    Returns:
        Validated AppConfig instance
    """
    return ConfigLoader.load_config(path, env=env, require_credentials=require_credentials)

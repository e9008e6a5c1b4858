"""
Configuration management for the PackVault sidecar.

Settings come from PACKVAULT_* environment variables, optionally overlaid by a
YAML config file.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from packvault.layout import PackLayout

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"


class Settings(BaseSettings):
    """Application settings."""

    # API Settings
    api_title: str = "PackVault Sidecar API"
    api_version: str = "1.0.0"
    api_description: str = "Add-on pack upload, restoration and command relay for a game server"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8080

    # Data volume layout; empty path settings derive from data_root
    data_root: str = "/data"
    behavior_packs_dir: str = ""
    resource_packs_dir: str = ""
    archive_root: str = ""
    server_properties: str = ""
    worlds_dir: str = ""

    # Command relay
    fifo_path: str = "/shared/command_fifo"

    # Uploads
    max_upload_size: int = 10 << 20

    # Rate limits (slowapi syntax)
    upload_rate_limit: str = "10/minute"
    command_rate_limit: str = "60/minute"

    model_config = {"env_prefix": "PACKVAULT_"}

    def layout(self) -> PackLayout:
        """Build the pack layout, applying explicit path overrides."""
        base = PackLayout.from_root(Path(self.data_root))
        return PackLayout(
            behavior_packs_dir=Path(self.behavior_packs_dir) if self.behavior_packs_dir else base.behavior_packs_dir,
            resource_packs_dir=Path(self.resource_packs_dir) if self.resource_packs_dir else base.resource_packs_dir,
            archive_root=Path(self.archive_root) if self.archive_root else base.archive_root,
            server_properties=Path(self.server_properties) if self.server_properties else base.server_properties,
            worlds_dir=Path(self.worlds_dir) if self.worlds_dir else base.worlds_dir,
        )


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration overrides from a YAML file.

    Args:
        config_path: Path to the YAML file (default: PACKVAULT_CONFIG or config.yaml)

    Returns:
        Configuration dictionary (empty if the file doesn't exist)
    """
    if config_path is None:
        config_path = Path(os.environ.get("PACKVAULT_CONFIG", str(DEFAULT_CONFIG_PATH)))

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return config


def get_settings() -> Settings:
    """
    Get application settings.

    Environment variables take precedence over values from the YAML file.

    Returns:
        Settings instance
    """
    config = load_config()
    overrides = {
        key: value
        for key, value in config.items()
        if key in Settings.model_fields and f"PACKVAULT_{key.upper()}" not in os.environ
    }
    return Settings(**overrides)


# Global settings instance
settings = get_settings()

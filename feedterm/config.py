"""YAML configuration for feedterm."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".feedterm" / "config.yaml"


class ConfigError(Exception):
    """Raised when the config file cannot be used."""


@dataclass
class DashboardConfig:
    """Settings for the dashboard and its collaborators."""
    api_url: str = "http://127.0.0.1:8000"
    request_timeout: float = 10.0
    token_file: str = "~/.feedterm/token"
    draft_file: str = "post.txt"
    log_file: str = "~/.feedterm/feedterm.log"
    log_level: str = "INFO"
    clamp_content_scroll: bool = False  # False allows scrolling past the end
    mask_secrets: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardConfig":
        unknown = sorted(k for k in data if k not in cls.__dataclass_fields__)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def load_config(config_path: Optional[str] = None) -> DashboardConfig:
    """Load configuration from a YAML file, then apply environment overrides."""
    path = Path(config_path).expanduser() if config_path else DEFAULT_CONFIG_PATH

    data: dict = {}
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
    else:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Failed to parse config {path}: expected mapping, got {type(data).__name__}")

    config = DashboardConfig.from_dict(data)
    env_url = os.environ.get("FEEDTERM_API_URL")
    if env_url:
        config.api_url = env_url
    return config

"""
Configuration management with schema validation.
Settings are resolved to plain values before any task logic runs.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ..api.auth import AuthStrategy
from .exceptions import ConfigError

DEFAULT_SETTINGS_FILE = Path("config") / "settings.yaml"
SETTINGS_ENV_VAR = "METATASKS_SETTINGS"


class GraphSettings(BaseModel):
    api_base_url: str = "https://graph.facebook.com"
    api_version: str = "v24.0"
    auth_strategy: AuthStrategy = AuthStrategy.BEARER_HEADER
    connection_timeout: float = 30
    read_timeout: float = 60


class PollingSettings(BaseModel):
    """Container status polling (video and carousel video children)"""
    poll_interval: float = Field(10, ge=0)
    initial_delay: float = Field(2, ge=0)
    max_wait: float = Field(300, gt=0)
    status_read_timeout: float = Field(30, gt=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Settings(BaseModel):
    graph: GraphSettings = Field(default_factory=GraphSettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} and ${VAR:default} with environment values"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                return os.getenv(var_name.strip(), default.strip())
            env_value = os.getenv(var_expr)
            if env_value is None:
                raise ConfigError(f"Environment variable {var_expr} not found")
            return env_value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load and validate settings

    Resolution order: explicit path, then $METATASKS_SETTINGS, then
    config/settings.yaml. An explicitly requested file must exist; the
    default file is optional and missing means "all defaults".
    """
    load_dotenv()

    explicit = path or os.getenv(SETTINGS_ENV_VAR)
    settings_path = Path(explicit) if explicit else DEFAULT_SETTINGS_FILE

    if not settings_path.exists():
        if explicit:
            raise ConfigError(f"Settings file not found: {settings_path}")
        return Settings()

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_path}: {e}")

    if not isinstance(raw_data, dict):
        raise ConfigError(f"Settings file must contain a mapping: {settings_path}")

    processed: Dict[str, Any] = _substitute_env_vars(raw_data)
    try:
        return Settings(**processed)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {settings_path}: {e}")

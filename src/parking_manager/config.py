"""Configuration models and loading utilities."""

import os
from decimal import Decimal
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from .state.models import DEFAULT_HOURLY_RATE, DEFAULT_SLOT_COUNT, MAX_HOURLY_RATE, MAX_SLOT_COUNT

DEFAULT_STATE_PATH = "data/parking_state.json"


class LotConfig(BaseModel):
    """Settings used when no snapshot exists yet."""

    slot_count: int = Field(default=DEFAULT_SLOT_COUNT, ge=1, le=MAX_SLOT_COUNT)
    hourly_rate: Decimal = Field(default=DEFAULT_HOURLY_RATE, ge=0, le=MAX_HOURLY_RATE)
    currency_symbol: str = "₹"


class StorageConfig(BaseModel):
    """Snapshot storage configuration."""

    path: str = DEFAULT_STATE_PATH

    @field_validator("path", mode="before")
    @classmethod
    def resolve_env_var(cls, v: str) -> str:
        """Resolve environment variable references like ${VAR_NAME}."""
        if isinstance(v, str) and v.startswith("${") and v.endswith("}"):
            env_var = v[2:-1]
            return os.environ.get(env_var, DEFAULT_STATE_PATH)
        return v


class APIConfig(BaseModel):
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


class ReportConfig(BaseModel):
    """Text report configuration."""

    lines_per_page: int = Field(default=50, ge=10)


class AppConfig(BaseModel):
    """Main application configuration."""

    lot: LotConfig = LotConfig()
    storage: StorageConfig = StorageConfig()
    api: APIConfig = APIConfig()
    report: ReportConfig = ReportConfig()


def load_config(path: str | Path) -> AppConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return AppConfig(**data)


def get_config_path() -> Path:
    """Get the default configuration file path."""
    env_path = os.environ.get("PARKING_CONFIG")
    if env_path:
        return Path(env_path)

    # Check for config in current directory first
    local_config = Path("config/config.yaml")
    if local_config.exists():
        return local_config

    # Check for config in parent directory (for Docker)
    parent_config = Path("/app/config/config.yaml")
    if parent_config.exists():
        return parent_config

    return local_config  # Return default even if doesn't exist

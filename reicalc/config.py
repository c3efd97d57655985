"""Configuration management for REICalc."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from reicalc.models import (
    ComparisonInputs,
    FinancingInputs,
    FlipInputs,
    LoanInputs,
    MAOInputs,
    PropertyInputs,
)

CONFIG_DIR = Path(__file__).parent.parent / "config"


class StorageConfig(BaseModel):
    url: str = "sqlite:///reicalc.db"


class DefaultsConfig(BaseModel):
    """Starting inputs for each calculator, used on first run and on reset."""

    property: PropertyInputs = PropertyInputs()
    financing: FinancingInputs = FinancingInputs()
    loan: LoanInputs = LoanInputs()
    flip: FlipInputs = FlipInputs()
    mao: MAOInputs = MAOInputs()
    comparison: ComparisonInputs = ComparisonInputs()


class DisplayConfig(BaseModel):
    currency_symbol: str = "$"
    currency_decimals: int = 2
    percent_decimals: int = 2


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REICALC_", env_nested_delimiter="__")

    storage: StorageConfig = StorageConfig()
    defaults: DefaultsConfig = DefaultsConfig()
    display: DisplayConfig = DisplayConfig()


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML files.

    Loads default.toml first, then merges local.toml or a custom path on top.
    ``REICALC_*`` environment variables fill in anything the files leave unset.
    """
    default_path = CONFIG_DIR / "default.toml"
    data: dict[str, Any] = {}

    if default_path.exists():
        with open(default_path, "rb") as f:
            data = tomllib.load(f)

    local_path = config_path or CONFIG_DIR / "local.toml"
    if local_path.exists():
        with open(local_path, "rb") as f:
            overrides = tomllib.load(f)
        data = _deep_merge(data, overrides)

    return AppConfig(**data)

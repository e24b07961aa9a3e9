from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from planner.core.constants import DEFAULT_INFLATION_RATE


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str

    inflation_rate: Decimal
    rounding_currency_decimals: int


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def load_settings(config_path: str = "config.yaml") -> Settings:
    """
    Loads config.yaml + overrides from .env/environment variables.
    """
    load_dotenv()  # loads .env into env vars

    cfg: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # Empty env vars count as "not set" so they never mask config.yaml.
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None:
            return _deep_get(cfg, cfg_path, default)
        v = v.strip()
        return _deep_get(cfg, cfg_path, default) if v == "" else v

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = _env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")

    # str() first: YAML hands back floats, and money rates must not pass through binary
    inflation_rate = Decimal(str(_env_or_cfg("INFLATION_RATE", "engine.inflation_rate", DEFAULT_INFLATION_RATE)))
    rounding_currency_decimals = int(_env_or_cfg("ROUNDING_CURRENCY_DECIMALS", "engine.rounding_currency_decimals", 2))

    if isinstance(log_level, str):
        log_level = log_level.strip().upper()

    return Settings(
        env=env,
        log_level=log_level,
        inflation_rate=inflation_rate,
        rounding_currency_decimals=rounding_currency_decimals,
    )


# Optional convenience singleton
SETTINGS = load_settings()

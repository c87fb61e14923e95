"""
Configuration loader for the marketplace API (database, payments, reports).
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "app_config.yml"


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///./database.sqlite3"
    pool_size: int = Field(default=5, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)
    sqlite_timeout: float = Field(default=30.0, gt=0)
    echo: bool = False


class PaymentsConfig(BaseModel):
    # Share of outstanding unpaid job value a client may deposit at once
    deposit_max_ratio: Decimal = Field(default=Decimal("0.25"), gt=0, le=1)
    conflict_retries: int = Field(default=1, ge=0, le=5)


class ReportsConfig(BaseModel):
    best_clients_limit: int = Field(default=2, ge=1, le=1000)


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    payments: PaymentsConfig = Field(default_factory=PaymentsConfig)
    reports: ReportsConfig = Field(default_factory=ReportsConfig)


def load_app_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load and validate the application configuration from YAML.

    DATABASE_URL, when set, overrides `database.url`.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = Path(os.getenv("MARKETPLACE_CONFIG", DEFAULT_CONFIG_PATH))

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = AppConfig(**data)
    except ValidationError as e:
        logger.error("App config validation failed: %s", e)
        raise

    db_url = os.getenv("DATABASE_URL")
    if db_url:
        cfg.database.url = db_url
    logger.info("Successfully loaded app config from %s", config_path)
    return cfg

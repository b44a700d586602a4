"""
Centralized configuration using pydantic-settings.
Loads from .env file and provides typed access to all constants.
"""

import logging
import sys
from pathlib import Path
from typing import Literal, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """Quarter-resolution engine constants."""

    regions: Tuple[str, ...] = Field(
        default=("latam", "europe", "apac"), description="Regions every segment is sold in"
    )
    seasonality: Tuple[float, ...] = Field(
        default=(1.0, 1.2, 0.8, 1.1, 1.3, 0.9, 1.15, 1.25),
        description="Demand multiplier per round, cycled (spring/fall peaks)",
    )
    default_potential_demand: int = Field(default=1000)

    # Attractiveness curves
    fallback_price: float = Field(default=900.0, description="Price used when neither brand nor default price is set")
    price_steepness: float = Field(default=3.0)
    value_pricing_bonus: float = Field(default=1.1)
    ad_saturation_spend: float = Field(default=500_000.0)
    ad_targeting_bonus: float = Field(default=1.3)
    ad_floor: float = Field(default=0.15, description="Word-of-mouth baseline")
    factor_cap: float = Field(default=1.2)
    salesforce_saturation: int = Field(default=10)
    default_compensation: float = Field(default=30_000.0, description="Annual salary per salesperson")
    distribution_saturation: int = Field(default=20)
    spillover_targeting: float = Field(default=0.3)
    untargeted_fit_penalty: float = Field(default=0.6)
    max_demand_creation: float = Field(default=1.5)
    pull_per_team_baseline: float = Field(default=0.3)

    # Financials
    tax_rate: float = Field(default=0.25)
    admin_revenue_rate: float = Field(default=0.08)
    admin_overhead: float = Field(default=50_000.0)
    fallback_unit_cost: float = Field(default=400.0)

    scoring_model: Literal["additive", "multiplicative"] = Field(
        default="additive", description="Balanced scorecard aggregation"
    )

    model_config = {"env_prefix": "ENGINE_", "env_file": ".env", "extra": "ignore"}


class GameSettings(BaseSettings):
    """Game lifecycle parameters (outside the engine)."""

    initial_cash: float = Field(default=5_000_000.0)
    initial_investment: float = Field(default=5_000_000.0)
    max_active_brands: int = Field(default=5)
    max_brand_name_length: int = Field(default=30)
    max_rounds: int = Field(default=8)
    scorecard_window: int = Field(default=4, description="Trailing rounds in the cumulative scorecard")

    model_config = {"env_prefix": "GAME_", "env_file": ".env", "extra": "ignore"}


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="[%(levelname)s] %(message)s")
    file: Optional[Path] = Field(default=None, description="Optional log file (UTF-8)")

    model_config = {"env_prefix": "LOG_", "env_file": ".env", "extra": "ignore"}


class Settings(BaseSettings):
    """Root settings aggregator."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    game: GameSettings = Field(default_factory=GameSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def setup_logging(log_settings: Optional[LogSettings] = None) -> logging.Logger:
    """Configure the root logger with a console handler (and a file handler if set)."""
    log_settings = log_settings or get_settings().log

    logger = logging.getLogger()
    logger.setLevel(log_settings.level.upper())

    # Drop existing handlers (avoid duplicate lines)
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(log_settings.format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_settings.file is not None:
        file_handler = logging.FileHandler(log_settings.file, encoding="utf-8", mode="w")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

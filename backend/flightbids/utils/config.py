"""
Environment configuration loader with validation for the flight bidding system.
"""

import os
import logging
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv


# Dotted setting key -> BidSettings field
SETTING_KEYS: Dict[str, str] = {
    "bids.allow_multiple_bids": "allow_multiple_bids",
    "bids.disable_flight_on_bid": "disable_flight_on_bid",
    "pireps.remove_bid_on_accept": "remove_bid_on_accept",
    "pireps.restrict_aircraft_to_rank": "restrict_aircraft_to_rank",
    "pireps.only_aircraft_at_dpt_airport": "only_aircraft_at_dpt_airport",
}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


class BidSettings(BaseModel):
    """
    Policy switches consulted by the bid manager and flight service.

    Lookups go through get() with the dotted setting keys used across the
    application, e.g. ``settings.get("bids.allow_multiple_bids")``.
    """

    allow_multiple_bids: bool = Field(
        default=False, description="May a user hold bids on more than one flight"
    )
    disable_flight_on_bid: bool = Field(
        default=True, description="Block other users once a flight has a bid"
    )
    remove_bid_on_accept: bool = Field(
        default=False, description="Release the bid when its PIREP is accepted"
    )
    restrict_aircraft_to_rank: bool = Field(
        default=True, description="Only offer subfleets allowed by the user's rank"
    )
    only_aircraft_at_dpt_airport: bool = Field(
        default=False, description="Only offer aircraft parked at the departure airport"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a setting by its dotted key; unknown keys return default."""
        attr = SETTING_KEYS.get(key)
        if attr is None:
            return default
        return getattr(self, attr)


class AppConfig(BaseModel):
    """Configuration model for the flight bidding system with validation."""

    database_url: Optional[str] = Field(
        default=None, description="Database connection URL (None builds one from DB_* vars)"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Enable debug mode (SQL echo)")
    bids: BidSettings = Field(default_factory=BidSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "database_url": os.getenv("DATABASE_URL") or None,
        "log_level": os.getenv("FLIGHTBIDS_LOG_LEVEL", "INFO"),
        "debug": _env_flag("FLIGHTBIDS_DEBUG", "false"),
        "bids": {
            "allow_multiple_bids": _env_flag("BIDS_ALLOW_MULTIPLE_BIDS", "false"),
            "disable_flight_on_bid": _env_flag("BIDS_DISABLE_FLIGHT_ON_BID", "true"),
            "remove_bid_on_accept": _env_flag("PIREPS_REMOVE_BID_ON_ACCEPT", "false"),
            "restrict_aircraft_to_rank": _env_flag("PIREPS_RESTRICT_AIRCRAFT_TO_RANK", "true"),
            "only_aircraft_at_dpt_airport": _env_flag("PIREPS_ONLY_AIRCRAFT_AT_DPT_AIRPORT", "false"),
        },
    }

    try:
        return AppConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


# Global configuration instance, used by the CLI entry point only
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        AppConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def configure_logging(config: AppConfig) -> None:
    """Configure root logging from the loaded configuration."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not config.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

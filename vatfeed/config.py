"""Configuration settings for the vatfeed service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("vatfeed.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid value for %s: %r", env_var, value)
        return default


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    vatfeed_env: str = os.getenv("VATFEED_ENV", "local")
    log_level: str = os.getenv("VATFEED_LOG_LEVEL", "INFO")

    # Feed transport
    feed_url: str = os.getenv(
        "VATFEED_FEED_URL", "https://data.vatsim.net/vatsim-data.txt"
    )
    feed_timeout: float = _get_float("VATFEED_FEED_TIMEOUT", 10.0)

    # Poll cycle
    poll_enabled: bool = _get_bool("VATFEED_POLL_ENABLED", default=False)
    poll_interval: float = _get_float("VATFEED_POLL_INTERVAL", 60.0)
    update_history_size: int = int(os.getenv("VATFEED_UPDATE_HISTORY_SIZE", "500"))

    # Grounded heuristic
    grounded_speed_threshold: float = _get_float(
        "VATFEED_GROUNDED_SPEED_THRESHOLD", 30.0
    )  # kts
    grounded_height_threshold: float = _get_float(
        "VATFEED_GROUNDED_HEIGHT_THRESHOLD", 100.0
    )  # ft AGL

    # Trails
    trail_max_length: int = int(os.getenv("VATFEED_TRAIL_MAX_LENGTH", "50"))
    trail_when_grounded: bool = _get_bool("VATFEED_TRAIL_WHEN_GROUNDED", default=False)
    trail_precision_digits: int = int(os.getenv("VATFEED_TRAIL_PRECISION_DIGITS", "6"))

    # Airports
    airport_vicinity_km: float = _get_float("VATFEED_AIRPORT_VICINITY_KM", 5.0)


settings = Settings()

__all__ = ["settings", "Settings"]

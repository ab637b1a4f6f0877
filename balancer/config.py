"""Settings loaded from balancer/config.yaml, plus logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from balancer.distribution import EVEN_DISTRIBUTION, normalize_strategy
from balancer.fileio import read_yaml
from balancer.workspace import config_path


DEFAULT_REDISTRIBUTION_THRESHOLD = 0.1
DEFAULT_STATUS_BAND_PERCENT = 10.0


@dataclass
class Settings:
    timezone: str = "UTC"
    # Fraction of target_value that recorded progress may drift before redistributing
    redistribution_threshold: float = DEFAULT_REDISTRIBUTION_THRESHOLD
    # +/- deviation (percent of target) treated as on-track
    status_band_percent: float = DEFAULT_STATUS_BAND_PERCENT
    default_strategy: str = EVEN_DISTRIBUTION
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone", "UTC")),
            redistribution_threshold=float(
                d.get("redistribution_threshold", DEFAULT_REDISTRIBUTION_THRESHOLD)
            ),
            status_band_percent=float(d.get("status_band_percent", DEFAULT_STATUS_BAND_PERCENT)),
            default_strategy=normalize_strategy(d.get("default_strategy")),
            log_level=str(d.get("log_level", "INFO")).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "redistribution_threshold": self.redistribution_threshold,
            "status_band_percent": self.status_band_percent,
            "default_strategy": self.default_strategy,
            "log_level": self.log_level,
        }


def load_settings(root: Path | None = None) -> Settings:
    """Load config.yaml; BALANCER_LOG_LEVEL overrides the file's log level."""
    settings = Settings.from_dict(read_yaml(config_path(root)))
    env_level = os.environ.get("BALANCER_LOG_LEVEL")
    if env_level:
        settings.log_level = env_level.upper()
    return settings


def configure_logging(settings: Settings | None = None, handlers: list[logging.Handler] | None = None) -> None:
    """Configure root logging once for an entry point (API server, TUI)."""
    if settings is None:
        settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

"""
Centralized runtime configuration for Keyward.

Loaded from environment variables with sensible defaults. Command line flags
take precedence over anything read here.

Usage:
    from keyward.config import get_config
    cfg = get_config()
    print(cfg.mapping_file)    # Path(".keyward.yml") or $KEYWARD_CONFIG
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_MAPPING_FILE = ".keyward.yml"

# 10MB lines correlate to 10MB files max (bundles, minified assets)
DEFAULT_MAX_LINE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class Config:
    """Top-level Keyward configuration."""

    mapping_file: Path = field(default_factory=lambda: Path(DEFAULT_MAPPING_FILE))
    log_level: str = "WARNING"
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES

    @property
    def log_level_number(self) -> int:
        """Numeric logging level; unknown names fall back to WARNING."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    return Config(
        mapping_file=Path(os.environ.get("KEYWARD_CONFIG", DEFAULT_MAPPING_FILE)),
        log_level=os.environ.get("KEYWARD_LOG_LEVEL", "WARNING"),
        max_line_bytes=int(
            os.environ.get("KEYWARD_MAX_LINE_BYTES", str(DEFAULT_MAX_LINE_BYTES))
        ),
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None

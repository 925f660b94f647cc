"""Global configuration for the vgccorner project."""

import os
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if not value:
        return default
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Ignoring {name}={value!r}, using default {default}")
        return default


def _env_int(name: str, default: int) -> int:
    return _env_number(name, default, int)


def _env_float(name: str, default: float) -> float:
    return _env_number(name, default, float)


@dataclass
class AnalysisConfig:
    """Configuration for battle log analysis."""

    max_log_bytes: int = field(
        default_factory=lambda: _env_int("VGCCORNER_MAX_LOG_BYTES", 5 * 1024 * 1024)
    )
    # Single-hit damage (HP percentage points) reported as a key moment
    big_hit_threshold: float = field(
        default_factory=lambda: _env_float("VGCCORNER_BIG_HIT_THRESHOLD", 50.0)
    )


@dataclass
class DataConfig:
    """Configuration for replay collection and processing."""

    raw_data_dir: str = "data/raw"
    processed_data_dir: str = "data/processed"
    replay_delay: float = field(
        default_factory=lambda: _env_float("VGCCORNER_REPLAY_DELAY", 1.0)
    )


@dataclass
class Config:
    """Global configuration container."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    data: DataConfig = field(default_factory=DataConfig)


# Global config instance
config = Config()

"""
Runtime settings, read from the environment (and a .env file if present).
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from .domain.stage import DEFAULT_STAGES, StageConfig, load_stages

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    ranking_file: str = "ranking.txt"
    high_score_file: str = "highscore.txt"
    stages_file: Optional[str] = None
    log_level: str = "INFO"
    log_file: str = "snakegate.log"
    seed: Optional[int] = None

    def stages(self) -> Tuple[StageConfig, ...]:
        if not self.stages_file:
            return DEFAULT_STAGES
        logger.info("Loading stages from %s", self.stages_file)
        return load_stages(self.stages_file)


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or default


def load_settings() -> Settings:
    load_dotenv()

    seed = _get_env("SNAKEGATE_SEED")
    try:
        seed_value = int(seed) if seed is not None else None
    except ValueError:
        raise ValueError(f"SNAKEGATE_SEED must be an integer, got {seed!r}")

    return Settings(
        ranking_file=_get_env("SNAKEGATE_RANKING_FILE", "ranking.txt"),
        high_score_file=_get_env("SNAKEGATE_HIGHSCORE_FILE", "highscore.txt"),
        stages_file=_get_env("SNAKEGATE_STAGES_FILE"),
        log_level=_get_env("SNAKEGATE_LOG_LEVEL", "INFO").upper(),
        log_file=_get_env("SNAKEGATE_LOG_FILE", "snakegate.log"),
        seed=seed_value,
    )

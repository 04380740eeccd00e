"""
Engine configuration: ranking thresholds, fallback category, progress snaps.

Configure via constructor arguments or environment variables:
    SERVICEMATCH_RELEVANCE_THRESHOLD: minimum percentage for a category to be surfaced
    SERVICEMATCH_DETAILED_THRESHOLD: minimum percentage for a detailed recommendation
    SERVICEMATCH_FALLBACK_CATEGORY: primary category when no signal exists
    SERVICEMATCH_PROGRESS_CEILING: cap on the positional progress estimate
    SERVICEMATCH_FINAL_STAGE_PROGRESS: progress on a final-stage last question
    SERVICEMATCH_LAST_QUESTION_PROGRESS: progress on any other last question

A .env file in the working directory (or any parent of this package) is
read first; variables already present in the environment win.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RELEVANCE_THRESHOLD = 5.0
DEFAULT_DETAILED_THRESHOLD = 15.0
DEFAULT_PROGRESS_CEILING = 90.0
DEFAULT_FINAL_STAGE_PROGRESS = 92.0
DEFAULT_LAST_QUESTION_PROGRESS = 95.0

ENV_PREFIX = "SERVICEMATCH_"


def _load_dotenv() -> None:
    """Load .env file into os.environ (only vars not already set)."""
    for parent in [Path.cwd()] + list(Path(__file__).resolve().parents):
        env_path = parent / ".env"
        if env_path.exists():
            for line in env_path.read_text().splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" in line:
                    key, value = line.split("=", 1)
                    key, value = key.strip(), value.strip()
                    if key and key not in os.environ:
                        os.environ[key] = value
            logger.debug(f"Loaded environment from {env_path}")
            break


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be a number, got {raw!r}"
        ) from None


@dataclass
class EngineConfig:
    """
    Tunable constants of the scoring and progress stages.

    Fields left as None are resolved from the environment, then from the
    module defaults. fallback_category stays None when unset, meaning "first
    category of the bank's enumeration".
    """

    relevance_threshold: Optional[float] = None
    detailed_threshold: Optional[float] = None
    fallback_category: Optional[str] = None
    progress_ceiling: Optional[float] = None
    final_stage_progress: Optional[float] = None
    last_question_progress: Optional[float] = None

    def __post_init__(self):
        _load_dotenv()
        if self.relevance_threshold is None:
            self.relevance_threshold = _env_float(
                "RELEVANCE_THRESHOLD", DEFAULT_RELEVANCE_THRESHOLD
            )
        if self.detailed_threshold is None:
            self.detailed_threshold = _env_float(
                "DETAILED_THRESHOLD", DEFAULT_DETAILED_THRESHOLD
            )
        if self.fallback_category is None:
            self.fallback_category = (
                os.environ.get(ENV_PREFIX + "FALLBACK_CATEGORY", "").strip() or None
            )
        if self.progress_ceiling is None:
            self.progress_ceiling = _env_float(
                "PROGRESS_CEILING", DEFAULT_PROGRESS_CEILING
            )
        if self.final_stage_progress is None:
            self.final_stage_progress = _env_float(
                "FINAL_STAGE_PROGRESS", DEFAULT_FINAL_STAGE_PROGRESS
            )
        if self.last_question_progress is None:
            self.last_question_progress = _env_float(
                "LAST_QUESTION_PROGRESS", DEFAULT_LAST_QUESTION_PROGRESS
            )
        self._validate()

    def _validate(self) -> None:
        for name in (
            "relevance_threshold",
            "detailed_threshold",
            "progress_ceiling",
            "final_stage_progress",
            "last_question_progress",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ConfigurationError(f"{name} must be within [0, 100], got {value}")
        if self.detailed_threshold < self.relevance_threshold:
            raise ConfigurationError(
                "detailed_threshold must not be below relevance_threshold "
                f"({self.detailed_threshold} < {self.relevance_threshold})"
            )
        if self.progress_ceiling > self.final_stage_progress:
            raise ConfigurationError(
                "progress_ceiling must not exceed final_stage_progress"
            )
        if self.final_stage_progress > self.last_question_progress:
            raise ConfigurationError(
                "final_stage_progress must not exceed last_question_progress"
            )

    def resolve_fallback(self, categories) -> str:
        """Fallback primary category for the given enumeration."""
        if not categories:
            raise ConfigurationError("Cannot pick a fallback from an empty category list")
        if self.fallback_category is None:
            return categories[0]
        if self.fallback_category not in categories:
            raise ConfigurationError(
                f"Fallback category {self.fallback_category!r} is not one of {list(categories)}"
            )
        return self.fallback_category


@lru_cache(maxsize=None)
def default_config() -> EngineConfig:
    """
    Process-wide configuration, resolved from .env and the environment once.

    Library calls made without an explicit config share this object, so
    ranking and progress never read files or the environment themselves.
    """
    config = EngineConfig()
    logger.info(
        f"Engine config: relevance={config.relevance_threshold}, "
        f"detailed={config.detailed_threshold}, fallback={config.fallback_category}"
    )
    return config

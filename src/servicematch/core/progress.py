"""
Progress estimation for a questionnaire whose length depends on the answers.

The visible-question count can grow as answers unlock follow-ups, so a plain
index/total bar would jump backward. The estimate is capped below the snap
points reserved for the last question, and a per-session high-water mark
keeps the reported value from ever decreasing.
"""

from __future__ import annotations

from typing import Optional

from .config import EngineConfig, default_config

COMPLETE = 100.0


def estimate_progress(
    position: int,
    visible_length: int,
    is_final_stage: bool,
    is_last: bool,
    config: Optional[EngineConfig] = None,
) -> float:
    """
    Raw progress percentage for the current position, without the
    high-water mark.

    Args:
        position: Index of the current question in the visible list
        visible_length: Number of currently visible questions
        is_final_stage: Whether the current question is flagged final-stage
        is_last: Whether the current question is the last visible one
        config: Snap points and ceiling (defaults to default_config())

    Returns:
        Percentage in [0, 100]
    """
    config = config or default_config()
    if visible_length <= 0:
        return COMPLETE
    if is_final_stage and is_last:
        return config.final_stage_progress
    if is_last:
        return config.last_question_progress
    base = position / visible_length * 100.0
    return max(0.0, min(base, config.progress_ceiling))


class ProgressEstimator:
    """Session-scoped progress reporter with a high-water mark."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or default_config()
        self.high_water: float = 0.0

    def report(
        self,
        position: int,
        visible_length: int,
        is_final_stage: bool,
        is_last: bool,
    ) -> float:
        estimate = estimate_progress(
            position, visible_length, is_final_stage, is_last, self.config
        )
        self.high_water = max(self.high_water, estimate)
        return self.high_water

    def complete(self) -> float:
        self.high_water = COMPLETE
        return self.high_water

    def reset(self) -> None:
        self.high_water = 0.0

"""
Recommendation ranker: normalizes a score vector into match percentages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import numpy as np

from .config import EngineConfig, default_config
from .utils import to_percentages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationEntry:
    """One surfaced category with its share of the total score."""
    category: str
    raw_score: float
    percentage: float
    is_detailed: bool = False   # at or above the detailed threshold

    def to_dict(self) -> Dict:
        return {
            "category": self.category,
            "raw_score": self.raw_score,
            "percentage": self.percentage,
            "is_detailed": self.is_detailed,
        }


@dataclass(frozen=True)
class RecommendationResult:
    """Ranked recommendations plus the primary category."""
    entries: List[RecommendationEntry]
    primary_category: str
    is_fallback: bool = False
    total_score: float = 0.0
    # Every category's percentage before the relevance filter
    percentages: Dict[str, float] = field(default_factory=dict)

    @property
    def detailed_entries(self) -> List[RecommendationEntry]:
        return [e for e in self.entries if e.is_detailed]

    def get_entry(self, category: str) -> Optional[RecommendationEntry]:
        for entry in self.entries:
            if entry.category == category:
                return entry
        return None

    def to_dict(self) -> Dict:
        return {
            "primary_category": self.primary_category,
            "is_fallback": self.is_fallback,
            "total_score": self.total_score,
            "entries": [e.to_dict() for e in self.entries],
            "percentages": dict(self.percentages),
        }


def rank(
    score_vector: Mapping[str, float],
    config: Optional[EngineConfig] = None,
) -> RecommendationResult:
    """
    Rank categories by their share of the total score.

    The mapping's iteration order is the category enumeration order and
    breaks percentage ties. Categories below the relevance threshold are
    dropped. An all-zero vector yields no entries and the fallback primary
    category rather than a division by zero.

    Args:
        score_vector: Category -> accumulated raw score
        config: Thresholds and fallback (defaults to default_config())

    Returns:
        RecommendationResult sorted by descending percentage
    """
    config = config or default_config()
    categories = list(score_vector.keys())
    raw = np.array([score_vector[c] for c in categories], dtype=np.float64)
    total = float(np.sum(raw))

    if total <= 0.0:
        fallback = config.resolve_fallback(categories)
        logger.info(f"No scoring signal, falling back to '{fallback}'")
        return RecommendationResult(
            entries=[],
            primary_category=fallback,
            is_fallback=True,
            total_score=0.0,
            percentages={c: 0.0 for c in categories},
        )

    percentages = to_percentages(raw)
    entries = [
        RecommendationEntry(
            category=category,
            raw_score=float(raw[i]),
            percentage=float(percentages[i]),
            is_detailed=bool(percentages[i] >= config.detailed_threshold),
        )
        for i, category in enumerate(categories)
        if percentages[i] >= config.relevance_threshold
    ]
    # sorted() is stable, so equal percentages keep enumeration order
    entries = sorted(entries, key=lambda e: e.percentage, reverse=True)
    if entries:
        primary = entries[0].category
    else:
        # Only reachable with a relevance threshold above the top share
        primary = categories[int(np.argmax(percentages))]

    return RecommendationResult(
        entries=entries,
        primary_category=primary,
        is_fallback=False,
        total_score=total,
        percentages={c: float(percentages[i]) for i, c in enumerate(categories)},
    )

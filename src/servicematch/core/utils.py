"""
Numerical utilities for score accumulation and normalization.

Pure numpy.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np


def weight_vector(weights: Mapping[str, float], categories: Sequence[str]) -> np.ndarray:
    """Dense vector over categories from a partial category->weight mapping."""
    vec = np.zeros(len(categories), dtype=np.float64)
    for i, category in enumerate(categories):
        vec[i] = weights.get(category, 0.0)
    return vec


def normalize(x: np.ndarray) -> np.ndarray:
    """Normalize array to sum to 1. All-zero input stays all-zero."""
    total = float(np.sum(x))
    if total <= 0.0:
        return np.zeros_like(x, dtype=np.float64)
    return x / total


def to_percentages(x: np.ndarray) -> np.ndarray:
    """Scale a non-negative vector so its entries sum to 100."""
    return normalize(x) * 100.0

"""Tests for core/ranking.py: normalization, filtering and ordering."""

import pytest

from servicematch.core.config import EngineConfig
from servicematch.core.errors import ConfigurationError
from servicematch.core.model import CATEGORIES
from servicematch.core.ranking import rank


def _vector(**scores):
    return {c: float(scores.get(c, 0.0)) for c in CATEGORIES}


@pytest.fixture
def config():
    return EngineConfig(relevance_threshold=5.0, detailed_threshold=15.0)


class TestRank:
    def test_eighty_twenty(self, config):
        """Raw 80/20 becomes 80%/20%; both clear the relevance and detailed thresholds."""
        result = rank(_vector(web=80, photo=20), config)
        assert [e.category for e in result.entries] == ["web", "photo"]
        assert result.entries[0].percentage == pytest.approx(80.0)
        assert result.entries[1].percentage == pytest.approx(20.0)
        assert result.entries[0].is_detailed
        assert result.entries[1].is_detailed
        assert result.primary_category == "web"

    def test_detailed_threshold(self, config):
        result = rank(_vector(web=90, photo=10), config)
        assert result.get_entry("web").is_detailed
        assert not result.get_entry("photo").is_detailed
        assert [e.category for e in result.detailed_entries] == ["web"]

    def test_low_relevance_dropped(self, config):
        result = rank(_vector(web=96, ai=4), config)
        assert [e.category for e in result.entries] == ["web"]
        assert result.get_entry("ai") is None
        # Still reported before filtering
        assert result.percentages["ai"] == pytest.approx(4.0)

    def test_exactly_at_threshold_kept(self, config):
        result = rank(_vector(web=95, ai=5), config)
        assert result.get_entry("ai") is not None

    def test_ties_follow_enumeration_order(self, config):
        result = rank(_vector(tech=1, photo=1, ai=1, web=1), config)
        assert [e.category for e in result.entries] == ["web", "photo", "ai", "tech"]
        assert result.primary_category == "web"

    def test_sorted_descending(self, config):
        result = rank(_vector(web=1, photo=5, cinema=3, automation=2, ai=4, tech=6), config)
        percentages = [e.percentage for e in result.entries]
        assert percentages == sorted(percentages, reverse=True)
        assert result.primary_category == "tech"

    def test_percentages_sum_to_100(self, config):
        result = rank(_vector(web=3.3, photo=1.1, cinema=0.2, automation=7, ai=0.01, tech=2), config)
        assert sum(result.percentages.values()) == pytest.approx(100.0)

    def test_raw_scores_preserved(self, config):
        result = rank(_vector(web=12.8, tech=6.8), config)
        assert result.get_entry("web").raw_score == pytest.approx(12.8)
        assert result.total_score == pytest.approx(19.6)


class TestZeroScore:
    def test_fallback_to_first_category(self, config):
        """All-zero scores yield no entries and the first category."""
        result = rank(_vector(), config)
        assert result.entries == []
        assert result.primary_category == "web"
        assert result.is_fallback

    def test_configured_fallback(self):
        result = rank(_vector(), EngineConfig(fallback_category="tech"))
        assert result.primary_category == "tech"

    def test_empty_vector_is_a_configuration_error(self, config):
        with pytest.raises(ConfigurationError, match="empty category list"):
            rank({}, config)

    def test_not_fallback_with_signal(self, config):
        assert not rank(_vector(ai=1), config).is_fallback


class TestSerialization:
    def test_to_dict(self, config):
        data = rank(_vector(web=80, photo=20), config).to_dict()
        assert data["primary_category"] == "web"
        assert data["entries"][0] == {
            "category": "web",
            "raw_score": pytest.approx(80.0),
            "percentage": pytest.approx(80.0),
            "is_detailed": True,
        }
        assert set(data["percentages"]) == set(CATEGORIES)

    def test_deterministic(self, config):
        vector = _vector(web=2, cinema=2, ai=7)
        assert rank(vector, config) == rank(vector, config)

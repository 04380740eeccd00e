"""Tests for viz/match_chart.py and content/services.py."""

import json

import pytest

from servicematch.content.services import SERVICE_PROFILES, get_service_cards
from servicematch.core.config import EngineConfig
from servicematch.core.model import CATEGORIES
from servicematch.core.ranking import rank
from servicematch.viz.match_chart import create_match_chart, create_match_radar


@pytest.fixture
def result():
    scores = {c: 0.0 for c in CATEGORIES}
    scores.update(web=60.0, automation=30.0, ai=7.0, tech=3.0)
    return rank(scores, EngineConfig(relevance_threshold=5.0, detailed_threshold=15.0))


@pytest.fixture
def fallback():
    return rank({c: 0.0 for c in CATEGORIES}, EngineConfig())


class TestServiceCards:
    def test_every_category_has_a_profile(self):
        assert set(SERVICE_PROFILES) == set(CATEGORIES)

    def test_cards_for_detailed_entries(self, result):
        cards = get_service_cards(result)
        assert [c["category"] for c in cards] == ["web", "automation"]
        assert cards[0]["percentage"] == pytest.approx(60.0)
        assert cards[1]["title"] == "Automation & Workflow Solutions"

    def test_fallback_card(self, fallback):
        cards = get_service_cards(fallback)
        assert len(cards) == 1
        assert cards[0]["category"] == "web"
        assert cards[0]["percentage"] is None


class TestMatchChart:
    def test_bar_chart(self, result):
        fig = json.loads(create_match_chart(result))
        bar = fig["data"][0]
        # Top match is drawn last so it sits at the top
        assert bar["y"][-1] == "Web Development"
        assert len(bar["y"]) == 3  # tech (3%) is filtered out

    def test_radar_includes_all_categories(self, result):
        fig = json.loads(create_match_radar(result))
        polygon = fig["data"][0]
        assert len(polygon["theta"]) == len(CATEGORIES) + 1
        assert fig["data"][1]["name"] == "Primary"

    def test_fallback_charts(self, fallback):
        bar = json.loads(create_match_chart(fallback))
        assert not bar["data"][0].get("y")
        radar = json.loads(create_match_radar(fallback))
        assert len(radar["data"]) == 1

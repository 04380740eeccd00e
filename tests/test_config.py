"""Tests for core/config.py: engine configuration."""

import pytest

from servicematch.core import config as config_module
from servicematch.core.config import EngineConfig, default_config
from servicematch.core.errors import ConfigurationError
from servicematch.core.model import CATEGORIES
from servicematch.core.progress import estimate_progress
from servicematch.core.ranking import rank


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "RELEVANCE_THRESHOLD", "DETAILED_THRESHOLD", "FALLBACK_CATEGORY",
        "PROGRESS_CEILING", "FINAL_STAGE_PROGRESS", "LAST_QUESTION_PROGRESS",
    ):
        monkeypatch.delenv(f"SERVICEMATCH_{name}", raising=False)


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.relevance_threshold == 5.0
        assert config.detailed_threshold == 15.0
        assert config.fallback_category is None
        assert config.progress_ceiling == 90.0
        assert config.final_stage_progress == 92.0
        assert config.last_question_progress == 95.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SERVICEMATCH_RELEVANCE_THRESHOLD", "10")
        monkeypatch.setenv("SERVICEMATCH_FALLBACK_CATEGORY", "ai")
        config = EngineConfig()
        assert config.relevance_threshold == 10.0
        assert config.fallback_category == "ai"

    def test_arguments_beat_env(self, monkeypatch):
        monkeypatch.setenv("SERVICEMATCH_DETAILED_THRESHOLD", "40")
        assert EngineConfig(detailed_threshold=20.0).detailed_threshold == 20.0

    def test_non_numeric_env(self, monkeypatch):
        monkeypatch.setenv("SERVICEMATCH_PROGRESS_CEILING", "lots")
        with pytest.raises(ConfigurationError, match="must be a number"):
            EngineConfig()

    def test_out_of_range(self):
        with pytest.raises(ConfigurationError, match=r"\[0, 100\]"):
            EngineConfig(relevance_threshold=120.0)

    def test_detailed_below_relevance(self):
        with pytest.raises(ConfigurationError, match="detailed_threshold"):
            EngineConfig(relevance_threshold=20.0, detailed_threshold=10.0)

    def test_progress_snaps_ordered(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(progress_ceiling=96.0)
        with pytest.raises(ConfigurationError):
            EngineConfig(final_stage_progress=97.0)

    def test_resolve_fallback(self):
        assert EngineConfig().resolve_fallback(CATEGORIES) == "web"
        assert EngineConfig(fallback_category="photo").resolve_fallback(CATEGORIES) == "photo"

    def test_unknown_fallback(self):
        with pytest.raises(ConfigurationError, match="Fallback category"):
            EngineConfig(fallback_category="gardening").resolve_fallback(CATEGORIES)

    def test_empty_categories_fallback(self):
        with pytest.raises(ConfigurationError, match="empty category list"):
            EngineConfig().resolve_fallback([])


@pytest.fixture
def fresh_default():
    default_config.cache_clear()
    yield
    default_config.cache_clear()


class TestDefaultConfig:
    def test_resolved_once(self, monkeypatch, fresh_default):
        calls = []
        monkeypatch.setattr(config_module, "_load_dotenv", lambda: calls.append(1))
        assert default_config() is default_config()
        assert len(calls) == 1

    def test_rank_and_progress_do_not_reread_environment(self, monkeypatch, fresh_default):
        calls = []
        monkeypatch.setattr(config_module, "_load_dotenv", lambda: calls.append(1))
        default_config()
        monkeypatch.setenv("SERVICEMATCH_RELEVANCE_THRESHOLD", "50")

        result = rank({"web": 70.0, "photo": 30.0})
        estimate_progress(1, 4, False, False)

        assert len(calls) == 1
        assert [e.category for e in result.entries] == ["web", "photo"]

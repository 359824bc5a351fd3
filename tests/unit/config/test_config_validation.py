"""
Tests for startup configuration checks and defaults.
"""

import pytest

from src.config import settings
from src.config.settings import config, validate_config_dependencies, validate_env_for_app


def test_retrieval_defaults():
    assert config.FULL_TEXT_WEIGHT == 1.0
    assert config.SEMANTIC_WEIGHT == 2.0
    assert config.RRF_K == 50
    assert config.HYBRID_SEARCH_RPC == "hybrid_search"
    assert config.CASES_TABLE == "cases"


def test_default_config_has_no_errors():
    assert validate_config_dependencies() == []


def test_non_positive_match_count_reported(monkeypatch):
    monkeypatch.setattr(settings.config, "MATCH_COUNT", 0)
    errors = validate_config_dependencies()
    assert any("MATCH_COUNT" in e for e in errors)


def test_non_positive_timeout_reported(monkeypatch):
    monkeypatch.setattr(settings.config, "STAGE_TIMEOUT_SECONDS", 0)
    assert any("STAGE_TIMEOUT_SECONDS" in e for e in validate_config_dependencies())


def test_missing_env_exits(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(SystemExit) as exc_info:
        validate_env_for_app()
    assert "OPENAI_API_KEY" in str(exc_info.value)


def test_env_present_passes():
    validate_env_for_app()

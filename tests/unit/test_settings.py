"""
Tests for environment-driven configuration.
"""

from config import EngineSettings, GameSettings, LogSettings


def test_defaults():
    settings = EngineSettings()
    assert settings.tax_rate == 0.25
    assert settings.regions == ("latam", "europe", "apac")
    assert len(settings.seasonality) == 8
    assert settings.scoring_model == "additive"


def test_engine_env_override(monkeypatch):
    monkeypatch.setenv("ENGINE_TAX_RATE", "0.3")
    monkeypatch.setenv("ENGINE_SCORING_MODEL", "multiplicative")
    settings = EngineSettings()
    assert settings.tax_rate == 0.3
    assert settings.scoring_model == "multiplicative"


def test_game_env_override(monkeypatch):
    monkeypatch.setenv("GAME_MAX_ROUNDS", "12")
    assert GameSettings().max_rounds == 12


def test_log_level_override(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert LogSettings().level == "debug"

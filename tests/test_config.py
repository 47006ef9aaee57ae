"""Tests for settings defaults and validation."""

import pytest
from pydantic import ValidationError

from geocatch.config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(bot_token="123:abc", _env_file=None, **overrides)


def test_gameplay_defaults(monkeypatch):
    for name in ("GYM_QUORUM", "CATCH_RADIUS_METERS", "SPAWN_TTL_MINUTES"):
        monkeypatch.delenv(name, raising=False)

    settings = make_settings()

    assert settings.spawn_ttl_minutes == 15
    assert settings.catch_radius_meters == 100
    assert settings.gym_quorum == 5
    assert settings.gym_presence_window_seconds == 180
    assert (settings.spawn_min_distance_meters, settings.spawn_max_distance_meters) == (25, 150)


def test_env_override(monkeypatch):
    monkeypatch.setenv("GYM_QUORUM", "3")

    assert make_settings().gym_quorum == 3


def test_cell_probability_bounded():
    with pytest.raises(ValidationError):
        make_settings(spawn_cell_probability=1.5)

"""
Shared fixtures: default engine settings and a small market.
"""

import pytest

from config import EngineSettings, GameSettings
from src.simulation_layer.engine import QuarterEngine
from tests.builders import make_segment


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def game_settings():
    return GameSettings()


@pytest.fixture
def engine(settings):
    return QuarterEngine(settings)


@pytest.fixture
def worker():
    return make_segment()


@pytest.fixture
def youth():
    return make_segment(name="Youth", min_price=500.0, max_price=900.0)

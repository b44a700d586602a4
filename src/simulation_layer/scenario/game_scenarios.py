"""
Game scenarios: which regions and segments a game opens with.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from src.data_layer.entities import Segment, default_segments


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    regions: Tuple[str, ...]
    segments: Tuple[str, ...]
    description: str = ""

    def game_segments(self) -> List[Segment]:
        """Default segments restricted to this scenario, in scenario order."""
        by_name = {s.name: s for s in default_segments()}
        return [by_name[name] for name in self.segments if name in by_name]


SCENARIOS: Dict[str, Scenario] = {
    "local-launch": Scenario(
        key="local-launch",
        name="Local Launch",
        regions=("latam",),
        segments=("Worker", "Recreation"),
        description="One region, two price-conscious segments",
    ),
    "mountain-expedition": Scenario(
        key="mountain-expedition",
        name="Mountain Expedition",
        regions=("europe",),
        segments=("Mountain", "Recreation", "Speed"),
        description="Performance segments in a single premium market",
    ),
    "global-domination": Scenario(
        key="global-domination",
        name="Global Domination",
        regions=("latam", "europe", "apac"),
        segments=("Worker", "Recreation", "Youth", "Mountain", "Speed"),
        description="Every region and every segment",
    ),
    "speed-innovation": Scenario(
        key="speed-innovation",
        name="Speed Innovation",
        regions=("apac",),
        segments=("Speed", "Youth"),
        description="Fast-moving segments in one growth market",
    ),
}

DEFAULT_SCENARIO = "local-launch"


def get_scenario(key: str) -> Scenario:
    """Look up a scenario; unknown keys fall back to the local launch."""
    return SCENARIOS.get(key) or SCENARIOS[DEFAULT_SCENARIO]

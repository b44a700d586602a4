"""
Brand lifecycle: create, update, deactivate.

Brand rules live here, outside the engine, which assumes its input is already
referentially valid:
- a target segment must name an existing segment of the game
- brand names are unique (case-insensitive) among a team's active brands
- at most `max_active_brands` active brands per team
- brands are soft-deleted (deactivated), never removed, to keep history readable
"""

import itertools
import logging
from typing import Any, Dict, Iterable, List, Optional

from config import GameSettings
from src.data_layer.entities import COMPONENTS, STARTER_COMPONENTS, Brand, Segment, Team
from src.data_layer.errors import BrandValidationError

logger = logging.getLogger(__name__)


class BrandRegistry:
    """Validates and applies brand changes for the teams of one game."""

    def __init__(
        self,
        segments: Iterable[Segment],
        settings: Optional[GameSettings] = None,
        id_prefix: str = "brand",
    ):
        self.segment_names = {s.name for s in segments}
        self.settings = settings or GameSettings()
        self._ids = itertools.count(1)
        self._id_prefix = id_prefix

    def _next_id(self) -> str:
        return f"{self._id_prefix}-{next(self._ids)}"

    def _check_segment(self, target_segment: Optional[str]) -> None:
        if target_segment is not None and target_segment not in self.segment_names:
            raise BrandValidationError(f"Unknown target segment: {target_segment!r}")

    def _check_name(self, team: Team, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()[: self.settings.max_brand_name_length]
        if not name:
            raise BrandValidationError("Brand name is required")
        for brand in team.active_brands:
            if brand.id != exclude_id and brand.name.lower() == name.lower():
                raise BrandValidationError(f"Brand name already exists for this team: {name!r}")
        return name

    def create(
        self,
        team: Team,
        name: str,
        target_segment: Optional[str] = None,
        components: Optional[Dict[str, Any]] = None,
        rd_investment: float = 0.0,
        brand_id: Optional[str] = None,
    ) -> Brand:
        """Create an active brand for `team` and attach it.

        Components left out start at the starter quality (3, no electronics).
        """
        if len(team.active_brands) >= self.settings.max_active_brands:
            raise BrandValidationError(
                f"Maximum {self.settings.max_active_brands} active brands allowed"
            )
        self._check_segment(target_segment)
        name = self._check_name(team, name)

        components = components or {}
        unknown = set(components) - set(COMPONENTS)
        if unknown:
            raise BrandValidationError(f"Unknown components: {sorted(unknown)}")

        brand = Brand(
            id=brand_id or self._next_id(),
            team_id=team.id,
            name=name,
            target_segment=target_segment,
            rd_investment=rd_investment,
            **{**STARTER_COMPONENTS, **components},
        )
        team.brands.append(brand)
        logger.info("Brand created: %s/%s (unit cost %.0f)", team.name, brand.name, brand.unit_cost)
        return brand

    def update(
        self,
        team: Team,
        brand_id: str,
        name: Optional[str] = None,
        target_segment: Optional[str] = None,
        components: Optional[Dict[str, Any]] = None,
        rd_investment: Optional[float] = None,
    ) -> Brand:
        """Apply a partial update; derived quality and unit cost are recomputed."""
        brand = team.brand_by_id(brand_id)
        if brand is None or not brand.is_active:
            raise BrandValidationError(f"No active brand {brand_id!r} for team {team.id!r}")

        if name is not None:
            brand.name = self._check_name(team, name, exclude_id=brand.id)
        if target_segment is not None:
            self._check_segment(target_segment)
            brand.target_segment = target_segment
        if components:
            unknown = set(components) - set(COMPONENTS)
            if unknown:
                raise BrandValidationError(f"Unknown components: {sorted(unknown)}")
            for component, quality in components.items():
                setattr(brand, component, quality)
        if rd_investment is not None:
            brand.rd_investment = rd_investment

        brand.recompute()
        return brand

    def deactivate(self, team: Team, brand_id: str) -> Brand:
        brand = team.brand_by_id(brand_id)
        if brand is None:
            raise BrandValidationError(f"No brand {brand_id!r} for team {team.id!r}")
        brand.is_active = False
        logger.info("Brand deactivated: %s/%s", team.name, brand.name)
        return brand

    def validate_team(self, team: Team) -> List[str]:
        """List rule violations among a team's active brands (empty when valid)."""
        problems = []
        seen = set()
        for brand in team.active_brands:
            if brand.target_segment is not None and brand.target_segment not in self.segment_names:
                problems.append(f"{brand.name}: unknown target segment {brand.target_segment!r}")
            key = brand.name.lower()
            if key in seen:
                problems.append(f"{brand.name}: duplicate active brand name")
            seen.add(key)
        if len(team.active_brands) > self.settings.max_active_brands:
            problems.append(f"more than {self.settings.max_active_brands} active brands")
        return problems

"""
Automated competitors for solo play.

Each automated team gets a personality (conservative / aggressive / balanced,
assigned round-robin by team index) that scales its spending. Budgets grow
with the round so competitors improve over the game but stay beatable.

Decisions are emitted in the canonical Decision schema (structured region
records, pricing by brand id). All variation comes from a seeded
`random.Random`, so a given seed replays the same game.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from src.data_layer.brand_registry import BrandRegistry
from src.data_layer.decision_schema import (
    Decision,
    InternetMarketing,
    RegionAdvertising,
    RegionDistribution,
    RegionSalesforce,
)
from src.data_layer.entities import Brand, Segment, Team
from src.simulation_layer.numeric import round_half_up
from src.simulation_layer.scenario.game_scenarios import Scenario

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompetitorPersonality:
    name: str
    ad_mult: float
    price_mult: float
    rd_mult: float
    sf_mult: float


PERSONALITIES = (
    CompetitorPersonality("conservative", ad_mult=0.7, price_mult=1.05, rd_mult=0.6, sf_mult=0.8),
    CompetitorPersonality("aggressive", ad_mult=1.2, price_mult=0.92, rd_mult=1.1, sf_mult=1.1),
    CompetitorPersonality("balanced", ad_mult=0.9, price_mult=1.0, rd_mult=0.85, sf_mult=0.95),
)

BRAND_NAMES = (
    ("Nova X1", "Nova Lite"),
    ("Zenith Pro", "Zenith Core"),
    ("Pulse Max", "Pulse Go"),
)

# Share of the round budget per spending area
CASH_SPEND_RATIO = 0.35
AD_SHARE = 0.25
INTERNET_SHARE = 0.08
SALESFORCE_SHARE = 0.2
RD_SHARE = 0.15
DIVIDEND_SHARE = 0.05

FALLBACK_IDEAL_PRICE = 1000.0
PRICE_JITTER = 0.15
SALESPERSON_BUDGET = 35_000
BASE_COMPENSATION = 30_000
COMPENSATION_RAISE_PER_ROUND = 1_500
SHOWROOM_FROM_ROUND = 5
DIVIDEND_FROM_ROUND = 6
MAX_ROUNDS = 8


def personality_for(team_index: int) -> CompetitorPersonality:
    return PERSONALITIES[team_index % len(PERSONALITIES)]


class CompetitorStrategist:
    """Generates brands and per-round decisions for automated teams."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def round_budget(self, round_number: int, cash_balance: float) -> float:
        """35% of cash, scaled from 0.6 to 0.9 over the game."""
        scale = 0.6 + (round_number / MAX_ROUNDS) * 0.3
        return max(0.0, cash_balance) * CASH_SPEND_RATIO * scale

    def _pricing(
        self,
        brands: Sequence[Brand],
        segments: Dict[str, Segment],
        personality: CompetitorPersonality,
    ) -> Dict[str, float]:
        pricing = {}
        for brand in brands:
            segment = segments.get(brand.target_segment) if brand.target_segment else None
            ideal = segment.price_midpoint if segment else FALLBACK_IDEAL_PRICE
            jitter = (self.rng.random() - 0.5) * PRICE_JITTER * ideal
            pricing[brand.id] = float(round_half_up(ideal * personality.price_mult + jitter))
        return pricing

    def generate_decision(
        self,
        team: Team,
        round_number: int,
        scenario: Scenario,
        segments: Sequence[Segment],
        team_index: int = 0,
    ) -> Decision:
        personality = personality_for(team_index)
        budget = self.round_budget(round_number, team.cash_balance)
        regions = scenario.regions
        brands = team.active_brands
        segments_by_name = {s.name: s for s in segments}
        ad_target = scenario.segments[0] if scenario.segments else None
        scale = 0.6 + (round_number / MAX_ROUNDS) * 0.3

        pricing = self._pricing(brands, segments_by_name, personality)
        default_price = None if brands else 900.0

        ad_budget = budget * AD_SHARE * personality.ad_mult
        advertising = {
            region: RegionAdvertising(
                spend=round_half_up(ad_budget / len(regions)), target_segment=ad_target
            )
            for region in regions
        }

        internet_budget = budget * INTERNET_SHARE / 4
        internet = InternetMarketing(
            web_pages=max(1, round_half_up(internet_budget / 5_000)),
            seo=max(1, round_half_up(internet_budget / 3_000)),
            paid_search=max(1, round_half_up(internet_budget / 8_000)),
            social_media=max(1, round_half_up(internet_budget / 6_000)),
        )

        sf_budget = budget * SALESFORCE_SHARE * personality.sf_mult
        salesforce = {}
        for region in regions:
            count = max(1, round_half_up(sf_budget / len(regions) / SALESPERSON_BUDGET))
            salesforce[region] = RegionSalesforce(
                count=count,
                compensation=BASE_COMPENSATION + round_half_up(round_number * COMPENSATION_RAISE_PER_ROUND),
                training=round_half_up(count * 2_000 * scale),
            )

        channel = "showroom" if round_number >= SHOWROOM_FROM_ROUND else "retail"
        distribution = {
            region: RegionDistribution(
                outlets=max(1, round_half_up(3 + round_number * 0.8 * personality.sf_mult)),
                channel=channel,
            )
            for region in regions
        }

        decision = Decision(
            pricing=pricing,
            default_price=default_price,
            advertising=advertising,
            internet=internet,
            salesforce=salesforce,
            distribution=distribution,
            rd_budget=round_half_up(budget * RD_SHARE * personality.rd_mult),
            dividend=round_half_up(budget * DIVIDEND_SHARE) if round_number >= DIVIDEND_FROM_ROUND else 0,
        )
        logger.debug(
            "Automated %s (%s) round %d: budget %.0f", team.name, personality.name, round_number, budget
        )
        return decision

    def brand_components(self) -> Dict[str, int]:
        return {
            "frame": 4 + self.rng.randrange(2),
            "wheels": 4 + self.rng.randrange(2),
            "drivetrain": 4 + self.rng.randrange(2),
            "brakes": 4 + self.rng.randrange(2),
            "suspension": 3 + self.rng.randrange(3),
            "seat": 4 + self.rng.randrange(2),
            "handlebars": 4 + self.rng.randrange(2),
            "electronics": 2 + self.rng.randrange(3),
        }

    def generate_brands(
        self,
        registry: BrandRegistry,
        team: Team,
        scenario: Scenario,
        team_index: int = 0,
    ) -> List[Brand]:
        """Register a starter brand aimed at the team's primary segment."""
        available = [name for name in scenario.segments if name in registry.segment_names]
        target = available[team_index % len(available)] if available else None
        name = BRAND_NAMES[team_index % len(BRAND_NAMES)][0]
        brand = registry.create(
            team,
            name=name,
            target_segment=target,
            components=self.brand_components(),
        )
        return [brand]

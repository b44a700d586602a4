"""
Domain records consumed by the quarter engine: segments, brands and teams.

Segments are immutable for the life of a game. Brands recompute their derived
quality and unit cost whenever components change. Teams carry the only
mutable running state between rounds (cash, cumulative profit, submission flag).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.simulation_layer.numeric import safe

# Component-quality attributes, in canonical order
COMPONENTS = (
    "frame",
    "wheels",
    "drivetrain",
    "brakes",
    "suspension",
    "seat",
    "handlebars",
    "electronics",
)

# Benefit dimensions a segment weighs
BENEFITS = (
    "performance",
    "durability",
    "style",
    "comfort",
    "lightweight",
    "customization",
)

MIN_COMPONENT = 0
MAX_COMPONENT = 5

# Quality a newly created brand starts from when a component is not chosen
STARTER_COMPONENTS = {name: (0 if name == "electronics" else 3) for name in COMPONENTS}

BASE_UNIT_COST = 150
COST_PER_QUALITY_POINT = 40


def clamp_component(value: Any, default: int = 0) -> int:
    """Clamp a component quality into [0, 5]; absent or unparseable input becomes `default`."""
    if value is None:
        return default
    try:
        quality = int(float(value))
    except (TypeError, ValueError):
        return default
    return max(MIN_COMPONENT, min(MAX_COMPONENT, quality))


@dataclass(frozen=True)
class Segment:
    """A customer archetype: demand potential, price band and benefit preferences."""

    name: str
    potential_demand: Dict[str, float] = field(default_factory=dict)
    growth_rate: float = 0.05
    min_price: float = 500.0
    max_price: float = 1500.0
    price_sensitivity: float = 0.15
    performance: float = 0.1
    durability: float = 0.1
    style: float = 0.1
    comfort: float = 0.1
    lightweight: float = 0.1
    customization: float = 0.1
    description: str = ""

    @property
    def price_midpoint(self) -> float:
        return (self.min_price + self.max_price) / 2

    def weights(self) -> Dict[str, float]:
        return {benefit: getattr(self, benefit) for benefit in BENEFITS}

    def potential_for(self, region: str, default: float = 1000.0) -> float:
        value = self.potential_demand.get(region)
        return default if value is None else safe(value, default)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Segment":
        """Build from a stored record.

        Accepts the canonical keys as well as the column names used by the
        game store (``potential_demand_<region>``, ``<benefit>_weight``,
        ``pref_<benefit>``, ``pref_price_sensitivity``).
        """
        potential = dict(data.get("potential_demand") or {})
        for key, value in data.items():
            if key.startswith("potential_demand_"):
                potential.setdefault(key[len("potential_demand_"):], value)

        def pick(name: str, default: float) -> float:
            for key in (name, f"{name}_weight", f"pref_{name}"):
                if data.get(key) is not None:
                    return safe(data[key], default)
            return default

        return cls(
            name=str(data["name"]),
            potential_demand={region: safe(v) for region, v in potential.items()},
            growth_rate=pick("growth_rate", 0.05),
            min_price=pick("min_price", 500.0),
            max_price=pick("max_price", 1500.0),
            price_sensitivity=pick("price_sensitivity", 0.15),
            performance=pick("performance", 0.1),
            durability=pick("durability", 0.1),
            style=pick("style", 0.1),
            comfort=pick("comfort", 0.1),
            lightweight=pick("lightweight", 0.1),
            customization=pick("customization", 0.1),
            description=str(data.get("description") or data.get("desc") or ""),
        )


@dataclass
class Brand:
    """A product line owned by one team."""

    id: str
    team_id: str
    name: str
    # Absent components are 0; electronics 0 = none fitted
    frame: int = 0
    wheels: int = 0
    drivetrain: int = 0
    brakes: int = 0
    suspension: int = 0
    seat: int = 0
    handlebars: int = 0
    electronics: int = 0
    target_segment: Optional[str] = None
    rd_investment: float = 0.0
    is_active: bool = True
    overall_quality: float = field(init=False, default=0.0)
    unit_cost: float = field(init=False, default=0.0)

    def __post_init__(self):
        self.recompute()

    def recompute(self) -> None:
        """Clamp components and refresh the derived quality and unit cost."""
        for name in COMPONENTS:
            setattr(self, name, clamp_component(getattr(self, name)))
        self.rd_investment = max(0.0, safe(self.rd_investment))

        qualities = list(self.components().values())
        fitted = [q for q in qualities if q > 0]
        self.overall_quality = sum(fitted) / len(fitted) if fitted else 0.0
        self.unit_cost = BASE_UNIT_COST + COST_PER_QUALITY_POINT * sum(qualities)

    def components(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in COMPONENTS}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team_id": self.team_id,
            "name": self.name,
            "components": self.components(),
            "target_segment": self.target_segment,
            "rd_investment": self.rd_investment,
            "is_active": self.is_active,
            "overall_quality": round(self.overall_quality, 3),
            "unit_cost": self.unit_cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], team_id: Optional[str] = None) -> "Brand":
        """Build from a stored record (``components`` mapping, ``comp_<x>`` or ``<x>_quality`` columns)."""
        nested = data.get("components") or {}
        kwargs = {}
        for name in COMPONENTS:
            candidates = (
                nested.get(name),
                data.get(name),
                data.get(f"comp_{name}"),
                data.get(f"{name}_quality"),
            )
            found = [value for value in candidates if value is not None]
            if found:
                kwargs[name] = found[0]
        return cls(
            id=str(data.get("id", data.get("name"))),
            team_id=str(team_id if team_id is not None else data.get("team_id", "")),
            name=str(data["name"]),
            target_segment=data.get("target_segment") or data.get("targetSegment") or None,
            rd_investment=data.get("rd_investment", data.get("rdInvestment", 0.0)),
            is_active=data.get("is_active", data.get("status", "active") == "active"),
            **kwargs,
        )


@dataclass
class Team:
    """A competitor (human or automated) and its running state between rounds."""

    id: str
    name: str
    brands: List[Brand] = field(default_factory=list)
    cash_balance: float = 5_000_000.0
    cumulative_profit: float = 0.0
    total_investment: float = 5_000_000.0
    is_automated: bool = False
    has_submitted: bool = False

    @property
    def active_brands(self) -> List[Brand]:
        return [b for b in self.brands if b.is_active]

    def brand_by_id(self, brand_id: str) -> Optional[Brand]:
        for brand in self.brands:
            if brand.id == brand_id:
                return brand
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        team_id = str(data["id"])
        return cls(
            id=team_id,
            name=str(data.get("name", team_id)),
            brands=[Brand.from_dict(b, team_id=team_id) for b in data.get("brands") or []],
            cash_balance=safe(data.get("cash_balance"), 5_000_000.0),
            cumulative_profit=safe(data.get("cumulative_profit")),
            total_investment=safe(data.get("total_investment"), 5_000_000.0),
            is_automated=bool(data.get("is_automated", data.get("is_ai", False))),
            has_submitted=bool(data.get("has_submitted", False)),
        )


# Segments seeded into every new game
DEFAULT_SEGMENT_DATA: List[Dict[str, Any]] = [
    {"name": "Worker", "description": "Budget-conscious professionals who need reliable, practical products for daily use",
     "min_price": 600, "max_price": 1000, "potential_demand": {"latam": 3000, "europe": 5000, "apac": 4000},
     "growth_rate": 0.05, "price_sensitivity": 0.25, "performance": 0.10, "durability": 0.25, "style": 0.05,
     "comfort": 0.25, "lightweight": 0.05, "customization": 0.05},
    {"name": "Recreation", "description": "Casual users who value style, comfort, and a great user experience",
     "min_price": 700, "max_price": 1200, "potential_demand": {"latam": 4000, "europe": 6000, "apac": 5000},
     "growth_rate": 0.08, "price_sensitivity": 0.15, "performance": 0.10, "durability": 0.15, "style": 0.20,
     "comfort": 0.20, "lightweight": 0.10, "customization": 0.10},
    {"name": "Youth", "description": "Young buyers looking for trendy, affordable products with social appeal",
     "min_price": 500, "max_price": 900, "potential_demand": {"latam": 5000, "europe": 4000, "apac": 6000},
     "growth_rate": 0.10, "price_sensitivity": 0.30, "performance": 0.05, "durability": 0.10, "style": 0.30,
     "comfort": 0.10, "lightweight": 0.05, "customization": 0.10},
    {"name": "Mountain", "description": "Power users who demand rugged, high-performance products for demanding tasks",
     "min_price": 900, "max_price": 1500, "potential_demand": {"latam": 2000, "europe": 4000, "apac": 3000},
     "growth_rate": 0.06, "price_sensitivity": 0.10, "performance": 0.30, "durability": 0.20, "style": 0.05,
     "comfort": 0.05, "lightweight": 0.15, "customization": 0.15},
    {"name": "Speed", "description": "Performance enthusiasts focused on cutting-edge specs and lightweight design",
     "min_price": 1000, "max_price": 1800, "potential_demand": {"latam": 1500, "europe": 3500, "apac": 2500},
     "growth_rate": 0.04, "price_sensitivity": 0.05, "performance": 0.30, "durability": 0.10, "style": 0.10,
     "comfort": 0.05, "lightweight": 0.30, "customization": 0.10},
]


def default_segments() -> List[Segment]:
    return [Segment.from_dict(data) for data in DEFAULT_SEGMENT_DATA]

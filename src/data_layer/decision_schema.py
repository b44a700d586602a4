"""
Canonical per-round decision schema.

Decisions arrive from two producers (human teams through the API and the
automated competitor strategist) and historically in several shapes. They are
validated and defaulted here, once, so the engine never branches on
"is this a number or an object". Every field defaults to zero/empty: a missing
sub-section only weakens a team's market pull, it never raises.

Legacy shapes accepted and normalized:
- flat numeric region budgets (``{"latam": 250000}``) -> ``{"spend": 250000}``
  for advertising, ``{"count": n}`` for sales force, ``{"outlets": n}`` for
  distribution (never silently zeroed)
- ``internet_marketing`` / ``rdBudget`` / camelCase keys
- ``pricing.default`` -> ``default_price``
- pricing keyed by brand display name -> brand id (see `normalize_decision`)
"""

import logging
from typing import Any, Dict, Iterable, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from src.simulation_layer.numeric import safe

logger = logging.getLogger(__name__)

Channel = Literal["showroom", "retail", "online"]
CHANNELS = ("showroom", "retail", "online")

_RECORD_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


def _non_negative(value: Any) -> float:
    return max(0.0, safe(value))


def _flat_to_record(data: Any, key: str, section: str) -> Any:
    """Wrap a bare number into ``{key: number}``; None becomes an empty record."""
    if data is None:
        return {}
    if isinstance(data, (int, float, str)) and not isinstance(data, bool):
        logger.warning("Flat %s value %r coerced to {%s: ...}", section, data, key)
        return {key: data}
    return data


class RegionAdvertising(BaseModel):
    """Media spend in one region, optionally aimed at one segment."""

    model_config = _RECORD_CONFIG

    spend: float = 0.0
    target_segment: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("target_segment", "targetSegment")
    )

    @model_validator(mode="before")
    @classmethod
    def _coerce_flat(cls, data: Any) -> Any:
        return _flat_to_record(data, "spend", "advertising")

    @field_validator("spend", mode="before")
    @classmethod
    def _spend(cls, value: Any) -> float:
        return _non_negative(value)

    @field_validator("target_segment", mode="before")
    @classmethod
    def _target(cls, value: Any) -> Optional[str]:
        return str(value) if value else None


class InternetMarketing(BaseModel):
    """Units bought on each of the four internet channels."""

    model_config = _RECORD_CONFIG

    web_pages: float = Field(default=0.0, validation_alias=AliasChoices("web_pages", "webPages"))
    seo: float = 0.0
    paid_search: float = Field(default=0.0, validation_alias=AliasChoices("paid_search", "paidSearch"))
    social_media: float = Field(default=0.0, validation_alias=AliasChoices("social_media", "socialMedia"))

    @model_validator(mode="before")
    @classmethod
    def _coerce_missing(cls, data: Any) -> Any:
        return {} if data is None else data

    @field_validator("web_pages", "seo", "paid_search", "social_media", mode="before")
    @classmethod
    def _units(cls, value: Any) -> float:
        return _non_negative(value)


class RegionSalesforce(BaseModel):
    """Sales force in one region. Compensation is an annual salary per head."""

    model_config = _RECORD_CONFIG

    count: int = 0
    compensation: Optional[float] = None
    training: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _coerce_flat(cls, data: Any) -> Any:
        return _flat_to_record(data, "count", "salesforce")

    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        return int(_non_negative(value))

    @field_validator("compensation", mode="before")
    @classmethod
    def _compensation(cls, value: Any) -> Optional[float]:
        return None if value is None else _non_negative(value)

    @field_validator("training", mode="before")
    @classmethod
    def _training(cls, value: Any) -> float:
        return _non_negative(value)


class RegionDistribution(BaseModel):
    """Outlets in one region and the channel they belong to."""

    model_config = _RECORD_CONFIG

    outlets: int = 0
    channel: Channel = Field(default="retail", validation_alias=AliasChoices("channel", "type"))

    @model_validator(mode="before")
    @classmethod
    def _coerce_flat(cls, data: Any) -> Any:
        return _flat_to_record(data, "outlets", "distribution")

    @field_validator("outlets", mode="before")
    @classmethod
    def _outlets(cls, value: Any) -> int:
        return int(_non_negative(value))

    @field_validator("channel", mode="before")
    @classmethod
    def _channel(cls, value: Any) -> str:
        channel = str(value or "retail").lower()
        if channel not in CHANNELS:
            logger.warning("Unknown distribution channel %r treated as retail", value)
            return "retail"
        return channel


def _region_mapping(value: Any, section: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Ignoring %s section of type %s", section, type(value).__name__)
        return {}
    return {str(region).lower(): entry for region, entry in value.items()}


class Decision(BaseModel):
    """One team's decisions for one round."""

    model_config = _RECORD_CONFIG

    pricing: Dict[str, float] = Field(default_factory=dict)
    default_price: Optional[float] = None
    advertising: Dict[str, RegionAdvertising] = Field(default_factory=dict)
    internet: InternetMarketing = Field(
        default_factory=InternetMarketing,
        validation_alias=AliasChoices("internet", "internet_marketing"),
    )
    salesforce: Dict[str, RegionSalesforce] = Field(default_factory=dict)
    distribution: Dict[str, RegionDistribution] = Field(default_factory=dict)
    rd_budget: float = Field(default=0.0, validation_alias=AliasChoices("rd_budget", "rdBudget"))
    dividend: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _normalize_shape(cls, data: Any) -> Any:
        if data is None:
            return {}
        if not isinstance(data, dict):
            return data
        data = {key: value for key, value in data.items() if value is not None}
        pricing = data.get("pricing")
        if pricing is not None and not isinstance(pricing, dict):
            logger.warning("Pricing %r is not a mapping; brand prices fall back to defaults", pricing)
        pricing = dict(pricing) if isinstance(pricing, dict) else {}
        if "default" in pricing:
            default = pricing.pop("default")
            data.setdefault("default_price", default)
        data["pricing"] = pricing
        return data

    @field_validator("pricing", mode="before")
    @classmethod
    def _pricing(cls, value: Any) -> Dict[str, float]:
        # Unparseable or negative prices drop out so the default chain applies
        return {
            str(brand_id): safe(price)
            for brand_id, price in value.items()
            if safe(price, default=-1.0) >= 0
        }

    @field_validator("default_price", mode="before")
    @classmethod
    def _default_price(cls, value: Any) -> Optional[float]:
        if value is None or safe(value, default=-1.0) < 0:
            return None
        return safe(value)

    @field_validator("advertising", "salesforce", "distribution", mode="before")
    @classmethod
    def _regions(cls, value: Any, info) -> Dict[str, Any]:
        return _region_mapping(value, info.field_name)

    @field_validator("rd_budget", "dividend", mode="before")
    @classmethod
    def _amounts(cls, value: Any) -> float:
        return _non_negative(value)

    def price_for(self, brand_id: Optional[str]) -> Optional[float]:
        if brand_id is None:
            return None
        return self.pricing.get(brand_id)

    def advertising_in(self, region: str) -> RegionAdvertising:
        return self.advertising.get(region) or RegionAdvertising()

    def salesforce_in(self, region: str) -> RegionSalesforce:
        return self.salesforce.get(region) or RegionSalesforce()

    def distribution_in(self, region: str) -> RegionDistribution:
        return self.distribution.get(region) or RegionDistribution()

    def outlets_in(self, region: str) -> int:
        return self.distribution_in(region).outlets


def normalize_decision(raw: Any, brands: Iterable = ()) -> Decision:
    """Validate a raw decision record against a team's brands.

    Pricing entries keyed by a brand's display name are re-keyed to its id;
    ids always win when a key matches both.
    """
    if isinstance(raw, Decision):
        return raw
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        return Decision.model_validate(raw)
    raw = dict(raw)
    pricing = raw.get("pricing")
    if isinstance(pricing, dict):
        brands = list(brands)
        ids = {b.id for b in brands}
        by_name = {b.name: b.id for b in brands}
        rekeyed = {}
        for key, price in pricing.items():
            key = str(key)
            if key not in ids and key in by_name:
                logger.warning("Pricing keyed by brand name %r re-keyed to id %r", key, by_name[key])
                rekeyed.setdefault(by_name[key], price)
            else:
                rekeyed[key] = price
        raw["pricing"] = rekeyed
    return Decision.model_validate(raw)

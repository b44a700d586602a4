"""
Data Layer - game records and the boundaries around the engine.

Provides:
- Segment / Brand / Team: domain records
- Decision: canonical per-round decision schema
- BrandRegistry: brand lifecycle rules
- RoundInput: engine input snapshot (and its reader)
- GameLedger: applies round results to team state
"""

from src.data_layer.entities import (
    BENEFITS,
    COMPONENTS,
    Brand,
    Segment,
    Team,
    default_segments,
)
from src.data_layer.decision_schema import Decision, normalize_decision
from src.data_layer.errors import (
    BrandValidationError,
    RoundInputError,
    RoundSequenceError,
    SimulationError,
)
from src.data_layer.brand_registry import BrandRegistry
from src.data_layer.round_input import RoundInput, load_round_input, load_round_input_file
from src.data_layer.ledger import GameLedger

__all__ = [
    # Records
    "BENEFITS",
    "COMPONENTS",
    "Brand",
    "Segment",
    "Team",
    "default_segments",
    # Decisions
    "Decision",
    "normalize_decision",
    # Errors
    "SimulationError",
    "RoundInputError",
    "BrandValidationError",
    "RoundSequenceError",
    # Boundaries
    "BrandRegistry",
    "RoundInput",
    "load_round_input",
    "load_round_input_file",
    "GameLedger",
]

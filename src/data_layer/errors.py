"""
Exception types raised at the boundaries around the engine.

The engine itself never raises for business outcomes; these cover domain
violations detected while building its input or applying its output.
"""


class SimulationError(Exception):
    """Base class for simulation boundary errors."""


class RoundInputError(SimulationError):
    """A round snapshot could not be assembled (bad round number, unknown segment, ...)."""


class BrandValidationError(SimulationError):
    """A brand create/update request violates a brand rule."""


class RoundSequenceError(SimulationError):
    """A round was advanced out of order, twice, or before teams were ready."""

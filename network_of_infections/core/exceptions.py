"""
Exception types raised by the simulation core.
"""


class ConfigurationError(ValueError):
    """Raised when a model parameter lies outside of its valid domain."""


class TopologyError(ValueError):
    """Raised when a tie operation would break the simple-graph invariants."""

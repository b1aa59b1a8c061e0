"""
Simulation coordinator.
"""

from .controller import (
    Simulation,
    SimulationResult,
    RoundSummary,
    ActivationPolicy,
    DynamicsOrder,
    StopReason,
)

__all__ = [
    'Simulation',
    'SimulationResult',
    'RoundSummary',
    'ActivationPolicy',
    'DynamicsOrder',
    'StopReason',
]

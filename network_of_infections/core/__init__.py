"""
Core models, statistics and exceptions of the network formation simulation.
"""

from .base_models import Utility, UtilityFunction, SimulationListener
from .exceptions import ConfigurationError, TopologyError
from .stats import (
    AssortativityCondition,
    LocalConnectionStats,
    GlobalNetworkStats,
    GlobalAgentStats,
    compute_local_connection_stats,
    compute_global_network_stats,
    compute_global_agent_stats,
)

__all__ = [
    'Utility',
    'UtilityFunction',
    'SimulationListener',
    'ConfigurationError',
    'TopologyError',
    'AssortativityCondition',
    'LocalConnectionStats',
    'GlobalNetworkStats',
    'GlobalAgentStats',
    'compute_local_connection_stats',
    'compute_global_network_stats',
    'compute_global_agent_stats',
]

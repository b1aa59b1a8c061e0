from .core import ConfigurationError, TopologyError, SimulationListener, Utility, UtilityFunction
from .disease import DiseaseSpecs, DiseaseGroup
from .agent import Agent, TieChange
from .network.graph_model import Network
from .simulation.controller import Simulation, SimulationResult, RoundSummary
from .utilities import create_utility_function
from .runner import Runner, run

__all__ = [
    "ConfigurationError",
    "TopologyError",
    "SimulationListener",
    "Utility",
    "UtilityFunction",
    "DiseaseSpecs",
    "DiseaseGroup",
    "Agent",
    "TieChange",
    "Network",
    "Simulation",
    "SimulationResult",
    "RoundSummary",
    "create_utility_function",
    "Runner",
    "run",
]

"""
Base classes and interfaces for the network formation models.

This module provides abstract base classes that define the interfaces
for the pluggable components of the simulation: the utility functions
agents use to score their network position, and the listeners that
observe a running simulation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional

from .exceptions import ConfigurationError
from .stats import LocalConnectionStats, compute_local_connection_stats
from ..disease.specs import DiseaseGroup


@dataclass(frozen=True)
class Utility:
    """
    Breakdown of an agent's utility.

    The overall utility is benefits minus costs:
    benefit_direct + benefit_indirect - costs_direct - costs_disease.
    """
    benefit_direct: float = 0.0
    benefit_indirect: float = 0.0
    costs_direct: float = 0.0
    costs_disease: float = 0.0

    @property
    def overall(self) -> float:
        return self.benefit_direct + self.benefit_indirect - self.costs_direct - self.costs_disease

    def to_dict(self) -> Dict[str, float]:
        return {
            "benefit_direct": self.benefit_direct,
            "benefit_indirect": self.benefit_indirect,
            "costs_direct": self.costs_direct,
            "costs_disease": self.costs_disease,
            "overall": self.overall,
        }


class UtilityFunction(ABC):
    """
    Abstract base class for utility functions.

    A utility function scores an agent's position in the current network
    snapshot. Variants implement the benefit and cost terms over the agent's
    local connection statistics; evaluation never mutates the network.
    """

    def __init__(self, parameters: Dict[str, Any]):
        """
        Initialize the utility function.

        Args:
            parameters: Variant-specific parameters

        Raises:
            ConfigurationError: If a parameter is outside its valid domain
        """
        self.parameters = dict(parameters)
        self.name = self.__class__.__name__
        self.validate_parameters()

    # ------------------------------------------------------------------
    # evaluation
    # ------------------------------------------------------------------

    def evaluate(self, agent, network=None,
                 with_agent=None, without_agent=None) -> Utility:
        """
        Evaluate the utility of an agent.

        Args:
            agent: Agent to evaluate
            network: Network snapshot to evaluate in (defaults to the agent's network)
            with_agent: Evaluate as if a tie to this agent existed
            without_agent: Evaluate as if the tie to this agent did not exist

        Returns:
            Utility breakdown
        """
        network = network if network is not None else agent.network
        with_id = with_agent.id if with_agent is not None else None
        without_id = without_agent.id if without_agent is not None else None

        lacs = compute_local_connection_stats(network, agent.id, with_id, without_id)
        return Utility(
            benefit_direct=self.social_benefits_direct(lacs, agent, network, with_id, without_id),
            benefit_indirect=self.social_benefits_indirect(lacs, agent, network, with_id, without_id),
            costs_direct=self.social_costs(lacs, agent, network, with_id, without_id),
            costs_disease=self.disease_costs(lacs, agent),
        )

    def get_utility(self, agent) -> Utility:
        return self.evaluate(agent)

    def get_utility_with(self, agent, other) -> Utility:
        """Utility of ``agent`` if it had a tie to ``other``."""
        return self.evaluate(agent, with_agent=other)

    def get_utility_without(self, agent, other) -> Utility:
        """Utility of ``agent`` if it had no tie to ``other``."""
        return self.evaluate(agent, without_agent=other)

    # ------------------------------------------------------------------
    # terms
    # ------------------------------------------------------------------

    @abstractmethod
    def social_benefits_direct(self, lacs: LocalConnectionStats, agent, network,
                               with_id: Optional[int] = None,
                               without_id: Optional[int] = None) -> float:
        pass

    @abstractmethod
    def social_benefits_indirect(self, lacs: LocalConnectionStats, agent, network,
                                 with_id: Optional[int] = None,
                                 without_id: Optional[int] = None) -> float:
        pass

    @abstractmethod
    def social_costs(self, lacs: LocalConnectionStats, agent, network,
                     with_id: Optional[int] = None,
                     without_id: Optional[int] = None) -> float:
        pass

    def disease_costs(self, lacs: LocalConnectionStats, agent) -> float:
        """
        Risk-perceived costs of the disease.

        A susceptible agent perceives the probability of getting infected by
        its infected ties distorted by r_pi, and the severity of the disease
        distorted by r_sigma. Infected agents bear the full severity,
        recovered agents nothing.
        """
        group = agent.disease_group
        specs = agent.disease_specs
        if group is DiseaseGroup.INFECTED:
            return specs.sigma
        if group is DiseaseGroup.RECOVERED:
            return 0.0

        p = (1.0 - (1.0 - specs.gamma) ** lacs.n_i) ** (2.0 - agent.r_pi)
        s = specs.sigma ** agent.r_sigma
        return p * s

    # ------------------------------------------------------------------
    # parameters
    # ------------------------------------------------------------------

    def validate_parameters(self) -> None:
        """Validate the parameters; variants extend this with their domains."""
        pass

    def _require_non_negative(self, *keys: str) -> None:
        for key in keys:
            value = self.parameters.get(key)
            if value is None or value < 0:
                raise ConfigurationError(f"{self.name}: '{key}' must be >= 0, got {value}")

    def _require_unit_interval(self, *keys: str) -> None:
        for key in keys:
            value = self.parameters.get(key)
            if value is None or not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{self.name}: '{key}' must be in [0, 1], got {value}")

    def get_parameters(self) -> Dict[str, Any]:
        return dict(self.parameters)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.name, "parameters": self.get_parameters()}

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.parameters == other.parameters

    def __hash__(self) -> int:
        return hash((self.name, tuple(sorted(self.parameters.items()))))

    def __repr__(self) -> str:
        params = ", ".join(f"{key}={value}" for key, value in self.parameters.items())
        return f"{self.name}({params})"


class SimulationListener:
    """
    Observer of a running simulation.

    All callbacks are invoked synchronously on the simulation thread.
    Override the ones of interest; exceptions raised here stop the
    simulation and propagate to the caller.
    """

    def simulation_started(self, simulation) -> None:
        pass

    def round_finished(self, simulation, summary) -> None:
        pass

    def infection_defeated(self, simulation, summary) -> None:
        pass

    def simulation_finished(self, simulation, result) -> None:
        pass

"""
Agent class for network formation and disease transmission.
"""

import logging
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .core.exceptions import ConfigurationError
from .core.stats import AssortativityCondition, assortativity_value
from .disease.specs import DiseaseGroup, DiseaseSpecs
from .disease.sir import create_infection

logger = logging.getLogger(__name__)

DEFAULT_PHI = 0.4
DEFAULT_PSI = 1.0
DEFAULT_XI = 0.25
DEFAULT_OMEGA = 0.0
DEFAULT_AGE = 0
DEFAULT_PROFESSION = "none"


class TieChange(Enum):
    """Outcome of a single agent activation."""
    NONE = "none"
    ADDED = "added"
    REMOVED = "removed"
    DECLINED = "declined"


@dataclass
class AgentConnectionStats:
    """
    Counters of tie requests and broken ties.

    The counters only ever increase; the *_epidemic variants count the same
    events while an infection is active in the network.
    """
    accepted_requests_in: int = 0
    accepted_requests_out: int = 0
    declined_requests_in: int = 0
    declined_requests_out: int = 0
    broken_ties_active: int = 0
    broken_ties_passive: int = 0
    accepted_requests_in_epidemic: int = 0
    accepted_requests_out_epidemic: int = 0
    declined_requests_in_epidemic: int = 0
    declined_requests_out_epidemic: int = 0
    broken_ties_active_epidemic: int = 0
    broken_ties_passive_epidemic: int = 0

    def increment(self, counter: str, epidemic: bool = False) -> None:
        setattr(self, counter, getattr(self, counter) + 1)
        if epidemic:
            epidemic_counter = counter + "_epidemic"
            setattr(self, epidemic_counter, getattr(self, epidemic_counter) + 1)

    def reset(self) -> None:
        for name in asdict(self):
            setattr(self, name, 0)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _validate_range(name: str, value: float, low: float, high: float) -> float:
    if value is None or not low <= value <= high:
        raise ConfigurationError(f"'{name}' must be in [{low}, {high}], got {value}")
    return float(value)


class Agent:
    """
    Represents an individual agent in the network.

    Agents are created by ``Network.add_agent``; their ties are stored in the
    network's graph and resolved by id, the agent only keeps a handle to the
    network it belongs to.
    """

    def __init__(self, agent_id: int, network, utility_function, disease_specs: DiseaseSpecs,
                 r_sigma: float = 1.0, r_pi: float = 1.0,
                 phi: float = DEFAULT_PHI, omega: float = DEFAULT_OMEGA,
                 psi: float = DEFAULT_PSI, xi: float = DEFAULT_XI,
                 age: float = DEFAULT_AGE, profession: str = DEFAULT_PROFESSION):
        """
        Initialize an agent.

        Args:
            agent_id: Unique identifier assigned by the network
            network: Network the agent belongs to
            utility_function: Utility function used to score the agent's position
            disease_specs: Characteristics of the disease the agent may catch
            r_sigma: Risk perception of the disease severity (0 seeking, 1 neutral, 2 averse)
            r_pi: Risk perception of the probability of infection
            phi: Probability to look for a new tie when activated
            omega: Probability to pick the most similar candidate instead of a random one
            psi: Probability to review existing ties when activated
            xi: Probability to look for new ties among agents at distance 2

        Raises:
            ConfigurationError: If a parameter is outside its valid domain
        """
        if disease_specs is None or not isinstance(disease_specs, DiseaseSpecs):
            raise ConfigurationError("Agents require DiseaseSpecs")
        if utility_function is None:
            raise ConfigurationError("Agents require a utility function")

        self.id = agent_id
        self.network = network
        self.utility_function = utility_function
        self.disease_specs = disease_specs
        self.r_sigma = _validate_range("r_sigma", r_sigma, 0.0, 2.0)
        self.r_pi = _validate_range("r_pi", r_pi, 0.0, 2.0)
        self.phi = _validate_range("phi", phi, 0.0, 1.0)
        self.omega = _validate_range("omega", omega, 0.0, 1.0)
        self.psi = _validate_range("psi", psi, 0.0, 1.0)
        self.xi = _validate_range("xi", xi, 0.0, 1.0)
        self.age = age
        self.profession = profession

        # position on the unit circle, set by the network
        self.x = 0.0
        self.y = 0.0

        self.connection_stats = AgentConnectionStats()
        self.disease_group = DiseaseGroup.SUSCEPTIBLE
        self.disease = None
        self.force_infected = False

    # ========================================================================
    # TIES
    # ========================================================================

    def get_connection_ids(self) -> List[int]:
        return sorted(self.network.graph[self.id])

    def get_connections(self) -> List["Agent"]:
        return [self.network.get_agent(agent_id) for agent_id in self.get_connection_ids()]

    def get_degree(self) -> int:
        return self.network.graph.degree(self.id)

    def is_connected_to(self, other: "Agent") -> bool:
        return self.network.graph.has_edge(self.id, other.id)

    def add_connection(self, other: "Agent") -> None:
        """Create a tie to ``other`` without consulting either agent."""
        self.network.add_tie(self.id, other.id)

    def remove_connection(self, other: "Agent") -> None:
        """Remove the tie to ``other``."""
        self.network.remove_tie(self.id, other.id)

    def disconnect_from(self, other: "Agent") -> None:
        """Unilaterally break the tie to ``other``, counting an active/passive break."""
        self.remove_connection(other)
        epidemic = self.network.has_active_infection()
        self.connection_stats.increment("broken_ties_active", epidemic)
        other.connection_stats.increment("broken_ties_passive", epidemic)

    def connect_to(self, other: "Agent") -> bool:
        """
        Request a tie to ``other``.

        The request is accepted if the tie does not lower the other agent's
        utility. Request counters are updated on both sides.

        Args:
            other: Agent to send the request to

        Returns:
            True if the tie was created
        """
        epidemic = self.network.has_active_infection()
        if other.accepts_connection_from(self):
            self.network.add_tie(self.id, other.id)
            self.connection_stats.increment("accepted_requests_out", epidemic)
            other.connection_stats.increment("accepted_requests_in", epidemic)
            return True

        self.connection_stats.increment("declined_requests_out", epidemic)
        other.connection_stats.increment("declined_requests_in", epidemic)
        return False

    def accepts_connection_from(self, other: "Agent") -> bool:
        return self.get_utility_with(other).overall >= self.get_utility().overall

    # ========================================================================
    # UTILITY
    # ========================================================================

    def get_utility(self):
        return self.utility_function.get_utility(self)

    def get_utility_with(self, other: "Agent"):
        return self.utility_function.get_utility_with(self, other)

    def get_utility_without(self, other: "Agent"):
        return self.utility_function.get_utility_without(self, other)

    def geographic_distance_to(self, other: "Agent") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def _removal_gains(self) -> Dict[int, float]:
        current = self.get_utility().overall
        gains = {}
        for other in self.get_connections():
            gain = self.get_utility_without(other).overall - current
            if gain > 0:
                gains[other.id] = gain
        return gains

    def is_satisfied(self) -> bool:
        """
        Check whether the agent wants to keep its ties as they are.

        The agent is satisfied if no tie removal strictly improves its utility
        and no non-neighbour exists with whom a tie would strictly improve
        its utility and be accepted. Costs one counterfactual utility per tie
        and per non-neighbour, so a network-wide check grows with N^2.
        """
        if self._removal_gains():
            return False

        current = self.get_utility().overall
        for other in self.get_non_neighbors():
            if self.get_utility_with(other).overall > current and other.accepts_connection_from(self):
                return False
        return True

    # ========================================================================
    # DECISION PROTOCOL
    # ========================================================================

    def get_non_neighbors(self) -> List["Agent"]:
        connected = set(self.network.graph[self.id])
        return [agent for agent in self.network.get_agents()
                if agent.id != self.id and agent.id not in connected]

    def get_distance2_neighbors(self) -> List["Agent"]:
        graph = self.network.graph
        direct = set(graph[self.id])
        distance2 = set()
        for neighbor_id in direct:
            distance2.update(graph[neighbor_id])
        distance2 -= direct
        distance2.discard(self.id)
        return [self.network.get_agent(agent_id) for agent_id in sorted(distance2)]

    def _similarity_distance(self, other: "Agent", conditions, ranges) -> float:
        distance = 0.0
        for condition in conditions:
            mine = assortativity_value(self, condition)
            theirs = assortativity_value(other, condition)
            if condition is AssortativityCondition.PROFESSION:
                distance += 0.0 if mine == theirs else 1.0
            elif ranges[condition] > 0:
                distance += abs(mine - theirs) / ranges[condition]
        return distance

    def _most_similar(self, pool: List["Agent"], rng: np.random.Generator) -> "Agent":
        conditions = self.network.assortativity_conditions
        ranges = {}
        for condition in conditions:
            if condition is AssortativityCondition.PROFESSION:
                continue
            values = [assortativity_value(agent, condition) for agent in pool + [self]]
            ranges[condition] = max(values) - min(values)

        distances = [self._similarity_distance(other, conditions, ranges) for other in pool]
        best = min(distances)
        closest = [other for other, distance in zip(pool, distances) if distance == best]
        return closest[int(rng.integers(len(closest)))]

    def select_candidate(self, rng: np.random.Generator) -> Optional["Agent"]:
        """
        Draw a candidate for a new tie.

        With probability xi the candidate comes from the agents at distance 2
        (if there are any), otherwise from all non-neighbours. With
        probability omega the most similar agent of that pool is picked,
        otherwise a random one.
        """
        pool = []
        if rng.random() < self.xi:
            pool = self.get_distance2_neighbors()
        if not pool:
            pool = self.get_non_neighbors()
        if not pool:
            return None

        if self.omega > 0 and rng.random() < self.omega:
            return self._most_similar(pool, rng)
        return pool[int(rng.integers(len(pool)))]

    def compute_round(self, rng: np.random.Generator) -> TieChange:
        """
        Activate the agent once.

        The agent first (with probability psi) breaks the tie whose removal
        improves its utility the most. If it keeps all its ties it may (with
        probability phi) request a tie to a candidate that improves its
        utility. At most one tie changes per activation.

        Args:
            rng: Random number generator of the simulation

        Returns:
            The tie change caused by this activation
        """
        if rng.random() < self.psi:
            gains = self._removal_gains()
            if gains:
                best = max(gains.values())
                candidates = sorted(agent_id for agent_id, gain in gains.items() if gain == best)
                partner = self.network.get_agent(candidates[int(rng.integers(len(candidates)))])
                self.disconnect_from(partner)
                logger.debug(f"Agent {self.id} broke tie to agent {partner.id}")
                return TieChange.REMOVED

        if rng.random() < self.phi:
            candidate = self.select_candidate(rng)
            if candidate is None:
                return TieChange.NONE
            if self.get_utility_with(candidate).overall <= self.get_utility().overall:
                return TieChange.NONE
            if self.connect_to(candidate):
                logger.debug(f"Agent {self.id} created tie to agent {candidate.id}")
                return TieChange.ADDED
            return TieChange.DECLINED

        return TieChange.NONE

    # ========================================================================
    # DISEASE
    # ========================================================================

    def is_susceptible(self) -> bool:
        return self.disease_group is DiseaseGroup.SUSCEPTIBLE

    def is_infected(self) -> bool:
        return self.disease_group is DiseaseGroup.INFECTED

    def is_recovered(self) -> bool:
        return self.disease_group is DiseaseGroup.RECOVERED

    def is_infectious(self) -> bool:
        return self.is_infected() and self.disease is not None and self.disease.is_infectious()

    @property
    def time_until_recovered(self) -> int:
        if not self.is_infected() or self.disease is None:
            return 0
        return self.disease.get_time_until_cured()

    def _become_infected(self) -> None:
        self.disease = create_infection(self.disease_specs)
        self.disease_group = DiseaseGroup.INFECTED

    def infect(self, disease_specs: DiseaseSpecs) -> None:
        """
        Infect the agent, whatever its current disease group.

        Args:
            disease_specs: Characteristics of the disease, must match the agent's own

        Raises:
            ConfigurationError: If the disease differs from the agent's disease
        """
        if disease_specs != self.disease_specs:
            raise ConfigurationError(f"Agent {self.id} cannot be infected with a disease "
                                     f"other than its own ({self.disease_specs})")
        self._become_infected()
        self.force_infected = True
        self.network.on_agent_changed(self)

    def cure(self) -> None:
        """Move the agent to the recovered group."""
        self.disease = None
        self.disease_group = DiseaseGroup.RECOVERED
        self.force_infected = False
        self.network.on_agent_changed(self)

    def make_susceptible(self) -> None:
        """Move the agent back to the susceptible group."""
        self.disease = None
        self.disease_group = DiseaseGroup.SUSCEPTIBLE
        self.force_infected = False
        self.network.on_agent_changed(self)

    def fight_disease(self) -> bool:
        """
        Count down the infection by one round.

        Returns:
            True if the agent recovered in this round
        """
        if not self.is_infected() or self.disease is None:
            return False
        self.disease.evolve()
        if self.disease.is_cured():
            self.disease = None
            self.disease_group = DiseaseGroup.RECOVERED
            self.force_infected = False
            return True
        return False

    def compute_disease_transmission(self, n_infectious: int, rng: np.random.Generator) -> bool:
        """
        Expose a susceptible agent to its infectious ties.

        One Bernoulli(gamma) trial per infectious tie; a single success infects.

        Args:
            n_infectious: Number of infectious ties
            rng: Random number generator of the simulation

        Returns:
            True if the agent got infected
        """
        if not self.is_susceptible() or n_infectious <= 0:
            return False
        if bool(np.any(rng.random(n_infectious) < self.disease_specs.gamma)):
            self._become_infected()
            return True
        return False

    # ========================================================================
    # MISC
    # ========================================================================

    def reset(self) -> None:
        """Clear disease state and counters, keep parameters."""
        self.disease = None
        self.disease_group = DiseaseGroup.SUSCEPTIBLE
        self.force_infected = False
        self.connection_stats.reset()

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "r_sigma": self.r_sigma,
            "r_pi": self.r_pi,
            "phi": self.phi,
            "omega": self.omega,
            "psi": self.psi,
            "xi": self.xi,
            "age": self.age,
            "profession": self.profession,
            "disease_group": self.disease_group.value,
            "time_until_recovered": self.time_until_recovered,
            "force_infected": self.force_infected,
        }

    def __repr__(self) -> str:
        return f"Agent(id={self.id}, group={self.disease_group.value})"

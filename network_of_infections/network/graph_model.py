"""
Network model owning the agents and the ties between them.
"""

import logging
import math
import threading
from typing import Dict, Any, Iterator, List, Optional, Tuple

import numpy as np
import networkx as nx

from ..agent import Agent
from ..core import stats
from ..core.exceptions import TopologyError
from ..core.stats import AssortativityCondition
from ..disease.specs import DiseaseGroup, DiseaseSpecs

logger = logging.getLogger(__name__)


class Network:
    """
    Manages the agents and the undirected, simple graph of ties between them.

    Agents are stored by id; the ties live in a ``networkx.Graph`` whose nodes
    are the agent ids. All tie mutations go through this class so the graph
    stays simple and symmetric, and so stability is re-evaluated after any
    external change.
    """

    def __init__(self, rounds_required_for_stability: int = 1,
                 assortativity_conditions: Optional[List[AssortativityCondition]] = None):
        """
        Initialize an empty network.

        Args:
            rounds_required_for_stability: Consecutive rounds in which all agents
                must be satisfied for the network to count as stable
            assortativity_conditions: Attributes agents compare when looking
                for similar candidates
        """
        if rounds_required_for_stability < 1:
            raise ValueError("rounds_required_for_stability must be >= 1")

        self.graph = nx.Graph()
        self.agents: Dict[int, Agent] = {}
        self.rounds_required_for_stability = rounds_required_for_stability
        self.assortativity_conditions = list(assortativity_conditions or [AssortativityCondition.AGE])
        self.timesteps_stable = 0
        self._next_id = 1
        self._run_lock = threading.Lock()

    # ========================================================================
    # AGENTS
    # ========================================================================

    @property
    def n(self) -> int:
        return len(self.agents)

    def add_agent(self, utility_function, disease_specs: DiseaseSpecs,
                  agent_id: Optional[int] = None, **agent_params) -> Agent:
        """
        Create a new agent and add it to the network.

        Args:
            utility_function: Utility function of the agent
            disease_specs: Disease characteristics of the agent
            agent_id: Id to use instead of a fresh one (e.g. when restoring a saved network)
            **agent_params: r_sigma, r_pi, phi, omega, psi, xi, age, profession

        Returns:
            The new agent

        Raises:
            TopologyError: If the requested id is already taken
        """
        if agent_id is None:
            agent_id = self._next_id
        elif agent_id in self.agents:
            raise TopologyError(f"Agent id {agent_id} is already taken")

        agent = Agent(agent_id, self, utility_function, disease_specs, **agent_params)
        self._next_id = max(self._next_id, agent_id + 1)
        self.agents[agent.id] = agent
        self.graph.add_node(agent.id)
        self._arrange_agents_in_circle()
        self.reset_stability()
        logger.debug(f"Added agent {agent.id}")
        return agent

    def remove_agent(self, agent_id: Optional[int] = None) -> Optional[Agent]:
        """
        Remove an agent and all of its ties.

        Args:
            agent_id: Agent to remove; the most recently added agent if omitted

        Returns:
            The removed agent, or None if the network is empty

        Raises:
            TopologyError: If the agent is not part of the network
        """
        if not self.agents:
            return None
        if agent_id is None:
            agent_id = max(self.agents)
        agent = self.get_agent(agent_id)

        self.graph.remove_node(agent_id)
        del self.agents[agent_id]
        agent.network = None
        self._arrange_agents_in_circle()
        self.reset_stability()
        logger.debug(f"Removed agent {agent_id}")
        return agent

    def get_agent(self, agent_id: int) -> Agent:
        try:
            return self.agents[agent_id]
        except KeyError:
            raise TopologyError(f"Agent {agent_id} is not part of the network") from None

    def get_agents(self) -> List[Agent]:
        return [self.agents[agent_id] for agent_id in sorted(self.agents)]

    def __iter__(self) -> Iterator[Agent]:
        return iter(self.get_agents())

    def __len__(self) -> int:
        return self.n

    def _arrange_agents_in_circle(self) -> None:
        for i, agent_id in enumerate(sorted(self.agents)):
            angle = 2.0 * math.pi * i / self.n
            agent = self.agents[agent_id]
            agent.x = math.cos(angle)
            agent.y = math.sin(angle)

    # ========================================================================
    # TIES
    # ========================================================================

    def _check_tie(self, agent_id: int, other_id: int) -> None:
        self.get_agent(agent_id)
        self.get_agent(other_id)
        if agent_id == other_id:
            raise TopologyError(f"Agent {agent_id} cannot be tied to itself")

    def add_tie(self, agent_id: int, other_id: int) -> None:
        """
        Create a tie between two agents.

        Raises:
            TopologyError: For self ties, duplicate ties and unknown agents
        """
        self._check_tie(agent_id, other_id)
        if self.graph.has_edge(agent_id, other_id):
            raise TopologyError(f"Agents {agent_id} and {other_id} are already tied")
        self.graph.add_edge(agent_id, other_id)
        self.reset_stability()

    def remove_tie(self, agent_id: int, other_id: int) -> None:
        """
        Remove the tie between two agents.

        Raises:
            TopologyError: If the tie does not exist or an agent is unknown
        """
        self._check_tie(agent_id, other_id)
        if not self.graph.has_edge(agent_id, other_id):
            raise TopologyError(f"Agents {agent_id} and {other_id} are not tied")
        self.graph.remove_edge(agent_id, other_id)
        self.reset_stability()

    def has_tie(self, agent_id: int, other_id: int) -> bool:
        return self.graph.has_edge(agent_id, other_id)

    def get_ties(self) -> List[Tuple[int, int]]:
        return sorted(tuple(sorted(edge)) for edge in self.graph.edges)

    def get_tie_count(self) -> int:
        return self.graph.number_of_edges()

    def create_full_network(self) -> None:
        """Tie every pair of agents."""
        agent_ids = sorted(self.agents)
        for i, agent_id in enumerate(agent_ids):
            for other_id in agent_ids[i + 1:]:
                self.graph.add_edge(agent_id, other_id)
        self.reset_stability()

    def clear_connections(self) -> None:
        """Remove all ties, keep the agents."""
        self.graph.remove_edges_from(list(self.graph.edges))
        self.reset_stability()

    def reset_agents(self) -> None:
        """Remove all ties and reset disease state and counters, keep agent parameters."""
        self.clear_connections()
        for agent in self.agents.values():
            agent.reset()

    def clear(self) -> None:
        """Remove all agents."""
        for agent in self.agents.values():
            agent.network = None
        self.agents.clear()
        self.graph.clear()
        self._next_id = 1
        self.reset_stability()

    # ========================================================================
    # DISEASE
    # ========================================================================

    def on_agent_changed(self, agent: Agent) -> None:
        """Called by agents whose disease state was changed from outside a simulation round."""
        self.reset_stability()

    def get_agents_by_group(self, group: DiseaseGroup) -> List[Agent]:
        return [agent for agent in self.get_agents() if agent.disease_group is group]

    def get_infectious_agents(self) -> List[Agent]:
        return [agent for agent in self.get_agents() if agent.is_infectious()]

    def has_active_infection(self) -> bool:
        return any(agent.is_infected() for agent in self.agents.values())

    def infect_random_agent(self, disease_specs: DiseaseSpecs,
                            rng: Optional[np.random.Generator] = None) -> Optional[Agent]:
        """
        Infect a random susceptible agent.

        Args:
            disease_specs: Disease to infect the agent with
            rng: Random number generator (a fresh unseeded one if omitted)

        Returns:
            The infected agent, or None if no agent is susceptible
        """
        susceptibles = self.get_agents_by_group(DiseaseGroup.SUSCEPTIBLE)
        if not susceptibles:
            logger.warning("No susceptible agent left to infect")
            return None
        rng = rng if rng is not None else np.random.default_rng()
        agent = susceptibles[int(rng.integers(len(susceptibles)))]
        agent.infect(disease_specs)
        logger.info(f"Infected agent {agent.id}")
        return agent

    # ========================================================================
    # STABILITY
    # ========================================================================

    def reset_stability(self) -> None:
        self.timesteps_stable = 0

    def is_pairwise_stable(self) -> bool:
        """
        True if every agent is satisfied with its ties right now.

        Stops at the first unsatisfied agent; a full check costs one
        counterfactual utility per tie and per non-neighbour of every agent.
        """
        return all(agent.is_satisfied() for agent in self.agents.values())

    def compute_stability(self) -> bool:
        """
        Record whether the network is pairwise stable in the current round.

        Returns:
            Whether the network counts as stable afterwards
        """
        if self.is_pairwise_stable():
            self.timesteps_stable += 1
        else:
            self.timesteps_stable = 0
        return self.is_stable()

    def check_initial_stability(self) -> bool:
        """
        Check the network before any round of a run.

        The check never counts as a round: a network that is satisfied
        already only becomes stable here if a single satisfied round is
        enough.

        Returns:
            Whether the network counts as stable afterwards
        """
        if (self.timesteps_stable == 0 and self.rounds_required_for_stability == 1
                and self.is_pairwise_stable()):
            self.timesteps_stable = 1
        return self.is_stable()

    def is_stable(self) -> bool:
        return self.timesteps_stable >= self.rounds_required_for_stability

    def acquire_run_lock(self) -> None:
        """
        Reserve the network for a running simulation.

        Raises:
            RuntimeError: If another simulation is already running on this network
        """
        if not self._run_lock.acquire(blocking=False):
            raise RuntimeError("Another simulation is already running on this network")

    def release_run_lock(self) -> None:
        self._run_lock.release()

    # ========================================================================
    # STATISTICS
    # ========================================================================

    def get_av_degree(self) -> float:
        return stats.compute_average_degree(self)

    def get_av_clustering(self) -> float:
        return stats.compute_average_clustering(self)

    def get_av_closeness(self) -> float:
        return stats.compute_average_closeness(self)

    def get_assortativity(self, condition: Optional[AssortativityCondition] = None) -> float:
        condition = condition or self.assortativity_conditions[0]
        return stats.compute_assortativity(self, condition)

    def get_global_stats(self) -> stats.GlobalNetworkStats:
        return stats.compute_global_network_stats(self)

    def get_agent_stats(self) -> stats.GlobalAgentStats:
        return stats.compute_global_agent_stats(self)

    def get_network_info(self) -> Dict[str, Any]:
        """
        Get a summary of the current network state.

        Returns:
            Dictionary with network statistics and disease group counts
        """
        info = self.get_global_stats().to_dict()
        info.update({group.value: len(self.get_agents_by_group(group)) for group in DiseaseGroup})
        return info

"""
Initial topologies and agent attributes for networks of agents.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence, Tuple, Union

import numpy as np
import networkx as nx

from .graph_model import Network
from ..core.exceptions import ConfigurationError
from ..disease.specs import DiseaseSpecs

logger = logging.getLogger(__name__)

TOPOLOGIES = ("empty", "full", "ring", "star", "random", "smallworld", "scalefree")


def generate_graph(topology: str, n_agents: int, topology_params: Optional[Dict[str, Any]] = None,
                   random_seed: Optional[int] = None) -> nx.Graph:
    """
    Generate a graph with nodes 0..n_agents-1 for the given topology.

    Args:
        topology: One of TOPOLOGIES
        n_agents: Number of nodes
        topology_params: Topology-specific parameters (see get_topology_params)
        random_seed: Random seed for the stochastic topologies

    Returns:
        networkx Graph
    """
    params = get_topology_params(topology)
    params.update(topology_params or {})

    if topology == "empty":
        return nx.empty_graph(n_agents)
    if topology == "full":
        return nx.complete_graph(n_agents)
    if topology == "ring":
        return nx.cycle_graph(n_agents) if n_agents > 2 else nx.path_graph(n_agents)
    if topology == "star":
        return nx.star_graph(n_agents - 1) if n_agents > 0 else nx.empty_graph(0)
    if topology == "random":
        return nx.erdos_renyi_graph(n_agents, params["p"], seed=random_seed)
    if topology == "smallworld":
        return nx.watts_strogatz_graph(n_agents, params["k"], params["beta"], seed=random_seed)
    if topology == "scalefree":
        return nx.barabasi_albert_graph(n_agents, params["m"], seed=random_seed)
    raise ConfigurationError(f"Unknown topology: {topology}. Available: {', '.join(TOPOLOGIES)}")


def get_topology_params(topology: str) -> Dict[str, Any]:
    """Get default parameters for a topology"""
    if topology == "random":
        return {"p": 0.1}
    if topology == "smallworld":
        return {"k": 4, "beta": 0.1}
    if topology == "scalefree":
        return {"m": 2}
    return {}


def apply_topology(network: Network, topology: str, topology_params: Optional[Dict[str, Any]] = None,
                   random_seed: Optional[int] = None) -> Network:
    """
    Replace the ties of a network with the given topology.

    Graph node i is mapped to the network's i-th agent in id order.
    """
    agent_ids = sorted(network.agents)
    graph = generate_graph(topology, len(agent_ids), topology_params, random_seed)

    network.clear_connections()
    for u, v in graph.edges:
        network.add_tie(agent_ids[u], agent_ids[v])
    logger.debug(f"Applied {topology} topology with {network.get_tie_count()} ties")
    return network


# ============================================================================
# AGENT ATTRIBUTES
# ============================================================================

# either a mapping of value to weight or a sequence of equally likely values
Distribution = Union[Dict[Any, float], Sequence[Any]]


def distribution_probabilities(name: str, distribution: Distribution) -> Tuple[List[Any], np.ndarray]:
    """
    Get the values of a distribution and their probabilities.

    Args:
        name: Name of the distribution for error messages
        distribution: Mapping of value to (relative) weight, or a sequence of values.
            Values repeated in a sequence are drawn more often.

    Returns:
        The values and their selection probabilities

    Raises:
        ConfigurationError: If the distribution is empty or has invalid weights
    """
    if isinstance(distribution, dict):
        values = list(distribution.keys())
        try:
            weights = np.array([float(weight) for weight in distribution.values()])
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} weights must be numbers") from None
    elif isinstance(distribution, (list, tuple)):
        values = list(distribution)
        weights = np.ones(len(values))
    else:
        raise ConfigurationError(f"{name} must be a mapping of value to weight or a list of values")

    if not values:
        raise ConfigurationError(f"{name} must not be empty")
    if np.any(weights < 0) or weights.sum() <= 0:
        raise ConfigurationError(f"{name} weights must be >= 0 and not all 0")
    return values, weights / weights.sum()


def sample_attribute(name: str, distribution: Distribution, size: int,
                     rng: np.random.Generator) -> List[Any]:
    """Draw ``size`` values from a distribution (see ``distribution_probabilities``)."""
    values, probabilities = distribution_probabilities(name, distribution)
    return [values[i] for i in rng.choice(len(values), size=size, p=probabilities)]


def _to_age(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid age: {value!r}") from None


def create_network(n_agents: int, utility_function, disease_specs: DiseaseSpecs,
                   topology: str = "empty", topology_params: Optional[Dict[str, Any]] = None,
                   random_seed: Optional[int] = None,
                   agent_params: Optional[Dict[str, Any]] = None,
                   age_distribution: Optional[Distribution] = None,
                   profession_distribution: Optional[Distribution] = None,
                   rng: Optional[np.random.Generator] = None,
                   **network_params) -> Network:
    """
    Create a network of agents with an initial topology.

    All agents share the utility function, the disease and ``agent_params``.
    Ages and professions are drawn per agent from the given distributions and
    take precedence over ``agent_params``.

    Args:
        n_agents: Number of agents
        utility_function: Utility function shared by all agents
        disease_specs: Disease characteristics shared by all agents
        topology: Initial topology
        topology_params: Topology-specific parameters
        random_seed: Random seed for the stochastic topologies
        agent_params: Keyword arguments passed to every ``add_agent`` call
        age_distribution: Ages to draw from (see ``sample_attribute``)
        profession_distribution: Professions to draw from (see ``sample_attribute``)
        rng: Random number generator for the attributes; seeded with random_seed if omitted
        **network_params: Keyword arguments for the ``Network`` constructor

    Returns:
        The populated network
    """
    if n_agents < 0:
        raise ConfigurationError(f"n_agents must be >= 0, got {n_agents}")

    rng = rng if rng is not None else np.random.default_rng(random_seed)
    per_agent = [dict(agent_params or {}) for _ in range(n_agents)]
    if age_distribution is not None:
        ages = sample_attribute("age_distribution", age_distribution, n_agents, rng)
        for params, age in zip(per_agent, ages):
            params["age"] = _to_age(age)
    if profession_distribution is not None:
        professions = sample_attribute("profession_distribution", profession_distribution, n_agents, rng)
        for params, profession in zip(per_agent, professions):
            params["profession"] = str(profession)

    network = Network(**network_params)
    for params in per_agent:
        network.add_agent(utility_function, disease_specs, **params)
    return apply_topology(network, topology, topology_params, random_seed)

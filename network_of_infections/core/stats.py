"""
Statistics over network snapshots.

This module provides the stateless aggregation helpers used by the agents
(to evaluate utilities), by the network (to test stability and report
aggregates) and by external reporting. All functions tolerate disconnected
graphs and isolated agents.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Any

import numpy as np
import networkx as nx

from ..disease.specs import DiseaseGroup, DiseaseSpecs


class AssortativityCondition(Enum):
    """Agent attributes that assortativity can be computed for."""
    AGE = "age"
    PROFESSION = "profession"
    RISK_PERCEPTION = "risk_perception"


@dataclass(frozen=True)
class LocalConnectionStats:
    """
    Counts describing an agent's neighbourhood.

    n: direct ties, split by disease group of the tied agent (n_s, n_i, n_r)
    m: agents at distance 2, split by disease group (m_s, m_i, m_r)
    y: open triads (pairs of direct ties that are not tied to each other)
    z: closed triads (pairs of direct ties that are tied to each other)
    """
    n: int = 0
    n_s: int = 0
    n_i: int = 0
    n_r: int = 0
    m: int = 0
    m_s: int = 0
    m_i: int = 0
    m_r: int = 0
    y: int = 0
    z: int = 0
    net_size: int = 0


@dataclass(frozen=True)
class GlobalNetworkStats:
    stable: bool
    n_agents: int
    ties: int
    av_degree: float
    av_clustering: float
    av_closeness: float
    av_path_length: float
    diameter: int
    density: float
    assortativity: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stable": self.stable,
            "n_agents": self.n_agents,
            "ties": self.ties,
            "av_degree": self.av_degree,
            "av_clustering": self.av_clustering,
            "av_closeness": self.av_closeness,
            "av_path_length": self.av_path_length,
            "diameter": self.diameter,
            "density": self.density,
            "assortativity": dict(self.assortativity),
        }


@dataclass(frozen=True)
class GlobalAgentStats:
    n: int
    n_s: int
    n_i: int
    n_r: int
    n_r_sigma_averse: int
    n_r_sigma_neutral: int
    n_r_sigma_seeking: int
    av_r_sigma: float
    n_r_pi_averse: int
    n_r_pi_neutral: int
    n_r_pi_seeking: int
    av_r_pi: float


# ============================================================================
# LOCAL STATISTICS
# ============================================================================

def _count_groups(network, agent_ids) -> Dict[DiseaseGroup, int]:
    counts = {group: 0 for group in DiseaseGroup}
    for agent_id in agent_ids:
        counts[network.get_agent(agent_id).disease_group] += 1
    return counts


def compute_local_connection_stats(network, agent_id: int,
                                   with_id: Optional[int] = None,
                                   without_id: Optional[int] = None) -> LocalConnectionStats:
    """
    Compute the neighbourhood counts of an agent.

    The optional ``with_id``/``without_id`` evaluate the counterfactual network
    in which a tie to that agent is added or removed. The network itself is
    never modified.
    """
    graph = network.graph
    direct = set(graph[agent_id])
    if with_id is not None and with_id != agent_id:
        direct.add(with_id)
    if without_id is not None:
        direct.discard(without_id)

    n = len(direct)
    if n == 0:
        return LocalConnectionStats(net_size=network.n)

    direct_groups = _count_groups(network, direct)

    distance2 = set()
    closed = 0
    for neighbor_id in direct:
        neighbors_of_neighbor = set(graph[neighbor_id])
        distance2.update(neighbors_of_neighbor)
        closed += len(neighbors_of_neighbor & direct)
    distance2 -= direct
    distance2.discard(agent_id)
    distance2_groups = _count_groups(network, distance2)

    # each closed triad has been seen from both of its ends
    z = closed // 2
    y = n * (n - 1) // 2 - z

    return LocalConnectionStats(
        n=n,
        n_s=direct_groups[DiseaseGroup.SUSCEPTIBLE],
        n_i=direct_groups[DiseaseGroup.INFECTED],
        n_r=direct_groups[DiseaseGroup.RECOVERED],
        m=len(distance2),
        m_s=distance2_groups[DiseaseGroup.SUSCEPTIBLE],
        m_i=distance2_groups[DiseaseGroup.INFECTED],
        m_r=distance2_groups[DiseaseGroup.RECOVERED],
        y=y,
        z=z,
        net_size=network.n,
    )


def compute_probability_of_infection(disease_specs: DiseaseSpecs, n_infected: int) -> float:
    """Probability of at least one transmission from ``n_infected`` infectious ties."""
    return 1.0 - (1.0 - disease_specs.gamma) ** n_infected


def compute_first_order_degree(network, agent_id: int) -> int:
    return network.graph.degree(agent_id)


def compute_second_order_degree(network, agent_id: int) -> int:
    return compute_local_connection_stats(network, agent_id).m


def geodesic_distances(network, source_id: int,
                       with_id: Optional[int] = None,
                       without_id: Optional[int] = None) -> Dict[int, int]:
    """
    Breadth-first geodesic distances from ``source_id`` to all reachable agents.

    Supports the same counterfactual tie as ``compute_local_connection_stats``.
    The source itself is included with distance 0.
    """
    graph = network.graph

    def neighbors(node_id):
        result = set(graph[node_id])
        if node_id == source_id:
            if with_id is not None and with_id != source_id:
                result.add(with_id)
            if without_id is not None:
                result.discard(without_id)
        elif node_id == with_id:
            result.add(source_id)
        elif node_id == without_id:
            result.discard(source_id)
        return result

    distances = {source_id: 0}
    queue = deque([source_id])
    while queue:
        current = queue.popleft()
        for neighbor_id in neighbors(current):
            if neighbor_id not in distances:
                distances[neighbor_id] = distances[current] + 1
                queue.append(neighbor_id)
    return distances


# ============================================================================
# CENTRALITY AND CLUSTERING
# ============================================================================

def compute_closeness(network, agent_id: int) -> float:
    """Inverse average geodesic distance to all reachable agents (0 if isolated)."""
    distances = geodesic_distances(network, agent_id)
    reachable = len(distances) - 1
    if reachable == 0:
        return 0.0
    return reachable / float(sum(distances.values()))


def compute_clustering(network, agent_id: int) -> float:
    """Share of neighbour pairs that are tied themselves (0 for degree < 2)."""
    return float(nx.clustering(network.graph, agent_id))


def compute_average_clustering(network) -> float:
    if network.n == 0:
        return 0.0
    return float(nx.average_clustering(network.graph))


def compute_average_closeness(network) -> float:
    if network.n == 0:
        return 0.0
    return float(np.mean([compute_closeness(network, agent_id) for agent_id in network.graph.nodes]))


def compute_average_degree(network) -> float:
    if network.n == 0:
        return 0.0
    return 2.0 * network.graph.number_of_edges() / network.n


def compute_density(network) -> float:
    return float(nx.density(network.graph)) if network.n > 1 else 0.0


def compute_average_betweenness(network) -> float:
    if network.n == 0:
        return 0.0
    betweenness = nx.betweenness_centrality(network.graph)
    return float(np.mean(list(betweenness.values())))


def _reachable_path_lengths(network):
    for _, lengths in nx.all_pairs_shortest_path_length(network.graph):
        for length in lengths.values():
            if length > 0:
                yield length


def compute_average_path_length(network) -> float:
    """Average geodesic distance over all pairs of mutually reachable agents."""
    lengths = list(_reachable_path_lengths(network))
    if not lengths:
        return 0.0
    return float(np.mean(lengths))


def compute_diameter(network) -> int:
    """Longest geodesic distance between any two mutually reachable agents."""
    return max(_reachable_path_lengths(network), default=0)


# ============================================================================
# ASSORTATIVITY
# ============================================================================

def assortativity_value(agent, condition: AssortativityCondition):
    """Attribute value of an agent used for the given assortativity condition."""
    if condition is AssortativityCondition.AGE:
        return agent.age
    if condition is AssortativityCondition.RISK_PERCEPTION:
        return agent.r_sigma + agent.r_pi
    if condition is AssortativityCondition.PROFESSION:
        return agent.profession
    raise ValueError(f"Unknown assortativity condition: {condition}")


def _numeric_assortativity(values_from: np.ndarray, values_to: np.ndarray) -> float:
    if values_from.size < 2 or np.std(values_from) == 0 or np.std(values_to) == 0:
        return 0.0
    pcc = float(np.corrcoef(values_from, values_to)[0, 1])
    return 0.0 if np.isnan(pcc) else pcc


def _categorical_assortativity(values_from, values_to) -> float:
    categories = sorted(set(values_from) | set(values_to))
    index = {category: i for i, category in enumerate(categories)}
    mixing = np.zeros((len(categories), len(categories)))
    for a, b in zip(values_from, values_to):
        mixing[index[a], index[b]] += 1
    mixing /= mixing.sum()
    a_squared = float(np.sum(mixing.sum(axis=1) ** 2))
    if np.isclose(a_squared, 1.0):
        return 0.0
    return (float(np.trace(mixing)) - a_squared) / (1.0 - a_squared)


def compute_assortativity(network, condition: AssortativityCondition) -> float:
    """
    Newman's assortativity coefficient of an agent attribute over all ties.

    Numeric attributes (age, risk perception) use the Pearson correlation over
    both orientations of every tie, categorical ones (profession) the
    mixing-matrix formulation. Undefined values (no ties, no variance) are 0.
    """
    edges = list(network.graph.edges)
    if not edges:
        return 0.0

    values_from = []
    values_to = []
    for u, v in edges:
        value_u = assortativity_value(network.get_agent(u), condition)
        value_v = assortativity_value(network.get_agent(v), condition)
        values_from.extend([value_u, value_v])
        values_to.extend([value_v, value_u])

    if condition is AssortativityCondition.PROFESSION:
        return _categorical_assortativity(values_from, values_to)
    return _numeric_assortativity(np.asarray(values_from, dtype=float),
                                  np.asarray(values_to, dtype=float))


# ============================================================================
# GLOBAL STATISTICS
# ============================================================================

def compute_global_network_stats(network) -> GlobalNetworkStats:
    return GlobalNetworkStats(
        stable=network.is_stable(),
        n_agents=network.n,
        ties=network.graph.number_of_edges(),
        av_degree=compute_average_degree(network),
        av_clustering=compute_average_clustering(network),
        av_closeness=compute_average_closeness(network),
        av_path_length=compute_average_path_length(network),
        diameter=compute_diameter(network),
        density=compute_density(network),
        assortativity={condition.value: compute_assortativity(network, condition)
                       for condition in AssortativityCondition},
    )


def _risk_attitudes(values):
    averse = sum(1 for value in values if value > 1.0)
    seeking = sum(1 for value in values if value < 1.0)
    neutral = len(values) - averse - seeking
    mean = float(np.mean(values)) if values else 0.0
    return averse, neutral, seeking, mean


def compute_global_agent_stats(network) -> GlobalAgentStats:
    agents = list(network.get_agents())
    groups = {group: 0 for group in DiseaseGroup}
    for agent in agents:
        groups[agent.disease_group] += 1

    sigma_averse, sigma_neutral, sigma_seeking, av_r_sigma = _risk_attitudes([a.r_sigma for a in agents])
    pi_averse, pi_neutral, pi_seeking, av_r_pi = _risk_attitudes([a.r_pi for a in agents])

    return GlobalAgentStats(
        n=len(agents),
        n_s=groups[DiseaseGroup.SUSCEPTIBLE],
        n_i=groups[DiseaseGroup.INFECTED],
        n_r=groups[DiseaseGroup.RECOVERED],
        n_r_sigma_averse=sigma_averse,
        n_r_sigma_neutral=sigma_neutral,
        n_r_sigma_seeking=sigma_seeking,
        av_r_sigma=av_r_sigma,
        n_r_pi_averse=pi_averse,
        n_r_pi_neutral=pi_neutral,
        n_r_pi_seeking=pi_seeking,
        av_r_pi=av_r_pi,
    )

"""
Data storage for simulation results and network snapshots.
"""

import json
import logging
import os
from typing import List, Dict, Any, Optional

import pandas as pd
import networkx as nx

from ..core.base_models import SimulationListener
from ..core.stats import AssortativityCondition
from ..disease.specs import DiseaseGroup, DiseaseSpecs
from ..disease.sir import create_infection
from ..network.graph_model import Network
from ..utilities import create_utility_function

logger = logging.getLogger(__name__)


class DataStorage(SimulationListener):
    """
    Records the rounds of a simulation and persists results.

    Register an instance with ``Simulation.add_simulation_listener`` to
    collect one row per finished round.
    """

    def __init__(self):
        """Initialize data storage."""
        self.rounds: List[Dict[str, Any]] = []
        self.simulations: List[Dict[str, Any]] = []

    def round_finished(self, simulation, summary) -> None:
        self.store_round(summary)

    def simulation_finished(self, simulation, result) -> None:
        self.simulations.append({
            "rounds_run": result.rounds_run,
            "total_rounds": result.total_rounds,
            "reason": result.reason.value,
            "stable": result.stable,
        })

    def store_round(self, summary) -> None:
        """
        Store the summary of a round.

        Args:
            summary: RoundSummary of the finished round
        """
        self.rounds.append(summary.to_dict())

    def clear(self) -> None:
        self.rounds = []
        self.simulations = []

    def to_dataframe(self) -> pd.DataFrame:
        """
        Get the recorded rounds as a data frame.

        Returns:
            One row per round, indexed by round number
        """
        if not self.rounds:
            return pd.DataFrame()
        return pd.DataFrame(self.rounds).set_index("round")

    def save_csv(self, filename: str) -> None:
        self.to_dataframe().to_csv(filename)

    def get_simulation_results(self) -> Dict[str, Any]:
        """
        Get complete simulation results.

        Returns:
            Dictionary containing all recorded rounds and simulation outcomes
        """
        return {
            'rounds': list(self.rounds),
            'simulations': list(self.simulations),
        }

    def save_to_file(self, filename: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """
        Save simulation data to file.

        Args:
            filename: Output filename
            extra: Additional entries merged into the saved results
        """
        results = self.get_simulation_results()
        results.update(extra or {})
        _ensure_directory(filename)

        with open(filename, 'w') as f:
            json.dump(results, f, indent=2)
        logger.info(f"Saved results to {filename}")


def _ensure_directory(filename: str) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)


# ============================================================================
# NETWORK SNAPSHOTS
# ============================================================================

def network_to_graph(network: Network) -> nx.Graph:
    """
    Copy a network into a plain networkx graph.

    Every node carries the full agent record (parameters, utility function,
    disease and counters) as attributes.
    """
    graph = nx.Graph(
        rounds_required_for_stability=network.rounds_required_for_stability,
        assortativity_conditions=[c.value for c in network.assortativity_conditions],
    )
    for agent in network.get_agents():
        record = agent.to_dict()
        record.pop("id")
        record["utility"] = agent.utility_function.to_dict()
        record["disease_specs"] = agent.disease_specs.to_dict()
        record["connection_stats"] = agent.connection_stats.to_dict()
        graph.add_node(agent.id, **record)
    graph.add_edges_from(network.get_ties())
    return graph


def graph_to_network(graph: nx.Graph) -> Network:
    """Rebuild a network from a graph created by ``network_to_graph``."""
    network = Network(
        rounds_required_for_stability=graph.graph.get("rounds_required_for_stability", 1),
        assortativity_conditions=[AssortativityCondition(c)
                                  for c in graph.graph.get("assortativity_conditions", ["age"])],
    )

    for node_id in sorted(graph.nodes):
        record = graph.nodes[node_id]
        utility = record["utility"]
        agent = network.add_agent(
            create_utility_function(utility["type"], utility["parameters"]),
            DiseaseSpecs.from_dict(record["disease_specs"]),
            agent_id=int(node_id),
            r_sigma=record["r_sigma"],
            r_pi=record["r_pi"],
            phi=record["phi"],
            omega=record["omega"],
            psi=record["psi"],
            xi=record["xi"],
            age=record["age"],
            profession=record["profession"],
        )

        agent.disease_group = DiseaseGroup(record["disease_group"])
        agent.force_infected = record.get("force_infected", False)
        if agent.is_infected():
            agent.disease = create_infection(agent.disease_specs)
            agent.disease.duration = agent.disease_specs.tau - record["time_until_recovered"]
        for counter, value in record.get("connection_stats", {}).items():
            setattr(agent.connection_stats, counter, value)

    for u, v in graph.edges:
        network.add_tie(int(u), int(v))
    network.reset_stability()
    return network


def save_network(network: Network, filename: str) -> None:
    """
    Write a network as networkx node-link JSON.

    Args:
        network: Network to save
        filename: Output filename
    """
    data = nx.node_link_data(network_to_graph(network))
    _ensure_directory(filename)
    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info(f"Saved network with {network.n} agents to {filename}")


def load_network(filename: str) -> Network:
    """
    Read a network written by ``save_network``.

    Args:
        filename: Input filename

    Returns:
        The restored network
    """
    with open(filename, 'r') as f:
        data = json.load(f)
    return graph_to_network(nx.node_link_graph(data))

"""
Experiment runner for network formation under infectious disease.
"""

import os
import logging
from datetime import datetime
from typing import Dict, Any, Optional, Tuple

import numpy as np
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from .config.config_manager import ConfigManager
from .data.storage import DataStorage, save_network
from .network.generator import create_network
from .simulation.controller import Simulation, ActivationPolicy, DynamicsOrder
from .visualization import plot_epidemic_curve, plot_network_evolution

import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


class Runner:
    """Experiment runner: configuration to network to simulation to stored results."""

    def __init__(self, config: ConfigManager, output_dir: Optional[str] = None):
        self.config = config
        self.output_dir = output_dir or config.get_output_directory()
        self.config.validate_config()

    def build_simulation(self) -> Tuple[Simulation, DataStorage]:
        """
        Create the network and the simulation described by the configuration.

        Returns:
            The simulation (with initial infections applied) and the storage
            listening to it
        """
        sim_params = self.config.get_simulation_params()
        disease_specs = self.config.create_disease_specs()
        rng = np.random.default_rng(sim_params['random_seed'])

        network = create_network(
            sim_params['n_agents'],
            self.config.create_utility_function(),
            disease_specs,
            topology=sim_params['initial_topology'],
            topology_params=sim_params['topology_params'],
            random_seed=sim_params['random_seed'],
            agent_params=self.config.get_agent_params(),
            age_distribution=self.config.get_age_distribution(),
            profession_distribution=self.config.get_profession_distribution(),
            rng=rng,
            rounds_required_for_stability=sim_params['rounds_required_for_stability'],
            assortativity_conditions=self.config.get_assortativity_conditions(),
        )
        for _ in range(sim_params['initial_infections']):
            network.infect_random_agent(disease_specs, rng)

        simulation = Simulation(
            network,
            rng=rng,
            random_seed=sim_params['random_seed'],
            activation_policy=ActivationPolicy(sim_params['activation_policy']),
            dynamics_order=DynamicsOrder(sim_params['dynamics_order']),
            static_during_epidemic=sim_params['static_during_epidemic'],
            progress_bar=True,
        )
        storage = DataStorage()
        simulation.add_simulation_listener(storage)
        return simulation, storage

    def run_experiment(self) -> Tuple[Dict[str, Any], str]:
        """Run a single experiment and save its results."""
        sim_params = self.config.get_simulation_params()
        logger.info(f"Running experiment with {sim_params['n_agents']} agents, "
                    f"utility {self.config.get_utility_params()['type']}")

        simulation, storage = self.build_simulation()
        result = simulation.simulate_until_stable(sim_params['max_rounds'])

        timestamp = datetime.now().strftime("%m-%d-%H-%M")
        experiment_path = os.path.join(self.output_dir, f"experiment_{timestamp}")
        os.makedirs(experiment_path, exist_ok=True)

        results = simulation.get_simulation_results()
        results['result'] = {k: v for k, v in result.to_dict().items() if k != 'history'}
        results['config'] = self.config.to_dict()

        storage.save_to_file(os.path.join(experiment_path, "results.json"), extra=results)
        storage.save_csv(os.path.join(experiment_path, "rounds.csv"))
        save_network(simulation.network, os.path.join(experiment_path, "network.json"))
        self.save_plots(storage, experiment_path)
        return results, experiment_path

    def save_plots(self, storage: DataStorage, experiment_path: str) -> None:
        plots_path = os.path.join(experiment_path, "plots")
        os.makedirs(plots_path, exist_ok=True)
        frame = storage.to_dataframe()
        for name, plot in (("epidemic_curve.png", plot_epidemic_curve),
                           ("network_evolution.png", plot_network_evolution)):
            fig = plot(frame, os.path.join(plots_path, name))
            plt.close(fig)


def run(config_path: str, output_dir: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """
    Run an experiment from a configuration file.

    Args:
        config_path: Path to the JSON configuration
        output_dir: Overrides the configured output directory

    Returns:
        Results dictionary and the experiment directory
    """
    runner = Runner(ConfigManager(config_path), output_dir)
    return runner.run_experiment()

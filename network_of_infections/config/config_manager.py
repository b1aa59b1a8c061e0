"""
Configuration manager for the network of infections simulation.
"""

import json
import os
from typing import Dict, Any, List, Optional, Union
from pathlib import Path

from ..core.exceptions import ConfigurationError
from ..core.stats import AssortativityCondition
from ..disease.specs import DiseaseSpecs
from ..utilities import create_utility_function

SEED_ENV_VAR = "NETWORK_OF_INFECTIONS_SEED"


class ConfigManager:
    """
    Manages configuration for the simulation.
    """

    def __init__(self, config_path: Optional[str] = None, config: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file (JSON)
            config: Configuration dictionary, used instead of reading a file
        """
        self.config_path = config_path or "config.json"
        self.config = config if config is not None else self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        config_path = Path(self.config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key, nested keys separated by dots
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_simulation_params(self) -> Dict[str, Any]:
        """
        Get simulation parameters.

        The random seed can be overridden with the NETWORK_OF_INFECTIONS_SEED
        environment variable.

        Returns:
            Dictionary of simulation parameters
        """
        random_seed = self.get('simulation.random_seed')
        env_seed = os.getenv(SEED_ENV_VAR)
        if env_seed:
            try:
                random_seed = int(env_seed)
            except ValueError:
                raise ConfigurationError(f"{SEED_ENV_VAR} must be an integer, got '{env_seed}'") from None

        return {
            'n_agents': int(self.get('simulation.n_agents', 20)),
            'max_rounds': int(self.get('simulation.max_rounds', 1000)),
            'random_seed': random_seed,
            'activation_policy': str(self.get('simulation.activation_policy', 'random_order')),
            'dynamics_order': str(self.get('simulation.dynamics_order', 'ties_first')),
            'static_during_epidemic': bool(self.get('simulation.static_during_epidemic', False)),
            'rounds_required_for_stability': int(self.get('simulation.rounds_required_for_stability', 1)),
            'initial_topology': str(self.get('simulation.initial_topology', 'empty')),
            'topology_params': dict(self.get('simulation.topology_params', {})),
            'initial_infections': int(self.get('simulation.initial_infections', 1)),
        }

    def get_agent_params(self) -> Dict[str, Any]:
        """
        Get agent parameters shared by all agents.

        Returns:
            Keyword arguments for Network.add_agent
        """
        return {
            'r_sigma': float(self.get('agents.r_sigma', 1.0)),
            'r_pi': float(self.get('agents.r_pi', 1.0)),
            'phi': float(self.get('agents.phi', 0.4)),
            'omega': float(self.get('agents.omega', 0.0)),
            'psi': float(self.get('agents.psi', 1.0)),
            'xi': float(self.get('agents.xi', 0.25)),
        }

    def get_age_distribution(self) -> Optional[Union[Dict[int, float], List[int]]]:
        """
        Get the distribution agent ages are drawn from.

        Returns:
            Mapping of age to weight or list of ages, or None if all agents
            keep the default age

        Raises:
            ConfigurationError: If an age is not an integer
        """
        distribution = self.get('agents.age_distribution')
        if distribution is None:
            return None
        try:
            if isinstance(distribution, list):
                return [int(age) for age in distribution]
            if isinstance(distribution, dict):
                return {int(age): weight for age, weight in distribution.items()}
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid age in agents.age_distribution: {e}") from e
        raise ConfigurationError("agents.age_distribution must be a mapping of age to weight or a list of ages")

    def get_profession_distribution(self) -> Optional[Union[Dict[str, float], List[str]]]:
        distribution = self.get('agents.profession_distribution')
        if isinstance(distribution, list):
            return [str(profession) for profession in distribution]
        return distribution

    def get_assortativity_conditions(self) -> List[AssortativityCondition]:
        names = self.get('agents.assortativity_conditions', ['age'])
        try:
            return [AssortativityCondition(name) for name in names]
        except ValueError as e:
            raise ConfigurationError(f"Invalid assortativity condition: {e}") from e

    def get_utility_params(self) -> Dict[str, Any]:
        """
        Get utility function type and parameters.

        Returns:
            Dictionary with 'type' and 'parameters'
        """
        return {
            'type': str(self.get('utility.type', 'cumulative')),
            'parameters': dict(self.get('utility.parameters', {})),
        }

    def get_disease_params(self) -> Dict[str, Any]:
        return {
            'tau': self.get('disease.tau', 10),
            'sigma': float(self.get('disease.sigma', 50.0)),
            'gamma': float(self.get('disease.gamma', 0.1)),
            'mu': float(self.get('disease.mu', 1.0)),
        }

    def create_utility_function(self):
        params = self.get_utility_params()
        return create_utility_function(params['type'], params['parameters'])

    def create_disease_specs(self) -> DiseaseSpecs:
        return DiseaseSpecs.from_dict(self.get_disease_params())

    def get_logging_level(self) -> str:
        return str(self.get('logging.level', 'INFO')).upper()

    def get_output_directory(self) -> str:
        """
        Get output directory.

        Returns:
            Output directory path
        """
        return str(self.get('output_directory', 'simulation_results'))

    def validate_config(self) -> bool:
        """
        Validate configuration.

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If a parameter is invalid
        """
        sim_params = self.get_simulation_params()

        if sim_params['n_agents'] <= 0:
            raise ConfigurationError("simulation.n_agents must be positive")
        if sim_params['max_rounds'] < 0:
            raise ConfigurationError("simulation.max_rounds must be non-negative")
        if sim_params['rounds_required_for_stability'] < 1:
            raise ConfigurationError("simulation.rounds_required_for_stability must be >= 1")
        if not 0 <= sim_params['initial_infections'] <= sim_params['n_agents']:
            raise ConfigurationError("simulation.initial_infections must be between 0 and n_agents")

        from ..simulation.controller import ActivationPolicy, DynamicsOrder
        from ..network.generator import TOPOLOGIES, distribution_probabilities
        try:
            ActivationPolicy(sim_params['activation_policy'])
            DynamicsOrder(sim_params['dynamics_order'])
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        if sim_params['initial_topology'] not in TOPOLOGIES:
            raise ConfigurationError(f"Unknown initial topology: {sim_params['initial_topology']}")

        agent_params = self.get_agent_params()
        for key in ('r_sigma', 'r_pi'):
            if not 0.0 <= agent_params[key] <= 2.0:
                raise ConfigurationError(f"agents.{key} must be in [0, 2]")
        for key in ('phi', 'omega', 'psi', 'xi'):
            if not 0.0 <= agent_params[key] <= 1.0:
                raise ConfigurationError(f"agents.{key} must be in [0, 1]")

        age_distribution = self.get_age_distribution()
        if age_distribution is not None:
            distribution_probabilities('agents.age_distribution', age_distribution)
        profession_distribution = self.get_profession_distribution()
        if profession_distribution is not None:
            distribution_probabilities('agents.profession_distribution', profession_distribution)

        self.get_assortativity_conditions()
        self.create_utility_function()
        self.create_disease_specs()
        return True

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.config)

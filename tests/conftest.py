import numpy as np
import pytest

from network_of_infections.disease.specs import DiseaseSpecs
from network_of_infections.network.graph_model import Network
from network_of_infections.utilities import Cumulative, NunnerBuskens

NUNNER_BUSKENS_TIES = [
    (1, 2), (1, 3), (1, 4), (1, 6), (1, 7), (1, 8),
    (2, 3), (3, 4), (3, 5), (4, 5), (5, 6), (6, 7),
    (7, 8), (8, 9), (8, 10),
]


@pytest.fixture
def disease_specs():
    return DiseaseSpecs(tau=10, sigma=50.0, gamma=0.1, mu=1.0)


@pytest.fixture
def harmless_disease():
    return DiseaseSpecs(tau=10, sigma=0.0, gamma=0.0, mu=1.0)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def make_network(disease_specs):
    """Factory for networks of identical agents."""
    def _make(n_agents, utility_function=None, specs=None, ties=(), network_params=None, **agent_params):
        network = Network(**(network_params or {}))
        utility_function = utility_function if utility_function is not None else Cumulative()
        specs = specs if specs is not None else disease_specs
        for _ in range(n_agents):
            network.add_agent(utility_function, specs, **agent_params)
        for u, v in ties:
            network.add_tie(u, v)
        return network
    return _make


@pytest.fixture
def nunner_buskens_network(make_network):
    utility = NunnerBuskens({"b1": 1.0, "b2": 0.5, "alpha": 0.3, "c1": 0.2, "c2": 0.1})
    return make_network(10, utility, ties=NUNNER_BUSKENS_TIES)

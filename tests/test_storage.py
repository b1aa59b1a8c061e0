import json
from pathlib import Path

import pytest

from network_of_infections.config import ConfigManager, SEED_ENV_VAR
from network_of_infections.data import DataStorage, load_network, save_network
from network_of_infections.disease.specs import DiseaseGroup
from network_of_infections.runner import Runner
from network_of_infections.simulation import Simulation
from network_of_infections.utilities import Irtc


@pytest.fixture
def mixed_network(make_network, disease_specs):
    network = make_network(5, Irtc({"alpha": 1.0, "beta": 0.5, "c": 0.3}), ties=[(1, 2), (2, 3), (4, 5)],
                           r_sigma=1.5, phi=0.7)
    network.agents[2].infect(disease_specs)
    network.agents[2].fight_disease()
    network.agents[5].cure()
    network.agents[4].disconnect_from(network.agents[5])
    network.remove_agent(3)
    return network


def test_storage_records_rounds(make_network, disease_specs):
    network = make_network(4, ties=[(1, 2)])
    network.agents[1].infect(disease_specs)
    storage = DataStorage()
    simulation = Simulation(network, random_seed=1)
    simulation.add_simulation_listener(storage)
    simulation.simulate(3)

    frame = storage.to_dataframe()
    assert list(frame.index) == [1, 2, 3]
    assert {"ties", "susceptible", "infected", "recovered", "new_infections"} <= set(frame.columns)
    assert storage.simulations[0]["reason"] == "rounds_completed"


def test_empty_storage_frame():
    assert DataStorage().to_dataframe().empty


def test_save_results(tmp_path, make_network):
    storage = DataStorage()
    network = make_network(2)
    simulation = Simulation(network, random_seed=1)
    simulation.add_simulation_listener(storage)
    simulation.simulate(2)

    path = tmp_path / "out" / "results.json"
    storage.save_to_file(str(path), extra={"label": "test"})
    data = json.loads(path.read_text())
    assert len(data["rounds"]) == 2
    assert data["label"] == "test"


def test_network_round_trip(tmp_path, mixed_network):
    path = tmp_path / "network.json"
    save_network(mixed_network, str(path))
    restored = load_network(str(path))

    assert sorted(restored.agents) == sorted(mixed_network.agents)
    assert restored.get_ties() == mixed_network.get_ties()
    for agent in mixed_network.get_agents():
        copy = restored.get_agent(agent.id)
        assert copy.disease_group is agent.disease_group
        assert copy.time_until_recovered == agent.time_until_recovered
        assert copy.r_sigma == agent.r_sigma
        assert copy.phi == agent.phi
        assert copy.utility_function == agent.utility_function
        assert copy.disease_specs == agent.disease_specs
        assert copy.connection_stats == agent.connection_stats

    assert restored.get_agent(2).disease_group is DiseaseGroup.INFECTED
    assert restored.add_agent(mixed_network.agents[1].utility_function,
                              mixed_network.agents[1].disease_specs).id == 6


def test_runner_writes_experiment(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    config = ConfigManager(config={
        "simulation": {"n_agents": 8, "max_rounds": 30, "random_seed": 5, "initial_topology": "ring"},
        "utility": {"type": "cumulative", "parameters": {"alpha": 1.0, "beta": 0.5}},
        "disease": {"tau": 3, "sigma": 1.0, "gamma": 0.5, "mu": 1.0},
    })
    results, experiment_path = Runner(config, str(tmp_path)).run_experiment()

    assert results["result"]["total_rounds"] >= 1
    assert results["experiment_metadata"]["n_agents"] == 8
    for name in ("results.json", "rounds.csv", "network.json",
                 "plots/epidemic_curve.png", "plots/network_evolution.png"):
        assert (Path(experiment_path) / name).exists()


def test_runner_draws_agent_attributes(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    config = ConfigManager(config={
        "simulation": {"n_agents": 50, "random_seed": 8, "initial_infections": 0},
        "agents": {"age_distribution": {"25": 1, "65": 1}, "profession_distribution": ["nurse", "clerk"]},
        "utility": {"type": "cumulative"},
        "disease": {"tau": 3, "sigma": 1.0, "gamma": 0.5, "mu": 1.0},
    })
    runner = Runner(config, str(tmp_path))

    simulation, _ = runner.build_simulation()
    agents = simulation.network.get_agents()
    assert {agent.age for agent in agents} == {25, 65}
    assert {agent.profession for agent in agents} == {"nurse", "clerk"}

    again, _ = runner.build_simulation()
    assert [agent.age for agent in again.network.get_agents()] == [agent.age for agent in agents]

import json

import pytest

from network_of_infections.config import ConfigManager, SEED_ENV_VAR
from network_of_infections.core.exceptions import ConfigurationError
from network_of_infections.core.stats import AssortativityCondition
from network_of_infections.utilities import NunnerBuskens


@pytest.fixture
def config_dict():
    return {
        "simulation": {"n_agents": 10, "max_rounds": 50, "random_seed": 3, "initial_topology": "ring"},
        "agents": {"phi": 0.6, "assortativity_conditions": ["age", "profession"]},
        "utility": {"type": "nunner_buskens", "parameters": {"alpha": 0.4}},
        "disease": {"tau": 5, "sigma": 10.0, "gamma": 0.2, "mu": 1.5},
        "logging": {"level": "debug"},
    }


def test_dotted_access(config_dict):
    config = ConfigManager(config=config_dict)
    assert config.get("simulation.n_agents") == 10
    assert config.get("simulation.missing", "fallback") == "fallback"
    assert config.get("utility.parameters.alpha") == 0.4


def test_defaults_and_overrides(config_dict, monkeypatch):
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    config = ConfigManager(config=config_dict)

    sim_params = config.get_simulation_params()
    assert sim_params["n_agents"] == 10
    assert sim_params["random_seed"] == 3
    assert sim_params["activation_policy"] == "random_order"
    assert sim_params["initial_infections"] == 1

    agent_params = config.get_agent_params()
    assert agent_params["phi"] == 0.6
    assert agent_params["psi"] == 1.0
    assert config.get_assortativity_conditions() == [AssortativityCondition.AGE,
                                                     AssortativityCondition.PROFESSION]
    assert config.get_logging_level() == "DEBUG"
    assert config.get_output_directory() == "simulation_results"


def test_seed_from_environment(config_dict, monkeypatch):
    monkeypatch.setenv(SEED_ENV_VAR, "99")
    assert ConfigManager(config=config_dict).get_simulation_params()["random_seed"] == 99

    monkeypatch.setenv(SEED_ENV_VAR, "not-a-number")
    with pytest.raises(ConfigurationError):
        ConfigManager(config=config_dict).get_simulation_params()


def test_factories(config_dict):
    config = ConfigManager(config=config_dict)
    utility = config.create_utility_function()
    assert isinstance(utility, NunnerBuskens)
    assert utility.alpha == 0.4
    assert config.create_disease_specs().tau == 5


def test_validate_config(config_dict, monkeypatch):
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    assert ConfigManager(config=config_dict).validate_config()


@pytest.mark.parametrize("section, key, value", [
    ("simulation", "n_agents", 0),
    ("simulation", "initial_infections", 11),
    ("simulation", "activation_policy", "whenever"),
    ("simulation", "initial_topology", "hypercube"),
    ("agents", "r_pi", 3.0),
    ("agents", "xi", -0.1),
    ("agents", "assortativity_conditions", ["height"]),
    ("agents", "age_distribution", {"old": 1.0}),
    ("agents", "age_distribution", {"30": -1.0}),
    ("agents", "age_distribution", []),
    ("agents", "profession_distribution", "teacher"),
    ("utility", "type", "unknown"),
    ("disease", "tau", 0),
])
def test_invalid_config(config_dict, monkeypatch, section, key, value):
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    config_dict[section][key] = value
    with pytest.raises(ConfigurationError):
        ConfigManager(config=config_dict).validate_config()


def test_load_from_file(tmp_path, config_dict):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_dict))
    assert ConfigManager(str(path)).get("disease.mu") == 1.5


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / "missing.json"))

    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        ConfigManager(str(path))


def test_attribute_distributions(config_dict):
    config = ConfigManager(config=config_dict)
    assert config.get_age_distribution() is None
    assert config.get_profession_distribution() is None

    config_dict["agents"]["age_distribution"] = {"20": 2, "60": 1}
    config_dict["agents"]["profession_distribution"] = ["nurse", "nurse", "teacher"]
    assert config.get_age_distribution() == {20: 2, 60: 1}
    assert config.get_profession_distribution() == ["nurse", "nurse", "teacher"]

    config_dict["agents"]["age_distribution"] = ["30", 40, 40]
    assert config.get_age_distribution() == [30, 40, 40]

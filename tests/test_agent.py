import numpy as np
import pytest

from network_of_infections.agent import TieChange
from network_of_infections.core.exceptions import ConfigurationError, TopologyError
from network_of_infections.disease.specs import DiseaseGroup, DiseaseSpecs
from network_of_infections.utilities import Cumulative, Irtc


@pytest.fixture
def cost_only():
    return Irtc({"alpha": 0.0, "beta": 0.0, "c": 1.0})


def test_ties_are_symmetric(make_network):
    network = make_network(3)
    a1, a2, a3 = network.get_agents()
    a1.add_connection(a2)

    assert a1.is_connected_to(a2) and a2.is_connected_to(a1)
    assert not a1.is_connected_to(a3)
    assert a2.get_connections() == [a1]


@pytest.mark.parametrize("operation", ["self", "duplicate", "missing"])
def test_invalid_tie_operations_leave_network_untouched(make_network, operation):
    network = make_network(3, ties=[(1, 2)])
    a1, a2, a3 = network.get_agents()

    with pytest.raises(TopologyError):
        if operation == "self":
            a1.add_connection(a1)
        elif operation == "duplicate":
            a2.add_connection(a1)
        else:
            a1.remove_connection(a3)
    assert network.get_ties() == [(1, 2)]
    assert not a1.is_connected_to(a1)


@pytest.mark.parametrize("params", [
    {"r_sigma": 2.5},
    {"r_pi": -0.1},
    {"phi": 1.2},
    {"omega": -1.0},
    {"psi": 2.0},
    {"xi": -0.5},
])
def test_invalid_agent_parameters(make_network, params):
    with pytest.raises(ConfigurationError):
        make_network(1, **params)


def test_manual_disease_transitions(make_network, disease_specs):
    agent = make_network(1).agents[1]
    assert agent.is_susceptible()

    agent.infect(disease_specs)
    assert agent.disease_group is DiseaseGroup.INFECTED
    assert agent.force_infected
    assert agent.time_until_recovered == disease_specs.tau

    agent.cure()
    assert agent.is_recovered()
    assert agent.time_until_recovered == 0

    agent.infect(disease_specs)
    assert agent.is_infected()

    agent.make_susceptible()
    assert agent.is_susceptible()


def test_infect_with_foreign_disease_is_rejected(make_network):
    agent = make_network(1).agents[1]
    with pytest.raises(ConfigurationError):
        agent.infect(DiseaseSpecs(tau=2, sigma=1.0, gamma=1.0, mu=1.0))
    assert agent.is_susceptible()


def test_recovery_after_exactly_tau_rounds(make_network, disease_specs):
    agent = make_network(1).agents[1]
    agent.infect(disease_specs)

    for expected in range(disease_specs.tau - 1, 0, -1):
        assert not agent.fight_disease()
        assert agent.time_until_recovered == expected
    assert agent.fight_disease()
    assert agent.is_recovered()


def test_disease_transmission(make_network, rng):
    certain = DiseaseSpecs(tau=3, sigma=1.0, gamma=1.0, mu=1.0)
    impossible = DiseaseSpecs(tau=3, sigma=1.0, gamma=0.0, mu=1.0)

    a1 = make_network(1, specs=certain).agents[1]
    assert not a1.compute_disease_transmission(0, rng)
    assert a1.compute_disease_transmission(1, rng)
    assert a1.is_infected()
    assert not a1.force_infected
    # only susceptible agents can catch the disease
    assert not a1.compute_disease_transmission(3, rng)

    a2 = make_network(1, specs=impossible).agents[1]
    assert not a2.compute_disease_transmission(5, rng)
    assert a2.is_susceptible()


def test_disconnect_counts_active_and_passive_breaks(make_network):
    network = make_network(2, ties=[(1, 2)])
    a1, a2 = network.get_agents()
    a1.disconnect_from(a2)

    assert network.get_tie_count() == 0
    assert a1.connection_stats.broken_ties_active == 1
    assert a2.connection_stats.broken_ties_passive == 1
    assert a1.connection_stats.broken_ties_active_epidemic == 0


def test_epidemic_counters(make_network, disease_specs):
    network = make_network(3, ties=[(1, 2)])
    a1, a2, a3 = network.get_agents()
    a3.infect(disease_specs)
    a1.disconnect_from(a2)

    assert a1.connection_stats.broken_ties_active_epidemic == 1
    assert a2.connection_stats.broken_ties_passive_epidemic == 1


def test_connect_to_accepted(make_network):
    network = make_network(2)
    a1, a2 = network.get_agents()

    assert a1.connect_to(a2)
    assert a1.is_connected_to(a2)
    assert a1.connection_stats.accepted_requests_out == 1
    assert a2.connection_stats.accepted_requests_in == 1


def test_connect_to_declined(make_network):
    network = make_network(2, Irtc({"alpha": 1.0, "beta": 0.0, "c": 2.0}))
    a1, a2 = network.get_agents()

    assert not a1.connect_to(a2)
    assert network.get_tie_count() == 0
    assert a1.connection_stats.declined_requests_out == 1
    assert a2.connection_stats.declined_requests_in == 1


def test_compute_round_breaks_costly_tie(make_network, cost_only, rng):
    network = make_network(2, cost_only, ties=[(1, 2)], psi=1.0)
    assert network.agents[1].compute_round(rng) is TieChange.REMOVED
    assert network.get_tie_count() == 0


def test_compute_round_creates_beneficial_tie(make_network, rng):
    network = make_network(2, Cumulative(), phi=1.0, psi=0.0)
    assert network.agents[1].compute_round(rng) is TieChange.ADDED
    assert network.has_tie(1, 2)


def test_compute_round_never_proposes_harmful_tie(make_network, cost_only, rng):
    network = make_network(2, cost_only, phi=1.0, psi=0.0)
    assert network.agents[1].compute_round(rng) is TieChange.NONE
    assert network.agents[1].connection_stats.declined_requests_out == 0


def test_compute_round_without_propensities_does_nothing(make_network, rng):
    network = make_network(2, Cumulative(), phi=0.0, psi=0.0)
    assert network.agents[1].compute_round(rng) is TieChange.NONE
    assert network.get_tie_count() == 0


def test_satisfaction(make_network, cost_only):
    full = make_network(3)
    full.create_full_network()
    assert all(agent.is_satisfied() for agent in full.get_agents())

    empty = make_network(2)
    assert not empty.agents[1].is_satisfied()

    costly = make_network(2, cost_only, ties=[(1, 2)])
    assert not costly.agents[1].is_satisfied()


def test_candidate_from_distance_two(make_network, rng):
    network = make_network(4, ties=[(1, 2), (2, 3)], xi=1.0)
    for _ in range(10):
        assert network.agents[1].select_candidate(rng).id == 3


def test_most_similar_candidate(make_network, disease_specs, rng):
    network = make_network(0)
    utility = Cumulative()
    a1 = network.add_agent(utility, disease_specs, age=20, omega=1.0, xi=0.0)
    network.add_agent(utility, disease_specs, age=60)
    a3 = network.add_agent(utility, disease_specs, age=22)
    network.add_agent(utility, disease_specs, age=45)

    for _ in range(10):
        assert a1.select_candidate(rng) is a3


def test_no_candidate_in_full_network(make_network, rng):
    network = make_network(3)
    network.create_full_network()
    assert network.agents[1].select_candidate(rng) is None


def test_to_dict(make_network):
    record = make_network(1, r_sigma=1.5).agents[1].to_dict()
    assert record["id"] == 1
    assert record["r_sigma"] == 1.5
    assert record["disease_group"] == "susceptible"

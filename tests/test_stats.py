import pytest

from network_of_infections.core import stats
from network_of_infections.core.stats import AssortativityCondition
from network_of_infections.disease.specs import DiseaseSpecs
from network_of_infections.utilities import Cumulative


def test_local_connection_stats(nunner_buskens_network):
    lacs = stats.compute_local_connection_stats(nunner_buskens_network, 1)
    assert lacs.n == 6
    assert lacs.n_s == 6
    assert lacs.m == 3
    assert lacs.z == 4
    assert lacs.y == 11
    assert lacs.net_size == 10


def test_local_connection_stats_counterfactual(nunner_buskens_network):
    with_tie = stats.compute_local_connection_stats(nunner_buskens_network, 1, with_id=5)
    assert with_tie.n == 7
    # 5 is tied to 3, 4 and 6
    assert with_tie.z == 7

    without_tie = stats.compute_local_connection_stats(nunner_buskens_network, 1, without_id=8)
    assert without_tie.n == 5
    assert without_tie.z == 3
    # 8 is still reachable through 7, 9 and 10 are not
    assert without_tie.m == 2


def test_local_connection_stats_by_disease_group(make_network, disease_specs):
    network = make_network(4, ties=[(1, 2), (1, 3), (3, 4)])
    network.agents[2].infect(disease_specs)
    network.agents[4].cure()

    lacs = stats.compute_local_connection_stats(network, 1)
    assert (lacs.n_s, lacs.n_i, lacs.n_r) == (1, 1, 0)
    assert (lacs.m_s, lacs.m_i, lacs.m_r) == (0, 0, 1)


def test_isolated_agent_stats(make_network):
    network = make_network(2)
    lacs = stats.compute_local_connection_stats(network, 1)
    assert lacs.n == 0 and lacs.m == 0 and lacs.y == 0 and lacs.z == 0
    assert stats.compute_closeness(network, 1) == 0.0
    assert stats.compute_clustering(network, 1) == 0.0


def test_degrees(nunner_buskens_network):
    assert stats.compute_first_order_degree(nunner_buskens_network, 1) == 6
    assert stats.compute_second_order_degree(nunner_buskens_network, 1) == 3


def test_closeness_ignores_unreachable_agents(make_network):
    network = make_network(5, ties=[(1, 2), (2, 3), (4, 5)])
    assert stats.compute_closeness(network, 1) == pytest.approx(2 / 3)
    assert stats.compute_closeness(network, 2) == pytest.approx(1.0)


def test_geodesic_distances(make_network):
    network = make_network(4, ties=[(1, 2), (2, 3)])
    assert stats.geodesic_distances(network, 1) == {1: 0, 2: 1, 3: 2}
    assert stats.geodesic_distances(network, 1, with_id=4) == {1: 0, 2: 1, 3: 2, 4: 1}
    assert stats.geodesic_distances(network, 3, without_id=2) == {3: 0}


def test_clustering(make_network):
    network = make_network(4, ties=[(1, 2), (2, 3), (1, 3), (3, 4)])
    assert stats.compute_clustering(network, 1) == pytest.approx(1.0)
    assert stats.compute_clustering(network, 3) == pytest.approx(1 / 3)
    assert stats.compute_clustering(network, 4) == 0.0


def test_path_lengths_over_reachable_pairs(make_network):
    network = make_network(5, ties=[(1, 2), (2, 3), (4, 5)])
    # pairs: 1-2, 2-3, 4-5 at distance 1, 1-3 at distance 2
    assert stats.compute_average_path_length(network) == pytest.approx(5 / 4)
    assert stats.compute_diameter(network) == 2


def test_empty_network_aggregates(make_network):
    network = make_network(0)
    assert stats.compute_average_degree(network) == 0.0
    assert stats.compute_average_clustering(network) == 0.0
    assert stats.compute_average_closeness(network) == 0.0
    assert stats.compute_average_path_length(network) == 0.0
    assert stats.compute_diameter(network) == 0
    assert stats.compute_density(network) == 0.0


def test_betweenness_and_density(make_network):
    network = make_network(3, ties=[(1, 2), (2, 3)])
    assert stats.compute_average_betweenness(network) == pytest.approx(1 / 3)
    assert stats.compute_density(network) == pytest.approx(2 / 3)


def _network_with_attributes(make_network, ages, professions, ties):
    network = make_network(0)
    specs = DiseaseSpecs(tau=5, sigma=1.0, gamma=0.1, mu=1.0)
    for age, profession in zip(ages, professions):
        network.add_agent(Cumulative(), specs, age=age, profession=profession)
    for u, v in ties:
        network.add_tie(u, v)
    return network


def test_assortativity_by_age(make_network):
    assortative = _network_with_attributes(make_network, [20, 20, 60, 60], ["a"] * 4, [(1, 2), (3, 4)])
    assert stats.compute_assortativity(assortative, AssortativityCondition.AGE) == pytest.approx(1.0)

    disassortative = _network_with_attributes(make_network, [20, 20, 60, 60], ["a"] * 4, [(1, 3), (2, 4)])
    assert stats.compute_assortativity(disassortative, AssortativityCondition.AGE) == pytest.approx(-1.0)


def test_assortativity_by_profession(make_network):
    network = _network_with_attributes(make_network, [1, 2, 3, 4], ["a", "a", "b", "b"], [(1, 2), (3, 4)])
    assert stats.compute_assortativity(network, AssortativityCondition.PROFESSION) == pytest.approx(1.0)


def test_undefined_assortativity_is_zero(make_network):
    no_ties = _network_with_attributes(make_network, [1, 2], ["a", "b"], [])
    assert stats.compute_assortativity(no_ties, AssortativityCondition.AGE) == 0.0

    same_age = _network_with_attributes(make_network, [30, 30, 30], ["a", "a", "a"], [(1, 2), (2, 3)])
    assert stats.compute_assortativity(same_age, AssortativityCondition.AGE) == 0.0
    assert stats.compute_assortativity(same_age, AssortativityCondition.PROFESSION) == 0.0
    assert stats.compute_assortativity(same_age, AssortativityCondition.RISK_PERCEPTION) == 0.0


def test_probability_of_infection():
    specs = DiseaseSpecs(tau=5, sigma=1.0, gamma=0.5, mu=1.0)
    assert stats.compute_probability_of_infection(specs, 0) == 0.0
    assert stats.compute_probability_of_infection(specs, 2) == pytest.approx(0.75)


def test_global_agent_stats(make_network, disease_specs):
    network = make_network(0)
    for r_sigma in (0.5, 1.0, 1.5, 2.0):
        network.add_agent(Cumulative(), disease_specs, r_sigma=r_sigma)
    network.agents[1].infect(disease_specs)

    agent_stats = stats.compute_global_agent_stats(network)
    assert (agent_stats.n, agent_stats.n_s, agent_stats.n_i, agent_stats.n_r) == (4, 3, 1, 0)
    assert agent_stats.n_r_sigma_averse == 2
    assert agent_stats.n_r_sigma_neutral == 1
    assert agent_stats.n_r_sigma_seeking == 1
    assert agent_stats.av_r_sigma == pytest.approx(1.25)
    assert agent_stats.n_r_pi_neutral == 4


def test_global_network_stats(make_network):
    network = make_network(4)
    network.create_full_network()
    network.compute_stability()

    global_stats = stats.compute_global_network_stats(network)
    assert global_stats.stable
    assert global_stats.ties == 6
    assert global_stats.av_degree == pytest.approx(3.0)
    assert global_stats.av_closeness == pytest.approx(1.0)
    assert global_stats.diameter == 1
    assert set(global_stats.to_dict()["assortativity"]) == {"age", "profession", "risk_perception"}

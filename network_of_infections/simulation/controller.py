"""
Simulation controller coordinating tie formation and disease spread.
"""

import logging
import threading
import concurrent.futures as cf
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple

import numpy as np
from tqdm import tqdm

from ..agent import TieChange
from ..core.base_models import SimulationListener
from ..disease.specs import DiseaseGroup
from ..network.graph_model import Network

logger = logging.getLogger(__name__)


class ActivationPolicy(Enum):
    """Which agents act in a round."""
    RANDOM_ORDER = "random_order"
    SEQUENTIAL = "sequential"
    SINGLE_RANDOM = "single_random"


class DynamicsOrder(Enum):
    """Whether agents act before or after the disease spreads in a round."""
    TIES_FIRST = "ties_first"
    DISEASE_FIRST = "disease_first"


class StopReason(Enum):
    STABLE = "stable"
    MAX_ROUNDS = "max_rounds"
    ROUNDS_COMPLETED = "rounds_completed"
    STOPPED = "stopped"
    PAUSED = "paused"


@dataclass(frozen=True)
class RoundSummary:
    """State of the network at the end of a round and what changed during it."""
    round: int
    ties: int
    susceptible: int
    infected: int
    recovered: int
    new_infections: int = 0
    recoveries: int = 0
    ties_added: int = 0
    ties_removed: int = 0
    requests_declined: int = 0
    av_degree: float = 0.0
    stable: bool = False
    infection_defeated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SimulationResult:
    """Outcome of a call to ``simulate`` or ``simulate_until_stable``."""
    rounds_run: int
    total_rounds: int
    reason: StopReason
    stable: bool
    history: List[RoundSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds_run": self.rounds_run,
            "total_rounds": self.total_rounds,
            "reason": self.reason.value,
            "stable": self.stable,
            "history": [summary.to_dict() for summary in self.history],
        }


class Simulation:
    """
    Round-based coordinator of a network simulation.

    Each round the activated agents decide on their ties and the disease
    advances once, in the configured order. Afterwards the network's
    stability is recorded and the registered listeners are notified.
    """

    def __init__(self,
                 network: Network,
                 rng: Optional[np.random.Generator] = None,
                 random_seed: Optional[int] = None,
                 activation_policy: ActivationPolicy = ActivationPolicy.RANDOM_ORDER,
                 dynamics_order: DynamicsOrder = DynamicsOrder.TIES_FIRST,
                 static_during_epidemic: bool = False,
                 progress_bar: bool = False):
        """
        Initialize the simulation.

        Args:
            network: Network to simulate
            rng: Random number generator; created from random_seed if omitted
            random_seed: Seed for the random number generator
            activation_policy: Which agents act in a round
            dynamics_order: Whether ties or disease are updated first in a round
            static_during_epidemic: Freeze all ties while an infection is active
            progress_bar: Show a tqdm progress bar while running
        """
        self.network = network
        self.random_seed = random_seed
        self.rng = rng if rng is not None else np.random.default_rng(random_seed)
        self.activation_policy = ActivationPolicy(activation_policy)
        self.dynamics_order = DynamicsOrder(dynamics_order)
        self.static_during_epidemic = static_during_epidemic
        self.progress_bar = progress_bar

        self.round = 0
        self.history: List[RoundSummary] = []
        self.listeners: List[SimulationListener] = []
        self.running = False
        self._stop_requested = threading.Event()
        self._pause_requested = threading.Event()
        self._executor: Optional[cf.ThreadPoolExecutor] = None

    # ========================================================================
    # CONTROL
    # ========================================================================

    def add_simulation_listener(self, listener: SimulationListener) -> None:
        self.listeners.append(listener)

    def remove_simulation_listener(self, listener: SimulationListener) -> None:
        self.listeners.remove(listener)

    def pause(self) -> None:
        """
        Pause after the current round; a later call to simulate continues.

        A request made before a run starts ends that run before its first round.
        """
        self._pause_requested.set()

    def stop(self) -> None:
        """Stop after the current round, or before the first round of the next run."""
        self._stop_requested.set()

    def reset(self) -> None:
        """Forget all rounds run so far."""
        if self.running:
            raise RuntimeError("Cannot reset a running simulation")
        self.round = 0
        self.history = []

    def simulate(self, rounds: int) -> SimulationResult:
        """
        Run a fixed number of rounds, regardless of stability.

        Args:
            rounds: Number of rounds to run

        Returns:
            SimulationResult with reason ROUNDS_COMPLETED unless stopped or paused
        """
        return self._run(rounds, until_stable=False)

    def simulate_until_stable(self, max_rounds: int) -> SimulationResult:
        """
        Run until the network is stable and no infection is active.

        Args:
            max_rounds: Maximum number of rounds to run in this call

        Returns:
            SimulationResult with reason STABLE or MAX_ROUNDS unless stopped or paused
        """
        return self._run(max_rounds, until_stable=True)

    def run_in_background(self, max_rounds: int) -> cf.Future:
        """
        Run ``simulate_until_stable`` on a worker thread.

        Returns:
            Future resolving to the SimulationResult
        """
        if self._executor is None:
            self._executor = cf.ThreadPoolExecutor(max_workers=1, thread_name_prefix="simulation")
        return self._executor.submit(self.simulate_until_stable, max_rounds)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def is_finished(self) -> bool:
        return self.network.is_stable() and not self.network.has_active_infection()

    # ========================================================================
    # MAIN LOOP
    # ========================================================================

    def _run(self, max_rounds: int, until_stable: bool) -> SimulationResult:
        if max_rounds < 0:
            raise ValueError(f"Number of rounds must be >= 0, got {max_rounds}")

        self.network.acquire_run_lock()
        self.running = True
        rounds_run = 0
        history: List[RoundSummary] = []
        pbar = None

        try:
            self.network.check_initial_stability()
            logger.info(f"Simulation started at round {self.round} with {self.network.n} agents "
                        f"and {self.network.get_tie_count()} ties")
            self._notify("simulation_started", self)

            if self.progress_bar:
                pbar = tqdm(total=max_rounds, desc=f"Simulating ({self.network.n} agents)", unit="round")

            while True:
                if until_stable and self.is_finished():
                    reason = StopReason.STABLE
                    break
                if rounds_run >= max_rounds:
                    reason = StopReason.MAX_ROUNDS if until_stable else StopReason.ROUNDS_COMPLETED
                    break
                if self._stop_requested.is_set():
                    reason = StopReason.STOPPED
                    break
                if self._pause_requested.is_set():
                    reason = StopReason.PAUSED
                    break

                summary = self._compute_round()
                rounds_run += 1
                history.append(summary)
                if pbar is not None:
                    pbar.update(1)

                self._notify("round_finished", self, summary)
                if summary.infection_defeated:
                    logger.info(f"Infection defeated in round {summary.round}")
                    self._notify("infection_defeated", self, summary)

            result = SimulationResult(
                rounds_run=rounds_run,
                total_rounds=self.round,
                reason=reason,
                stable=self.network.is_stable(),
                history=history,
            )
            if reason is StopReason.MAX_ROUNDS:
                logger.warning(f"Simulation reached {max_rounds} rounds without stability "
                               f"(stable={result.stable}, active infection="
                               f"{self.network.has_active_infection()})")
            else:
                logger.info(f"Simulation finished after {rounds_run} rounds ({reason.value})")

            self._notify("simulation_finished", self, result)
            return result
        finally:
            if pbar is not None:
                pbar.close()
            self._stop_requested.clear()
            self._pause_requested.clear()
            self.running = False
            self.network.release_run_lock()

    def _notify(self, event: str, *args) -> None:
        for listener in list(self.listeners):
            getattr(listener, event)(*args)

    def _compute_round(self) -> RoundSummary:
        self.round += 1
        had_infection = self.network.has_active_infection()

        if self.dynamics_order is DynamicsOrder.TIES_FIRST:
            tie_counts = self._compute_agent_decisions()
            new_infections, recoveries = self._compute_disease_dynamics()
        else:
            new_infections, recoveries = self._compute_disease_dynamics()
            tie_counts = self._compute_agent_decisions()

        stable = self.network.compute_stability()
        infection_defeated = had_infection and not self.network.has_active_infection()

        summary = RoundSummary(
            round=self.round,
            ties=self.network.get_tie_count(),
            susceptible=len(self.network.get_agents_by_group(DiseaseGroup.SUSCEPTIBLE)),
            infected=len(self.network.get_agents_by_group(DiseaseGroup.INFECTED)),
            recovered=len(self.network.get_agents_by_group(DiseaseGroup.RECOVERED)),
            new_infections=new_infections,
            recoveries=recoveries,
            ties_added=tie_counts[TieChange.ADDED],
            ties_removed=tie_counts[TieChange.REMOVED],
            requests_declined=tie_counts[TieChange.DECLINED],
            av_degree=self.network.get_av_degree(),
            stable=stable,
            infection_defeated=infection_defeated,
        )
        self.history.append(summary)
        logger.debug(f"Round {summary.round}: ties={summary.ties} S={summary.susceptible} "
                     f"I={summary.infected} R={summary.recovered} stable={stable}")
        return summary

    def _select_agents(self) -> List[int]:
        agent_ids = sorted(self.network.agents)
        if not agent_ids:
            return []
        if self.activation_policy is ActivationPolicy.SEQUENTIAL:
            return agent_ids
        if self.activation_policy is ActivationPolicy.SINGLE_RANDOM:
            return [agent_ids[int(self.rng.integers(len(agent_ids)))]]
        return [agent_ids[i] for i in self.rng.permutation(len(agent_ids))]

    def _compute_agent_decisions(self) -> Dict[TieChange, int]:
        counts = {change: 0 for change in TieChange}
        if self.static_during_epidemic and self.network.has_active_infection():
            return counts
        for agent_id in self._select_agents():
            change = self.network.get_agent(agent_id).compute_round(self.rng)
            counts[change] += 1
        return counts

    def _compute_disease_dynamics(self) -> Tuple[int, int]:
        """
        Advance the disease by one round.

        Transmission uses the agents that were infectious at the start of the
        step; agents infected during the step start counting down next round.

        Returns:
            Number of new infections and number of recoveries
        """
        agents = self.network.get_agents()
        infectious_ids = {agent.id for agent in agents if agent.is_infectious()}
        infected_before = [agent for agent in agents if agent.is_infected()]

        recoveries = sum(1 for agent in infected_before if agent.fight_disease())

        new_infections = 0
        if infectious_ids:
            graph = self.network.graph
            for agent in agents:
                if not agent.is_susceptible():
                    continue
                n_infectious = len(infectious_ids.intersection(graph[agent.id]))
                if agent.compute_disease_transmission(n_infectious, self.rng):
                    new_infections += 1
        return new_infections, recoveries

    # ========================================================================
    # RESULTS
    # ========================================================================

    def get_simulation_results(self) -> Dict[str, Any]:
        """Get the simulation results as a serialisable dictionary."""
        return {
            'experiment_metadata': {
                'n_agents': self.network.n,
                'rounds': self.round,
                'random_seed': self.random_seed,
                'activation_policy': self.activation_policy.value,
                'dynamics_order': self.dynamics_order.value,
                'static_during_epidemic': self.static_during_epidemic,
            },
            'history': [summary.to_dict() for summary in self.history],
            'network_info': self.network.get_network_info(),
        }

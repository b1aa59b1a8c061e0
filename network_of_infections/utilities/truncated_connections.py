"""
Truncated connections utility function.
"""

from typing import Dict, Any, Optional
from ..core.base_models import UtilityFunction


class TruncatedConnections(UtilityFunction):
    """
    Truncated connections model.

    Benefits decay with distance and are cut off beyond distance 2: delta per
    direct tie, delta^2 per agent at distance 2. Each tie costs c, ties to
    infected agents c * mu. The disease itself carries no costs.
    """

    DEFAULTS = {"delta": 0.5, "c": 0.0}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.delta = self.parameters["delta"]
        self.c = self.parameters["c"]

    def validate_parameters(self) -> None:
        self._require_unit_interval("delta")
        self._require_non_negative("c")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.delta * lacs.n

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.delta ** 2 * lacs.m

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        mu = agent.disease_specs.mu
        return self.c * (lacs.n_s + lacs.n_r + mu * lacs.n_i)

    def disease_costs(self, lacs, agent) -> float:
        return 0.0

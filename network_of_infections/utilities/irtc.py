"""
Infectious risk of ties combined (IRTC) utility function.
"""

from typing import Dict, Any, Optional
from ..core.base_models import UtilityFunction


class Irtc(UtilityFunction):
    """
    IRTC utility function.

    Benefits as in the cumulative model. Each tie costs c, ties to infected
    agents cost c scaled by the care factor mu of the disease. The disease
    costs are the agent's risk-perceived costs of getting infected.
    """

    DEFAULTS = {"alpha": 1.0, "beta": 0.0, "c": 0.0}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.alpha = self.parameters["alpha"]
        self.beta = self.parameters["beta"]
        self.c = self.parameters["c"]

    def validate_parameters(self) -> None:
        self._require_non_negative("alpha", "beta", "c")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.alpha * lacs.n

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.beta * lacs.m

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        mu = agent.disease_specs.mu
        return self.c * (lacs.n_s + lacs.n_r + mu * lacs.n_i)

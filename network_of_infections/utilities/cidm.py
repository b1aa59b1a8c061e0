"""
Coevolution of infectious diseases and networks (CIDM) utility function.
"""

from typing import Dict, Any, Optional
from ..core.base_models import UtilityFunction


class Cidm(UtilityFunction):
    """
    CIDM utility function.

    Extends IRTC by discounting the benefits of infected ties: a direct tie
    to an infected agent is worth kappa * alpha, an infected agent at
    distance 2 is worth lamda * beta.
    """

    DEFAULTS = {"alpha": 1.0, "kappa": 1.0, "beta": 0.0, "lamda": 1.0, "c": 0.0}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.alpha = self.parameters["alpha"]
        self.kappa = self.parameters["kappa"]
        self.beta = self.parameters["beta"]
        self.lamda = self.parameters["lamda"]
        self.c = self.parameters["c"]

    def validate_parameters(self) -> None:
        self._require_non_negative("alpha", "beta", "c")
        self._require_unit_interval("kappa", "lamda")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.alpha * (lacs.n_s + self.kappa * lacs.n_i + lacs.n_r)

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.beta * (lacs.m_s + self.lamda * lacs.m_i + lacs.m_r)

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        mu = agent.disease_specs.mu
        return self.c * (lacs.n_s + lacs.n_r + mu * lacs.n_i)

"""
Cumulative utility: benefits from direct and indirect ties, no costs.
"""

from typing import Dict, Any, Optional
from ..core.base_models import UtilityFunction


class Cumulative(UtilityFunction):
    """
    Cumulative utility function.

    Every direct tie is worth alpha, every agent at distance 2 is worth beta.
    Ties are free and the disease is ignored.
    """

    DEFAULTS = {"alpha": 1.0, "beta": 0.5}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.alpha = self.parameters["alpha"]
        self.beta = self.parameters["beta"]

    def validate_parameters(self) -> None:
        self._require_non_negative("alpha", "beta")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.alpha * lacs.n

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.beta * lacs.m

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return 0.0

    def disease_costs(self, lacs, agent) -> float:
        return 0.0

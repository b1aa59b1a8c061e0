"""
Burger & Buskens utility function.
"""

from typing import Dict, Any, Optional
from ..core.base_models import UtilityFunction


class BurgerBuskens(UtilityFunction):
    """
    Burger & Buskens utility function.

    b1 per direct tie, b2 per closed triad. Costs c1 per tie, c2 per squared
    tie count and c3 per closed triad.
    """

    DEFAULTS = {"b1": 1.0, "b2": 0.0, "c1": 0.0, "c2": 0.0, "c3": 0.0}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.b1 = self.parameters["b1"]
        self.b2 = self.parameters["b2"]
        self.c1 = self.parameters["c1"]
        self.c2 = self.parameters["c2"]
        self.c3 = self.parameters["c3"]

    def validate_parameters(self) -> None:
        self._require_non_negative("b1", "b2", "c1", "c2", "c3")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.b1 * lacs.n

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.b2 * lacs.z

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.c1 * lacs.n + self.c2 * lacs.n ** 2 + self.c3 * lacs.z

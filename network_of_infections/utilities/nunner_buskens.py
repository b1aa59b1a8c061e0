"""
Nunner & Buskens utility function with a preference for triadic closure.
"""

from typing import Dict, Any, Optional
from ..core.base_models import UtilityFunction
from ..core.exceptions import ConfigurationError


class NunnerBuskens(UtilityFunction):
    """
    Nunner & Buskens utility function.

    Direct ties are worth b1 each. The triadic term rewards agents whose
    share of closed triads (z / (y + z)) is close to the preferred share
    alpha: it is b2 at a perfect match and drops linearly with the distance,
    normalised by the largest possible distance. Isolated agents get no
    triadic benefit. Costs are quadratic in the number of ties,
    c1 * n + c2 * n^2.
    """

    DEFAULTS = {"b1": 1.0, "b2": 0.5, "alpha": 0.3, "c1": 0.2, "c2": 0.1}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.b1 = self.parameters["b1"]
        self.b2 = self.parameters["b2"]
        self.alpha = self.parameters["alpha"]
        self.c1 = self.parameters["c1"]
        self.c2 = self.parameters["c2"]

    def validate_parameters(self) -> None:
        self._require_non_negative("b1", "b2", "c1", "c2")
        self._require_unit_interval("alpha")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.b1 * lacs.n

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        if lacs.n == 0:
            return 0.0
        triads = lacs.y + lacs.z
        closed_share = lacs.z / triads if triads > 0 else 0.0
        distance = abs(closed_share - self.alpha) / max(self.alpha, 1.0 - self.alpha)
        return self.b2 * (1.0 - 2.0 * distance)

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.c1 * lacs.n + self.c2 * lacs.n ** 2

    def get_theoretic_degree(self) -> float:
        """Average degree at which the marginal benefit of a tie equals its marginal costs."""
        return self.av_degree_from_c2(self.b1, self.c1, self.c2)

    @staticmethod
    def av_degree_from_c2(b1: float, c1: float, c2: float) -> float:
        if c2 == 0:
            raise ConfigurationError("c2 must be > 0 to derive a theoretic degree")
        return (b1 - c1) / (2.0 * c2)

    @staticmethod
    def c2_from_av_degree(b1: float, c1: float, av_degree: float) -> float:
        if av_degree == 0:
            raise ConfigurationError("Average degree must be > 0 to derive c2")
        return (b1 - c1) / (2.0 * av_degree)

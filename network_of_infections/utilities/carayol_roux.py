"""
Carayol & Roux utility function with distance decay and geographic costs.
"""

import math
from typing import Dict, Any, Optional

from ..core.base_models import UtilityFunction
from ..core.stats import geodesic_distances


class CarayolRoux(UtilityFunction):
    """
    Carayol & Roux utility function.

    Every reachable agent at geodesic distance d is worth omega * delta^d.
    A tie costs c times the geographic distance between the two agents,
    scaled by ceil(N / 2).
    """

    DEFAULTS = {"omega": 1.0, "delta": 0.5, "c": 0.0}

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        super().__init__({**self.DEFAULTS, **(parameters or {})})
        self.omega = self.parameters["omega"]
        self.delta = self.parameters["delta"]
        self.c = self.parameters["c"]

    def validate_parameters(self) -> None:
        self._require_non_negative("omega", "c")
        self._require_unit_interval("delta")

    def social_benefits_direct(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        return self.omega * self.delta * lacs.n

    def social_benefits_indirect(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        distances = geodesic_distances(network, agent.id, with_id, without_id)
        return sum(self.omega * self.delta ** d for d in distances.values() if d >= 2)

    def social_costs(self, lacs, agent, network, with_id=None, without_id=None) -> float:
        tie_ids = set(network.graph[agent.id])
        if with_id is not None:
            tie_ids.add(with_id)
        tie_ids.discard(without_id)
        if not tie_ids:
            return 0.0

        scale = math.ceil(network.n / 2.0)
        return sum(self.c * agent.geographic_distance_to(network.get_agent(tie_id)) / scale
                   for tie_id in tie_ids)

    def disease_costs(self, lacs, agent) -> float:
        return 0.0

"""
Disease specifications and infection dynamics.
"""

from .specs import DiseaseSpecs, DiseaseType, DiseaseGroup, DiseaseState
from .sir import SIRDisease, create_infection

__all__ = [
    "DiseaseSpecs",
    "DiseaseType",
    "DiseaseGroup",
    "DiseaseState",
    "SIRDisease",
    "create_infection",
]

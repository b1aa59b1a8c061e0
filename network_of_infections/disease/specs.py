"""
Disease parameters and the enumerations describing disease states.
"""

from dataclasses import dataclass
from enum import Enum

from ..core.exceptions import ConfigurationError


class DiseaseType(Enum):
    """Compartmental disease models available."""
    SIR = "SIR"


class DiseaseGroup(Enum):
    """Compartment an agent belongs to."""
    SUSCEPTIBLE = "susceptible"
    INFECTED = "infected"
    RECOVERED = "recovered"


class DiseaseState(Enum):
    """State of an ongoing infection."""
    INFECTIOUS = "infectious"
    DEFEATED = "defeated"


@dataclass(frozen=True)
class DiseaseSpecs:
    """
    Immutable description of a disease, shared by all agents exposed to it.

    Attributes:
        tau: Rounds an infection lasts until recovery
        sigma: Severity of the disease (costs while being infected)
        gamma: Transmission probability per infectious tie and round
        mu: Care factor multiplying the costs of ties to infected agents
        disease_type: Compartmental model of the disease
    """
    tau: int
    sigma: float
    gamma: float
    mu: float
    disease_type: DiseaseType = DiseaseType.SIR

    def __post_init__(self):
        if isinstance(self.tau, bool) or int(self.tau) != self.tau:
            raise ConfigurationError(f"tau must be an integer, got {self.tau!r}")
        if self.tau < 1:
            raise ConfigurationError(f"tau must be at least 1, got {self.tau}")
        if self.sigma < 0:
            raise ConfigurationError(f"sigma must be non-negative, got {self.sigma}")
        if not 0.0 <= self.gamma <= 1.0:
            raise ConfigurationError(f"gamma must be within [0, 1], got {self.gamma}")
        if self.mu < 0:
            raise ConfigurationError(f"mu must be non-negative, got {self.mu}")
        if not isinstance(self.disease_type, DiseaseType):
            raise ConfigurationError(f"Unknown disease type: {self.disease_type!r}")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "tau", int(self.tau))

    def to_dict(self) -> dict:
        return {
            "disease_type": self.disease_type.value,
            "tau": self.tau,
            "sigma": self.sigma,
            "gamma": self.gamma,
            "mu": self.mu,
        }

    @classmethod
    def from_dict(cls, params: dict) -> "DiseaseSpecs":
        return cls(
            tau=params["tau"],
            sigma=float(params["sigma"]),
            gamma=float(params["gamma"]),
            mu=float(params["mu"]),
            disease_type=DiseaseType(params.get("disease_type", DiseaseType.SIR.value)),
        )

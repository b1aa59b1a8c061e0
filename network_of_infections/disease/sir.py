"""
SIR infection bookkeeping.
"""

from .specs import DiseaseSpecs, DiseaseState


class SIRDisease:
    """
    A single infection of one agent.

    The infection stays INFECTIOUS for ``tau`` rounds and is DEFEATED afterwards.
    """

    def __init__(self, disease_specs: DiseaseSpecs):
        self.disease_specs = disease_specs
        self.duration = 0
        self.state = DiseaseState.INFECTIOUS

    def evolve(self):
        """Advance the infection by one round."""
        if self.state is DiseaseState.DEFEATED:
            return
        self.duration += 1
        if self.duration >= self.disease_specs.tau:
            self.state = DiseaseState.DEFEATED

    def is_infectious(self) -> bool:
        return self.state is DiseaseState.INFECTIOUS

    def is_cured(self) -> bool:
        return self.state is DiseaseState.DEFEATED

    def get_time_until_cured(self) -> int:
        return self.disease_specs.tau - self.duration

    def __repr__(self) -> str:
        return (f"SIRDisease(duration={self.duration}, state={self.state.value}, "
                f"tau={self.disease_specs.tau})")


def create_infection(disease_specs: DiseaseSpecs) -> SIRDisease:
    """Create an infection matching the disease type of the given specs."""
    # SIR is the only compartmental model so far
    return SIRDisease(disease_specs)

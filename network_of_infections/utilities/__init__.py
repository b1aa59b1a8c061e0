"""
Utility function implementations package.
"""

from typing import Dict, Any, Optional

from .cumulative import Cumulative
from .irtc import Irtc
from .cidm import Cidm
from .nunner_buskens import NunnerBuskens
from .burger_buskens import BurgerBuskens
from .carayol_roux import CarayolRoux
from .truncated_connections import TruncatedConnections
from ..core.exceptions import ConfigurationError

UTILITY_FUNCTIONS = {
    "cumulative": Cumulative,
    "irtc": Irtc,
    "cidm": Cidm,
    "nunner_buskens": NunnerBuskens,
    "burger_buskens": BurgerBuskens,
    "carayol_roux": CarayolRoux,
    "truncated_connections": TruncatedConnections,
}


def create_utility_function(name: str, parameters: Optional[Dict[str, Any]] = None):
    """
    Create a utility function by name.

    Args:
        name: Variant name, e.g. 'cumulative' or 'NunnerBuskens'
        parameters: Variant-specific parameters (defaults apply for missing keys)

    Returns:
        UtilityFunction instance

    Raises:
        ConfigurationError: If the name is unknown or a parameter is invalid
    """
    key = name.strip().lower().replace("_", "")
    by_key = {registered.replace("_", ""): registered for registered in UTILITY_FUNCTIONS}
    if key not in by_key:
        raise ConfigurationError(f"Unknown utility function: {name}. "
                                 f"Available: {', '.join(sorted(UTILITY_FUNCTIONS))}")
    return UTILITY_FUNCTIONS[by_key[key]](parameters)


__all__ = [
    'Cumulative',
    'Irtc',
    'Cidm',
    'NunnerBuskens',
    'BurgerBuskens',
    'CarayolRoux',
    'TruncatedConnections',
    'UTILITY_FUNCTIONS',
    'create_utility_function',
]

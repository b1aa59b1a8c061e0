"""
Network model and initial topologies.
"""

from .graph_model import Network
from .generator import (
    create_network,
    apply_topology,
    generate_graph,
    sample_attribute,
    TOPOLOGIES,
)

__all__ = [
    'Network',
    'create_network',
    'apply_topology',
    'generate_graph',
    'sample_attribute',
    'TOPOLOGIES',
]

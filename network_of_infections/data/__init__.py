"""
Data management module for the network of infections simulation.
"""

from .storage import DataStorage, save_network, load_network, network_to_graph, graph_to_network

__all__ = ['DataStorage', 'save_network', 'load_network', 'network_to_graph', 'graph_to_network']

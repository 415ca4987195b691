"""Knowledge graph notes: tiered connection inference plus a force-directed layout."""

from .graph import GraphSession, infer_connections, extract_keywords, ForceSimulation, InteractionController

__all__ = [
    "GraphSession",
    "infer_connections",
    "extract_keywords",
    "ForceSimulation",
    "InteractionController",
]

__version__ = "0.1.0"

from .keywords import extract_keywords, ordered_keywords, STOP_WORDS
from .models import Note, Connection, GraphFrame, Transform, normalize_tags
from .inference import infer_connections, infer_pair, connection_key
from .simulation import ForceSimulation, ForceParams, SimNode, SimEdge
from .interaction import InteractionController
from .loop import SimulationLoop
from .session import GraphSession

__all__ = [
    "extract_keywords", "ordered_keywords", "STOP_WORDS",
    "Note", "Connection", "GraphFrame", "Transform", "normalize_tags",
    "infer_connections", "infer_pair", "connection_key",
    "ForceSimulation", "ForceParams", "SimNode", "SimEdge",
    "InteractionController",
    "SimulationLoop",
    "GraphSession",
]

"""
GraphSession: the core facade the host talks to.

It holds the current note snapshot and the connections inferred from it,
the live simulation, the interaction controller bound to that simulation and
the frame loop. Hosts call `on_notes_changed` after every mutation and
`on_viewport_resized` when the drawing area changes; renderers read
`frame()`.
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .inference import infer_connections
from .interaction import InteractionController
from .loop import FrameClock, SimulationLoop
from .models import Connection, EdgeView, GraphFrame, Note, Point
from .simulation import ForceParams, ForceSimulation, SimEdge


def summarize(notes: Sequence[Note], connections: Sequence[Connection]) -> str:
    return f"Knowledge graph: {len(notes)} note(s), {len(connections)} connection(s)."


class GraphSession:
    def __init__(self, width: float = 600.0, height: float = 420.0, *,
                 fps: float = 60.0, seed: Optional[int] = None,
                 params: Optional[ForceParams] = None,
                 clock: Optional[FrameClock] = None):
        self.simulation = ForceSimulation(width, height, params=params, seed=seed)
        self.controller = InteractionController(self.simulation)
        self.loop = SimulationLoop(self.simulation, fps=fps, clock=clock)
        self._notes: Tuple[Note, ...] = ()
        self._connections: List[Connection] = []

    @property
    def notes(self) -> List[Note]:
        return list(self._notes)

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections)

    def note(self, note_id: str) -> Optional[Note]:
        for n in self._notes:
            if n.id == note_id:
                return n
        return None

    def on_notes_changed(self, snapshot: Sequence[Note]) -> List[Connection]:
        """Recompute every connection for the new snapshot and reheat the layout."""
        self._notes = tuple(snapshot)
        self._connections = infer_connections(self._notes)
        ids = [n.id for n in self._notes]
        self.simulation.set_nodes(ids)
        self.simulation.set_edges(
            SimEdge(source=c.source, target=c.target, strength=c.strength) for c in self._connections
        )
        self.simulation.restart()
        self.controller.forget(ids)
        logger.debug("Graph recomputed: {} note(s), {} connection(s)", len(self._notes), len(self._connections))
        return self.connections

    def on_viewport_resized(self, width: float, height: float) -> None:
        self.simulation.resize(width, height)

    def frame(self) -> GraphFrame:
        sim = self.simulation
        positions = sim.positions()
        edges = [
            EdgeView(source=c.source, target=c.target, strength=c.strength, reason=c.reason)
            for c in self._connections
            if c.source in positions and c.target in positions
        ]
        return GraphFrame(
            tick=sim.ticks,
            width=sim.width,
            height=sim.height,
            heat=sim.heat,
            positions={i: Point(x=x, y=y) for i, (x, y) in positions.items()},
            edges=edges,
            transform=self.controller.transform,
            pinned=sim.pinned,
            selected=self.controller.selected,
        )

    def summary(self) -> str:
        return summarize(self._notes, self._connections)

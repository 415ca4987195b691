"""
Pointer and viewport handling on top of a ForceSimulation.

Client coordinates are relative to the graph container. The controller owns
the viewport transform (pan/zoom) and drives drag through the simulation's
pin and move operations; it never changes graph topology.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple

from .inference import neighbour_ids
from .models import Connection, Transform
from .simulation import ForceSimulation

MIN_SCALE = 0.25
MAX_SCALE = 4.0
WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.91
BUTTON_ZOOM_IN = 1.25
BUTTON_ZOOM_OUT = 0.8


def clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


@dataclass
class _PanStart:
    px: float
    py: float
    ox: float
    oy: float


class InteractionController:
    def __init__(self, simulation: ForceSimulation):
        self.simulation = simulation
        self.transform = Transform()
        self.dragging: Optional[str] = None
        self.selected: Optional[str] = None
        self.hovered: Optional[str] = None
        self._pan: Optional[_PanStart] = None

    @property
    def panning(self) -> bool:
        return self._pan is not None

    def to_simulation(self, client_x: float, client_y: float) -> Tuple[float, float]:
        t = self.transform
        return (client_x - t.x) / t.scale, (client_y - t.y) / t.scale

    def to_client(self, x: float, y: float) -> Tuple[float, float]:
        t = self.transform
        return x * t.scale + t.x, y * t.scale + t.y

    # ---- pointer -------------------------------------------------------------

    def pointer_down_canvas(self, client_x: float, client_y: float) -> None:
        t = self.transform
        self._pan = _PanStart(px=client_x, py=client_y, ox=t.x, oy=t.y)

    def pointer_down_node(self, node_id: str) -> bool:
        if self.simulation.node(node_id) is None:
            return False
        self.simulation.pin(node_id)
        self.dragging = node_id
        return True

    def pointer_move(self, client_x: float, client_y: float) -> None:
        if self.dragging is not None:
            x, y = self.to_simulation(client_x, client_y)
            self.simulation.move_node(self.dragging, x, y)
            return
        if self._pan is not None:
            p = self._pan
            self.transform = self.transform.model_copy(update={
                "x": p.ox + client_x - p.px,
                "y": p.oy + client_y - p.py,
            })

    def pointer_up(self) -> None:
        if self.dragging is not None:
            self.simulation.pin(None)
            self.dragging = None
        self._pan = None

    # ---- zoom ----------------------------------------------------------------

    def wheel(self, client_x: float, client_y: float, delta_y: float) -> Transform:
        """Zoom around the cursor so the point under it stays put."""
        t = self.transform
        factor = WHEEL_ZOOM_IN if delta_y < 0 else WHEEL_ZOOM_OUT
        scale = clamp_scale(t.scale * factor)
        self.transform = Transform(
            scale=scale,
            x=client_x - (client_x - t.x) * scale / t.scale,
            y=client_y - (client_y - t.y) * scale / t.scale,
        )
        return self.transform

    def zoom_in(self) -> Transform:
        self.transform = self.transform.model_copy(update={"scale": min(MAX_SCALE, self.transform.scale * BUTTON_ZOOM_IN)})
        return self.transform

    def zoom_out(self) -> Transform:
        self.transform = self.transform.model_copy(update={"scale": max(MIN_SCALE, self.transform.scale * BUTTON_ZOOM_OUT)})
        return self.transform

    def reset_view(self) -> Transform:
        self.transform = Transform()
        return self.transform

    # ---- selection -----------------------------------------------------------

    def select(self, node_id: Optional[str]) -> Optional[str]:
        self.selected = node_id
        return node_id

    def hover(self, node_id: Optional[str]) -> None:
        self.hovered = node_id

    def highlighted(self, connections: Iterable[Connection]) -> Optional[Set[str]]:
        """Hovered node plus its direct neighbours, or None when nothing is hovered."""
        if self.hovered is None:
            return None
        return neighbour_ids(self.hovered, connections) | {self.hovered}

    def forget(self, live_ids: Iterable[str]) -> None:
        """Drop references to nodes that no longer exist."""
        live = set(live_ids)
        if self.dragging is not None and self.dragging not in live:
            self.dragging = None
        if self.selected not in live:
            self.selected = None
        if self.hovered not in live:
            self.hovered = None

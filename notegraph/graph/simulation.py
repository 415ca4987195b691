"""
Force-directed layout.

A small physical model: every node carries a position and a velocity and is
pushed around by pairwise Coulomb-like repulsion, springs along edges
(scaled by connection strength) and a weak pull toward the viewport centre.
The simulation cools down: a heat counter is decremented per step and the
layout freezes at zero until something reheats it.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import math

import numpy as np

REPULSION = 4500.0
SPRING_LENGTH = 160.0
SPRING_K = 0.04
CENTER_GRAVITY = 0.015
DAMPING = 0.72
MAX_HEAT = 300            # ticks at full heat
RELEASE_HEAT = 60         # small reheat when a dragged node is released
PADDING = 48.0
MIN_DISTANCE = 1.0
AXIS_NUDGE = 0.01         # replaces a zero axis delta so coincident nodes separate
INITIAL_RADIUS = 0.25     # fraction of the viewport's minor dimension
JITTER = 20.0


@dataclass(frozen=True)
class ForceParams:
    repulsion: float = REPULSION
    spring_length: float = SPRING_LENGTH
    spring_k: float = SPRING_K
    center_gravity: float = CENTER_GRAVITY
    damping: float = DAMPING
    max_heat: int = MAX_HEAT
    release_heat: int = RELEASE_HEAT
    padding: float = PADDING
    min_distance: float = MIN_DISTANCE
    initial_radius: float = INITIAL_RADIUS
    jitter: float = JITTER


@dataclass
class SimNode:
    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0


@dataclass(frozen=True)
class SimEdge:
    source: str
    target: str
    strength: float

    @property
    def key(self) -> str:
        return f"{self.source}>{self.target}"


class ForceSimulation:
    """Owns the live layout state: nodes by id, edges, the pin and the heat."""

    def __init__(self, width: float = 0.0, height: float = 0.0,
                 params: Optional[ForceParams] = None, seed: Optional[int] = None):
        self.params = params or ForceParams()
        self.width = float(width)
        self.height = float(height)
        self.heat = self.params.max_heat
        self.pinned: Optional[str] = None
        self.ticks = 0
        self._nodes: Dict[str, SimNode] = {}
        self._order: List[str] = []
        self._waiting: List[str] = []
        self._edges: List[SimEdge] = []
        self._rng = np.random.default_rng(seed)

    # ---- topology ------------------------------------------------------------

    @property
    def node_ids(self) -> List[str]:
        return list(self._order)

    @property
    def edges(self) -> List[SimEdge]:
        return list(self._edges)

    def node(self, node_id: str) -> Optional[SimNode]:
        return self._nodes.get(node_id)

    def _has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def _place(self, node_id: str, index: int, total: int) -> SimNode:
        p = self.params
        cx, cy = self.width / 2, self.height / 2
        angle = (index / max(total, 1)) * 2 * math.pi
        r = min(self.width, self.height) * p.initial_radius
        jx, jy = (self._rng.random(2) - 0.5) * p.jitter
        return SimNode(id=node_id, x=cx + r * math.cos(angle) + float(jx), y=cy + r * math.sin(angle) + float(jy))

    def set_nodes(self, node_ids: Iterable[str]) -> None:
        """Upsert nodes by id. Existing ids keep position and velocity."""
        ids = list(dict.fromkeys(node_ids))
        changed = ids != self._order
        self._nodes = {i: n for i, n in self._nodes.items() if i in ids}
        self._waiting = [i for i in self._waiting if i in ids]
        self._order = ids
        if self.pinned not in ids:
            self.pinned = None
        for index, node_id in enumerate(ids):
            if node_id in self._nodes or node_id in self._waiting:
                continue
            if self._has_area():
                self._nodes[node_id] = self._place(node_id, index, len(ids))
            else:
                self._waiting.append(node_id)
        if changed:
            self.restart()

    def set_edges(self, edges: Iterable[SimEdge]) -> None:
        edges = list(edges)
        if [e.key for e in edges] != [e.key for e in self._edges]:
            self.restart()
        self._edges = edges

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        if self._has_area() and self._waiting:
            total = len(self._order)
            for node_id in self._waiting:
                self._nodes[node_id] = self._place(node_id, self._order.index(node_id), total)
            self._waiting = []
        self.restart()

    # ---- control -------------------------------------------------------------

    def restart(self) -> None:
        self.heat = self.params.max_heat

    @property
    def frozen(self) -> bool:
        return self.heat <= 0

    def pin(self, node_id: Optional[str]) -> None:
        """Pin one node (None releases). Releasing reheats a little."""
        self.pinned = node_id
        if node_id is None:
            self.heat = max(self.heat, self.params.release_heat)

    def move_node(self, node_id: str, x: float, y: float) -> bool:
        node = self._nodes.get(node_id)
        if node is None:
            return False
        node.x, node.y = float(x), float(y)
        node.vx = node.vy = 0.0
        return True

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {i: (self._nodes[i].x, self._nodes[i].y) for i in self._order if i in self._nodes}

    # ---- physics -------------------------------------------------------------

    def _repulsion(self, pos: np.ndarray) -> np.ndarray:
        """Velocity deltas from pairwise repulsion, upper triangle only (a < b)."""
        n = len(pos)
        d = pos[None, :, :] - pos[:, None, :]
        d = np.where(d == 0.0, AXIS_NUDGE, d)
        dist = np.sqrt((d ** 2).sum(axis=2))
        dist = np.maximum(dist, self.params.min_distance)
        force = self.params.repulsion / dist ** 2
        f = d * (force / dist)[:, :, None]
        f *= np.triu(np.ones((n, n)), k=1)[:, :, None]
        return f.sum(axis=0) - f.sum(axis=1)

    def step(self) -> bool:
        """Advance one tick. Returns False when the layout is frozen."""
        self.ticks += 1
        ids = [i for i in self._order if i in self._nodes]
        if self.heat <= 0 or not ids:
            return False
        p = self.params
        nodes = [self._nodes[i] for i in ids]
        index = {i: k for k, i in enumerate(ids)}
        pos = np.array([(nd.x, nd.y) for nd in nodes], dtype=float)
        vel = np.array([(nd.vx, nd.vy) for nd in nodes], dtype=float)
        free = np.array([i != self.pinned for i in ids])

        vel += self._repulsion(pos) * free[:, None]

        for e in self._edges:
            s, t = index.get(e.source), index.get(e.target)
            if s is None or t is None:
                continue
            delta = pos[t] - pos[s]
            dist = math.hypot(delta[0], delta[1]) or AXIS_NUDGE
            spring = p.spring_k * (dist - p.spring_length) * e.strength
            f = delta * (spring / dist)
            if free[s]:
                vel[s] += f
            if free[t]:
                vel[t] -= f

        centre = np.array([self.width / 2, self.height / 2])
        vel[free] += (centre - pos[free]) * p.center_gravity

        vel[free] *= p.damping
        pos[free] += vel[free]
        pad_x = min(p.padding, self.width / 2)
        pad_y = min(p.padding, self.height / 2)
        pos[:, 0] = np.where(free, np.clip(pos[:, 0], pad_x, self.width - pad_x), pos[:, 0])
        pos[:, 1] = np.where(free, np.clip(pos[:, 1], pad_y, self.height - pad_y), pos[:, 1])

        for k, nd in enumerate(nodes):
            if not free[k]:
                continue
            nd.x, nd.y = float(pos[k, 0]), float(pos[k, 1])
            nd.vx, nd.vy = float(vel[k, 0]), float(vel[k, 1])

        self.heat = max(0, self.heat - 1)
        return True

"""Force simulation — iterative layout of a word-association graph.

One ``step`` cools ``alpha`` toward ``alpha_target``, applies the link,
charge, centre and collision forces, then integrates velocities into
positions. Pinned nodes are held at their pin instead of integrated.

Scheduling is cooperative: ``restart`` asks the frame scheduler for a
frame, each frame runs one step and notifies tick listeners, and once alpha
drops below ``alpha_min`` the simulation goes idle until restarted. Drag
handlers only write pins and the alpha target; positions are written by
``step`` alone.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable

from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.errors import UnknownNodeError
from wordtree_graph.force.forces import CenterForce, CollideForce, Force, LinkForce, ManyBodyForce
from wordtree_graph.force.types import EdgeSegment, Frame, LayoutLink, LayoutNode, NodePosition
from wordtree_graph.graph import GraphData
from wordtree_graph.scale import NodeScale
from wordtree_graph.scheduler import FrameScheduler

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

TickCallback = Callable[[Frame], None]


class ForceSimulation:
    """Owns the live positions of one graph for one rendering session."""

    def __init__(
        self,
        graph: GraphData,
        config: LayoutConfig = DEFAULT_CONFIG,
        scheduler: FrameScheduler | None = None,
        seed: int = 0,
    ) -> None:
        self.graph = graph
        self.config = config
        self.scheduler = scheduler
        self.scale = NodeScale.from_graph(graph, config)

        self.nodes: list[LayoutNode] = [LayoutNode(node=n, index=i) for i, n in enumerate(graph.nodes)]
        self._by_id: dict[str, LayoutNode] = {ln.id: ln for ln in self.nodes}
        self.links: list[LayoutLink] = [
            LayoutLink(source=self._by_id[e.from_id], target=self._by_id[e.to_id], edge=e, index=i)
            for i, e in enumerate(graph.edges)
        ]

        self.alpha = config.alpha_start
        self.alpha_min = config.alpha_min
        self.alpha_decay = config.alpha_decay
        self.alpha_target = 0.0
        self.velocity_decay = 1.0 - config.velocity_decay

        cx, cy = config.center
        self.forces: dict[str, Force] = {
            "link": LinkForce(self.links, distance=config.link_distance, strength=config.link_strength),
            "charge": ManyBodyForce(strength=config.charge_strength, distance_min=config.charge_distance_min),
            "center": CenterForce(cx, cy, strength=config.center_strength),
            "collide": CollideForce(lambda ln: self.scale.collide_radius(ln.node), strength=config.collide_strength),
        }

        self._rng = random.Random(seed)
        self._initialize_nodes()
        for force in self.forces.values():
            force.initialize(self.nodes, self._rng)

        self._tick_listeners: list[TickCallback] = []
        self._end_listeners: list[Callable[[], None]] = []
        self._frame_handle: object = None
        self._running = False
        self._active_drags: set[str] = set()

    def _initialize_nodes(self) -> None:
        """Place unplaced nodes on a phyllotaxis spiral around the origin."""
        for ln in self.nodes:
            if ln.fx is not None:
                ln.x = ln.fx
            if ln.fy is not None:
                ln.y = ln.fy
            if ln.x is None or ln.y is None:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + ln.index)
                angle = ln.index * INITIAL_ANGLE
                ln.x = radius * math.cos(angle)
                ln.y = radius * math.sin(angle)

    # ── lookup ──

    def node(self, node_id: str) -> LayoutNode:
        try:
            return self._by_id[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def __len__(self) -> int:
        return len(self.nodes)

    # ── stepping ──

    def step(self) -> None:
        """Advance the simulation by one iteration."""
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

        for force in self.forces.values():
            force(self.alpha)

        for ln in self.nodes:
            if ln.fx is None:
                ln.vx *= self.velocity_decay
                ln.x += ln.vx
            else:
                ln.x = ln.fx
                ln.vx = 0.0
            if ln.fy is None:
                ln.vy *= self.velocity_decay
                ln.y += ln.vy
            else:
                ln.y = ln.fy
                ln.vy = 0.0

    def tick(self, iterations: int = 1) -> ForceSimulation:
        """Run ``iterations`` steps synchronously, without notifying listeners."""
        for _ in range(iterations):
            self.step()
        return self

    def settle(self, max_iterations: int = 1000) -> int:
        """Step until alpha drops below ``alpha_min``; return the steps taken."""
        steps = 0
        while not self.is_cool and steps < max_iterations:
            self.step()
            steps += 1
        return steps

    @property
    def is_cool(self) -> bool:
        return self.alpha < self.alpha_min

    # ── scheduling ──

    @property
    def is_running(self) -> bool:
        return self._running

    def on_tick(self, callback: TickCallback) -> None:
        self._tick_listeners.append(callback)

    def on_end(self, callback: Callable[[], None]) -> None:
        self._end_listeners.append(callback)

    def restart(self) -> ForceSimulation:
        """Resume frame-driven stepping. A graph with no nodes stays idle."""
        if not self.nodes or self.scheduler is None:
            return self
        self._running = True
        if self._frame_handle is None:
            logger.debug("simulation for %r running (alpha=%.4f)", self.graph.root_id, self.alpha)
            self._frame_handle = self.scheduler.request_frame(self._on_frame)
        return self

    def stop(self) -> ForceSimulation:
        """Cancel any pending frame. Safe to call repeatedly."""
        self._running = False
        handle, self._frame_handle = self._frame_handle, None
        if handle is not None and self.scheduler is not None:
            self.scheduler.cancel_frame(handle)
            logger.debug("simulation for %r stopped", self.graph.root_id)
        return self

    def _on_frame(self) -> None:
        self._frame_handle = None
        if not self._running:
            return
        self.step()
        if self._tick_listeners:
            frame = self.frame()
            for callback in self._tick_listeners:
                callback(frame)
        if self.is_cool:
            self._running = False
            logger.debug("simulation for %r idle (alpha=%.4f)", self.graph.root_id, self.alpha)
            for callback in self._end_listeners:
                callback()
            return
        # A tick listener may have stopped or restarted the simulation.
        if self._running and self._frame_handle is None and self.scheduler is not None:
            self._frame_handle = self.scheduler.request_frame(self._on_frame)

    # ── drag-to-pin ──

    def drag_start(self, node_id: str) -> None:
        """Pin a node where it is and heat the simulation so neighbours re-settle."""
        ln = self.node(node_id)
        if not self._active_drags:
            self.alpha_target = self.config.alpha_drag_target
            self.restart()
        self._active_drags.add(node_id)
        ln.fx = ln.x
        ln.fy = ln.y

    def drag_move(self, node_id: str, x: float, y: float) -> None:
        """Move a dragged node's pin; the next step puts the node there."""
        ln = self.node(node_id)
        ln.fx = x
        ln.fy = y

    def drag_end(self, node_id: str) -> None:
        """Release the pin and let the simulation cool back to rest."""
        ln = self.node(node_id)
        self._active_drags.discard(node_id)
        if not self._active_drags:
            self.alpha_target = 0.0
        ln.fx = None
        ln.fy = None

    # ── output ──

    def frame(self) -> Frame:
        """Snapshot of current node positions and edge endpoints."""
        nodes = tuple(
            NodePosition(
                id=ln.id,
                label=ln.node.label,
                lineage=ln.node.lineage,
                weight=ln.node.weight,
                x=ln.x,
                y=ln.y,
                radius=self.scale.radius(ln.node),
                font_size=self.scale.font_size(ln.node),
                pinned=ln.is_pinned,
            )
            for ln in self.nodes
        )
        edges = tuple(
            EdgeSegment(
                from_id=link.source.id,
                to_id=link.target.id,
                weight=link.edge.weight,
                x1=link.source.x,
                y1=link.source.y,
                x2=link.target.x,
                y2=link.target.y,
            )
            for link in self.links
        )
        return Frame(nodes=nodes, edges=edges, alpha=self.alpha)

"""Word-tree view — one rendering session over one viewport.

A view holds at most one simulation. Loading a new association tree stops
and discards the previous simulation before the next one starts, so two
simulations never drive the same viewport. Pointer input arrives in screen
coordinates and is mapped into the scene through the current zoom transform.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping

from wordtree_graph.association import AssociationTree
from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.force import ForceSimulation, Frame
from wordtree_graph.graph import GraphData, build
from wordtree_graph.hierarchy import HierarchyLayout, layout_hierarchy
from wordtree_graph.interaction import Point, ZoomBehavior, ZoomTransform
from wordtree_graph.scheduler import FrameScheduler

logger = logging.getLogger(__name__)

FrameCallback = Callable[[Frame], None]


class WordTreeView:
    """Graph, force simulation and zoom state for one viewport."""

    def __init__(
        self,
        config: LayoutConfig = DEFAULT_CONFIG,
        scheduler: FrameScheduler | None = None,
        seed: int = 0,
    ) -> None:
        self.config = config
        self.scheduler = scheduler
        self.seed = seed
        self.zoom = ZoomBehavior(config, scheduler)
        self.tree: AssociationTree | None = None
        self.graph: GraphData | None = None
        self.simulation: ForceSimulation | None = None
        self._frame_listeners: list[FrameCallback] = []
        self.zoom.on_zoom(self._on_zoom)

    # ── lifecycle ──

    def load(self, tree: AssociationTree | Mapping) -> GraphData:
        """Replace the current tree; the old simulation is stopped first."""
        if not isinstance(tree, AssociationTree):
            tree = AssociationTree.from_dict(tree)
        self.teardown()
        self.tree = tree
        self.graph = build(tree)
        self.simulation = ForceSimulation(self.graph, self.config, self.scheduler, seed=self.seed)
        self.simulation.on_tick(self._on_tick)
        self.simulation.restart()
        logger.debug("view loaded %r (%d nodes)", tree.word, len(self.graph.nodes))
        return self.graph

    def teardown(self) -> None:
        """Stop the simulation and any running zoom reset. Idempotent."""
        self.zoom.interrupt()
        if self.simulation is not None:
            self.simulation.stop()
            self.simulation = None

    # ── output ──

    def on_frame(self, callback: FrameCallback) -> None:
        """Register a renderer; it receives a frame per step and per zoom change."""
        self._frame_listeners.append(callback)

    def frame(self) -> Frame | None:
        if self.simulation is None:
            return None
        return dataclasses.replace(self.simulation.frame(), transform=self.zoom.transform)

    def _on_tick(self, frame: Frame) -> None:
        self._publish(dataclasses.replace(frame, transform=self.zoom.transform))

    def _on_zoom(self, transform: ZoomTransform) -> None:
        frame = self.frame()
        if frame is not None:
            self._publish(frame)

    def _publish(self, frame: Frame) -> None:
        for callback in self._frame_listeners:
            callback(frame)

    def hierarchy(self) -> HierarchyLayout | None:
        """The strict tree projection of the loaded graph."""
        if self.graph is None:
            return None
        return layout_hierarchy(self.graph, self.config)

    def tooltip(self, node_id: str) -> str:
        if self.graph is None:
            raise KeyError(node_id)
        return self.graph.tooltip(node_id)

    # ── pointer input ──

    def drag_start(self, node_id: str) -> None:
        if self.simulation is not None:
            self.simulation.drag_start(node_id)

    def drag_move(self, node_id: str, pointer: Point) -> None:
        """Move a dragged node to the scene point under the screen ``pointer``."""
        if self.simulation is not None:
            x, y = self.zoom.transform.invert(pointer)
            self.simulation.drag_move(node_id, x, y)

    def drag_end(self, node_id: str) -> None:
        if self.simulation is not None:
            self.simulation.drag_end(node_id)

    def reset(self, duration: float | None = None) -> None:
        """Animate the viewport back to the identity transform."""
        self.zoom.reset(duration)

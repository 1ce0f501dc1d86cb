"""Force layout types — mutable simulation state and immutable frame snapshots."""

from __future__ import annotations

from dataclasses import dataclass

from wordtree_graph.graph import GraphEdge, GraphNode, Lineage
from wordtree_graph.interaction import IDENTITY, ZoomTransform


@dataclass(eq=False)
class LayoutNode:
    """A graph node with live position and velocity.

    ``x``/``y`` are None until the simulation places the node. When the pin
    ``fx``/``fy`` is set the simulation holds the node exactly there.
    """

    node: GraphNode
    index: int
    x: float | None = None
    y: float | None = None
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def is_pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


@dataclass(eq=False)
class LayoutLink:
    """An edge between two live layout nodes."""

    source: LayoutNode
    target: LayoutNode
    edge: GraphEdge
    index: int


# ─── Frame Snapshots ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NodePosition:
    id: str
    label: str
    lineage: Lineage
    weight: int | None
    x: float
    y: float
    radius: float
    font_size: float
    pinned: bool = False


@dataclass(frozen=True)
class EdgeSegment:
    from_id: str
    to_id: str
    weight: int
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs for one simulation step.

    Positions are scene coordinates; ``transform`` maps them to the screen.
    """

    nodes: tuple[NodePosition, ...]
    edges: tuple[EdgeSegment, ...]
    alpha: float
    transform: ZoomTransform = IDENTITY

    def position(self, node_id: str) -> tuple[float, float]:
        for n in self.nodes:
            if n.id == node_id:
                return (n.x, n.y)
        raise KeyError(node_id)

    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of all node circles; zeros when empty."""
        if not self.nodes:
            return (0.0, 0.0, 0.0, 0.0)
        return (
            min(n.x - n.radius for n in self.nodes),
            min(n.y - n.radius for n in self.nodes),
            max(n.x + n.radius for n in self.nodes),
            max(n.y + n.radius for n in self.nodes),
        )

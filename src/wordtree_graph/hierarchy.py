"""Hierarchy layout — the strict tree projection of an association graph.

The keyword sits at the origin; left context grows toward negative x and
right context toward positive x, one column per context distance::

    the ── river ──┐
                   bank ── account
         muddy ────┘

Within each side, leaves are stacked vertically in traversal order with a
wider gap between leaves of different parents; every parent is centred on
its children. Depth is capped at ``tree_max_depth`` levels below the keyword.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import networkx as nx

from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.graph import GraphData, GraphNode, Lineage
from wordtree_graph.scale import NodeScale

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    """A node placed in the hierarchy layout."""

    id: str
    label: str
    lineage: Lineage
    weight: int | None
    depth: int
    x: float
    y: float
    font_size: float
    parent_id: str | None = None


@dataclass
class TreeLink:
    from_id: str
    to_id: str
    weight: int
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class HierarchyLayout:
    root_id: str
    nodes: list[TreeNode] = field(default_factory=list)
    links: list[TreeLink] = field(default_factory=list)

    def node(self, node_id: str) -> TreeNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) over node anchors."""
        if not self.nodes:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [n.x for n in self.nodes]
        ys = [n.y for n in self.nodes]
        return (min(xs), min(ys), max(xs), max(ys))


def _side_rows(
    g: nx.DiGraph,
    root_id: str,
    lineage: Lineage,
    visible: dict[str, int],
    config: LayoutConfig,
) -> dict[str, float]:
    """Vertical position of every visible node on one side, centred on 0."""
    order = [
        n
        for n in nx.dfs_preorder_nodes(g, root_id, depth_limit=config.tree_max_depth)
        if n != root_id and g.nodes[n]["data"].lineage is lineage
    ]
    if not order:
        return {}

    def visible_children(node_id: str) -> list[str]:
        return [c for c in g.successors(node_id) if c in visible]

    def parent_of(node_id: str) -> str:
        return next(iter(g.predecessors(node_id)))

    rows: dict[str, float] = {}
    cursor = 0.0
    last_leaf: str | None = None
    for node_id in order:
        if visible_children(node_id):
            continue
        if last_leaf is not None:
            same_parent = parent_of(last_leaf) == parent_of(node_id)
            gap = config.tree_sibling_separation if same_parent else config.tree_non_sibling_separation
            cursor += gap * config.tree_node_size
        rows[node_id] = cursor
        last_leaf = node_id

    for node_id in reversed(order):
        children = visible_children(node_id)
        if children:
            rows[node_id] = (rows[children[0]] + rows[children[-1]]) / 2

    first_level = [n for n in order if visible[n] == 1]
    offset = (rows[first_level[0]] + rows[first_level[-1]]) / 2
    return {n: y - offset for n, y in rows.items()}


def layout_hierarchy(graph: GraphData, config: LayoutConfig = DEFAULT_CONFIG) -> HierarchyLayout:
    """Place every node within ``tree_max_depth`` of the keyword."""
    g = graph.digraph
    root_id = graph.root_id
    visible: dict[str, int] = nx.single_source_shortest_path_length(g, root_id, cutoff=config.tree_max_depth)
    scale = NodeScale.from_nodes((graph.node(n) for n in visible), config)

    rows: dict[str, float] = {root_id: 0.0}
    rows.update(_side_rows(g, root_id, Lineage.Left, visible, config))
    rows.update(_side_rows(g, root_id, Lineage.Right, visible, config))

    def place(n: GraphNode) -> TreeNode:
        direction = -1.0 if n.lineage is Lineage.Left else 1.0
        parents = list(g.predecessors(n.id))
        return TreeNode(
            id=n.id,
            label=n.label,
            lineage=n.lineage,
            weight=n.weight,
            depth=visible[n.id],
            x=direction * visible[n.id] * config.tree_level_gap,
            y=rows[n.id],
            font_size=scale.font_size(n),
            parent_id=parents[0] if parents else None,
        )

    layout = HierarchyLayout(root_id=root_id)
    layout.nodes = [place(n) for n in graph.nodes if n.id in visible]
    placed = {n.id: n for n in layout.nodes}
    for e in graph.edges:
        if e.from_id in placed and e.to_id in placed:
            a, b = placed[e.from_id], placed[e.to_id]
            layout.links.append(TreeLink(e.from_id, e.to_id, e.weight, a.x, a.y, b.x, b.y))

    hidden = len(graph.nodes) - len(layout.nodes)
    if hidden:
        logger.debug("hierarchy for %r: %d nodes beyond depth %d hidden", root_id, hidden, config.tree_max_depth)
    return layout

"""Graph builder — flattens an association tree into nodes and edges.

The keyword becomes the single root node. Each side (left context, right
context) is walked depth-first with its lineage fixed for the whole subtree,
emitting one node per distinct tree position and one edge per parent → child
step. Node ids are the context path joined with ``PATH_SEPARATOR`` so the same
word at different positions yields distinct nodes::

    bank ── river ── river__the        (left)
      └──── account                    (right)

The result is consumed read-only by two projections: the hierarchy layout
(``wordtree_graph.hierarchy``) and the force simulation (``wordtree_graph.force``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property

import networkx as nx

from wordtree_graph.association import AssociationNode, AssociationTree, children_of

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "__"


class Lineage(Enum):
    """Which part of the association tree a node belongs to."""

    Root = "root"
    Left = "left"
    Right = "right"


# ─── Graph Types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GraphNode:
    """A node of the flattened association graph.

    Attributes:
        id: Unique id. The keyword for the root, the joined context path otherwise.
        lineage: Root, Left or Right.
        weight: Occurrence count of the word at this position (None for the root).
        path: Context words from the keyword outwards; empty for the root.
    """

    id: str
    lineage: Lineage
    weight: int | None = None
    path: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return self.lineage is Lineage.Root

    @property
    def label(self) -> str:
        """Display text: the word itself, without its context path."""
        return self.path[-1] if self.path else self.id

    @property
    def depth(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class GraphEdge:
    """A parent → child step, weighted by the child's occurrence count."""

    from_id: str
    to_id: str
    weight: int


@dataclass(frozen=True)
class GraphData:
    """Flat node and edge sets built from one association tree.

    ``nodes`` starts with the root and otherwise follows traversal order, so
    every edge's ``from_id`` names a node listed before its ``to_id``.
    """

    root_id: str
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    _index: dict[str, GraphNode] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._index.update((n.id, n) for n in self.nodes)

    def node(self, node_id: str) -> GraphNode:
        return self._index[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def root(self) -> GraphNode:
        return self._index[self.root_id]

    def non_root_nodes(self) -> list[GraphNode]:
        return [n for n in self.nodes if not n.is_root]

    @cached_property
    def digraph(self) -> nx.DiGraph:
        """A networkx view: node attr ``data`` holds the GraphNode, edge attr ``data`` the GraphEdge."""
        g: nx.DiGraph = nx.DiGraph()
        for n in self.nodes:
            g.add_node(n.id, data=n, lineage=n.lineage.value, weight=n.weight)
        for e in self.edges:
            g.add_edge(e.from_id, e.to_id, data=e, weight=e.weight)
        return g

    def tooltip(self, node_id: str) -> str:
        """Hover text for a node: ``"river (3)"``, or just the keyword for the root."""
        n = self.node(node_id)
        if n.weight is None:
            return n.label
        return f"{n.label} ({n.weight})"


# ─── Builder ──────────────────────────────────────────────────────────────────


class _Flattener:
    """Traversal state for one ``build`` call.

    Nodes are keyed structurally by (lineage, path). The joined string id is
    derived from the path; if another position already claimed that string
    (same word on both sides, a token containing the separator, or a context
    word equal to the keyword) the id is qualified with the lineage.
    """

    def __init__(self, root_id: str) -> None:
        self.root_id = root_id
        self.nodes: list[GraphNode] = [GraphNode(id=root_id, lineage=Lineage.Root)]
        self.edges: list[GraphEdge] = []
        self.seen: dict[tuple[Lineage, tuple[str, ...]], str] = {}
        self.taken_ids: set[str] = {root_id}

    def claim_id(self, lineage: Lineage, path: tuple[str, ...]) -> str:
        candidate = PATH_SEPARATOR.join(path)
        if candidate not in self.taken_ids:
            return candidate
        qualified = f"{lineage.value}:{candidate}"
        suffix = 1
        unique = qualified
        while unique in self.taken_ids:
            suffix += 1
            unique = f"{qualified}#{suffix}"
        logger.debug("node id %r already taken, using %r", candidate, unique)
        return unique

    def walk(self, entries: dict[str, AssociationNode], parent_id: str, lineage: Lineage) -> None:
        """Emit ``entries`` and everything below them in pre-order."""
        stack: list[tuple[Iterator, str, tuple[str, ...]]] = [(iter(entries.items()), parent_id, ())]
        while stack:
            items, parent_id, parent_path = stack[-1]
            for word, child in items:
                path = parent_path + (word,)
                key = (lineage, path)
                node_id = self.seen.get(key)
                if node_id is None:
                    node_id = self.claim_id(lineage, path)
                    self.seen[key] = node_id
                    self.taken_ids.add(node_id)
                    self.nodes.append(GraphNode(id=node_id, lineage=lineage, weight=child.weight, path=path))
                self.edges.append(GraphEdge(from_id=parent_id, to_id=node_id, weight=child.weight))
                grandchildren = children_of(child)
                if grandchildren:
                    stack.append((iter(grandchildren.items()), node_id, path))
                    break
            else:
                stack.pop()


def build(tree: AssociationTree) -> GraphData:
    """Flatten an association tree into a ``GraphData``.

    Deterministic and side-effect free: equal trees give equal graphs.
    """
    flattener = _Flattener(tree.word)
    flattener.walk(tree.left, tree.word, Lineage.Left)
    flattener.walk(tree.right, tree.word, Lineage.Right)

    logger.debug(
        "built graph for %r: %d nodes, %d edges",
        tree.word,
        len(flattener.nodes),
        len(flattener.edges),
    )
    return GraphData(
        root_id=tree.word,
        nodes=tuple(flattener.nodes),
        edges=tuple(flattener.edges),
    )

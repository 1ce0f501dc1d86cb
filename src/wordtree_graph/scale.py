"""Node scale — circle radius and label size from occurrence counts.

Weights are min–max normalised over the non-root nodes; the root always
renders at the maximum size. When every weight is equal the fraction is
undefined and all non-root nodes fall back to the minimum size.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from wordtree_graph.association import DEFAULT_WEIGHT
from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.graph import GraphData, GraphNode


@dataclass(frozen=True)
class NodeScale:
    """Maps a node's weight onto radius and font size."""

    min_weight: float = DEFAULT_WEIGHT
    max_weight: float = DEFAULT_WEIGHT
    radius_min: float = DEFAULT_CONFIG.radius_min
    radius_max: float = DEFAULT_CONFIG.radius_max
    font_min: float = DEFAULT_CONFIG.font_min
    font_max: float = DEFAULT_CONFIG.font_max
    collide_padding: float = DEFAULT_CONFIG.collide_padding

    @classmethod
    def from_nodes(cls, nodes: Iterable[GraphNode], config: LayoutConfig = DEFAULT_CONFIG) -> NodeScale:
        weights = [_weight_of(n) for n in nodes if not n.is_root]
        return cls(
            min_weight=min(weights, default=DEFAULT_WEIGHT),
            max_weight=max(weights, default=DEFAULT_WEIGHT),
            radius_min=config.radius_min,
            radius_max=config.radius_max,
            font_min=config.font_min,
            font_max=config.font_max,
            collide_padding=config.collide_padding,
        )

    @classmethod
    def from_graph(cls, graph: GraphData, config: LayoutConfig = DEFAULT_CONFIG) -> NodeScale:
        return cls.from_nodes(graph.nodes, config)

    @property
    def is_degenerate(self) -> bool:
        return self.max_weight == self.min_weight

    def fraction(self, node: GraphNode) -> float:
        """Normalised weight in [0, 1]; 1 for the root, 0 when all weights are equal."""
        if node.is_root:
            return 1.0
        if self.is_degenerate:
            return 0.0
        return (_weight_of(node) - self.min_weight) / (self.max_weight - self.min_weight)

    def radius(self, node: GraphNode) -> float:
        return self.radius_min + self.fraction(node) * (self.radius_max - self.radius_min)

    def font_size(self, node: GraphNode) -> float:
        return self.font_min + self.fraction(node) * (self.font_max - self.font_min)

    def collide_radius(self, node: GraphNode) -> float:
        """Radius used by collision avoidance: the drawn radius plus padding."""
        return self.radius(node) + self.collide_padding


def _weight_of(node: GraphNode) -> float:
    return DEFAULT_WEIGHT if node.weight is None else node.weight

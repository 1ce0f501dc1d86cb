"""Public API — payload in, SVG out."""

from __future__ import annotations

from collections.abc import Mapping

from wordtree_graph.association import AssociationTree
from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.force import ForceSimulation, Frame
from wordtree_graph.graph import GraphData, build
from wordtree_graph.hierarchy import HierarchyLayout, layout_hierarchy
from wordtree_graph.renderers.base import Renderer
from wordtree_graph.renderers.svg import ForceSvgRenderer, TreeSvgRenderer


def build_graph(payload: AssociationTree | Mapping) -> GraphData:
    """Parse a ``{word, left, right}`` payload (or take a parsed tree) and flatten it."""
    tree = payload if isinstance(payload, AssociationTree) else AssociationTree.from_dict(payload)
    return build(tree)


def render_force_svg(
    payload: AssociationTree | Mapping,
    config: LayoutConfig = DEFAULT_CONFIG,
    seed: int = 0,
    max_iterations: int = 1000,
) -> str:
    """Settle a force layout headlessly and render it to SVG."""
    simulation = ForceSimulation(build_graph(payload), config, seed=seed)
    simulation.settle(max_iterations)
    renderer: Renderer[Frame] = ForceSvgRenderer(config.width, config.height)
    return renderer.render(simulation.frame())


def render_tree_svg(payload: AssociationTree | Mapping, config: LayoutConfig = DEFAULT_CONFIG) -> str:
    """Render the hierarchy projection to SVG."""
    renderer: Renderer[HierarchyLayout] = TreeSvgRenderer()
    return renderer.render(layout_hierarchy(build_graph(payload), config))

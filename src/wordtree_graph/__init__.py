"""wordtree_graph — word association trees as hierarchical and force-directed layouts."""

from wordtree_graph.api import build_graph, render_force_svg, render_tree_svg
from wordtree_graph.association import AssociationTree, Branch, Leaf, parse_node
from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.errors import InvalidTreeError, UnknownNodeError, WordTreeError
from wordtree_graph.force import ForceSimulation, Frame
from wordtree_graph.graph import PATH_SEPARATOR, GraphData, GraphEdge, GraphNode, Lineage, build
from wordtree_graph.hierarchy import HierarchyLayout, layout_hierarchy
from wordtree_graph.interaction import IDENTITY, ZoomBehavior, ZoomTransform
from wordtree_graph.scale import NodeScale
from wordtree_graph.scheduler import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler
from wordtree_graph.view import WordTreeView

__all__ = [
    "DEFAULT_CONFIG",
    "IDENTITY",
    "PATH_SEPARATOR",
    "AssociationTree",
    "AsyncioFrameScheduler",
    "Branch",
    "ForceSimulation",
    "Frame",
    "FrameScheduler",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "HierarchyLayout",
    "InvalidTreeError",
    "LayoutConfig",
    "Leaf",
    "Lineage",
    "ManualFrameScheduler",
    "NodeScale",
    "UnknownNodeError",
    "WordTreeError",
    "WordTreeView",
    "ZoomBehavior",
    "ZoomTransform",
    "build",
    "build_graph",
    "layout_hierarchy",
    "parse_node",
    "render_force_svg",
    "render_tree_svg",
]

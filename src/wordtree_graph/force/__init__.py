"""Force-directed layout of association graphs."""

from wordtree_graph.force.forces import CenterForce, CollideForce, Force, LinkForce, ManyBodyForce, jiggle
from wordtree_graph.force.simulation import ForceSimulation
from wordtree_graph.force.types import EdgeSegment, Frame, LayoutLink, LayoutNode, NodePosition

__all__ = [
    "CenterForce",
    "CollideForce",
    "EdgeSegment",
    "Force",
    "ForceSimulation",
    "Frame",
    "LayoutLink",
    "LayoutNode",
    "LinkForce",
    "ManyBodyForce",
    "NodePosition",
    "jiggle",
]

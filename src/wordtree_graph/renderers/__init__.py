"""Renderers for force frames and hierarchy layouts."""

from wordtree_graph.renderers.base import Renderer
from wordtree_graph.renderers.svg import ForceSvgRenderer, TreeSvgRenderer

__all__ = ["ForceSvgRenderer", "Renderer", "TreeSvgRenderer"]

"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol, TypeVar

LayoutT = TypeVar("LayoutT", contravariant=True)


class Renderer(Protocol[LayoutT]):
    """Protocol that all renderers must implement."""

    def render(self, layout: LayoutT) -> str:
        """Render a laid-out association graph to an output string."""
        ...

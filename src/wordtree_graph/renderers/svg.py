"""SVG renderers — force frames and hierarchy layouts to SVG strings."""

from __future__ import annotations

from wordtree_graph.force.types import Frame, NodePosition
from wordtree_graph.graph import Lineage
from wordtree_graph.hierarchy import HierarchyLayout, TreeNode

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_FAMILY = "Inter,Roboto,Arial,Helvetica,sans-serif"
BACKGROUND = "#f8fafc"
TEXT_FILL = "#222"
COUNT_FILL = "#888"
COUNT_FONT_SIZE = 12
PADDING = 40  # canvas padding in pixels around a hierarchy

LINEAGE_FILL: dict[Lineage, str] = {
    Lineage.Root: "#2563eb",
    Lineage.Left: "#f59e42",
    Lineage.Right: "#10b981",
}

_LINK_STYLE = 'stroke="#aaa" stroke-width="2" stroke-opacity="0.7"'
_NODE_STROKE = 'stroke="#fff" stroke-width="2"'


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: float) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size:g}"'


def _num(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


# ─── Force Frame ────────────────────────────────────────────────────────────


def _render_circle(n: NodePosition) -> str:
    fill = LINEAGE_FILL[n.lineage]
    title = _escape(n.label if n.weight is None else f"{n.label} ({n.weight})")
    return (
        f'<circle cx="{_num(n.x)}" cy="{_num(n.y)}" r="{_num(n.radius)}" fill="{fill}" {_NODE_STROKE}>'
        f"<title>{title}</title></circle>"
    )


def _render_label(n: NodePosition) -> str:
    return (
        f'<text x="{_num(n.x)}" y="{_num(n.y)}" dy="5" text-anchor="middle" '
        f'{_font(n.font_size)} fill="{TEXT_FILL}" pointer-events="none">{_escape(n.label)}</text>'
    )


class ForceSvgRenderer:
    """SVG renderer — consumes a force ``Frame``, produces an SVG string.

    The frame's zoom transform is applied to a single scene group, so node
    coordinates are emitted unchanged.
    """

    def __init__(self, width: float = 900, height: float = 700) -> None:
        self.width = width
        self.height = height

    def render(self, frame: Frame) -> str:
        w, h = _num(self.width), _num(self.height)
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
            f'<rect width="{w}" height="{h}" fill="{BACKGROUND}"/>',
            f'<g transform="{frame.transform.to_svg()}">',
            f"<g {_LINK_STYLE}>",
        ]
        for e in frame.edges:
            parts.append(f'<line x1="{_num(e.x1)}" y1="{_num(e.y1)}" x2="{_num(e.x2)}" y2="{_num(e.y2)}"/>')
        parts.append("</g>")

        parts.append("<g>")
        parts.extend(_render_circle(n) for n in frame.nodes)
        parts.append("</g>")

        parts.append("<g>")
        parts.extend(_render_label(n) for n in frame.nodes)
        parts.append("</g>")

        parts.append("</g>")
        parts.append("</svg>")
        return "\n".join(parts)


# ─── Hierarchy ──────────────────────────────────────────────────────────────


def _render_tree_node(n: TreeNode, dx: float, dy: float) -> str:
    x, y = n.x + dx, n.y + dy
    if n.lineage is Lineage.Left:
        anchor = "end"
    elif n.lineage is Lineage.Right:
        anchor = "start"
    else:
        anchor = "middle"
    parts = [
        f'<text x="{_num(x)}" y="{_num(y)}" text-anchor="{anchor}" font-weight="300" '
        f'{_font(n.font_size)} fill="{TEXT_FILL}">{_escape(n.label)}</text>'
    ]
    if n.weight is not None:
        parts.append(
            f'<text x="{_num(x)}" y="{_num(y)}" dy="18" text-anchor="{anchor}" '
            f'{_font(COUNT_FONT_SIZE)} fill="{COUNT_FILL}">({n.weight})</text>'
        )
    return "\n".join(parts)


def _diagonal(x1: float, y1: float, x2: float, y2: float) -> str:
    """Horizontal cubic Bézier from parent to child."""
    mx = (x1 + x2) / 2
    return f"M{_num(x1)},{_num(y1)}C{_num(mx)},{_num(y1)} {_num(mx)},{_num(y2)} {_num(x2)},{_num(y2)}"


class TreeSvgRenderer:
    """SVG renderer — consumes a ``HierarchyLayout``, produces an SVG string."""

    def render(self, layout: HierarchyLayout) -> str:
        if not layout.nodes:
            return ""

        min_x, min_y, max_x, max_y = layout.bounds()
        dx, dy = PADDING * 4 - min_x, PADDING - min_y
        svg_w = _num(max_x - min_x + PADDING * 8)
        svg_h = _num(max_y - min_y + PADDING * 2)

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_w}" height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">',
            f'<rect width="{svg_w}" height="{svg_h}" fill="{BACKGROUND}"/>',
        ]

        # Links behind labels
        for link in layout.links:
            path = _diagonal(link.x1 + dx, link.y1 + dy, link.x2 + dx, link.y2 + dy)
            parts.append(f'<path d="{path}" fill="none" {_LINK_STYLE}/>')

        for n in layout.nodes:
            parts.append(_render_tree_node(n, dx, dy))

        parts.append("</svg>")
        return "\n".join(parts)

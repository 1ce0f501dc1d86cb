"""Layout configuration — geometry, physics and interaction tunables.

Module-level constants hold the defaults; ``LayoutConfig`` bundles them so a
caller can override a few values and hand the result to any component.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

# ─── Node Scale ───────────────────────────────────────────────────────────────

RADIUS_MIN: float = 14.0
RADIUS_MAX: float = 40.0
FONT_MIN: float = 14.0
FONT_MAX: float = 32.0
COLLIDE_PADDING: float = 4.0

# ─── Forces ───────────────────────────────────────────────────────────────────

LINK_DISTANCE: float = 80.0
LINK_STRENGTH: float = 1.0
CHARGE_STRENGTH: float = -250.0
CHARGE_DISTANCE_MIN: float = 1.0
CENTER_STRENGTH: float = 1.0
COLLIDE_STRENGTH: float = 1.0

# ─── Alpha Schedule ───────────────────────────────────────────────────────────

ALPHA_START: float = 1.0
ALPHA_MIN: float = 0.001
ALPHA_DECAY: float = 1.0 - ALPHA_MIN ** (1.0 / 300.0)
ALPHA_DRAG_TARGET: float = 0.3
VELOCITY_DECAY: float = 0.4

# ─── Viewport & Interaction ───────────────────────────────────────────────────

VIEWPORT_WIDTH: float = 900.0
VIEWPORT_HEIGHT: float = 700.0
SCALE_MIN: float = 0.2
SCALE_MAX: float = 4.0
RESET_DURATION: float = 0.5  # seconds
FRAME_INTERVAL: float = 1.0 / 60.0  # seconds

# ─── Hierarchy ────────────────────────────────────────────────────────────────

TREE_MAX_DEPTH: int = 4
TREE_LEVEL_GAP: float = 180.0
TREE_NODE_SIZE: float = 28.0
TREE_SIBLING_SEPARATION: float = 2.5
TREE_NON_SIBLING_SEPARATION: float = 3.0


@dataclass(frozen=True)
class LayoutConfig:
    """All tunables for one rendering session.

    Defaults mirror the module constants. Use ``replace`` to derive a variant.
    """

    radius_min: float = RADIUS_MIN
    radius_max: float = RADIUS_MAX
    font_min: float = FONT_MIN
    font_max: float = FONT_MAX
    collide_padding: float = COLLIDE_PADDING

    link_distance: float = LINK_DISTANCE
    link_strength: float = LINK_STRENGTH
    charge_strength: float = CHARGE_STRENGTH
    charge_distance_min: float = CHARGE_DISTANCE_MIN
    center_strength: float = CENTER_STRENGTH
    collide_strength: float = COLLIDE_STRENGTH

    alpha_start: float = ALPHA_START
    alpha_min: float = ALPHA_MIN
    alpha_decay: float = ALPHA_DECAY
    alpha_drag_target: float = ALPHA_DRAG_TARGET
    velocity_decay: float = VELOCITY_DECAY

    width: float = VIEWPORT_WIDTH
    height: float = VIEWPORT_HEIGHT
    scale_min: float = SCALE_MIN
    scale_max: float = SCALE_MAX
    reset_duration: float = RESET_DURATION
    frame_interval: float = FRAME_INTERVAL

    tree_max_depth: int = TREE_MAX_DEPTH
    tree_level_gap: float = TREE_LEVEL_GAP
    tree_node_size: float = TREE_NODE_SIZE
    tree_sibling_separation: float = TREE_SIBLING_SEPARATION
    tree_non_sibling_separation: float = TREE_NON_SIBLING_SEPARATION

    def replace(self, **changes: object) -> LayoutConfig:
        return dataclasses.replace(self, **changes)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)


DEFAULT_CONFIG = LayoutConfig()

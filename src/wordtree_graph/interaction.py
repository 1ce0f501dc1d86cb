"""Pan/zoom — the viewport transform applied to the whole rendered scene.

Gestures produce a new ``ZoomTransform`` (translate + uniform scale, scale
clamped to the configured extent). Node positions are never touched; the
transform maps scene coordinates to screen coordinates::

    screen = scene * k + (x, y)

``reset`` animates back to the identity over a fixed duration, one step per
scheduler frame. Any gesture interrupts a running reset.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from wordtree_graph.config import DEFAULT_CONFIG, LayoutConfig
from wordtree_graph.scheduler import FrameScheduler

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# Wheel delta multipliers by DOM deltaMode (pixel, line, page).
_WHEEL_PIXEL = 0.002
_WHEEL_LINE = 0.05
_WHEEL_PAGE = 1.0


# ─── Transform ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ZoomTransform:
    """Uniform scale ``k`` followed by translation ``(x, y)``."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, point: Point) -> Point:
        """Scene → screen."""
        return (point[0] * self.k + self.x, point[1] * self.k + self.y)

    def invert(self, point: Point) -> Point:
        """Screen → scene."""
        return ((point[0] - self.x) / self.k, (point[1] - self.y) / self.k)

    def translated_by(self, dx: float, dy: float) -> ZoomTransform:
        """Shift by a screen-space offset."""
        return ZoomTransform(self.k, self.x + dx, self.y + dy)

    def scaled_to(self, k: float, anchor: Point) -> ZoomTransform:
        """Rescale to ``k`` keeping the screen point ``anchor`` fixed."""
        sx, sy = self.invert(anchor)
        return ZoomTransform(k, anchor[0] - sx * k, anchor[1] - sy * k)

    @property
    def is_identity(self) -> bool:
        return self.k == 1.0 and self.x == 0.0 and self.y == 0.0

    def to_svg(self) -> str:
        return f"translate({self.x:g},{self.y:g}) scale({self.k:g})"


IDENTITY = ZoomTransform()


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate_transform(a: ZoomTransform, b: ZoomTransform, t: float) -> ZoomTransform:
    """Blend two transforms: scale geometrically, translation linearly."""
    if t <= 0:
        return a
    if t >= 1:
        return b
    k = math.exp(math.log(a.k) + (math.log(b.k) - math.log(a.k)) * t)
    return ZoomTransform(k, a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


# ─── Zoom Behaviour ───────────────────────────────────────────────────────────


@dataclass
class _Transition:
    start: ZoomTransform
    end: ZoomTransform
    started_at: float
    duration: float
    handle: object = None


class ZoomBehavior:
    """Owns the current transform and turns gestures into transform updates."""

    def __init__(
        self,
        config: LayoutConfig = DEFAULT_CONFIG,
        scheduler: FrameScheduler | None = None,
    ) -> None:
        self.scale_extent: tuple[float, float] = (config.scale_min, config.scale_max)
        self.reset_duration = config.reset_duration
        self.viewport_center: Point = config.center
        self.scheduler = scheduler
        self._transform = IDENTITY
        self._listeners: list[Callable[[ZoomTransform], None]] = []
        self._transition: _Transition | None = None

    @property
    def transform(self) -> ZoomTransform:
        return self._transform

    @property
    def is_transitioning(self) -> bool:
        return self._transition is not None

    def on_zoom(self, callback: Callable[[ZoomTransform], None]) -> None:
        self._listeners.append(callback)

    def _emit(self, transform: ZoomTransform) -> None:
        self._transform = transform
        for callback in self._listeners:
            callback(transform)

    def _clamp(self, k: float) -> float:
        lo, hi = self.scale_extent
        return max(lo, min(hi, k))

    # ── gestures ──

    def set_transform(self, transform: ZoomTransform) -> ZoomTransform:
        self.interrupt()
        k = self._clamp(transform.k)
        self._emit(transform if k == transform.k else ZoomTransform(k, transform.x, transform.y))
        return self._transform

    def pan(self, dx: float, dy: float) -> ZoomTransform:
        """Pointer drag on the background: translate by a screen offset."""
        self.interrupt()
        self._emit(self._transform.translated_by(dx, dy))
        return self._transform

    def zoom_by(self, factor: float, anchor: Point | None = None) -> ZoomTransform:
        """Multiply the scale by ``factor`` around ``anchor`` (viewport centre by default)."""
        self.interrupt()
        k = self._clamp(self._transform.k * factor)
        self._emit(self._transform.scaled_to(k, anchor or self.viewport_center))
        return self._transform

    def wheel(self, delta_y: float, anchor: Point | None = None, delta_mode: int = 0) -> ZoomTransform:
        """Wheel gesture; ``delta_mode`` follows DOM WheelEvent (0 pixel, 1 line, 2 page)."""
        if delta_mode == 1:
            unit = _WHEEL_LINE
        elif delta_mode:
            unit = _WHEEL_PAGE
        else:
            unit = _WHEEL_PIXEL
        return self.zoom_by(2 ** (-delta_y * unit), anchor)

    def pinch(self, ratio: float, anchor: Point | None = None) -> ZoomTransform:
        """Two-finger gesture: ``ratio`` is current over previous finger distance."""
        return self.zoom_by(ratio, anchor)

    # ── reset ──

    def reset(self, duration: float | None = None) -> None:
        """Animate back to the identity transform.

        Without a scheduler, or with a non-positive duration, the identity is
        applied at once. Node positions and pins are unaffected.
        """
        self.interrupt()
        duration = self.reset_duration if duration is None else duration
        if self.scheduler is None or duration <= 0 or self._transform == IDENTITY:
            self._emit(IDENTITY)
            return
        logger.debug("reset transition from %s over %.3fs", self._transform.to_svg(), duration)
        self._transition = _Transition(
            start=self._transform,
            end=IDENTITY,
            started_at=self.scheduler.now(),
            duration=duration,
        )
        self._transition.handle = self.scheduler.request_frame(self._on_transition_frame)

    def _on_transition_frame(self) -> None:
        transition = self._transition
        if transition is None or self.scheduler is None:
            return
        elapsed = self.scheduler.now() - transition.started_at
        t = min(1.0, elapsed / transition.duration)
        if t >= 1.0:
            self._transition = None
            self._emit(transition.end)
            return
        self._emit(interpolate_transform(transition.start, transition.end, ease_cubic_in_out(t)))
        transition.handle = self.scheduler.request_frame(self._on_transition_frame)

    def interrupt(self) -> None:
        """Cancel a running reset, leaving the transform where it is."""
        transition, self._transition = self._transition, None
        if transition is not None and self.scheduler is not None:
            self.scheduler.cancel_frame(transition.handle)

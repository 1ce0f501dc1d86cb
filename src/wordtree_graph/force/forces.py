"""Forces — velocity contributions applied once per simulation step.

Each force is initialised with the live node list and a seeded random
source, then called with the current ``alpha``. Forces only adjust
velocities (``vx``/``vy``), except centring which shifts positions directly.
Pinned nodes still act on their neighbours; the simulation ignores their
own velocity when integrating.
"""

from __future__ import annotations

import math
import random
from collections import Counter
from collections.abc import Callable, Sequence
from typing import Protocol

from wordtree_graph.force.types import LayoutLink, LayoutNode


def jiggle(rng: random.Random) -> float:
    """A tiny random offset used to separate exactly coincident points."""
    return (rng.random() - 0.5) * 1e-6


class Force(Protocol):
    """Protocol that all forces must implement."""

    def initialize(self, nodes: Sequence[LayoutNode], rng: random.Random) -> None: ...

    def __call__(self, alpha: float) -> None: ...


# ─── Link ─────────────────────────────────────────────────────────────────────


class LinkForce:
    """Spring along each edge pulling its endpoints toward ``distance`` apart.

    The correction is split between the endpoints by degree, so a leaf moves
    more than the hub it hangs from.
    """

    def __init__(
        self,
        links: Sequence[LayoutLink],
        distance: float = 80.0,
        strength: float = 1.0,
        iterations: int = 1,
    ) -> None:
        self.links = list(links)
        self.distance = distance
        self.strength = strength
        self.iterations = iterations
        self._bias: list[float] = []
        self._rng = random.Random(0)

    def initialize(self, nodes: Sequence[LayoutNode], rng: random.Random) -> None:
        self._rng = rng
        degree: Counter[int] = Counter()
        for link in self.links:
            degree[link.source.index] += 1
            degree[link.target.index] += 1
        self._bias = [
            degree[link.source.index] / (degree[link.source.index] + degree[link.target.index]) for link in self.links
        ]

    def __call__(self, alpha: float) -> None:
        for _ in range(self.iterations):
            for link, bias in zip(self.links, self._bias):
                source, target = link.source, link.target
                x = target.x + target.vx - source.x - source.vx or jiggle(self._rng)
                y = target.y + target.vy - source.y - source.vy or jiggle(self._rng)
                length = math.sqrt(x * x + y * y)
                length = (length - self.distance) / length * alpha * self.strength
                x *= length
                y *= length
                target.vx -= x * bias
                target.vy -= y * bias
                source.vx += x * (1 - bias)
                source.vy += y * (1 - bias)


# ─── Charge ───────────────────────────────────────────────────────────────────


class ManyBodyForce:
    """Pairwise repulsion (negative strength) falling off with distance.

    Exhaustive over all pairs; association graphs stay small enough that no
    spatial index is needed.
    """

    def __init__(self, strength: float = -250.0, distance_min: float = 1.0) -> None:
        self.strength = strength
        self.distance_min2 = distance_min * distance_min
        self._nodes: list[LayoutNode] = []
        self._rng = random.Random(0)

    def initialize(self, nodes: Sequence[LayoutNode], rng: random.Random) -> None:
        self._nodes = list(nodes)
        self._rng = rng

    def __call__(self, alpha: float) -> None:
        w = self.strength * alpha
        for node in self._nodes:
            for other in self._nodes:
                if other is node:
                    continue
                x = other.x - node.x
                y = other.y - node.y
                l2 = x * x + y * y
                if x == 0:
                    x = jiggle(self._rng)
                    l2 += x * x
                if y == 0:
                    y = jiggle(self._rng)
                    l2 += y * y
                if l2 < self.distance_min2:
                    l2 = math.sqrt(self.distance_min2 * l2)
                node.vx += x * w / l2
                node.vy += y * w / l2


# ─── Centre ───────────────────────────────────────────────────────────────────


class CenterForce:
    """Translate all nodes so their centroid sits on ``(x, y)``."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.strength = strength
        self._nodes: list[LayoutNode] = []

    def initialize(self, nodes: Sequence[LayoutNode], rng: random.Random) -> None:
        self._nodes = list(nodes)

    def __call__(self, alpha: float) -> None:
        n = len(self._nodes)
        if n == 0:
            return
        sx = (sum(node.x for node in self._nodes) / n - self.x) * self.strength
        sy = (sum(node.y for node in self._nodes) / n - self.y) * self.strength
        for node in self._nodes:
            node.x -= sx
            node.y -= sy


# ─── Collision ────────────────────────────────────────────────────────────────


class CollideForce:
    """Push apart any two nodes whose circles overlap.

    Overlap is resolved along the line between the (predicted) centres; the
    smaller node takes the larger share of the correction.
    """

    def __init__(
        self,
        radius: Callable[[LayoutNode], float],
        strength: float = 1.0,
        iterations: int = 1,
    ) -> None:
        self.radius = radius
        self.strength = strength
        self.iterations = iterations
        self._nodes: list[LayoutNode] = []
        self._radii: list[float] = []
        self._rng = random.Random(0)

    def initialize(self, nodes: Sequence[LayoutNode], rng: random.Random) -> None:
        self._nodes = list(nodes)
        self._radii = [self.radius(node) for node in self._nodes]
        self._rng = rng

    def __call__(self, alpha: float) -> None:
        nodes, radii = self._nodes, self._radii
        for _ in range(self.iterations):
            for i, node in enumerate(nodes):
                ri = radii[i]
                ri2 = ri * ri
                xi = node.x + node.vx
                yi = node.y + node.vy
                for j in range(i + 1, len(nodes)):
                    other = nodes[j]
                    rj = radii[j]
                    r = ri + rj
                    x = xi - other.x - other.vx
                    y = yi - other.y - other.vy
                    l2 = x * x + y * y
                    if l2 >= r * r:
                        continue
                    if x == 0:
                        x = jiggle(self._rng)
                        l2 += x * x
                    if y == 0:
                        y = jiggle(self._rng)
                        l2 += y * y
                    length = math.sqrt(l2)
                    length = (r - length) / length * self.strength
                    x *= length
                    y *= length
                    rj2 = rj * rj
                    share = rj2 / (ri2 + rj2)
                    node.vx += x * share
                    node.vy += y * share
                    other.vx -= x * (1 - share)
                    other.vy -= y * (1 - share)

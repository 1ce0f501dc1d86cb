"""Association trees — the keyword-centred input structure.

The analysis service answers a word-tree request with::

    {"word": "bank",
     "left":  {"river": {"count": 3, "the": {"count": 2}}},
     "right": {"account": {"count": 5}}}

Every mapping key except ``count`` is a context word whose value is another
nested mapping. This module parses that payload once into a tagged variant
(``Leaf`` | ``Branch``) so consumers never re-inspect raw keys.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Union

from wordtree_graph.errors import InvalidTreeError

logger = logging.getLogger(__name__)

COUNT_KEY = "count"
DEFAULT_WEIGHT = 1


# ─── Node Variants ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Leaf:
    """A context word with no further context beyond it."""

    weight: int = DEFAULT_WEIGHT


@dataclass(frozen=True)
class Branch:
    """A context word followed by further context words.

    ``children`` keeps the payload's key order, which is also the order the
    graph builder emits nodes in.
    """

    weight: int = DEFAULT_WEIGHT
    children: dict[str, AssociationNode] = field(default_factory=dict)


AssociationNode = Union[Leaf, Branch]


def children_of(node: AssociationNode) -> dict[str, AssociationNode]:
    """Return the child entries of a node (empty for a leaf)."""
    if isinstance(node, Branch):
        return node.children
    return {}


# ─── Parsing ──────────────────────────────────────────────────────────────────


def _count(raw: Mapping) -> int:
    """Read the reserved ``count`` annotation, falling back to 1.

    Booleans are ints in Python but never occurrence counts, and NaN,
    infinities and negatives are not frequencies either.
    """
    value = raw.get(COUNT_KEY)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_WEIGHT
    if not math.isfinite(value) or value < 0:
        return DEFAULT_WEIGHT
    return value


def _variant(raw: Mapping, children: dict[str, AssociationNode]) -> AssociationNode:
    weight = _count(raw)
    if not children:
        return Leaf(weight=weight)
    return Branch(weight=weight, children=children)


def parse_children(raw: object) -> dict[str, AssociationNode]:
    """Parse the word entries of a raw mapping; non-mappings have none.

    Walks with an explicit stack so context depth is not limited by the
    interpreter's recursion limit. A frame becomes a node once its items
    are exhausted.
    """
    if not isinstance(raw, Mapping):
        return {}
    frames: list[tuple[str, Mapping, Iterator, dict[str, AssociationNode]]] = [("", raw, iter(raw.items()), {})]
    while True:
        _, _, items, children = frames[-1]
        for key, value in items:
            if key == COUNT_KEY:
                continue
            if isinstance(value, Mapping):
                frames.append((str(key), value, iter(value.items()), {}))
                break
            children[str(key)] = Leaf()
        else:
            word, mapping, _, children = frames.pop()
            if not frames:
                return children
            frames[-1][3][word] = _variant(mapping, children)


def parse_node(raw: object) -> AssociationNode:
    """Parse one raw nested value.

    A mapping with at least one word key becomes a ``Branch``; a mapping with
    only ``count`` (or nothing), and any non-mapping value, becomes a ``Leaf``.
    """
    if not isinstance(raw, Mapping):
        return Leaf()
    return _variant(raw, parse_children(raw))


# ─── Tree Root ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AssociationTree:
    """A keyword with independently rooted left and right context maps."""

    word: str
    left: dict[str, AssociationNode] = field(default_factory=dict)
    right: dict[str, AssociationNode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.word, str) or not self.word.strip():
            raise InvalidTreeError(f"association tree needs a non-empty keyword, got {self.word!r}")

    @classmethod
    def from_dict(cls, payload: Mapping) -> AssociationTree:
        """Parse a ``{word, left, right}`` payload from the analysis service."""
        if not isinstance(payload, Mapping):
            raise InvalidTreeError(f"association payload must be a mapping, got {type(payload).__name__}")
        tree = cls(
            word=payload.get("word"),  # type: ignore[arg-type]
            left=parse_children(payload.get("left")),
            right=parse_children(payload.get("right")),
        )
        logger.debug(
            "parsed association tree %r: %d left / %d right first-level words",
            tree.word,
            len(tree.left),
            len(tree.right),
        )
        return tree

"""Exceptions raised for caller errors.

The graph builder and the force simulation never raise on malformed nested
content; these cover inputs that cannot be turned into a graph at all and
calls that name nodes the simulation does not own.
"""

from __future__ import annotations


class WordTreeError(Exception):
    """Base class for all wordtree_graph errors."""


class InvalidTreeError(WordTreeError, ValueError):
    """The association payload has no usable root keyword."""


class UnknownNodeError(WordTreeError, KeyError):
    """A node id is not part of the running simulation."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"unknown node: {self.node_id!r}"

"""Tests for graph.py — flattening association trees into nodes and edges."""

from __future__ import annotations

import networkx as nx

from wordtree_graph.association import AssociationTree
from wordtree_graph.graph import PATH_SEPARATOR, GraphData, Lineage, build

# ─── Helpers ──────────────────────────────────────────────────────────────────


def graph_of(payload: dict) -> GraphData:
    return build(AssociationTree.from_dict(payload))


def chain(*words: str) -> dict:
    """Nested single-branch context: chain("a", "b") → {"a": {"b": {}}}."""
    node: dict = {}
    for word in reversed(words):
        node = {word: node}
    return node


# ─── Worked Example ───────────────────────────────────────────────────────────


class TestBankExample:
    def test_nodes(self, bank_payload):
        """bank / river / river__the / account with lineage and weights."""
        g = graph_of(bank_payload)
        assert [(n.id, n.lineage, n.weight) for n in g.nodes] == [
            ("bank", Lineage.Root, None),
            ("river", Lineage.Left, 3),
            ("river__the", Lineage.Left, 2),
            ("account", Lineage.Right, 5),
        ]

    def test_edges(self, bank_payload):
        """One edge per parent → child step, weighted by the child's count."""
        g = graph_of(bank_payload)
        assert [(e.from_id, e.to_id, e.weight) for e in g.edges] == [
            ("bank", "river", 3),
            ("river", "river__the", 2),
            ("bank", "account", 5),
        ]

    def test_labels_are_last_path_segment(self, bank_payload):
        g = graph_of(bank_payload)
        assert g.node("river__the").label == "the"
        assert g.node("river__the").path == ("river", "the")
        assert g.root.label == "bank"

    def test_tooltips(self, bank_payload):
        g = graph_of(bank_payload)
        assert g.tooltip("river") == "river (3)"
        assert g.tooltip("bank") == "bank"


# ─── Structural Properties ────────────────────────────────────────────────────


class TestStructure:
    def test_single_root(self, deep_payload):
        """Exactly one Root node, and its id is the keyword."""
        g = graph_of(deep_payload)
        roots = [n for n in g.nodes if n.lineage is Lineage.Root]
        assert len(roots) == 1
        assert roots[0].id == "data"
        assert g.nodes[0] is roots[0]

    def test_ids_unique(self, deep_payload):
        g = graph_of(deep_payload)
        ids = [n.id for n in g.nodes]
        assert len(ids) == len(set(ids))

    def test_edge_count_equals_non_root_nodes(self, deep_payload):
        """Each non-root node has exactly one parent edge."""
        g = graph_of(deep_payload)
        assert len(g.edges) == len(g.non_root_nodes())

    def test_is_tree_rooted_at_keyword(self, deep_payload):
        """The networkx projection is an arborescence rooted at the keyword."""
        g = graph_of(deep_payload)
        dg = g.digraph
        assert nx.is_arborescence(dg)
        assert dg.in_degree("data") == 0

    def test_ids_reconstructed_from_ancestry(self, deep_payload):
        """Joining the labels along the root → node path gives back the id and the path."""
        g = graph_of(deep_payload)
        for n in g.non_root_nodes():
            ancestry = nx.shortest_path(g.digraph, g.root_id, n.id)[1:]
            words = tuple(g.node(a).label for a in ancestry)
            assert words == n.path
            assert PATH_SEPARATOR.join(words) == n.id

    def test_paths_reconstructed_when_ids_are_qualified(self):
        """Qualified ids still carry the exact structural path of their position."""
        g = graph_of({"word": "w", "left": {"the": {"w": {}}}, "right": {"the": {"end": {}}, "w": {}}})
        assert any(":" in n.id for n in g.nodes)
        for n in g.non_root_nodes():
            ancestry = nx.shortest_path(g.digraph, g.root_id, n.id)[1:]
            assert tuple(g.node(a).label for a in ancestry) == n.path
            assert g.node(ancestry[0]).lineage is n.lineage

    def test_parents_emitted_before_children(self, deep_payload):
        g = graph_of(deep_payload)
        position = {n.id: i for i, n in enumerate(g.nodes)}
        for e in g.edges:
            assert position[e.from_id] < position[e.to_id]

    def test_no_cross_lineage_edges(self, deep_payload):
        """Edges stay within one side, except those leaving the root."""
        g = graph_of(deep_payload)
        for e in g.edges:
            src, dst = g.node(e.from_id), g.node(e.to_id)
            if not src.is_root:
                assert src.lineage is dst.lineage

    def test_same_word_different_positions(self, deep_payload):
        """"the" under "big" and under "raw" are distinct nodes."""
        g = graph_of(deep_payload)
        assert "big__the" in g
        assert "raw__the" in g

    def test_idempotent(self, deep_payload):
        """Building twice gives set-equal nodes and edges."""
        tree = AssociationTree.from_dict(deep_payload)
        a, b = build(tree), build(tree)
        assert set(a.nodes) == set(b.nodes)
        assert set(a.edges) == set(b.edges)

    def test_digraph_attributes(self, bank_payload):
        dg = graph_of(bank_payload).digraph
        assert dg.nodes["river"]["lineage"] == "left"
        assert dg.edges["bank", "account"]["weight"] == 5


# ─── Edge Cases ───────────────────────────────────────────────────────────────


class TestEdgeCases:
    def test_empty_sides(self):
        """No context on either side → only the root, no edges."""
        g = graph_of({"word": "alone", "left": {}, "right": {}})
        assert [n.id for n in g.nodes] == ["alone"]
        assert g.edges == ()

    def test_count_only_entry_is_leaf(self):
        g = graph_of({"word": "w", "left": {"a": {"count": 7}}, "right": {}})
        assert [n.id for n in g.nodes] == ["w", "a"]
        assert g.node("a").weight == 7

    def test_malformed_values_are_leaves(self):
        """Non-mapping nested values give weight-1 leaves."""
        g = graph_of({"word": "w", "left": {"a": "x", "b": 3}, "right": {"c": None}})
        assert [(n.id, n.weight) for n in g.non_root_nodes()] == [("a", 1), ("b", 1), ("c", 1)]
        assert len(g.edges) == 3

    def test_same_first_word_on_both_sides(self):
        """A word on both sides gets two distinct nodes."""
        g = graph_of({"word": "w", "left": {"the": {}}, "right": {"the": {}}})
        left = [n for n in g.nodes if n.lineage is Lineage.Left]
        right = [n for n in g.nodes if n.lineage is Lineage.Right]
        assert left[0].id == "the"
        assert right[0].id != "the"
        assert right[0].label == "the"
        assert len(g.edges) == 2

    def test_context_word_equal_to_keyword(self):
        """A context word equal to the keyword does not merge with the root."""
        g = graph_of({"word": "bank", "left": {"bank": {}}, "right": {}})
        assert len(g.nodes) == 2
        assert g.nodes[1].lineage is Lineage.Left
        assert g.nodes[1].label == "bank"
        assert g.edges[0].to_id == g.nodes[1].id

    def test_separator_inside_token(self):
        """A token containing the separator cannot collide with a deeper path."""
        g = graph_of({"word": "w", "left": {"a": {"b": {}}, "a__b": {}}, "right": {}})
        ids = [n.id for n in g.nodes]
        assert len(ids) == len(set(ids)) == 4
        assert len(g.edges) == 3

    def test_deep_chain(self):
        g = graph_of({"word": "w", "left": chain("a", "b", "c", "d", "e"), "right": {}})
        assert g.nodes[-1].id == "a__b__c__d__e"
        assert g.nodes[-1].depth == 5

    def test_very_deep_chain(self):
        """A context chain far deeper than the recursion limit still flattens."""
        depth = 2500
        words = [f"w{i}" for i in range(depth)]
        g = graph_of({"word": "k", "left": chain(*words), "right": chain("r")})
        assert len(g.nodes) == depth + 2
        assert len(g.edges) == depth + 1
        deepest = g.nodes[depth]
        assert deepest.depth == depth
        assert deepest.label == f"w{depth - 1}"
        assert g.nodes[-1].id == "r"
        position = {n.id: i for i, n in enumerate(g.nodes)}
        for e in g.edges:
            assert position[e.from_id] < position[e.to_id]

    def test_deep_branching_keeps_pre_order(self):
        """Siblings after a deep subtree come after that whole subtree."""
        g = graph_of({"word": "k", "left": {"a": chain("b", "c"), "d": {}}, "right": {}})
        assert [n.id for n in g.nodes] == ["k", "a", "a__b", "a__b__c", "d"]

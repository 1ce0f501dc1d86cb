"""Tests for force/simulation.py — stepping, scheduling and drag-to-pin."""

from __future__ import annotations

import asyncio
import itertools
import math

import pytest

from wordtree_graph.association import AssociationTree
from wordtree_graph.errors import UnknownNodeError
from wordtree_graph.force import ForceSimulation, Frame
from wordtree_graph.graph import GraphData, build
from wordtree_graph.scheduler import AsyncioFrameScheduler, ManualFrameScheduler

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(payload: dict) -> GraphData:
    return build(AssociationTree.from_dict(payload))


def centroid(sim: ForceSimulation) -> tuple[float, float]:
    n = len(sim.nodes)
    return (sum(ln.x for ln in sim.nodes) / n, sum(ln.y for ln in sim.nodes) / n)


# ─── Initialisation ───────────────────────────────────────────────────────────


class TestInitialisation:
    def test_every_node_placed(self, deep_payload):
        sim = ForceSimulation(make_graph(deep_payload))
        assert len(sim) == len(make_graph(deep_payload).nodes)
        assert all(ln.x is not None and ln.y is not None for ln in sim.nodes)

    def test_phyllotaxis_start(self, bank_payload):
        """Node 0 starts at radius 10·√0.5 on the x axis."""
        sim = ForceSimulation(make_graph(bank_payload))
        root = sim.node("bank")
        assert root.x == pytest.approx(10 * math.sqrt(0.5))
        assert root.y == pytest.approx(0)

    def test_no_pins_initially(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        assert not any(ln.is_pinned for ln in sim.nodes)

    def test_links_reference_layout_nodes(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        assert [(lk.source.id, lk.target.id) for lk in sim.links] == [
            ("bank", "river"),
            ("river", "river__the"),
            ("bank", "account"),
        ]


# ─── Stepping ─────────────────────────────────────────────────────────────────


class TestStepping:
    def test_alpha_cools(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        before = sim.alpha
        sim.tick()
        assert sim.alpha < before

    def test_settle_reaches_rest(self, deep_payload):
        sim = ForceSimulation(make_graph(deep_payload))
        steps = sim.settle()
        assert sim.is_cool
        assert 250 <= steps <= 400

    def test_settled_graph_centred(self, deep_payload):
        """The centroid ends near the viewport centre."""
        sim = ForceSimulation(make_graph(deep_payload))
        sim.settle()
        cx, cy = centroid(sim)
        assert cx == pytest.approx(sim.config.width / 2, abs=5)
        assert cy == pytest.approx(sim.config.height / 2, abs=5)

    def test_settled_graph_circles_do_not_collapse(self, bank_payload):
        """Collision and charge keep every pair of circles mostly apart."""
        sim = ForceSimulation(make_graph(bank_payload))
        sim.settle()
        frame = sim.frame()
        for a, b in itertools.combinations(frame.nodes, 2):
            distance = math.hypot(a.x - b.x, a.y - b.y)
            assert distance >= 0.75 * (a.radius + b.radius), (a.id, b.id, distance)

    def test_deterministic_for_seed(self, deep_payload):
        a = ForceSimulation(make_graph(deep_payload), seed=11).tick(60).frame()
        b = ForceSimulation(make_graph(deep_payload), seed=11).tick(60).frame()
        assert a.nodes == b.nodes

    def test_empty_graph(self):
        """No nodes: stepping, framing and scheduling are all no-ops."""
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(GraphData(root_id="x"), scheduler=scheduler)
        sim.tick(3)
        sim.restart()
        assert scheduler.pending == 0
        assert not sim.is_running
        frame = sim.frame()
        assert frame.nodes == ()
        assert frame.edges == ()


# ─── Frames ───────────────────────────────────────────────────────────────────


class TestFrame:
    def test_edge_endpoints_follow_nodes(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload)).tick(10)
        frame = sim.frame()
        for edge in frame.edges:
            assert (edge.x1, edge.y1) == frame.position(edge.from_id)
            assert (edge.x2, edge.y2) == frame.position(edge.to_id)

    def test_frame_carries_scale(self, bank_payload):
        frame = ForceSimulation(make_graph(bank_payload)).frame()
        root = next(n for n in frame.nodes if n.id == "bank")
        leaf = next(n for n in frame.nodes if n.id == "river__the")
        assert root.radius == 40
        assert leaf.radius == 14
        assert leaf.label == "the"

    def test_frame_is_snapshot(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        frame = sim.frame()
        x_before = frame.position("river")[0]
        sim.tick(5)
        assert frame.position("river")[0] == x_before

    def test_unknown_position(self, bank_payload):
        with pytest.raises(KeyError):
            ForceSimulation(make_graph(bank_payload)).frame().position("nope")


# ─── Scheduling ───────────────────────────────────────────────────────────────


class TestScheduling:
    def test_restart_requests_frame(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        sim.restart()
        assert sim.is_running
        assert scheduler.pending == 1

    def test_restart_twice_single_frame(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        sim.restart().restart()
        assert scheduler.pending == 1

    def test_tick_listener_per_frame(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        frames: list[Frame] = []
        sim.on_tick(frames.append)
        sim.restart()
        scheduler.advance(3)
        assert len(frames) == 3
        assert frames[0].alpha > frames[-1].alpha

    def test_goes_idle_and_notifies_end(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        ended: list[bool] = []
        sim.on_end(lambda: ended.append(True))
        sim.restart()
        scheduler.run_until_idle()
        assert sim.is_cool
        assert not sim.is_running
        assert ended == [True]
        assert scheduler.pending == 0

    def test_stop_is_idempotent(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        sim.restart()
        sim.stop()
        sim.stop()
        assert not sim.is_running
        assert scheduler.pending == 0

    def test_stop_from_tick_listener(self, bank_payload):
        """Stopping inside a tick callback prevents the next frame."""
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        sim.on_tick(lambda frame: sim.stop())
        sim.restart()
        scheduler.advance(1)
        assert scheduler.pending == 0
        assert not sim.is_running

    def test_without_scheduler_restart_is_noop(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        sim.restart()
        assert not sim.is_running

    def test_asyncio_scheduler_runs_to_rest(self, bank_payload):
        async def main() -> ForceSimulation:
            sim = ForceSimulation(make_graph(bank_payload), scheduler=AsyncioFrameScheduler(interval=0))
            done = asyncio.Event()
            sim.on_end(done.set)
            sim.restart()
            await asyncio.wait_for(done.wait(), timeout=30)
            return sim

        sim = asyncio.run(main())
        assert sim.is_cool
        assert not sim.is_running


# ─── Drag-to-pin ──────────────────────────────────────────────────────────────


class TestDrag:
    def test_pinned_node_held_exactly(self, deep_payload):
        """After drag-start and drag-move, steps leave the node on the pin."""
        sim = ForceSimulation(make_graph(deep_payload))
        sim.drag_start("big")
        sim.drag_move("big", 123.0, -45.0)
        sim.tick(5)
        node = sim.node("big")
        assert (node.x, node.y) == (123.0, -45.0)
        assert sim.frame().position("big") == (123.0, -45.0)

    def test_drag_start_pins_current_position(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload)).tick(20)
        node = sim.node("river")
        here = (node.x, node.y)
        sim.drag_start("river")
        assert (node.fx, node.fy) == here
        sim.tick(3)
        assert (node.x, node.y) == here

    def test_pinned_node_still_moves_neighbours(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload)).tick(20)
        leaf = sim.node("river__the")
        before = (leaf.x, leaf.y)
        sim.drag_start("river")
        sim.drag_move("river", 2000.0, 2000.0)
        sim.tick(5)
        assert (leaf.x, leaf.y) != before

    def test_drag_end_releases(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        sim.drag_start("river")
        sim.drag_move("river", 10.0, 10.0)
        sim.drag_end("river")
        node = sim.node("river")
        assert node.fx is None and node.fy is None
        assert not node.is_pinned

    def test_alpha_target_follows_active_drags(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        sim.drag_start("river")
        sim.drag_start("account")
        assert sim.alpha_target == sim.config.alpha_drag_target
        sim.drag_end("river")
        assert sim.alpha_target == sim.config.alpha_drag_target
        sim.drag_end("account")
        assert sim.alpha_target == 0.0

    def test_drag_reheats_idle_simulation(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        sim.restart()
        scheduler.run_until_idle()
        assert not sim.is_running
        sim.drag_start("account")
        assert sim.is_running
        scheduler.advance(5)
        assert sim.is_running
        assert sim.alpha > sim.alpha_min

    def test_drag_keeps_pin_across_frames(self, bank_payload):
        scheduler = ManualFrameScheduler()
        sim = ForceSimulation(make_graph(bank_payload), scheduler=scheduler)
        sim.restart()
        sim.drag_start("account")
        sim.drag_move("account", 50.0, 60.0)
        scheduler.advance(10)
        assert sim.frame().position("account") == (50.0, 60.0)

    def test_unknown_node(self, bank_payload):
        sim = ForceSimulation(make_graph(bank_payload))
        with pytest.raises(UnknownNodeError):
            sim.drag_start("nope")
        with pytest.raises(KeyError):
            sim.drag_move("nope", 0, 0)

"""Tests for the reset/seek controller.

Critical Invariants:
- A seek ends exactly on its target and hands the cursor back to the stepper
- The world-reset callback runs exactly once per seek, at the crossing
- No moment fires while seeking
"""

import logging

import pytest
from conftest import moment, t

from timegraph.config import TimeLoopSettings
from timegraph.core.time import LoopTime
from timegraph.timeloop import (
    EnvironmentSpawners,
    LoopState,
    Resettable,
    ResetLoop,
    Timeline,
    TimeLoop,
    ease_speed,
    reset_world,
    seek_step,
    step_loop,
)
from timegraph.tracing import TickTrace
from timegraph.world import Name, Parent

FRAME = 1 / 60


class Respawns:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self, world) -> None:
        self.count += 1


@pytest.fixture
def seeking(world, loop_world):
    """World stepping and seeking on timeline `a`, counting environment respawns."""
    respawns = Respawns()
    world.insert_resource(EnvironmentSpawners([respawns]))
    world.register_systems(seek_step, step_loop)
    loop_world("a", Timeline(moments={t("0s"): moment("zero"), t("3s"): moment("three")}))
    return respawns


def run_until_running(world, limit=5000):
    tloop = world.resource(TimeLoop)
    for ticks in range(1, limit + 1):
        world.tick(FRAME)
        if tloop.state is LoopState.RUNNING:
            return ticks
    raise AssertionError("seek never finished")


def test_ease_speed_shape():
    assert ease_speed(0.0) == pytest.approx(0.0)
    assert ease_speed(0.5) == pytest.approx(1.0)
    assert ease_speed(1.0) == pytest.approx(0.0)
    assert ease_speed(0.25) == pytest.approx(0.5)
    assert ease_speed(0.25) == pytest.approx(ease_speed(0.75))
    for i in range(11):
        assert 0.0 <= ease_speed(i / 10) <= 1.0 + 1e-12


def test_seek_back_reaches_target_and_resets_once(world, seeking, fired):
    """CRITICAL: Seeking 10s -> 0s lands exactly on 0s with one world reset.

    Why: Resetting twice would respawn the environment twice; overshooting
    the target would skip or repeat the moment at 0s.
    """
    tloop = world.resource(TimeLoop)
    tloop.curr = tloop.curr.at(t("10s"))
    assert tloop.begin_reset(LoopTime.EPOCH)

    trace = world.resource(TickTrace)
    reset_ticks = []
    tloop_times = []
    for _ in range(5000):
        before = tloop.time
        world.tick(FRAME)
        if any(e["type"] == "world_reset" for e in trace.drain()):
            reset_ticks.append((before, tloop.time))
        if tloop.state is LoopState.RUNNING:
            break
        tloop_times.append(tloop.time)

    assert tloop.state is LoopState.RUNNING
    assert seeking.count == 1
    # progress 0.4 of a 10s -> 0s seek is the 6s mark
    [(before, after)] = reset_ticks
    assert before > t("6s") >= after
    assert all(a > b for a, b in zip(tloop_times, tloop_times[1:], strict=False))
    # the finishing tick hands over to the stepper, which fires the moment at 0s
    assert fired == ["zero"]
    assert tloop.time == world.delta


def test_reset_fires_once_when_a_tick_jumps_over_the_crossing(world, seeking):
    """CRITICAL: One long tick from progress 0 to 0.5 still resets, and only once.

    Why: The crossing is detected between ticks, not sampled at a fixed time.
    """
    tloop = world.resource(TimeLoop)
    tloop.curr = tloop.curr.at(t("10s"))
    tloop.begin_reset(LoopTime.EPOCH)
    trace = world.resource(TickTrace)

    world.tick(5.0)

    assert tloop.time == t("5s")
    assert tloop.is_resetting
    assert seeking.count == 1
    [event] = trace.of_type("world_reset")
    assert event["progress"] == pytest.approx(0.5)

    run_until_running(world)

    assert seeking.count == 1
    assert len(trace.of_type("world_reset")) == 1


def test_seek_is_faster_than_real_time(world, seeking):
    tloop = world.resource(TimeLoop)
    tloop.curr = tloop.curr.at(t("10s"))
    tloop.begin_reset(LoopTime.EPOCH)

    ticks = run_until_running(world)

    assert ticks < 10 * 60
    assert ticks > 10 * 60 / (1 + TimeLoopSettings().peak_speedup)


def test_seek_forward(world, seeking, fired):
    tloop = world.resource(TimeLoop)
    tloop.begin_reset(t("5s"))
    world.tick(FRAME)
    assert t("0s") < tloop.time < t("5s")
    run_until_running(world)
    assert fired == []
    assert tloop.time == t("5s") + world.delta
    assert seeking.count == 1


def test_reset_crossing_from_settings(world, seeking):
    world.insert_resource(TimeLoopSettings(reset_crossing=0.9, peak_speedup=0.0))
    tloop = world.resource(TimeLoop)
    tloop.curr = tloop.curr.at(t("1s"))
    tloop.begin_reset(LoopTime.EPOCH)
    trace = world.resource(TickTrace)

    run_until_running(world)

    [event] = trace.of_type("world_reset")
    assert event["progress"] >= 0.9
    assert LoopTime.parse(event["time"]) <= t("100ms")


def test_same_target_is_a_noop(world, seeking, caplog):
    tloop = world.resource(TimeLoop)
    with caplog.at_level(logging.WARNING, logger="timegraph.time_graph"):
        assert not tloop.begin_reset(tloop.time)
    assert tloop.state is LoopState.RUNNING
    assert "current time" in caplog.text


def test_reset_requested_mid_seek_is_rejected(world, seeking, caplog):
    """CRITICAL: A second ResetLoop while seeking leaves the first seek intact."""
    tloop = world.resource(TimeLoop)
    tloop.curr = tloop.curr.at(t("10s"))
    tloop.begin_reset(LoopTime.EPOCH)
    world.tick(FRAME)

    with caplog.at_level(logging.WARNING):
        ResetLoop(to=t("30s")).apply(world)

    assert tloop.resetting_to == LoopTime.EPOCH
    assert tloop.resetting_from == t("10s")
    assert "already resetting" in caplog.text


def test_reset_loop_action_begins_seek(world, seeking, fired):
    tloop = world.resource(TimeLoop)
    ResetLoop(to=t("0s")).apply(world)  # at 0s: no-op
    assert tloop.state is LoopState.RUNNING

    world.tick(4.0)
    assert fired == ["zero", "three"]
    ResetLoop(to=t("0s")).apply(world)
    assert tloop.state is LoopState.RESETTING
    assert world.resource(TickTrace).of_type("reset_begin")[0]["target"] == "0s"
    assert tloop.time == t("4s")


def test_progress():
    tloop = TimeLoop.starting_at("a", t("10s"))
    assert tloop.progress() == 1.0
    tloop.begin_reset(t("0s"))
    assert tloop.progress() == 0.0
    tloop.curr = tloop.curr.at(t("6s"))
    assert tloop.progress() == pytest.approx(0.4)


def test_reset_world_runs_hooks_then_spawners(world):
    calls = []

    def remember(world, entity):
        calls.append(("hook", world.get(entity, Name).value))

    world.insert_resource(EnvironmentSpawners([lambda w: calls.append(("spawn", None))]))
    world.spawn(Name("kept"), Resettable(on_reset=remember))
    parent = world.spawn(Name("parent"), Resettable())
    child = world.spawn(Name("child"), Parent(parent), Resettable(on_reset=remember))
    plain = world.spawn(Name("plain"))

    reset_world(world)

    assert calls == [("hook", "kept"), ("spawn", None)]
    assert not world.exists(parent)
    assert not world.exists(child)
    assert world.exists(plain)


"""End-to-end journeys through the bundled content.

The intro timeline opens a portal at 5s and resets at 1m; area_1 branches
from the intro at 5s, spawns a short-lived orb at 10s, silences the intro's
lever hint at 30s and collapses at 45s.
"""

import logging
from pathlib import Path

import pytest

from timegraph import LoopTime, TimeLoopSettings, build_world
from timegraph.core.time import TimePoint
from timegraph.game import EnvRoot, Lever, Overlaps, Player, PortalTo
from timegraph.game.actions import FlipLever
from timegraph.timeloop import Labelled, LoopState, Timelines, TimeLoop
from timegraph.tracing import TickTrace

ASSETS = Path(__file__).resolve().parents[2] / "assets"
INTRO = "tl/intro.tl.json"
AREA_1 = "tl/area_1.tl.json"
STEP = 0.1


@pytest.fixture
def game():
    world = build_world(TimeLoopSettings(content_dir=ASSETS, history_max_ticks=5000))
    world.tick(0.0)
    return world


def run_until(world, condition, limit=5000):
    for _ in range(limit):
        world.tick(STEP)
        if condition(world):
            return
    raise AssertionError("condition never met")


def loop_time(world):
    return world.resource(TimeLoop).time


def history(world):
    return world.resource(TickTrace).store


def events_of(world, kind):
    store = history(world)
    first, last = store.get_tick_range()
    return [e for e in store.get_events(first, last) if e["type"] == kind]


def test_build_world_loads_bundled_content(game):
    timelines = game.resource(Timelines)
    assert sorted(timelines.ids()) == [AREA_1, INTRO]
    assert timelines.validate_links() == []
    assert game.resource(TimeLoop).curr == TimePoint(INTRO, LoopTime.EPOCH)
    assert game.single(Player) is not None
    assert game.find_named("IntroLever") is not None


def test_build_world_skips_broken_files(caplog):
    settings = TimeLoopSettings(content_dir=ASSETS, timelines=[INTRO, "tl/missing.tl.json"])
    with caplog.at_level(logging.ERROR):
        world = build_world(settings)
    assert world.resource(Timelines).ids() == [INTRO]
    assert "tl/missing.tl.json" in caplog.text


def test_intro_opens_portal_at_five_seconds(game, caplog):
    with caplog.at_level(logging.INFO, logger="timegraph.happens"):
        run_until(game, lambda w: loop_time(w) >= LoopTime.parse("5s"))
    assert game.single(PortalTo) is None
    assert "You wake up" in caplog.text

    game.tick(STEP)
    _, portal = game.single(PortalTo)
    assert portal.target == TimePoint(AREA_1, LoopTime.EPOCH)


def test_portal_into_area_1(game):
    """CRITICAL: Entering the portal moves the cursor to area_1 at 0s.

    area_1 inherits the intro's first five seconds, then continues with its
    own moments: the orb at 10s lives for 5s of loop time.
    """
    run_until(game, lambda w: w.single(PortalTo) is not None)
    player = game.single(Player)[0]
    portal = game.single(PortalTo)[0]
    overlaps = game.resource(Overlaps)
    overlaps.add(player, portal)
    game.tick(STEP)
    overlaps.clear()
    assert game.resource(TimeLoop).curr == TimePoint(AREA_1, LoopTime.EPOCH)

    run_until(game, lambda w: loop_time(w) > LoopTime.parse("10s"))
    assert game.find_named("FleetingOrb") is not None
    assert [e["source"] for e in events_of(game, "branch")] == [INTRO]

    run_until(game, lambda w: loop_time(w) > LoopTime.parse("15s"))
    assert game.find_named("FleetingOrb") is None

    run_until(game, lambda w: loop_time(w) > LoopTime.parse("30s"))
    hint = game.resource(Timelines).get(INTRO).get_moment(Labelled("lever-hint"))
    assert hint.get_happenings("hint").disabled

    run_until(game, lambda w: w.resource(TimeLoop).is_resetting)
    assert game.resource(TimeLoop).timeline == AREA_1


def test_full_loop_resets_world(game):
    """CRITICAL: At 1m the loop seeks back to 0s and rebuilds the world once."""
    env_pieces = sum(1 for _ in game.query(EnvRoot))
    lever = game.find_named("IntroLever")
    FlipLever().apply(game)

    run_until(game, lambda w: w.resource(TimeLoop).is_resetting)
    assert game.single(PortalTo) is not None
    [begin] = events_of(game, "reset_begin")
    assert begin["target"] == "0s"

    run_until(game, lambda w: w.resource(TimeLoop).state is LoopState.RUNNING)

    assert len(events_of(game, "world_reset")) == 1
    assert len(events_of(game, "reset_end")) == 1
    assert loop_time(game) <= LoopTime.from_secs(STEP)
    assert game.resource(TimeLoop).timeline == INTRO
    assert game.single(PortalTo) is None
    assert sum(1 for _ in game.query(EnvRoot)) == env_pieces
    assert not game.get(lever, Lever).flipped

"""Bootstrap: build a World with content loaded and every system registered.

Usage:
    settings = TimeLoopSettings(content_dir="assets")
    configure_logging(settings)
    world = build_world(settings)
    while running:
        world.tick(frame_seconds)
"""

from __future__ import annotations

import logging

from timegraph.config import TimeLoopSettings
from timegraph.core.action import ActionRegistry, get_registry
from timegraph.game import (
    InteractInput,
    Overlaps,
    clear_interact_input,
    despawn_expired,
    enter_portals,
    run_triggers,
    setup_environment,
    setup_intro,
    setup_ui,
    spawn_environment,
    tick_hand,
)
from timegraph.timeloop import (
    EnvironmentSpawners,
    TimelineLoader,
    Timelines,
    TimeLoop,
    seek_step,
    step_loop,
)
from timegraph.tracing import InMemoryHistoryStore, TickTrace, record_history
from timegraph.world import World

logger = logging.getLogger(__name__)


def load_timelines(settings: TimeLoopSettings, registry: ActionRegistry) -> Timelines:
    """Load the configured timeline files. Failures are logged and skipped."""
    loader = TimelineLoader(registry, settings.content_dir)
    timelines = Timelines()
    failed = timelines.load_all(loader, settings.timelines)
    if failed:
        logger.error("%d timeline file(s) failed to load: %s", len(failed), ", ".join(failed))
    timelines.validate_links()
    if settings.entry_timeline not in timelines:
        logger.error("Entry timeline %s is not loaded", settings.entry_timeline)
    return timelines


def build_world(
    settings: TimeLoopSettings | None = None,
    registry: ActionRegistry | None = None,
) -> World:
    """Create a ready-to-tick world.

    Args:
        settings: Loop configuration (defaults to environment/`.env`).
        registry: Action registry for content (defaults to the global one).

    Returns:
        World with content, resources and systems in place.
    """
    settings = settings or TimeLoopSettings()
    registry = registry or get_registry()

    world = World()
    world.insert_resource(settings)
    world.insert_resource(load_timelines(settings, registry))
    world.insert_resource(TimeLoop.starting_at(settings.entry_timeline))
    world.insert_resource(Overlaps())
    world.insert_resource(InteractInput())
    world.insert_resource(TickTrace(store=InMemoryHistoryStore(settings.history_max_ticks)))
    world.insert_resource(EnvironmentSpawners([spawn_environment]))

    world.register_systems(
        # STARTUP
        setup_environment,
        setup_intro,
        setup_ui,
        # PRE_UPDATE: a seek requested during a step starts on the next tick
        seek_step,
        step_loop,
        # UPDATE
        run_triggers,
        enter_portals,
        tick_hand,
        # POST_UPDATE
        despawn_expired,
        record_history,
        clear_interact_input,
    )
    return world

from __future__ import annotations

from functools import partial

from esper import World

from sumstack.events.bus import (
    EventBus,
    EVENT_COUNTDOWN_CHANGED,
    EVENT_GAME_STATUS_CHANGED,
    EVENT_GRID_CHANGED,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_STATE_CHANGED,
    EVENT_TARGET_CHANGED,
    EVENT_TUTORIAL_STEP_CHANGED,
)
from sumstack.snapshot import GameSnapshot, build_snapshot

# Events after which observable state may differ.
STATE_EVENTS = (
    EVENT_GRID_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_TARGET_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_COUNTDOWN_CHANGED,
    EVENT_GAME_STATUS_CHANGED,
    EVENT_TUTORIAL_STEP_CHANGED,
)


class SnapshotSystem:
    """Publishes a fresh GameSnapshot after every state change."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self._latest: GameSnapshot | None = None
        for name in STATE_EVENTS:
            self.event_bus.subscribe(name, partial(self._on_state_event, name))

    @property
    def latest(self) -> GameSnapshot:
        if self._latest is None:
            self._latest = build_snapshot(self.world)
        return self._latest

    def _on_state_event(self, cause: str, sender, **payload) -> None:
        self._latest = build_snapshot(self.world)
        self.event_bus.emit(EVENT_STATE_CHANGED, snapshot=self._latest, cause=cause)

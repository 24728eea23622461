from __future__ import annotations

import logging
import random
from enum import Enum

from esper import World

from sumstack.constants import POINTS_PER_BLOCK
from sumstack.events.bus import (
    EventBus,
    EVENT_GRID_CHANGED,
    EVENT_MATCH_CLEARED,
    EVENT_OVERSHOOT,
    EVENT_ROUND_RESET,
    EVENT_SELECTION_CHANGED,
    EVENT_SESSION_CLEARED,
    EVENT_SHAKE,
    EVENT_TARGET_CHANGED,
)
from sumstack.systems.grid_ops import (
    delete_blocks,
    get_oracle,
    get_selection,
    random_target,
    selection_total,
)
from sumstack.utils.game_state import is_playing

logger = logging.getLogger(__name__)


class RoundOutcome(Enum):
    MATCH = "match"
    OVERSHOOT = "overshoot"
    CONTINUE = "continue"


class RoundResolutionSystem:
    """Compares the live selection sum with the oracle number after every change.

    MATCH clears the selected blocks, scores them and rolls a new target.
    OVERSHOOT only drops the selection. Anything below the target waits for
    the next click. An empty selection sums to 0 and can never match, since
    targets start at 10.

    Points are awarded by ScoreSystem and pacing is handled by
    ModeSchedulerSystem; both listen to EVENT_MATCH_CLEARED.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: random.Random | None = None,
        points_per_block: int = POINTS_PER_BLOCK,
    ):
        self.world = world
        self.event_bus = event_bus
        self.points_per_block = points_per_block
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self._resolving = False
        self.event_bus.subscribe(EVENT_SELECTION_CHANGED, self.on_selection_changed)
        self.event_bus.subscribe(EVENT_TARGET_CHANGED, self.on_target_changed)
        self.event_bus.subscribe(EVENT_ROUND_RESET, self.on_round_reset)
        self.event_bus.subscribe(EVENT_SESSION_CLEARED, self.on_session_cleared)

    @property
    def target(self) -> int:
        return get_oracle(self.world).value

    # Event handlers -----------------------------------------------------

    def on_selection_changed(self, sender, **kwargs):
        self.resolve()

    def on_target_changed(self, sender, **kwargs):
        self.resolve()

    def on_round_reset(self, sender, **kwargs):
        self.new_target()

    def on_session_cleared(self, sender, **kwargs):
        self.set_target(0)

    # Resolution ---------------------------------------------------------

    def resolve(self) -> RoundOutcome:
        # Clearing the selection and rolling a target re-enter through the bus.
        if self._resolving or not is_playing(self.world):
            return RoundOutcome.CONTINUE
        self._resolving = True
        try:
            return self._resolve()
        finally:
            self._resolving = False

    def _resolve(self) -> RoundOutcome:
        selection = get_selection(self.world)
        target = self.target
        total = selection_total(self.world, selection)
        if total == target:
            self._on_match(target)
            return RoundOutcome.MATCH
        if total > target:
            dropped = selection.clear()
            logger.debug("overshoot: %d > %d with %d blocks", total, target, len(dropped))
            self.event_bus.emit(EVENT_SELECTION_CHANGED, selected=[], reason="overshoot")
            self.event_bus.emit(EVENT_OVERSHOOT, total=total, target=target, block_ids=dropped)
            return RoundOutcome.OVERSHOOT
        return RoundOutcome.CONTINUE

    def _on_match(self, target: int) -> None:
        selection = get_selection(self.world)
        selected = list(selection.block_ids)
        points = len(selected) * self.points_per_block
        removed = delete_blocks(self.world, selected)
        # Deterministic ordering for events/tests
        removed.sort(key=lambda entry: (entry[1], entry[2]))
        self.event_bus.emit(EVENT_GRID_CHANGED, reason="match", block_ids=[entry[0] for entry in removed])
        selection.clear()
        self.event_bus.emit(EVENT_SELECTION_CHANGED, selected=[], reason="match")
        self.new_target()
        logger.debug("match on %d with %d blocks (+%d)", target, len(removed), points)
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            positions=[(row, col) for _, row, col, _ in removed],
            block_ids=[entry[0] for entry in removed],
            values=[entry[3] for entry in removed],
            points=points,
            target=target,
        )
        self.event_bus.emit(EVENT_SHAKE, reason="match")

    # Target -------------------------------------------------------------

    def new_target(self) -> int:
        return self.set_target(random_target(self._rng))

    def set_target(self, value: int) -> int:
        oracle = get_oracle(self.world)
        previous = oracle.value
        oracle.value = int(value)
        # A new target invalidates whatever was selected against the old one.
        selection = get_selection(self.world)
        if selection.block_ids:
            selection.clear()
            self.event_bus.emit(EVENT_SELECTION_CHANGED, selected=[], reason="target_changed")
        self.event_bus.emit(EVENT_TARGET_CHANGED, target=oracle.value, previous=previous)
        return oracle.value

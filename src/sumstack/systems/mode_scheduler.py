from __future__ import annotations

import logging

from esper import World

from sumstack.components.countdown import Countdown
from sumstack.components.game_state import GameMode, GameStatus
from sumstack.constants import COUNTDOWN_TICK_SECONDS, TIME_MODE_LIMIT
from sumstack.events.bus import (
    EventBus,
    EVENT_COUNTDOWN_CHANGED,
    EVENT_GAME_STATUS_CHANGED,
    EVENT_MATCH_CLEARED,
    EVENT_ROUND_RESET,
    EVENT_ROW_ADD_REQUEST,
    EVENT_TICK,
)
from sumstack.utils.game_state import get_game_state, is_playing

logger = logging.getLogger(__name__)


class ModeSchedulerSystem:
    """Decides when rows are forced in.

    Classic mode requests a row after every match. Time mode runs a whole-second
    countdown while playing: reaching zero requests a row and starts over, and a
    match refills it without adding a row.

    The countdown lives in a Countdown component that only exists while a
    time-mode round is playing. Leaving PLAYING deletes it, so late ticks find
    nothing to advance; entering PLAYING again creates a fresh one.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        time_limit: int = TIME_MODE_LIMIT,
        tick_seconds: float = COUNTDOWN_TICK_SECONDS,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.time_limit = max(1, int(time_limit))
        self.tick_seconds = float(tick_seconds)
        self._countdown_entity: int | None = None
        self.event_bus.subscribe(EVENT_MATCH_CLEARED, self.on_match_cleared)
        self.event_bus.subscribe(EVENT_GAME_STATUS_CHANGED, self.on_status_changed)
        self.event_bus.subscribe(EVENT_ROUND_RESET, self.on_round_reset)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def countdown(self) -> Countdown | None:
        if self._countdown_entity is None:
            return None
        try:
            return self.world.component_for_entity(self._countdown_entity, Countdown)
        except KeyError:
            self._countdown_entity = None
            return None

    @property
    def running(self) -> bool:
        return self.countdown is not None

    @property
    def time_left(self) -> int | None:
        countdown = self.countdown
        return countdown.remaining if countdown is not None else None

    # Event handlers -----------------------------------------------------

    def on_match_cleared(self, sender, **payload) -> None:
        if not is_playing(self.world):
            return
        mode = get_game_state(self.world).mode
        if mode == GameMode.CLASSIC:
            self.event_bus.emit(EVENT_ROW_ADD_REQUEST, reason="match")
            return
        countdown = self.countdown
        if countdown is None:
            return
        countdown.reset()
        self._emit_countdown(countdown, reason="match")

    def on_status_changed(self, sender, **payload) -> None:
        new_status = payload.get("new_status")
        if new_status == GameStatus.PLAYING:
            self.start()
        else:
            self.stop(reason=new_status.value if isinstance(new_status, GameStatus) else "stopped")

    def on_round_reset(self, sender, **payload) -> None:
        # Restarting mid-round keeps status PLAYING, so no status event follows.
        if is_playing(self.world):
            self.start()

    def on_tick(self, sender, **payload) -> None:
        dt = payload.get("dt")
        if dt is None:
            return
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            return
        if dt <= 0:
            return
        countdown = self.countdown
        if countdown is None:
            return
        if not is_playing(self.world):
            self.stop(reason="not_playing")
            return
        countdown.elapsed += dt
        while countdown.elapsed >= self.tick_seconds:
            countdown.elapsed -= self.tick_seconds
            self.tick_second()
            # A forced row may have ended the round.
            if self.countdown is not countdown:
                break

    # Countdown control --------------------------------------------------

    def start(self) -> None:
        """Replace any existing countdown with a full one, in time mode only."""
        self.stop(reason="restart", announce=False)
        if get_game_state(self.world).mode != GameMode.TIME:
            return
        countdown = Countdown(limit=self.time_limit, remaining=self.time_limit)
        self._countdown_entity = self.world.create_entity(countdown)
        logger.debug("countdown started at %ds", self.time_limit)
        self._emit_countdown(countdown, reason="start")

    def stop(self, reason: str = "stopped", *, announce: bool = True) -> None:
        entity = self._countdown_entity
        if entity is None:
            return
        self._countdown_entity = None
        try:
            self.world.delete_entity(entity, immediate=True)
        except KeyError:
            pass
        logger.debug("countdown stopped (%s)", reason)
        if announce:
            self.event_bus.emit(EVENT_COUNTDOWN_CHANGED, time_left=None, limit=self.time_limit, reason=reason)

    def tick_second(self) -> None:
        countdown = self.countdown
        if countdown is None or not is_playing(self.world):
            return
        countdown.remaining -= 1
        if countdown.remaining > 0:
            self._emit_countdown(countdown, reason="tick")
            return
        countdown.remaining = countdown.limit
        self._emit_countdown(countdown, reason="expired")
        self.event_bus.emit(EVENT_ROW_ADD_REQUEST, reason="countdown")

    def _emit_countdown(self, countdown: Countdown, *, reason: str) -> None:
        self.event_bus.emit(
            EVENT_COUNTDOWN_CHANGED,
            time_left=countdown.remaining,
            limit=countdown.limit,
            reason=reason,
        )

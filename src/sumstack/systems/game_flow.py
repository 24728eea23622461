"""High-level coordinator for session status transitions."""
from __future__ import annotations

import logging

from esper import World

from sumstack.components.game_state import GameMode, GameStatus
from sumstack.constants import TUTORIAL_STEP_COUNT
from sumstack.events.bus import (
    EVENT_HOME_REQUEST,
    EVENT_RESTART_REQUEST,
    EVENT_ROUND_RESET,
    EVENT_SESSION_CLEARED,
    EVENT_START_GAME_REQUEST,
    EVENT_TUTORIAL_CLOSE_REQUEST,
    EVENT_TUTORIAL_OPEN_REQUEST,
    EVENT_TUTORIAL_STEP_CHANGED,
    EVENT_TUTORIAL_STEP_REQUEST,
    EventBus,
)
from sumstack.utils.game_state import coerce_mode, get_game_state, set_game_status

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Central coordinator for the menu, tutorial, play and game-over states.

    idle --start--> playing --overflow--> gameover --restart--> playing
    {playing, gameover, tutorial} --home--> idle
    idle --tutorial--> tutorial --close--> idle

    Commands issued from the wrong state are ignored. Overflow is driven by
    RowSpawnSystem; everything else comes through here.
    """

    _RESTARTABLE = (GameStatus.PLAYING, GameStatus.GAMEOVER)
    _HOMEABLE = (GameStatus.PLAYING, GameStatus.GAMEOVER, GameStatus.TUTORIAL)

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        tutorial_steps: int = TUTORIAL_STEP_COUNT,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.tutorial_steps = max(1, int(tutorial_steps))

        self.event_bus.subscribe(EVENT_START_GAME_REQUEST, self._on_start_request)
        self.event_bus.subscribe(EVENT_RESTART_REQUEST, self._on_restart_request)
        self.event_bus.subscribe(EVENT_HOME_REQUEST, self._on_home_request)
        self.event_bus.subscribe(EVENT_TUTORIAL_OPEN_REQUEST, self._on_tutorial_open)
        self.event_bus.subscribe(EVENT_TUTORIAL_CLOSE_REQUEST, self._on_tutorial_close)
        self.event_bus.subscribe(EVENT_TUTORIAL_STEP_REQUEST, self._on_tutorial_step)

    @property
    def status(self) -> GameStatus:
        return get_game_state(self.world).status

    @property
    def mode(self) -> GameMode:
        return get_game_state(self.world).mode

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_start_request(self, sender, **payload) -> None:
        mode = coerce_mode(payload.get("mode"))
        if mode is None:
            return
        self.start_game(mode)

    def _on_restart_request(self, sender, **payload) -> None:
        self.restart_game()

    def _on_home_request(self, sender, **payload) -> None:
        self.go_home()

    def _on_tutorial_open(self, sender, **payload) -> None:
        self.open_tutorial()

    def _on_tutorial_close(self, sender, **payload) -> None:
        self.close_tutorial()

    def _on_tutorial_step(self, sender, **payload) -> None:
        delta = payload.get("delta")
        if not isinstance(delta, int):
            return
        self._move_tutorial(delta)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_game(self, mode: GameMode) -> bool:
        if self.status != GameStatus.IDLE:
            return False
        get_game_state(self.world).mode = mode
        self._begin_round()
        return True

    def restart_game(self) -> bool:
        if self.status not in self._RESTARTABLE:
            return False
        self._begin_round()
        return True

    def go_home(self) -> bool:
        if self.status not in self._HOMEABLE:
            return False
        previous = self.status
        set_game_status(self.world, self.event_bus, GameStatus.IDLE)
        if previous != GameStatus.TUTORIAL:
            self.event_bus.emit(EVENT_SESSION_CLEARED, reason="home")
        return True

    def open_tutorial(self) -> bool:
        if self.status != GameStatus.IDLE:
            return False
        state = get_game_state(self.world)
        state.tutorial_step = 0
        set_game_status(self.world, self.event_bus, GameStatus.TUTORIAL)
        self.event_bus.emit(EVENT_TUTORIAL_STEP_CHANGED, step=0, total=self.tutorial_steps)
        return True

    def close_tutorial(self) -> bool:
        if self.status != GameStatus.TUTORIAL:
            return False
        set_game_status(self.world, self.event_bus, GameStatus.IDLE)
        return True

    def next_tutorial_step(self) -> int:
        return self._move_tutorial(1)

    def previous_tutorial_step(self) -> int:
        return self._move_tutorial(-1)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _begin_round(self) -> None:
        state = get_game_state(self.world)
        logger.info("starting %s round", state.mode.value)
        # Reset before flipping to PLAYING so the first evaluation sees the fresh round.
        self.event_bus.emit(EVENT_ROUND_RESET, mode=state.mode)
        set_game_status(self.world, self.event_bus, GameStatus.PLAYING)

    def _move_tutorial(self, delta: int) -> int:
        state = get_game_state(self.world)
        if state.status != GameStatus.TUTORIAL:
            return state.tutorial_step
        step = max(0, min(self.tutorial_steps - 1, state.tutorial_step + delta))
        if step != state.tutorial_step:
            state.tutorial_step = step
            self.event_bus.emit(EVENT_TUTORIAL_STEP_CHANGED, step=step, total=self.tutorial_steps)
        return state.tutorial_step

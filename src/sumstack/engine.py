"""Wires the world, event bus and systems into one playable session.

Front ends talk to :class:`SumStackEngine`; tests usually build the pieces they
need directly.
"""
from __future__ import annotations

import random
from pathlib import Path

from sumstack.components.game_state import GameMode, GameStatus
from sumstack.constants import GRID_HEIGHT, GRID_WIDTH, INITIAL_ROWS, TIME_MODE_LIMIT
from sumstack.events.bus import (
    EVENT_BLOCK_CLICK,
    EVENT_TICK,
    EventBus,
)
from sumstack.snapshot import GameSnapshot, build_snapshot
from sumstack.storage import HighScoreStore, JsonHighScoreStore
from sumstack.systems.game_flow import GameFlowSystem
from sumstack.systems.grid import GridSystem
from sumstack.systems.mode_scheduler import ModeSchedulerSystem
from sumstack.systems.round_resolution import RoundResolutionSystem
from sumstack.systems.row_spawn import RowSpawnSystem
from sumstack.systems.score import ScoreSystem
from sumstack.systems.selection import SelectionSystem
from sumstack.systems.snapshot import SnapshotSystem
from sumstack.utils.game_state import coerce_mode, get_game_state
from sumstack.world import create_world


class SumStackEngine:
    def __init__(
        self,
        *,
        store: HighScoreStore | None = None,
        save_path: Path | None = None,
        rng: random.Random | None = None,
        rows: int = GRID_HEIGHT,
        cols: int = GRID_WIDTH,
        initial_rows: int = INITIAL_ROWS,
        time_limit: int = TIME_MODE_LIMIT,
    ) -> None:
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, rng=rng)
        if store is None:
            store = JsonHighScoreStore(save_path)
        self.store = store

        # Subscription order matters: on a match the score is awarded before
        # the scheduler may add a row and end the round.
        self.grid_system = GridSystem(self.world, self.event_bus, rows=rows, cols=cols, initial_rows=initial_rows)
        self.selection_system = SelectionSystem(self.world, self.event_bus)
        self.score_system = ScoreSystem(self.world, self.event_bus, store=store)
        self.round_resolution_system = RoundResolutionSystem(self.world, self.event_bus)
        self.row_spawn_system = RowSpawnSystem(self.world, self.event_bus, self.grid_system)
        self.mode_scheduler_system = ModeSchedulerSystem(self.world, self.event_bus, time_limit=time_limit)
        self.game_flow_system = GameFlowSystem(self.world, self.event_bus)
        self.snapshot_system = SnapshotSystem(self.world, self.event_bus)

    # Input ----------------------------------------------------------------

    def select_block(self, block_id: int) -> None:
        self.event_bus.emit(EVENT_BLOCK_CLICK, block_id=block_id)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    # Commands -------------------------------------------------------------

    def start_game(self, mode: GameMode | str) -> bool:
        resolved = coerce_mode(mode)
        if resolved is None:
            return False
        return self.game_flow_system.start_game(resolved)

    def restart_game(self) -> bool:
        return self.game_flow_system.restart_game()

    def go_home(self) -> bool:
        return self.game_flow_system.go_home()

    def open_tutorial(self) -> bool:
        return self.game_flow_system.open_tutorial()

    def close_tutorial(self) -> bool:
        return self.game_flow_system.close_tutorial()

    def next_tutorial_step(self) -> int:
        return self.game_flow_system.next_tutorial_step()

    def previous_tutorial_step(self) -> int:
        return self.game_flow_system.previous_tutorial_step()

    # Observation ----------------------------------------------------------

    @property
    def status(self) -> GameStatus:
        return get_game_state(self.world).status

    def snapshot(self) -> GameSnapshot:
        return build_snapshot(self.world)

    def subscribe(self, name: str, fn) -> None:
        self.event_bus.subscribe(name, fn)

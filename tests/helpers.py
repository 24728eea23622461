from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List

from esper import World

from sumstack.components.game_state import GameMode
from sumstack.events.bus import EventBus
from sumstack.storage import HighScoreStore, MemoryHighScoreStore
from sumstack.systems.game_flow import GameFlowSystem
from sumstack.systems.grid import GridSystem
from sumstack.systems.grid_ops import create_block, iter_blocks
from sumstack.systems.mode_scheduler import ModeSchedulerSystem
from sumstack.systems.round_resolution import RoundResolutionSystem
from sumstack.systems.row_spawn import RowSpawnSystem
from sumstack.systems.score import ScoreSystem
from sumstack.systems.selection import SelectionSystem
from sumstack.world import create_world


@dataclass
class Session:
    bus: EventBus
    world: World
    store: HighScoreStore
    grid: GridSystem
    selection: SelectionSystem
    score: ScoreSystem
    resolver: RoundResolutionSystem
    row_spawn: RowSpawnSystem
    scheduler: ModeSchedulerSystem
    flow: GameFlowSystem

    def inventory(self) -> List[tuple[int, int, int, int]]:
        return sorted(iter_blocks(self.world))


def build_session(*, seed: int = 0, store: HighScoreStore | None = None, time_limit: int = 10) -> Session:
    """Assemble every core system in the same order the engine uses."""

    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    store = store if store is not None else MemoryHighScoreStore()
    grid = GridSystem(world, bus)
    selection = SelectionSystem(world, bus)
    score = ScoreSystem(world, bus, store=store)
    resolver = RoundResolutionSystem(world, bus)
    row_spawn = RowSpawnSystem(world, bus, grid)
    scheduler = ModeSchedulerSystem(world, bus, time_limit=time_limit)
    flow = GameFlowSystem(world, bus)
    return Session(bus, world, store, grid, selection, score, resolver, row_spawn, scheduler, flow)


def start_round(session: Session, mode: GameMode = GameMode.CLASSIC, *, empty_grid: bool = False) -> Session:
    assert session.flow.start_game(mode)
    if empty_grid:
        session.grid.clear()
    return session


def place_block(world: World, row: int, col: int, value: int) -> int:
    return create_block(world, row, col, value)


def capture(bus: EventBus, name: str) -> List[Dict[str, Any]]:
    """Record the payload of every emission of ``name``."""

    received: List[Dict[str, Any]] = []
    bus.subscribe(name, lambda sender, **payload: received.append(payload))
    return received

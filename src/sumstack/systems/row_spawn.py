from __future__ import annotations

import logging
from typing import List

from esper import World

from sumstack.components.block import GridPosition
from sumstack.components.game_state import GameStatus
from sumstack.events.bus import (
    EventBus,
    EVENT_GRID_CHANGED,
    EVENT_GRID_OVERFLOW,
    EVENT_ROW_ADD_REQUEST,
    EVENT_ROW_ADDED,
)
from sumstack.systems.grid import GridSystem
from sumstack.utils.game_state import is_playing, set_game_status

logger = logging.getLogger(__name__)


class RowSpawnSystem:
    """Pushes the stack up one row and feeds a fresh row in at the bottom.

    A block already on the top row when a row is requested ends the round:
    the status flips to GAMEOVER and the grid is left exactly as it was.
    """

    def __init__(self, world: World, event_bus: EventBus, grid: GridSystem):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        self.event_bus.subscribe(EVENT_ROW_ADD_REQUEST, self.on_row_add_request)

    def on_row_add_request(self, sender, **kwargs):
        self.request_row_add(reason=kwargs.get("reason", "request"))

    def request_row_add(self, reason: str = "request") -> List[int]:
        """Shift and spawn, or end the round on overflow. Returns the new block ids."""
        if not is_playing(self.world):
            return []
        if self.grid.is_overflowing():
            top = sorted(
                (position.row, position.col)
                for _, position in self.world.get_component(GridPosition)
                if position.row == 0
            )
            logger.info("grid overflow on %s; %d blocks at the top", reason, len(top))
            set_game_status(self.world, self.event_bus, GameStatus.GAMEOVER)
            self.event_bus.emit(EVENT_GRID_OVERFLOW, positions=top, reason=reason)
            return []
        self.grid.shift_up()
        new_blocks = self.grid.spawn_bottom_row()
        logger.debug("row added (%s)", reason)
        self.event_bus.emit(EVENT_GRID_CHANGED, reason="row_added", block_ids=new_blocks)
        self.event_bus.emit(EVENT_ROW_ADDED, new_blocks=new_blocks, reason=reason)
        return new_blocks

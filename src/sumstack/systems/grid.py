from __future__ import annotations

import logging
import random
from typing import Iterable, List

from esper import World

from sumstack.components.block import GridPosition
from sumstack.components.board import Board
from sumstack.constants import GRID_HEIGHT, GRID_WIDTH, INITIAL_ROWS
from sumstack.events.bus import (
    EventBus,
    EVENT_GRID_CHANGED,
    EVENT_ROUND_RESET,
    EVENT_SESSION_CLEARED,
)
from sumstack.systems.grid_ops import (
    BlockEntry,
    block_ids,
    delete_blocks,
    fill_row,
    occupied_rows,
)

logger = logging.getLogger(__name__)


class GridSystem:
    """Owns the block grid: initial fill, removal, shifting and bottom-row spawning.

    Row 0 is the top (loss boundary) and ``rows - 1`` is the bottom, where new
    rows appear. Block identities are esper entity ids, which the world hands
    out from a monotonic counter and never reuses.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_HEIGHT,
        cols: int = GRID_WIDTH,
        *,
        initial_rows: int = INITIAL_ROWS,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.initial_rows = max(0, min(initial_rows, rows))
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self.board_entity = self.world.create_entity(Board(rows=rows, cols=cols))
        self.event_bus.subscribe(EVENT_ROUND_RESET, self.on_round_reset)
        self.event_bus.subscribe(EVENT_SESSION_CLEARED, self.on_session_cleared)

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    # Event handlers -----------------------------------------------------

    def on_round_reset(self, sender, **kwargs):
        self.initialize()

    def on_session_cleared(self, sender, **kwargs):
        self.clear()

    # Operations ---------------------------------------------------------

    def initialize(self) -> List[int]:
        """Discard all blocks and fill the bottom ``initial_rows`` rows."""
        self._delete_all()
        board = self.board
        created: List[int] = []
        for row in range(board.rows - self.initial_rows, board.rows):
            created.extend(fill_row(self.world, row, board.cols, self._rng))
        logger.debug("grid initialized with %d blocks", len(created))
        self.event_bus.emit(EVENT_GRID_CHANGED, reason="initialize", block_ids=created)
        return created

    def clear(self) -> None:
        removed = self._delete_all()
        if removed:
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="clear", block_ids=[entry[0] for entry in removed])

    def remove_blocks(self, ids: Iterable[int]) -> List[BlockEntry]:
        removed = delete_blocks(self.world, list(ids))
        if removed:
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="remove", block_ids=[entry[0] for entry in removed])
        return removed

    def shift_up(self) -> None:
        for _, position in self.world.get_component(GridPosition):
            position.row -= 1

    def spawn_bottom_row(self) -> List[int]:
        board = self.board
        return fill_row(self.world, board.rows - 1, board.cols, self._rng)

    def is_overflowing(self) -> bool:
        """True iff a block sits on the top row, so one more shift would push it off-grid."""
        return 0 in occupied_rows(self.world)

    def _delete_all(self) -> List[BlockEntry]:
        return delete_blocks(self.world, block_ids(self.world))

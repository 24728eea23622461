"""
State Snapshot
==============

Read-only view of the session for presentation layers: everything a renderer
needs to draw the board and HUD, detached from the live components.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from esper import World

from sumstack.components.countdown import Countdown
from sumstack.components.game_state import GameMode, GameStatus
from sumstack.components.score_board import ScoreBoard
from sumstack.systems.grid_ops import get_oracle, get_selection, iter_blocks, selection_total
from sumstack.utils.game_state import get_game_state


@dataclass(frozen=True, slots=True)
class BlockView:
    id: int
    value: int
    row: int
    col: int


@dataclass(frozen=True)
class GameSnapshot:
    status: GameStatus
    mode: GameMode
    target: int
    score: int
    high_score: int
    blocks: Tuple[BlockView, ...] = field(default_factory=tuple)
    selected: Tuple[int, ...] = field(default_factory=tuple)
    selection_sum: int = 0
    # Only meaningful in time mode while playing.
    time_left: Optional[int] = None
    tutorial_step: int = 0

    def block_at(self, row: int, col: int) -> BlockView | None:
        for block in self.blocks:
            if block.row == row and block.col == col:
                return block
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "mode": self.mode.value,
            "target": self.target,
            "score": self.score,
            "high_score": self.high_score,
            "blocks": [
                {"id": b.id, "value": b.value, "row": b.row, "col": b.col}
                for b in self.blocks
            ],
            "selected": list(self.selected),
            "selection_sum": self.selection_sum,
            "time_left": self.time_left,
            "tutorial_step": self.tutorial_step,
        }


def build_snapshot(world: World) -> GameSnapshot:
    state = get_game_state(world)
    selection = get_selection(world)
    score = 0
    high_score = 0
    for _, board in world.get_component(ScoreBoard):
        score, high_score = board.score, board.high_score
        break
    time_left = None
    if state.mode == GameMode.TIME:
        for _, countdown in world.get_component(Countdown):
            time_left = countdown.remaining
            break
    blocks = tuple(
        BlockView(id=ent, value=value, row=row, col=col)
        for ent, row, col, value in sorted(iter_blocks(world), key=lambda e: (e[1], e[2]))
    )
    return GameSnapshot(
        status=state.status,
        mode=state.mode,
        target=get_oracle(world).value,
        score=score,
        high_score=high_score,
        blocks=blocks,
        selected=tuple(selection.block_ids),
        selection_sum=selection_total(world, selection),
        time_left=time_left,
        tutorial_step=state.tutorial_step,
    )

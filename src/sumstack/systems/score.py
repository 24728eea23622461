from __future__ import annotations

import logging

from esper import World

from sumstack.components.score_board import ScoreBoard
from sumstack.events.bus import (
    EventBus,
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_MATCH_CLEARED,
    EVENT_ROUND_RESET,
    EVENT_SCORE_CHANGED,
)
from sumstack.storage import HighScoreStore, MemoryHighScoreStore

logger = logging.getLogger(__name__)


class ScoreSystem:
    """Round score and persisted high score bookkeeping.

    The high score is read from the store once, at construction, and written
    back every time the score climbs past it.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        store: HighScoreStore | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._store = store if store is not None else MemoryHighScoreStore()
        self._board_entity = self._ensure_board_entity()
        self.board.high_score = self._load_high_score()
        self.event_bus.subscribe(EVENT_ROUND_RESET, self.on_round_reset)
        self.event_bus.subscribe(EVENT_MATCH_CLEARED, self.on_match_cleared)

    def _ensure_board_entity(self) -> int:
        existing = list(self.world.get_component(ScoreBoard))
        if existing:
            return existing[0][0]
        return self.world.create_entity(ScoreBoard())

    def _load_high_score(self) -> int:
        try:
            return max(0, int(self._store.load()))
        except Exception as exc:  # injected stores may raise anything
            logger.warning("high score unavailable, starting from 0: %s", exc)
            return 0

    @property
    def board(self) -> ScoreBoard:
        return self.world.component_for_entity(self._board_entity, ScoreBoard)

    @property
    def score(self) -> int:
        return self.board.score

    @property
    def high_score(self) -> int:
        return self.board.high_score

    def on_round_reset(self, sender, **kwargs) -> None:
        board = self.board
        if board.score == 0:
            return
        board.score = 0
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=0)

    def on_match_cleared(self, sender, **kwargs) -> None:
        points = kwargs.get("points")
        if not points:
            return
        self.award(int(points))

    def award(self, points: int) -> int:
        if points <= 0:
            return self.board.score
        board = self.board
        board.score += points
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=board.score, delta=points)
        if board.score > board.high_score:
            previous = board.high_score
            board.high_score = board.score
            self._persist(board.high_score)
            self.event_bus.emit(EVENT_HIGH_SCORE_CHANGED, high_score=board.high_score, previous=previous)
        return board.score

    def _persist(self, value: int) -> None:
        try:
            self._store.save(value)
        except Exception as exc:  # fire-and-forget write
            logger.warning("skipping high score write: %s", exc)

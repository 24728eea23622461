from __future__ import annotations

from typing import List

from esper import World

from sumstack.components.selection import Selection
from sumstack.events.bus import (
    EventBus,
    EVENT_BLOCK_CLICK,
    EVENT_ROUND_RESET,
    EVENT_SELECTION_CHANGED,
    EVENT_SESSION_CLEARED,
)
from sumstack.systems.grid_ops import get_selection, is_block, selection_total
from sumstack.utils.game_state import is_playing


class SelectionSystem:
    """Tracks the player's chosen blocks and their running sum.

    Clicks are only honoured while the session is playing; anything else is
    silently ignored. Every change is announced with EVENT_SELECTION_CHANGED so
    the round resolver re-evaluates immediately.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_BLOCK_CLICK, self.on_block_click)
        self.event_bus.subscribe(EVENT_ROUND_RESET, self.on_reset)
        self.event_bus.subscribe(EVENT_SESSION_CLEARED, self.on_reset)

    @property
    def selection(self) -> Selection:
        return get_selection(self.world)

    @property
    def selected(self) -> List[int]:
        return list(self.selection.block_ids)

    def on_block_click(self, sender, **kwargs):
        block_id = kwargs.get("block_id")
        if block_id is None:
            return
        self.toggle(block_id)

    def on_reset(self, sender, **kwargs):
        self.clear(reason="reset")

    def toggle(self, block_id: int) -> bool:
        """Toggle block_id in the selection; returns False when the click was ignored."""
        if not is_playing(self.world):
            return False
        try:
            block_id = int(block_id)
        except (TypeError, ValueError):
            return False
        if not is_block(self.world, block_id):
            return False
        selection = self.selection
        selection.toggle(block_id)
        self.event_bus.emit(EVENT_SELECTION_CHANGED, selected=list(selection.block_ids), reason="toggle")
        return True

    def current_sum(self) -> int:
        return selection_total(self.world, self.selection)

    def clear(self, reason: str = "clear") -> List[int]:
        previous = self.selection.clear()
        if previous:
            self.event_bus.emit(EVENT_SELECTION_CHANGED, selected=[], reason=reason)
        return previous

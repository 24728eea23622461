from __future__ import annotations

import logging

from esper import World

from sumstack.components.game_state import GameMode, GameState, GameStatus
from sumstack.events.bus import EVENT_GAME_STATUS_CHANGED, EventBus

logger = logging.getLogger(__name__)


def get_game_state(world: World) -> GameState:
    """Return the GameState singleton, creating it if absent."""
    for _, state in world.get_component(GameState):
        return state
    state = GameState()
    world.create_entity(state)
    return state


def is_playing(world: World) -> bool:
    return get_game_state(world).status == GameStatus.PLAYING


def coerce_mode(value: GameMode | str | None) -> GameMode | None:
    if isinstance(value, GameMode):
        return value
    if value is None:
        return None
    try:
        return GameMode(str(value).lower())
    except ValueError:
        return None


def set_game_status(world: World, event_bus: EventBus, status: GameStatus) -> bool:
    """Update the session status and emit a change event when it differs.

    Returns True when the status actually changed.
    """
    state = get_game_state(world)
    previous = state.status
    if previous == status:
        return False
    state.status = status
    logger.info("game status %s -> %s (%s)", previous.value, status.value, state.mode.value)
    event_bus.emit(
        EVENT_GAME_STATUS_CHANGED,
        previous_status=previous,
        new_status=status,
        mode=state.mode,
    )
    return True

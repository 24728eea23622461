import random

from esper import World

from sumstack.components.game_state import GameMode, GameState, GameStatus
from sumstack.components.oracle import Oracle
from sumstack.components.score_board import ScoreBoard
from sumstack.components.selection import Selection
from sumstack.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    initial_status: GameStatus = GameStatus.IDLE,
    *,
    mode: GameMode = GameMode.CLASSIC,
    rng: random.Random | None = None,
) -> World:
    """Create the ECS world holding the session singletons.

    Grid entities are owned by GridSystem, which creates the Board entity
    when constructed.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    world.create_entity(
        GameState(status=initial_status, mode=mode),
        Selection(),
        Oracle(),
        ScoreBoard(),
    )
    return world

"""Game state resource describing the session status and chosen mode."""
from dataclasses import dataclass
from enum import Enum


class GameStatus(Enum):
    """Top-level session status driving which commands are accepted."""
    IDLE = "idle"
    PLAYING = "playing"
    GAMEOVER = "gameover"
    TUTORIAL = "tutorial"


class GameMode(Enum):
    """Pacing variant chosen at game start and fixed for the round."""
    CLASSIC = "classic"
    TIME = "time"


@dataclass
class GameState:
    """Singleton component storing the current status, mode and tutorial page."""
    status: GameStatus = GameStatus.IDLE
    mode: GameMode = GameMode.CLASSIC
    tutorial_step: int = 0

from dataclasses import dataclass

@dataclass(slots=True)
class ScoreBoard:
    score: int = 0
    high_score: int = 0

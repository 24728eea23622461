from dataclasses import dataclass


@dataclass(slots=True)
class Countdown:
    """Time-mode countdown in whole seconds.

    Only present while a time-mode round is playing. ``elapsed`` accumulates
    tick deltas until a full second has passed.
    """

    limit: int
    remaining: int
    elapsed: float = 0.0

    def reset(self) -> None:
        self.remaining = self.limit
        self.elapsed = 0.0

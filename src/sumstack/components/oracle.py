from dataclasses import dataclass

@dataclass(slots=True)
class Oracle:
    """Current target number the selection must sum to."""
    value: int = 0

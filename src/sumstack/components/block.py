from dataclasses import dataclass

@dataclass(slots=True)
class Block:
    """Numbered block occupying one grid cell.

    The owning entity id is the block's identity. Position lives in GridPosition.
    """
    value: int


@dataclass(slots=True)
class GridPosition:
    row: int
    col: int

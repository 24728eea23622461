from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class Selection:
    """Ordered block ids the player has currently chosen."""
    block_ids: List[int] = field(default_factory=list)

    def toggle(self, block_id: int) -> bool:
        """Add or remove block_id; returns True if it is selected afterwards."""
        if block_id in self.block_ids:
            self.block_ids.remove(block_id)
            return False
        self.block_ids.append(block_id)
        return True

    def clear(self) -> List[int]:
        previous = list(self.block_ids)
        self.block_ids.clear()
        return previous

    def __contains__(self, block_id: int) -> bool:
        return block_id in self.block_ids

    def __len__(self) -> int:
        return len(self.block_ids)

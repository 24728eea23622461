from __future__ import annotations

import random
from typing import Iterable, Iterator, List, Tuple

from esper import World

from sumstack.components.block import Block, GridPosition
from sumstack.components.board import Board
from sumstack.components.oracle import Oracle
from sumstack.components.selection import Selection
from sumstack.constants import BLOCK_MAX, BLOCK_MIN, TARGET_MAX, TARGET_MIN

Position = Tuple[int, int]
# (block_id, row, col, value)
BlockEntry = Tuple[int, int, int, int]


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board definition not found")


def get_selection(world: World) -> Selection:
    for _, selection in world.get_component(Selection):
        return selection
    raise RuntimeError("Selection component not found")


def get_oracle(world: World) -> Oracle:
    for _, oracle in world.get_component(Oracle):
        return oracle
    raise RuntimeError("Oracle component not found")


def iter_blocks(world: World) -> Iterator[BlockEntry]:
    for entity, (block, position) in world.get_components(Block, GridPosition):
        yield entity, position.row, position.col, block.value


def block_ids(world: World) -> List[int]:
    return [entity for entity, _ in world.get_component(Block)]


def is_block(world: World, block_id: int) -> bool:
    try:
        return world.has_component(block_id, Block)
    except KeyError:
        return False


def block_value(world: World, block_id: int) -> int | None:
    try:
        return world.component_for_entity(block_id, Block).value
    except KeyError:
        return None


def get_block_at(world: World, row: int, col: int) -> int | None:
    for entity, position in world.get_component(GridPosition):
        if position.row == row and position.col == col:
            return entity
    return None


def occupied_rows(world: World) -> set[int]:
    return {position.row for _, position in world.get_component(GridPosition)}


def random_block_value(rng: random.Random) -> int:
    return rng.randint(BLOCK_MIN, BLOCK_MAX)


def random_target(rng: random.Random) -> int:
    return rng.randint(TARGET_MIN, TARGET_MAX)


def create_block(world: World, row: int, col: int, value: int) -> int:
    return world.create_entity(Block(value=value), GridPosition(row=row, col=col))


def fill_row(world: World, row: int, cols: int, rng: random.Random) -> List[int]:
    """Create one block per column on ``row`` with random values."""
    return [create_block(world, row, col, random_block_value(rng)) for col in range(cols)]


def delete_blocks(world: World, ids: Iterable[int]) -> List[BlockEntry]:
    """Delete live blocks among ids and return what was removed.

    Ids that are not live blocks are skipped.
    """
    removed: List[BlockEntry] = []
    for block_id in ids:
        try:
            block = world.component_for_entity(block_id, Block)
            position = world.component_for_entity(block_id, GridPosition)
        except KeyError:
            continue
        removed.append((block_id, position.row, position.col, block.value))
        world.delete_entity(block_id, immediate=True)
    return removed


def selection_total(world: World, selection: Selection) -> int:
    total = 0
    for block_id in selection.block_ids:
        value = block_value(world, block_id)
        if value is not None:
            total += value
    return total

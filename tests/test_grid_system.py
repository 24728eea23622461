import random

from sumstack.components.board import Board
from sumstack.components.game_state import GameStatus
from sumstack.constants import BLOCK_MAX, BLOCK_MIN, GRID_HEIGHT, GRID_WIDTH, INITIAL_ROWS
from sumstack.events.bus import EVENT_GRID_CHANGED, EVENT_ROUND_RESET, EVENT_SESSION_CLEARED, EventBus
from sumstack.systems.grid import GridSystem
from sumstack.systems.grid_ops import block_ids, get_block_at, iter_blocks
from sumstack.world import create_world
from tests.helpers import capture, place_block


def _grid(rows=GRID_HEIGHT, cols=GRID_WIDTH, seed=3):
    bus = EventBus()
    world = create_world(bus, GameStatus.PLAYING, rng=random.Random(seed))
    return bus, world, GridSystem(world, bus, rows=rows, cols=cols)


def test_board_component_exists():
    bus, world, _ = _grid(rows=6, cols=7)
    boards = list(world.get_component(Board))
    assert boards, 'Board component missing'
    ent, comp = boards[0]
    assert comp.rows == 6 and comp.cols == 7


def test_initialize_fills_bottom_rows():
    _, world, grid = _grid()
    created = grid.initialize()

    assert len(created) == INITIAL_ROWS * GRID_WIDTH
    blocks = list(iter_blocks(world))
    rows = {row for _, row, _, _ in blocks}
    assert rows == set(range(GRID_HEIGHT - INITIAL_ROWS, GRID_HEIGHT))
    cells = {(row, col) for _, row, col, _ in blocks}
    assert len(cells) == len(blocks), "two blocks share a cell"
    assert all(BLOCK_MIN <= value <= BLOCK_MAX for _, _, _, value in blocks)


def test_initialize_discards_previous_blocks_and_never_reuses_ids():
    _, world, grid = _grid()
    first = set(grid.initialize())
    second = set(grid.initialize())

    assert not first & second
    assert set(block_ids(world)) == second


def test_remove_blocks_ignores_unknown_ids():
    bus, world, grid = _grid()
    grid.initialize()
    target = get_block_at(world, GRID_HEIGHT - 1, 0)
    changes = capture(bus, EVENT_GRID_CHANGED)

    removed = grid.remove_blocks([target, 999_999])

    assert [entry[0] for entry in removed] == [target]
    assert get_block_at(world, GRID_HEIGHT - 1, 0) is None
    assert len(block_ids(world)) == INITIAL_ROWS * GRID_WIDTH - 1
    assert changes[-1]["reason"] == "remove"


def test_remove_blocks_with_only_unknown_ids_emits_nothing():
    bus, _, grid = _grid()
    changes = capture(bus, EVENT_GRID_CHANGED)

    assert grid.remove_blocks([424242]) == []
    assert changes == []


def test_shift_up_moves_every_block_one_row_toward_top():
    _, world, grid = _grid()
    grid.initialize()
    before = {ent: row for ent, row, _, _ in iter_blocks(world)}

    grid.shift_up()

    after = {ent: row for ent, row, _, _ in iter_blocks(world)}
    assert after == {ent: row - 1 for ent, row in before.items()}


def test_spawn_bottom_row_adds_one_block_per_column():
    _, world, grid = _grid()
    new_ids = grid.spawn_bottom_row()

    assert len(new_ids) == GRID_WIDTH
    placed = sorted((row, col) for ent, row, col, _ in iter_blocks(world) if ent in new_ids)
    assert placed == [(GRID_HEIGHT - 1, col) for col in range(GRID_WIDTH)]


def test_is_overflowing_only_with_block_on_top_row():
    _, world, grid = _grid()
    place_block(world, 1, 0, 5)
    assert not grid.is_overflowing()
    place_block(world, 0, 3, 5)
    assert grid.is_overflowing()


def test_round_reset_and_session_clear_events_drive_grid():
    bus, world, _ = _grid()

    bus.emit(EVENT_ROUND_RESET)
    assert len(block_ids(world)) == INITIAL_ROWS * GRID_WIDTH

    bus.emit(EVENT_SESSION_CLEARED, reason="home")
    assert block_ids(world) == []

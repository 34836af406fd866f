import pytest

from src.core.astar import find_path
from src.core.presets import PRESET_ORDER, PRESETS, build_preset
from src.core.types import BoardError, CellType


def test_order_covers_all_presets():
    assert set(PRESET_ORDER) == set(PRESETS)


def test_blank_has_no_pads():
    board, start, end = build_preset("blank", 6, 3)
    assert start is None and end is None
    assert (board.width, board.height) == (6, 3)


def test_blank_fits_any_size():
    board, _, _ = build_preset("blank", 1, 1)
    assert board.cells == [[CellType.INSULATOR]]


@pytest.mark.parametrize("name", ["slot_barrier", "trace_fence"])
@pytest.mark.parametrize("size", [(5, 4), (12, 7), (40, 25)])
def test_demo_boards_are_solvable(name, size):
    board, start, end = build_preset(name, *size)
    assert (board.width, board.height) == size
    assert board.cell_at(start) is CellType.SOURCE
    assert board.cell_at(end) is CellType.TARGET
    result = find_path(board, start, end)
    assert result is not None
    assert result.distance > end[0] - start[0]


def test_unknown_preset():
    with pytest.raises(KeyError):
        build_preset("spiral", 10, 10)


def test_demo_board_too_small():
    with pytest.raises(BoardError):
        build_preset("trace_fence", 4, 4)

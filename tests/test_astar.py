from math import sqrt

import pytest

from src.core.astar import CreepageAStar, SearchCancelled, find_path
from src.core.presets import build_preset
from src.core.types import Board, BoardError, CellType, OutOfBoundsError

_CHARS = {
    ".": CellType.INSULATOR,
    "T": CellType.TRACE,
    "#": CellType.SLOT,
    "S": CellType.SOURCE,
    "E": CellType.TARGET,
}


def board(*rows: str) -> Board:
    return Board.from_rows([[_CHARS[ch] for ch in row] for row in rows])


def test_open_board_uses_diagonals():
    result = find_path(Board.blank(10, 10), (0, 0), (3, 4))
    assert result is not None
    assert result.distance == pytest.approx(3 * sqrt(2) + 1.0)
    assert len(result.path) == 5
    assert result.path[0] == (0, 0)
    assert result.path[-1] == (3, 4)
    for (x0, y0), (x1, y1) in zip(result.path, result.path[1:]):
        assert max(abs(x1 - x0), abs(y1 - y0)) == 1


def test_straight_line_on_open_board():
    result = find_path(Board.blank(3, 3), (0, 0), (2, 0))
    assert result.path == ((0, 0), (1, 0), (2, 0))
    assert result.distance == pytest.approx(2.0)


def test_same_inputs_same_output():
    b, start, end = build_preset("trace_fence", 40, 25)
    first = find_path(b, start, end)
    second = find_path(b, start, end)
    assert first == second


def test_accepts_plain_rows():
    rows = [[CellType.INSULATOR] * 4 for _ in range(2)]
    result = find_path(rows, (0, 0), (3, 1))
    assert result.path[0] == (0, 0)
    assert result.path[-1] == (3, 1)
    assert result.distance == pytest.approx(2.0 + sqrt(2))


def test_detours_around_blocked_cell():
    b = board(
        ".T.",
        "...",
        "...",
    )
    result = find_path(b, (0, 0), (2, 0))
    assert result.path == ((0, 0), (1, 1), (2, 0))
    assert result.distance == pytest.approx(2 * sqrt(2))
    assert result.distance > 2.0


def test_diagonal_squeeze_between_two_obstacles_is_refused():
    b = board(
        ".T.",
        "T..",
        "...",
    )
    assert find_path(b, (0, 0), (1, 1)) is None


def test_squeeze_refused_for_slots_too():
    b = board(
        ".#",
        "#.",
    )
    assert find_path(b, (0, 0), (1, 1)) is None


def test_target_on_obstacle_is_enterable():
    b = board(
        "..T",
        "...",
        "...",
    )
    result = find_path(b, (0, 0), (2, 0))
    assert result.path == ((0, 0), (1, 0), (2, 0))
    assert result.distance == pytest.approx(2.0)


def test_target_inside_slot_is_enterable():
    b = board(
        "...#",
        "...#",
    )
    result = find_path(b, (0, 0), (3, 1))
    assert result is not None
    assert result.path[-1] == (3, 1)


def test_enclosed_start_is_unreachable():
    b = board(
        ".....",
        ".TT#.",
        ".#.T.",
        ".##T.",
        ".....",
    )
    assert find_path(b, (2, 2), (0, 0)) is None


def test_enclosed_target_is_unreachable():
    b = board(
        "S....",
        ".TTT.",
        ".T.T.",
        ".TTT.",
        ".....",
    )
    assert find_path(b, (0, 0), (2, 2)) is None


def test_ring_cell_as_target_is_reachable():
    b = board(
        ".....",
        ".TTT.",
        ".T.T.",
        ".TTT.",
        ".....",
    )
    result = find_path(b, (2, 2), (3, 2))
    assert result.path == ((2, 2), (3, 2))
    assert result.distance == pytest.approx(1.0)


def test_ring_corner_as_target_still_needs_an_open_side():
    b = board(
        ".....",
        ".TTT.",
        ".T.T.",
        ".TTT.",
        ".....",
    )
    assert find_path(b, (2, 2), (3, 3)) is None


def test_start_equals_end():
    result = find_path(Board.blank(4, 4), (2, 1), (2, 1))
    assert result.path == ((2, 1),)
    assert result.distance == 0.0


def test_single_cell_board():
    result = find_path(Board.blank(1, 1), (0, 0), (0, 0))
    assert result.path == ((0, 0),)


def test_equal_scores_prefer_first_discovered():
    # (1,0) and (1,1) both lead to (2,1) at cost 1 + sqrt(2); (1,0) is opened first
    result = find_path(Board.blank(3, 3), (0, 0), (2, 1))
    assert result.path == ((0, 0), (1, 0), (2, 1))
    assert result.distance == pytest.approx(1.0 + sqrt(2))


def test_grid_is_not_modified():
    b, start, end = build_preset("slot_barrier", 12, 8)
    before = b.copy()
    find_path(b, start, end)
    assert b == before


def test_out_of_bounds_endpoints_raise():
    b = Board.blank(3, 3)
    with pytest.raises(OutOfBoundsError):
        find_path(b, (3, 0), (0, 0))
    with pytest.raises(OutOfBoundsError):
        find_path(b, (0, 0), (0, -1))


def test_malformed_grid_raises():
    with pytest.raises(BoardError):
        find_path([], (0, 0), (0, 0))
    with pytest.raises(BoardError):
        find_path([[CellType.INSULATOR] * 3, [CellType.INSULATOR] * 2], (0, 0), (1, 1))
    with pytest.raises(BoardError):
        find_path([[0, 1], [1, 0]], (0, 0), (1, 1))


def test_cancellation_stops_search():
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 3

    with pytest.raises(SearchCancelled):
        find_path(Board.blank(20, 20), (0, 0), (19, 19), should_cancel=should_cancel)


def test_cancellation_check_that_never_fires_changes_nothing():
    b, start, end = build_preset("trace_fence", 30, 12)
    assert find_path(b, start, end, should_cancel=lambda: False) == find_path(b, start, end)


def test_step_api_lifecycle():
    algo = CreepageAStar()
    assert algo.step().status == "idle"

    algo.init(Board.blank(3, 3), (0, 0), (2, 2))
    first = algo.step()
    assert first.status == "running"
    assert first.closed == [(0, 0)]
    assert first.opened == [(1, 0), (0, 1), (1, 1)]
    assert first.metrics["popped"] == 1
    assert first.metrics["open_size"] == 3

    statuses = [algo.step().status for _ in range(2)]
    assert statuses == ["running", "done"]
    again = algo.step()
    assert again.status == "done"
    assert again.path == [(0, 0), (1, 1), (2, 2)]
    assert again.metrics["total_cost"] == pytest.approx(2 * sqrt(2))

    algo.reset()
    assert algo.result is None
    assert algo.step().closed == [(0, 0)]


def test_step_api_reports_no_path():
    algo = CreepageAStar()
    algo.init(board(".T.", "T..", "..."), (0, 0), (2, 2))
    res = algo.step()
    assert res.opened == []
    assert algo.step().status == "no_path"
    assert algo.step().status == "no_path"


@pytest.mark.parametrize("name", ["slot_barrier", "trace_fence"])
def test_stepping_matches_find_path(name):
    b, start, end = build_preset(name, 40, 25)
    algo = CreepageAStar()
    algo.init(b, start, end)
    while algo.step().status == "running":
        pass
    assert algo.result == find_path(b, start, end)

# src/core/presets.py
#!/usr/bin/env python3
"""Demo boards, drawn in code for whatever size the window was started with."""

from typing import Callable, Dict, Optional, Tuple

from src.core.types import Board, BoardError, Cell, CellType

Preset = Tuple[Board, Optional[Cell], Optional[Cell]]  # board, source, target

MIN_WIDTH = 5
MIN_HEIGHT = 4


def _pads(board: Board) -> Tuple[Cell, Cell]:
    mid = board.height // 2
    src, dst = (1, mid), (board.width - 2, mid)
    board.set_cell(src, CellType.SOURCE)
    board.set_cell(dst, CellType.TARGET)
    return src, dst


def blank(width: int, height: int) -> Preset:
    return Board.blank(width, height), None, None


def slot_barrier(width: int, height: int) -> Preset:
    """A milled slot splits the pads; the only way round is the bottom row."""
    board = Board.blank(width, height)
    col = width // 2
    for row in range(height - 1):
        board.set_cell((col, row), CellType.SLOT)
    src, dst = _pads(board)
    return board, src, dst


def trace_fence(width: int, height: int) -> Preset:
    """Copper fingers from alternating edges force a serpentine path."""
    board = Board.blank(width, height)
    from_top = True
    for col in range(2, width - 2, 3):
        rows = range(0, height - 1) if from_top else range(1, height)
        for row in rows:
            board.set_cell((col, row), CellType.TRACE)
        from_top = not from_top
    src, dst = _pads(board)
    return board, src, dst


PRESETS: Dict[str, Callable[[int, int], Preset]] = {
    "blank": blank,
    "slot_barrier": slot_barrier,
    "trace_fence": trace_fence,
}
PRESET_ORDER = ("blank", "slot_barrier", "trace_fence")  # keys [1]/[2]/[3]


def build_preset(name: str, width: int, height: int) -> Preset:
    if name not in PRESETS:
        raise KeyError(f"unknown preset {name!r}; choose from {', '.join(PRESET_ORDER)}")
    if name != "blank" and (width < MIN_WIDTH or height < MIN_HEIGHT):
        raise BoardError(f"preset {name!r} needs at least {MIN_WIDTH}x{MIN_HEIGHT}, got {width}x{height}")
    return PRESETS[name](width, height)

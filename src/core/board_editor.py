# src/core/board_editor.py
#!/usr/bin/env python3
"""
Editing model behind the viewer: tools, painting rules and auto-recompute.

Every edit re-runs the creepage search when both pads are placed, so the
viewer only has to draw `board`, `path` and `distance_mm`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import logging

from src.core.astar import find_path
from src.core.presets import build_preset
from src.core.types import Board, Cell, CellType, PathResult

logger = logging.getLogger(__name__)


class ToolMode(Enum):
    SET_START = "SET_START"
    SET_END = "SET_END"
    DRAW_TRACE = "DRAW_TRACE"
    DRAW_SLOT = "DRAW_SLOT"
    ERASER = "ERASER"


STATUS_NEED_START = "Place Start Point"
STATUS_NEED_END = "Place End Point"
STATUS_NO_PATH = "No Valid Path Found"
STATUS_OK = "Path Calculated"

_PAINT = {
    ToolMode.DRAW_TRACE: CellType.TRACE,
    ToolMode.DRAW_SLOT: CellType.SLOT,
    ToolMode.ERASER: CellType.INSULATOR,
}


@dataclass
class BoardEditor:
    board: Board
    cell_mm: float = 1.0
    tool: ToolMode = ToolMode.SET_START
    start: Optional[Cell] = None
    end: Optional[Cell] = None
    result: Optional[PathResult] = field(default=None, init=False)

    def __post_init__(self):
        self.recompute()

    @classmethod
    def blank(cls, width: int, height: int, cell_mm: float = 1.0) -> "BoardEditor":
        return cls(Board.blank(width, height), cell_mm=cell_mm)

    # -------------------- derived state --------------------

    @property
    def path(self) -> List[Cell]:
        return list(self.result.path) if self.result else []

    @property
    def distance_mm(self) -> float:
        return self.result.distance * self.cell_mm if self.result else 0.0

    @property
    def status(self) -> str:
        if self.start is None:
            return STATUS_NEED_START
        if self.end is None:
            return STATUS_NEED_END
        return STATUS_OK if self.result else STATUS_NO_PATH

    # -------------------- edits --------------------

    def set_tool(self, tool: ToolMode) -> None:
        self.tool = tool
        logger.debug("tool -> %s", tool.value)

    def apply_tool(self, x: int, y: int, tool: Optional[ToolMode] = None) -> bool:
        """Apply ``tool`` (default: the active one) at (x, y). Returns True if the board changed."""
        c = (x, y)
        self.board.require_in_bounds(c, "cell")
        tool = tool or self.tool
        current = self.board.cell_at(c)

        if tool is ToolMode.SET_START:
            if self.start == c:
                return False
            if self.start is not None:
                self.board.set_cell(self.start, CellType.INSULATOR)
            if self.end == c:
                self.end = None
            self.board.set_cell(c, CellType.SOURCE)
            self.start = c
        elif tool is ToolMode.SET_END:
            if self.end == c:
                return False
            if self.end is not None:
                self.board.set_cell(self.end, CellType.INSULATOR)
            if self.start == c:
                self.start = None
            self.board.set_cell(c, CellType.TARGET)
            self.end = c
        else:
            # Pads survive every brush except the eraser
            if current in (CellType.SOURCE, CellType.TARGET) and tool is not ToolMode.ERASER:
                return False
            paint = _PAINT[tool]
            if current is paint:
                return False
            if self.start == c:
                self.start = None
            if self.end == c:
                self.end = None
            self.board.set_cell(c, paint)

        self.recompute()
        return True

    def clear(self) -> None:
        self.board = Board.blank(self.board.width, self.board.height)
        self.start = None
        self.end = None
        self.recompute()

    def load_preset(self, name: str) -> None:
        board, start, end = build_preset(name, self.board.width, self.board.height)
        self.board, self.start, self.end = board, start, end
        logger.debug("preset %s loaded", name)
        self.recompute()

    def recompute(self) -> Optional[PathResult]:
        if self.start is None or self.end is None:
            self.result = None
            return None
        self.result = find_path(self.board, self.start, self.end)
        logger.debug("recomputed %s -> %s: %s", self.start, self.end,
                     f"{self.distance_mm:.2f} mm" if self.result else "unreachable")
        return self.result

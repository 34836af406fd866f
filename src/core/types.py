# src/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any, Sequence, Union

Cell = Tuple[int, int]  # (col, row)


class BoardError(ValueError):
    """Raised when a board or a coordinate violates the caller contract."""


class OutOfBoundsError(BoardError):
    pass


class CellType(Enum):
    INSULATOR = "INSULATOR"   # bare substrate
    TRACE = "TRACE"           # copper of another net
    SLOT = "SLOT"             # milled cutout / air gap
    SOURCE = "SOURCE"
    TARGET = "TARGET"
    PATH = "PATH"             # overlay only, never handed to the engine

    @property
    def walkable(self) -> bool:
        return self not in (CellType.TRACE, CellType.SLOT)


@dataclass
class Board:
    width: int
    height: int
    cells: List[List[CellType]]        # [row][col]

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise BoardError(f"board must be at least 1x1, got {self.width}x{self.height}")
        if len(self.cells) != self.height:
            raise BoardError(f"expected {self.height} rows, got {len(self.cells)}")
        for y, row in enumerate(self.cells):
            if len(row) != self.width:
                raise BoardError(f"row {y} has {len(row)} columns, expected {self.width}")
            for v in row:
                if not isinstance(v, CellType):
                    raise BoardError(f"row {y} holds {v!r}, not a CellType")

    @classmethod
    def blank(cls, width: int, height: int) -> "Board":
        return cls(width, height, [[CellType.INSULATOR] * width for _ in range(height)])

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[CellType]]) -> "Board":
        """Build a board from row-major data, copying it."""
        if not rows or not rows[0]:
            raise BoardError("board must have at least one row and one column")
        return cls(len(rows[0]), len(rows), [list(r) for r in rows])

    @classmethod
    def coerce(cls, grid: Union["Board", Sequence[Sequence[CellType]]]) -> "Board":
        return grid if isinstance(grid, Board) else cls.from_rows(grid)

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def require_in_bounds(self, c: Cell, what: str = "coordinate") -> None:
        if not self.in_bounds(c):
            raise OutOfBoundsError(f"{what} {c} outside {self.width}x{self.height} board")

    def cell_at(self, c: Cell) -> CellType:
        x, y = c
        return self.cells[y][x]

    def set_cell(self, c: Cell, value: CellType) -> None:
        x, y = c
        self.cells[y][x] = value

    def is_block(self, c: Cell) -> bool:
        return not self.cell_at(c).walkable

    def copy(self) -> "Board":
        return Board(self.width, self.height, [list(r) for r in self.cells])


@dataclass(frozen=True)
class PathResult:
    path: Tuple[Cell, ...]             # start -> target, both inclusive
    distance: float                    # grid units


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

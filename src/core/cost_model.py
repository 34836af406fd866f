# src/core/cost_model.py
#!/usr/bin/env python3
"""
Walkability and movement costs for the creepage search.

- Straight steps cost 1.0 grid unit, diagonal steps cost sqrt(2).
- Heuristic is the Euclidean distance, which never overestimates an
  8-connected path priced this way (admissible + consistent).
"""

from math import sqrt

from src.core.types import Cell, CellType

COST_STRAIGHT = 1.0
COST_DIAGONAL = sqrt(2.0)


def is_walkable(cell: CellType) -> bool:
    """Trace and slot block the surface path; everything else can be crossed."""
    return cell.walkable


def heuristic(a: Cell, b: Cell) -> float:
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return sqrt(dx * dx + dy * dy)


def is_diagonal(dx: int, dy: int) -> bool:
    return abs(dx) == 1 and abs(dy) == 1


def move_cost(dx: int, dy: int) -> float:
    return COST_DIAGONAL if is_diagonal(dx, dy) else COST_STRAIGHT

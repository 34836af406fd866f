# src/core/astar.py
#!/usr/bin/env python3
"""
A* over a painted PCB board — shortest surface (creepage) path.

Implements the Algorithm API the viewer drives:
- init(board, start, goal) - reset() - step() -> StepResult
and a one-shot helper, find_path(grid, start, end).

Movement is 8-connected:
- straight step = 1.0, diagonal step = sqrt(2), Euclidean heuristic.
- Trace and slot cells block, except the goal cell itself, which can always
  be entered (creepage is measured up to a pad sitting on copper).
- A diagonal step is refused when both orthogonal cells it passes between
  block (no squeezing through a corner gap).

Tie-breaking in the PQ:
- (f, seq, index): lower f, then the node that entered Open first. A node
  keeps its first seq when its f improves, so pops happen in the same order
  as a linear scan of an insertion-ordered open list.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union
import heapq
import logging

from src.core.cost_model import heuristic, is_diagonal, is_walkable, move_cost
from src.core.types import Board, Cell, CellType, PathResult, StepResult

logger = logging.getLogger(__name__)

NO_PARENT = -1


class SearchCancelled(Exception):
    """Raised when the caller's cancellation check asks a running search to stop."""


@dataclass
class CreepageAStar:
    name: str = "A*"

    board: Optional[Board] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None

    # Arena, one slot per cell, indexed y * width + x
    g: List[float] = field(default_factory=list)
    h: List[float] = field(default_factory=list)
    f: List[float] = field(default_factory=list)
    parent: List[int] = field(default_factory=list)
    order: List[int] = field(default_factory=list)      # seq of first entry into Open
    blocked: bytearray = field(default_factory=bytearray)
    closed: bytearray = field(default_factory=bytearray)
    in_open: bytearray = field(default_factory=bytearray)

    open_pq: List[Tuple[float, int, int]] = field(default_factory=list)  # (f, seq, index)
    open_count: int = 0
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    seq: int = 0
    goal_index: int = -1
    result: Optional[PathResult] = None

    # -------------------- lifecycle --------------------

    def init(self, board: Board, start: Cell, goal: Cell) -> None:
        """Validate the endpoints and seed a fresh search on ``board``."""
        start = (int(start[0]), int(start[1]))
        goal = (int(goal[0]), int(goal[1]))
        board.require_in_bounds(start, "start")
        board.require_in_bounds(goal, "goal")
        self.board = board
        self.start = start
        self.goal = goal
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.board is None:
            return
        n = self.board.width * self.board.height
        self.g = [0.0] * n
        self.h = [0.0] * n
        self.f = [0.0] * n
        self.parent = [NO_PARENT] * n
        self.order = [-1] * n
        # Snapshot walkability so edits made while stepping never leak into this search
        self.blocked = bytearray(
            0 if is_walkable(c) else 1 for row in self.board.cells for c in row
        )
        self.closed = bytearray(n)
        self.in_open = bytearray(n)
        self.open_pq.clear()
        self.open_count = 0
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.seq = 0
        self.goal_index = self._index(self.goal)
        self.result = None

        s = self._index(self.start)
        self.h[s] = heuristic(self.start, self.goal)
        self.f[s] = self.h[s]
        self._push(s)

    # -------------------- arena helpers --------------------

    def _index(self, c: Cell) -> int:
        return c[1] * self.board.width + c[0]

    def _cell(self, i: int) -> Cell:
        y, x = divmod(i, self.board.width)
        return (x, y)

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _push(self, i: int) -> None:
        if not self.in_open[i]:
            self.in_open[i] = 1
            self.order[i] = self._bump()
            self.open_count += 1
        heapq.heappush(self.open_pq, (self.f[i], self.order[i], i))

    def _pop_open(self) -> Optional[int]:
        while self.open_pq:
            _, _, i = heapq.heappop(self.open_pq)
            # Superseded entries of finalized nodes
            if self.closed[i]:
                continue
            self.in_open[i] = 0
            self.open_count -= 1
            return i
        return None

    def _blocks(self, i: int) -> bool:
        return bool(self.blocked[i]) and i != self.goal_index

    def _neighbors8(self, i: int) -> Iterator[Tuple[int, int, int]]:
        """Yield (index, dx, dy) for every neighbour the search may step onto."""
        w, hgt = self.board.width, self.board.height
        x, y = self._cell(i)
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                nx, ny = x + dx, y + dy
                if not (0 <= nx < w and 0 <= ny < hgt):
                    continue
                v = ny * w + nx
                if self.closed[v]:
                    continue
                if self._blocks(v):
                    continue
                if is_diagonal(dx, dy):
                    side_a = y * w + nx     # horizontal neighbour of current
                    side_b = ny * w + x     # vertical neighbour of current
                    if self._blocks(side_a) and self._blocks(side_b):
                        continue
                yield v, dx, dy

    def _reconstruct(self, end: int) -> PathResult:
        path: List[Cell] = []
        distance = 0.0
        cur = end
        while self.parent[cur] != NO_PARENT:
            par = self.parent[cur]
            (x, y), (px, py) = self._cell(cur), self._cell(par)
            path.append((x, y))
            distance += move_cost(x - px, y - py)
            cur = par
        path.append(self.start)
        path.reverse()
        return PathResult(path=tuple(path), distance=distance)

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* finalization:
          - Pop the lowest-f node (earliest inserted on ties).
          - If goal, reconstruct and finish.
          - Else relax admitted neighbours with straight/diagonal cost.
        """
        if self.board is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=list(self.result.path), metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        u = self._pop_open()
        if u is None:
            self.no_path = True
            logger.debug("no path %s -> %s after %d expansions", self.start, self.goal, self.popped_count)
            return StepResult(status="no_path", metrics=self._metrics())

        self.closed[u] = 1
        self.popped_count += 1
        cu = self._cell(u)

        if u == self.goal_index:
            self.done = True
            self.result = self._reconstruct(u)
            logger.debug(
                "path %s -> %s: %d cells, distance %.4f, %d expansions",
                self.start, self.goal, len(self.result.path), self.result.distance, self.popped_count,
            )
            return StepResult(
                status="done",
                closed=[cu],
                current=cu,
                path=list(self.result.path),
                metrics=self._metrics(),
            )

        opened_now: List[Cell] = []
        for v, dx, dy in self._neighbors8(u):
            alt = self.g[u] + move_cost(dx, dy)
            if not self.in_open[v] or alt < self.g[v]:
                cv = self._cell(v)
                self.parent[v] = u
                self.g[v] = alt
                self.h[v] = heuristic(cv, self.goal)
                self.f[v] = self.g[v] + self.h[v]
                if not self.in_open[v]:
                    opened_now.append(cv)
                self._push(v)

        return StepResult(
            status="running",
            opened=opened_now,
            closed=[cu],
            current=cu,
            metrics=self._metrics(),
        )

    def run(self, should_cancel: Optional[Callable[[], bool]] = None) -> Optional[PathResult]:
        """Step until the search settles; None means the goal is unreachable."""
        while True:
            if should_cancel is not None and should_cancel():
                raise SearchCancelled(f"search {self.start} -> {self.goal} cancelled")
            res = self.step()
            if res.status == "done":
                return self.result
            if res.status != "running":
                return None

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": self.open_count,
            "closed_count": self.popped_count,
            "path_len": len(self.result.path) if self.result else 0,
            "total_cost": self.result.distance if self.result else None,
        }


def find_path(
    grid: Union[Board, Sequence[Sequence[CellType]]],
    start: Cell,
    end: Cell,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Optional[PathResult]:
    """Return the shortest creepage path from ``start`` to ``end``, or None.

    ``grid`` is a :class:`Board` or row-major rows of :class:`CellType`.
    Raises :class:`BoardError` / :class:`OutOfBoundsError` on malformed input
    and :class:`SearchCancelled` if ``should_cancel`` returns true.
    """
    algo = CreepageAStar()
    algo.init(Board.coerce(grid), start, end)
    return algo.run(should_cancel)


__all__ = ["CreepageAStar", "SearchCancelled", "find_path", "NO_PARENT"]

"""Random maze generation with a randomised Prim's algorithm."""

from __future__ import annotations

import random
from typing import Optional

from tanktrouble.objects import Vec

Cell = tuple[int, int]

_DIRECTIONS = ((0, -1), (-1, 0), (0, 1), (1, 0))


class Maze:
    """A grid of ``columns`` by ``rows`` cells, each ``grid_size`` wide.

    ``passages`` holds the open connections between neighbouring cells; every
    other shared edge is a wall.
    """

    def __init__(
        self,
        columns: int,
        rows: int,
        grid_size: int,
        rng: Optional[random.Random] = None,
    ) -> None:
        if columns < 2 or rows < 1:
            raise ValueError("a maze needs at least two columns and one row")
        if grid_size <= 0:
            raise ValueError("grid size must be positive")
        self.columns = columns
        self.rows = rows
        self.grid_size = grid_size
        self._rng = rng if rng is not None else random.Random()
        self.passages: set[frozenset[Cell]] = set()

    def _inside(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.columns and 0 <= y < self.rows

    def generate(self) -> None:
        """Carve a new spanning tree of passages."""
        passages: set[frozenset[Cell]] = set()
        visited: set[Cell] = {(0, 0)}
        walls: list[tuple[Cell, Cell]] = [((0, 0), (1, 0))]
        while walls:
            first, second = walls.pop(self._rng.randrange(len(walls)))
            if second not in visited:
                passages.add(frozenset((first, second)))
                visited.add(second)
            x, y = second
            for dx, dy in _DIRECTIONS:
                nxt = (x + dx, y + dy)
                if not self._inside(nxt) or nxt in visited:
                    continue
                if frozenset((second, nxt)) not in passages:
                    walls.append((second, nxt))
        self.passages = passages

    def block_positions(self) -> list[tuple[Vec, Vec]]:
        """Start and end points of every inner wall: vertical walls first."""
        g = self.grid_size
        blocks: list[tuple[Vec, Vec]] = []
        for y in range(self.rows):
            for x in range(self.columns - 1):
                if frozenset(((x, y), (x + 1, y))) not in self.passages:
                    blocks.append((
                        (float((x + 1) * g), float(y * g)),
                        (float((x + 1) * g), float((y + 1) * g)),
                    ))
        for x in range(self.columns):
            for y in range(self.rows - 1):
                if frozenset(((x, y), (x, y + 1))) not in self.passages:
                    blocks.append((
                        (float(x * g), float((y + 1) * g)),
                        (float((x + 1) * g), float((y + 1) * g)),
                    ))
        return blocks
"""Wall segments of the maze."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from tanktrouble.objects import Shell, Vec

Segment = tuple[Vec, Vec]


@dataclass(frozen=True)
class Block:
    """An axis-aligned wall between ``start`` and ``end``.

    ``width`` and ``height`` are the extents across and along the wall as the
    collision code uses them; ``borders`` are the wall's outline grown by a
    shell radius, in the order top, bottom, left, right.
    """

    BLOCK_WIDTH: ClassVar[int] = 4

    id: int
    start: Vec
    end: Vec
    horizon: bool = field(init=False)
    center: Vec = field(init=False)
    width: int = field(init=False)
    height: int = field(init=False)
    corners: tuple[Vec, Vec, Vec, Vec] = field(init=False, repr=False)
    borders: tuple[Segment, Segment, Segment, Segment] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        sx, sy = (float(v) for v in self.start)
        ex, ey = (float(v) for v in self.end)
        if sy != ey and sx != ex:
            raise ValueError("a block must be horizontal or vertical")
        horizon = sy == ey
        half = self.BLOCK_WIDTH / 2
        if horizon:
            if sx > ex:
                (sx, sy), (ex, ey) = (ex, ey), (sx, sy)
            tl = (sx - half, sy - half)
            bl = (sx - half, sy + half)
            tr = (ex + half, ey - half)
            br = (ex + half, ey + half)
            width = int(bl[1] - tl[1])
            height = int(tr[0] - tl[0])
        else:
            if sy > ey:
                (sx, sy), (ex, ey) = (ex, ey), (sx, sy)
            tl = (sx - half, sy - half)
            tr = (sx + half, sy - half)
            bl = (ex - half, ey + half)
            br = (ex + half, ey + half)
            height = int(bl[1] - tl[1])
            width = int(tr[0] - tl[0])

        r = Shell.RADIUS
        btl = (tl[0] - r, tl[1] - r)
        btr = (tr[0] + r, tr[1] - r)
        bbl = (bl[0] - r, bl[1] + r)
        bbr = (br[0] + r, br[1] + r)

        values = {
            "start": (sx, sy),
            "end": (ex, ey),
            "horizon": horizon,
            "center": ((tl[0] + tr[0]) / 2, (tl[1] + bl[1]) / 2),
            "width": width,
            "height": height,
            "corners": (tl, tr, bl, br),
            "borders": ((btl, btr), (bbl, bbr), (btl, bbl), (btr, bbr)),
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_center(cls, horizon: bool, center: Vec, grid_size: int) -> Block:
        """A wall one grid cell long, centred on ``center``."""
        x, y = center
        half = grid_size // 2
        if horizon:
            return cls(0, (x - half, y), (x + half, y))
        return cls(0, (x, y - half), (x, y + half))

    def border(self, n: int) -> Segment:
        """Border segment ``n``: 0 top, 1 bottom, 2 left, 3 right."""
        if not 0 <= n < 4:
            raise IndexError(f"border index {n} out of range")
        return self.borders[n]
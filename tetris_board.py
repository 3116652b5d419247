"""Board helpers: cell grid, paste/collide, rotation, sweep"""
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

Cell = Optional[str]


class InvariantError(AssertionError):
    """Raised when the engine reaches a state its construction rules out."""


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)


SHIFT_DOWN = Point(0, 1)


class Image:
    """Fixed-size 2-D buffer of cells, addressed as (x, y) with y growing down.

    Used both for the matrix and for the 4x4 piece bitmaps. A cell is either
    None (empty) or a one-letter tag.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.rows: List[List[Cell]] = [[None] * width for _ in range(height)]

    def __repr__(self):
        lines = ["".join(c or "." for c in row) for row in self.rows]
        return f"Image({self.width}x{self.height})\n" + "\n".join(lines)

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return self.rows == other.rows

    def inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int):
        if not self.inside(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} image")

    def get(self, x: int, y: int) -> Cell:
        self._check(x, y)
        return self.rows[y][x]

    def set(self, x: int, y: int, value: Cell):
        self._check(x, y)
        self.rows[y][x] = value

    def clear(self):
        for row in self.rows:
            row[:] = [None] * self.width

    def copy(self) -> "Image":
        img = Image(self.width, self.height)
        img.rows = [row[:] for row in self.rows]
        return img

    def recolored(self, value: Cell) -> "Image":
        """Copy with every non-empty cell replaced by `value`."""
        img = Image(self.width, self.height)
        img.rows = [[value if c else None for c in row] for row in self.rows]
        return img

    def cells(self) -> Iterator[Tuple[int, int, str]]:
        for y, row in enumerate(self.rows):
            for x, c in enumerate(row):
                if c:
                    yield x, y, c

    # paste / collide

    def _overlay(self, other: "Image", pos: Point, x_scale: int, crop_top: int):
        """Yield (x, y, cell) destination coordinates for other's non-empty cells."""
        for iy in range(crop_top, other.height):
            row = other.rows[iy]
            for ix in range(other.width * x_scale):
                c = row[ix // x_scale]
                if c is None:
                    continue
                yield pos.x + ix, pos.y + iy - crop_top, c

    def can_place(self, other: "Image", pos: Point, x_scale: int = 1, crop_top: int = 0) -> bool:
        """True if other fits at pos: every non-empty cell in bounds and on an empty cell."""
        for x, y, _ in self._overlay(other, pos, x_scale, crop_top):
            if not self.inside(x, y) or self.rows[y][x] is not None:
                return False
        return True

    def place(self, other: "Image", pos: Point, x_scale: int = 1, crop_top: int = 0):
        """Write other's non-empty cells at pos. Cells falling outside are dropped."""
        for x, y, c in self._overlay(other, pos, x_scale, crop_top):
            if self.inside(x, y):
                self.rows[y][x] = c

    def rotate_clockwise(self, window: int):
        """Rotate the top-left window x window square in place (transpose, then mirror)."""
        if not 0 <= window <= min(self.width, self.height):
            raise InvariantError(f"rotation window {window} does not fit {self.width}x{self.height}")
        r = self.rows
        for y in range(window):
            for x in range(y):
                r[y][x], r[x][y] = r[x][y], r[y][x]
        for y in range(window):
            for x in range(window // 2):
                r[y][x], r[y][window - 1 - x] = r[y][window - 1 - x], r[y][x]

    def occupied(self, p: Point) -> bool:
        """Off-board counts as occupied (walls and floor block T-spin corners)."""
        if not self.inside(p.x, p.y):
            return True
        return self.rows[p.y][p.x] is not None


def sweep(img: Image) -> int:
    """Clear full rows and return the number of cleared rows.

    Rows holding at least one empty cell are kept and compacted toward the
    bottom in their original order; vacated rows at the top come back empty.
    """
    kept = [row for row in img.rows if any(c is None for c in row)]
    cleared = img.height - len(kept)
    if cleared:
        img.rows = [[None] * img.width for _ in range(cleared)] + kept
    return cleared

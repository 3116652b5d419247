"""Piece model, shapes, SRS rotation"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tetris_board import Image, InvariantError, Point

SIZE = 4
PIECES = ("I", "L", "O", "T", "J", "Z", "S")
GHOST = "G"

# Spawn orientation inside the 4x4 box, '#' is a block
SHAPES: Dict[str, Tuple[str, ...]] = {
    "I": ("    ",
          "####",
          "    ",
          "    "),
    "J": ("#   ",
          "### ",
          "    ",
          "    "),
    "L": ("  # ",
          "### ",
          "    ",
          "    "),
    "O": (" ## ",
          " ## ",
          "    ",
          "    "),
    "S": (" ## ",
          "##  ",
          "    ",
          "    "),
    "T": (" #  ",
          "### ",
          "    ",
          "    "),
    "Z": ("##  ",
          " ## ",
          "    ",
          "    "),
}

# Side of the square the shape turns in; O does not turn
WINDOWS = {"I": 4, "J": 3, "L": 3, "O": 0, "S": 3, "T": 3, "Z": 3}


def _build_rotations() -> Dict[str, Tuple[Image, ...]]:
    table = {}
    for t in PIECES:
        img = Image(SIZE, SIZE)
        for y, line in enumerate(SHAPES[t]):
            for x, ch in enumerate(line):
                if ch != " ":
                    img.set(x, y, t)
        states = [img]
        for _ in range(3):
            img = img.copy()
            img.rotate_clockwise(WINDOWS[t])
            states.append(img)
        table[t] = tuple(states)
    return table


# Built once at import; treat as read-only
ROTATIONS = _build_rotations()
_EMPTY = Image(SIZE, SIZE)


def rotation_state(t: str, rot: int) -> Image:
    try:
        return ROTATIONS[t][rot & 3]
    except KeyError:
        raise InvariantError(f"no rotation table for piece type {t!r}") from None


@dataclass
class Tetrimino:
    """A piece: type tag, rotation index and the top-left of its 4x4 box.

    `t` is None for an empty slot (nothing held yet, ghost not drawable).
    """
    t: Optional[str] = "I"
    rot: int = 0
    pos: Point = field(default_factory=lambda: Point(0, 0))
    image: Image = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.rotate(self.rot)

    def rotate(self, rot: int):
        self.rot = rot & 3
        self.image = rotation_state(self.t, self.rot) if self.t else _EMPTY

    def recolored(self, tag: str) -> "Tetrimino":
        """Same placement, with a private bitmap painted `tag` (ghost piece)."""
        p = Tetrimino(self.t, self.rot, self.pos)
        p.image = self.image.recolored(tag)
        return p

    def cells(self) -> List[Tuple[int, int]]:
        """Board coordinates of the occupied cells."""
        return [(self.pos.x + x, self.pos.y + y) for x, y, _ in self.image.cells()]


# -------------------------------------------------------------
# SRS wall kicks, (old_rot, new_rot) -> offsets to try in order.
# y grows downward, so "up" kicks are negative.
# -------------------------------------------------------------
JLSTZ_KICKS: Dict[Tuple[int, int], List[Tuple[int, int]]] = {
    (0, 1): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],
    (1, 0): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],
    (1, 2): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],
    (2, 1): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],
    (2, 3): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],
    (3, 2): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],
    (3, 0): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],
    (0, 3): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],
}
I_KICKS: Dict[Tuple[int, int], List[Tuple[int, int]]] = {
    (0, 1): [(0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)],
    (1, 0): [(0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)],
    (1, 2): [(0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)],
    (2, 1): [(0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)],
    (2, 3): [(0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)],
    (3, 2): [(0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)],
    (3, 0): [(0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)],
    (0, 3): [(0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)],
}


def kicks(t: str, old_rot: int, new_rot: int) -> List[Point]:
    table = I_KICKS if t == "I" else JLSTZ_KICKS
    return [Point(dx, dy) for dx, dy in table[(old_rot & 3, new_rot & 3)]]


# Diagonal corners of the T's 3x3 box, (front, back) for each rotation.
# Front corners flank the pointing side: rotation 1 points right, so its
# front is the right column; rotation 2 points down, so its front is the
# bottom row. Tables that swap these two rows read the back as the front.
#   A#B
#   ###     rotation 0 (pointing up): A, B front; C, D back
#   C D
TSPIN_CORNERS: Dict[int, Tuple[Tuple[Point, Point], Tuple[Point, Point]]] = {
    0: ((Point(0, 0), Point(2, 0)), (Point(0, 2), Point(2, 2))),
    1: ((Point(2, 0), Point(2, 2)), (Point(0, 0), Point(0, 2))),
    2: ((Point(0, 2), Point(2, 2)), (Point(0, 0), Point(2, 0))),
    3: ((Point(0, 0), Point(0, 2)), (Point(2, 0), Point(2, 2))),
}

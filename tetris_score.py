"""Line clear scoring, T-spin bonuses and back-to-back streaks"""
import enum
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from tetris_board import InvariantError


class Move(enum.Enum):
    """How the active piece got where it is, judged at its last accepted move."""
    NORMAL = "normal"
    MINI_TSPIN = "mini-tspin"
    TSPIN = "tspin"


# Streak effect of a clear
KEEP, EXTEND, RESET = "keep", "extend", "reset"

# (move, rows cleared) -> (message, points before level multiplier, streak effect)
SCORE_TABLE: Dict[Tuple[Move, int], Tuple[str, int, str]] = {
    (Move.NORMAL, 0): ("", 0, KEEP),
    (Move.NORMAL, 1): ("Single", 100, RESET),
    (Move.NORMAL, 2): ("Double", 300, RESET),
    (Move.NORMAL, 3): ("Triple", 500, RESET),
    (Move.NORMAL, 4): ("Tetris", 800, EXTEND),
    (Move.MINI_TSPIN, 0): ("Mini T-Spin", 100, KEEP),
    (Move.MINI_TSPIN, 1): ("Mini T-Spin Single", 200, EXTEND),
    (Move.TSPIN, 0): ("T-Spin", 400, KEEP),
    (Move.TSPIN, 1): ("T-Spin Single", 800, EXTEND),
    (Move.TSPIN, 2): ("T-Spin Double", 1200, EXTEND),
    (Move.TSPIN, 3): ("T-Spin Triple", 1600, EXTEND),
}

B2B_SUFFIX = " B2B"


@dataclass(frozen=True)
class Award:
    name: str
    points: int
    back_to_back: int

    @property
    def message(self) -> Optional[str]:
        if self.points <= 0:
            return None
        return f"{self.name} {self.points}"


def award(move: Move, cleared: int, level: int, back_to_back: int) -> Award:
    """Score a lock that cleared `cleared` rows.

    Points are multiplied by the level first; a clear that grows an
    existing streak (prior streak >= 1) then earns half again on top.
    """
    try:
        name, points, effect = SCORE_TABLE[(move, cleared)]
    except KeyError:
        raise InvariantError(f"{move.value} cannot clear {cleared} rows") from None

    streak = back_to_back
    if effect == EXTEND:
        streak += 1
    elif effect == RESET:
        streak = 0

    points *= level
    if streak > back_to_back and back_to_back >= 1:
        points += points // 2
        name += B2B_SUFFIX
    return Award(name, points, streak)

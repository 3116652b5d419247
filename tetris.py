"""
Tetrino: falling-block engine on a virtual clock
=================================================

The engine never polls and never sleeps. A front-end calls `Tetris.tic`
with the wall-clock time that passed since its previous call and a FIFO of
key edges stamped with the frame they are due on. The engine advances its
own microsecond clock and replays, in time order, everything that became
due:

  • Repeat translate: a held direction key keeps shifting the piece
  • Lock: a grounded piece is committed after the lock delay
  • Fall: gravity (or soft drop) moves the piece down one row
  • Input: the next queued key edge

After every single event the piece's support is re-checked, so a piece
walked off a ledge starts falling at once and a piece that lands starts
its lock delay at once. The result only depends on the elapsed time and
the input sequence, never on how often the front-end calls in.

-------------------------------------------------------------
STRUCTURE OVERVIEW
-------------------------------------------------------------

  • tetris_board: Image grid with paste/collide, row sweep
  • tetris_piece: Shapes, rotation table, SRS kicks, T-spin corners
  • tetris_rng: 7-bag randomizer
  • tetris_score: Score table, T-spin and back-to-back bonuses
  • tetris_input: Key edge records and controller flags
  • tetris (this module): The engine state machine and event loop

-------------------------------------------------------------
RULES SUMMARY
-------------------------------------------------------------

  • Matrix is 10 x 40; only the bottom 20 rows are visible. Locking any
    cell above them ends the game.
  • Gravity: 1s per row at level 1, shrinking as
    (0.8 - (level-1) * 0.0007) ** (level-1); soft drop is 20x faster.
  • Lock delay 500ms, extended by each accepted move up to 15 times;
    reaching a new lowest row refills the budget.
  • Level = 1 + lines / 10, capped at 15.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

from tetris_board import SHIFT_DOWN, Image, Point, sweep
from tetris_config import CONFIG
from tetris_input import Command, CommandState, ControllerState, Input
from tetris_piece import GHOST, SIZE, TSPIN_CORNERS, Tetrimino, kicks
from tetris_rng import BagRandom
from tetris_score import Move, award

log = logging.getLogger(__name__)

# -------------------------------------------------------------
# CONSTANTS
# -------------------------------------------------------------
MATRIX_WIDTH, MATRIX_HEIGHT = 10, 40
SKYLINE = 20                   # Visible rows at the bottom of the matrix
MAX_LEVEL = 15
LINES_PER_LEVEL = 10
SOFT_DROP_PER_CELL = 1
HARD_DROP_PER_CELL = 2


class Phase(enum.Enum):
    WELCOME = "welcome"
    PLAY = "play"
    GAME_OVER = "game_over"


def fall_periods(level: int) -> Tuple[int, int]:
    """Return (normal, soft drop) microseconds per row for a level."""
    normal = int(1_000_000 * (0.8 - (level - 1) * 0.0007) ** (level - 1))
    return normal, normal // 20


def _earliest(*times: Optional[int]) -> Optional[int]:
    armed = [t for t in times if t is not None]
    return min(armed) if armed else None


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of everything a front-end draws."""
    phase: Phase
    matrix: Image
    active: Tetrimino
    next: Tetrimino
    held: Optional[Tetrimino]
    ghost: Optional[Tetrimino]
    score: int
    level: int
    lines: int
    messages: Tuple[str, ...]    # most recent first
    game_time: int


class Tetris:
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = CONFIG["SEED"]
        self.rng = BagRandom(seed)
        self.alive = True
        self.phase = Phase.WELCOME

        self.frame_period = CONFIG["FRAME_PERIOD_US"]
        self.lock_period = CONFIG["LOCK_PERIOD_US"]
        self.repeat_translate_period = CONFIG["REPEAT_TRANSLATE_PERIOD_US"]
        self.repeat_translate_grace_period = CONFIG["REPEAT_TRANSLATE_GRACE_US"]
        self.max_lock_moves = CONFIG["MAX_LOCK_MOVES"]
        self.start_level = CONFIG["START_LEVEL"]

        self.matrix = Image(MATRIX_WIDTH, MATRIX_HEIGHT)
        self.active = Tetrimino(None)
        self.next = Tetrimino(None)
        self.held = Tetrimino(None)
        self.ghost: Optional[Tetrimino] = None

        self.controller = ControllerState()
        self.command = CommandState()

        # Clock and scheduled events, microseconds; None means never
        self.game_time = 0
        self.fall_time: Optional[int] = None
        self.lock_time: Optional[int] = None
        self.repeat_translate_time: Optional[int] = None
        self.soft_drop_scheduled = False

        self.score = 0
        self.lines = 0
        self.level = 1
        self.normal_fall_period, self.short_fall_period = fall_periods(1)
        self.can_hold = True
        self.lowest_y = 0
        self.moves_left = self.max_lock_moves
        self.last_move = Move.NORMAL
        self.back_to_back = 0
        self.messages: Deque[str] = deque(maxlen=CONFIG["MAX_MESSAGES"])

    # ---------- Session ----------
    def set_level(self, level: int):
        self.level = level
        self.normal_fall_period, self.short_fall_period = fall_periods(level)

    def current_frame(self) -> int:
        return (self.game_time + self.frame_period - 1) // self.frame_period

    def new_game(self, level: int):
        if not 1 <= level <= MAX_LEVEL:
            raise ValueError(f"level must be in 1..{MAX_LEVEL}, got {level}")
        self.game_time = 0
        self.score = 0
        self.lines = 0
        self.back_to_back = 0
        self.messages.clear()
        self.matrix.clear()
        self.controller = ControllerState()
        self.command = CommandState()

        first = Tetrimino(self.rng.next_piece())
        self.next = Tetrimino(self.rng.next_piece())
        self.held = Tetrimino(None)
        self.set_level(level)
        self.can_hold = True
        self.repeat_translate_time = None

        self.respawn(first)
        self.phase = Phase.PLAY
        self._update_support(self.game_time)
        self._update_ghost()
        log.info("new game at level %d (seed %d)", level, self.rng.seed)

    def respawn(self, piece: Tetrimino):
        """Make `piece` the active piece at the top-center spawn point."""
        piece.rotate(0)
        piece.pos = Point((MATRIX_WIDTH - SIZE) // 2, MATRIX_HEIGHT - SKYLINE - 2)
        self.active = piece
        self.fall_time = None
        self.lock_time = None
        self.soft_drop_scheduled = False
        self.lowest_y = piece.pos.y
        self.moves_left = self.max_lock_moves
        self.last_move = Move.NORMAL
        log.debug("spawn %s", piece.t)

    # ---------- Placement queries ----------
    def can_fit(self, piece: Tetrimino) -> bool:
        return self.matrix.can_place(piece.image, piece.pos)

    def can_fall(self, piece: Tetrimino) -> bool:
        return self.matrix.can_place(piece.image, piece.pos + SHIFT_DOWN)

    def drop_row(self, piece: Tetrimino) -> int:
        """Lowest row the piece reaches falling straight down from where it is."""
        y = piece.pos.y
        if not piece.t or not self.matrix.can_place(piece.image, piece.pos):
            return y
        while self.matrix.can_place(piece.image, Point(piece.pos.x, y + 1)):
            y += 1
        return y

    # ---------- Lock / clear ----------
    def lock(self, time: int):
        self.matrix.place(self.active.image, self.active.pos)
        top = min(y for _, y in self.active.cells())
        log.debug("lock %s at %s", self.active.t, self.active.pos)
        if top < MATRIX_HEIGHT - SKYLINE:
            self.phase = Phase.GAME_OVER
            self.ghost = None
            log.info("game over at %d us: score %d, lines %d", time, self.score, self.lines)
            return
        self.clear_rows()
        self.can_hold = True
        self.respawn(self.next)
        self.next = Tetrimino(self.rng.next_piece())

    def clear_rows(self) -> int:
        """Remove full rows, then score them against the last move."""
        cleared = sweep(self.matrix)
        self.lines += cleared
        result = award(self.last_move, cleared, self.level, self.back_to_back)
        self.back_to_back = result.back_to_back
        if result.points > 0:
            self.messages.appendleft(result.message)
            self.score += result.points
            log.debug("%s", result.message)
        self.set_level(min(1 + self.lines // LINES_PER_LEVEL, MAX_LEVEL))
        return cleared

    # ---------- Moves ----------
    def _accept_move(self, kind: Move, time: int):
        # Extended placement: a grounded piece buys more lock delay, a bounded number of times
        if self.lock_time is not None and self.moves_left > 0:
            self.moves_left -= 1
            self.lock_time = max(self.lock_time, time + self.lock_period)
        self.last_move = kind

    def _translate(self, dx: int, time: int):
        pos = self.active.pos + Point(dx, 0)
        if self.matrix.can_place(self.active.image, pos):
            self.active.pos = pos
            self._accept_move(Move.NORMAL, time)

    def _rotate(self, dr: int, time: int) -> bool:
        """Rotate by dr quarter turns with SRS kicks; the piece is untouched on failure."""
        piece = self.active
        old = piece.rot
        piece.rotate(old + dr)
        for k, offset in enumerate(kicks(piece.t, old, piece.rot)):
            pos = piece.pos + offset
            if self.matrix.can_place(piece.image, pos):
                piece.pos = pos
                self._accept_move(self._classify_spin(piece, k), time)
                return True
        piece.rotate(old)
        return False

    def _classify_spin(self, piece: Tetrimino, kick_index: int) -> Move:
        if piece.t != "T":
            return Move.NORMAL
        if kick_index == 4:
            return Move.TSPIN
        front, back = TSPIN_CORNERS[piece.rot]
        n_front = sum(self.matrix.occupied(piece.pos + p) for p in front)
        n_back = sum(self.matrix.occupied(piece.pos + p) for p in back)
        if n_front == 2 and n_back >= 1:
            return Move.TSPIN
        if n_front >= 1 and n_back == 2:
            return Move.MINI_TSPIN
        return Move.NORMAL

    def _hard_drop(self, time: int):
        y = self.drop_row(self.active)
        self.score += HARD_DROP_PER_CELL * (y - self.active.pos.y)
        self.active.pos = Point(self.active.pos.x, y)
        self.lock(time)

    def _hold(self):
        if not self.can_hold:
            return
        self.can_hold = False
        if self.held.t:
            self.held, incoming = Tetrimino(self.active.t), self.held
        else:
            self.held, incoming = Tetrimino(self.active.t), self.next
            self.next = Tetrimino(self.rng.next_piece())
        log.debug("hold %s", self.held.t)
        self.respawn(incoming)

    def _fall(self):
        self.active.pos = self.active.pos + SHIFT_DOWN
        if self.soft_drop_scheduled:
            self.score += SOFT_DROP_PER_CELL
        self.soft_drop_scheduled = self.command.down
        self.fall_time += self.short_fall_period if self.command.down else self.normal_fall_period

    # ---------- Input ----------
    def _shift_keys(self, event: Input, time: int):
        pressed = event.pressed
        if event.command is Command.MOVE_LEFT:
            self.controller.left = self.command.left = pressed
            self.command.right = not pressed and self.controller.right
        else:
            self.controller.right = self.command.right = pressed
            self.command.left = not pressed and self.controller.left
        if self.command.direction:
            self._translate(self.command.direction, time)
            self.repeat_translate_time = time + self.repeat_translate_grace_period
        else:
            self.repeat_translate_time = None

    def _soft_drop_key(self, pressed: bool, time: int):
        self.command.down = pressed
        if pressed:
            self.fall_time = time
            self.soft_drop_scheduled = True
        else:
            # Push the pending soft step back onto the normal schedule
            if self.fall_time is not None:
                self.fall_time += self.normal_fall_period - self.short_fall_period
            self.soft_drop_scheduled = False

    def _handle_input(self, event: Input, time: int):
        cmd = event.command
        if cmd is Command.QUIT:
            if not event.pressed:
                self.alive = False
        elif cmd in (Command.MOVE_LEFT, Command.MOVE_RIGHT):
            self._shift_keys(event, time)
        elif cmd is Command.SOFT_DROP:
            self._soft_drop_key(event.pressed, time)
        elif not event.pressed:
            return
        elif cmd is Command.ROTATE_LEFT:
            self._rotate(-1, time)
        elif cmd is Command.ROTATE_RIGHT:
            self._rotate(1, time)
        elif cmd is Command.HARD_DROP:
            self._hard_drop(time)
        elif cmd is Command.HOLD:
            self._hold()

    def _menu_input(self, inputs: Deque[Input]):
        """Welcome and game-over screens: hard drop advances, quit leaves."""
        while inputs:
            event = inputs.popleft()
            if event.command is Command.HARD_DROP and event.pressed:
                if self.phase is Phase.WELCOME:
                    self.new_game(self.start_level)
                elif self.phase is Phase.GAME_OVER:
                    self.phase = Phase.WELCOME
            elif event.command is Command.QUIT:
                self.alive = False

    # ---------- Time advance ----------
    def _update_support(self, time: int):
        if self.can_fall(self.active):
            self.fall_time = _earliest(self.fall_time, time + self.normal_fall_period)
            self.lock_time = None
        else:
            self.lock_time = _earliest(self.lock_time, time + self.lock_period)
            self.fall_time = None
            self.soft_drop_scheduled = False
        # A new lowest row refills the lock delay budget
        if self.active.pos.y > self.lowest_y:
            self.lowest_y = self.active.pos.y
            self.moves_left = self.max_lock_moves

    def _update_ghost(self):
        ghost = self.active.recolored(GHOST)
        ghost.pos = Point(ghost.pos.x, self.drop_row(self.active))
        self.ghost = ghost if self.active.t and self.can_fit(ghost) else None

    def tic(self, elapsed: int, inputs: Deque[Input]) -> bool:
        """Advance the clock by `elapsed` microseconds and run every event now due.

        `inputs` is drained as its events come due. Returns False once the
        player has quit.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed time must be non-negative, got {elapsed}")
        self.game_time += elapsed

        if self.phase is not Phase.PLAY:
            self._menu_input(inputs)
            return self.alive

        while self.phase is Phase.PLAY and self.alive:
            input_time = inputs[0].frame * self.frame_period if inputs else None
            now = _earliest(self.repeat_translate_time, self.lock_time, self.fall_time, input_time)
            if now is None or now > self.game_time:
                break

            # Ties resolve in this order: repeat, lock, fall, input
            if self.repeat_translate_time is not None and self.repeat_translate_time <= now:
                self._translate(self.command.direction, now)
                self.repeat_translate_time += self.repeat_translate_period
            elif self.lock_time is not None and self.lock_time <= now:
                self.lock(now)
            elif self.fall_time is not None and self.fall_time <= now:
                self._fall()
            else:
                self._handle_input(inputs.popleft(), now)

            if self.phase is not Phase.PLAY:
                break
            self._update_support(now)

        if self.phase is Phase.PLAY:
            self._update_ghost()
        return self.alive

    # ---------- Front-end view ----------
    def snapshot(self) -> Snapshot:
        def copy(p: Tetrimino) -> Tetrimino:
            return Tetrimino(p.t, p.rot, p.pos)

        return Snapshot(
            phase=self.phase,
            matrix=self.matrix.copy(),
            active=copy(self.active),
            next=copy(self.next),
            held=copy(self.held) if self.held.t else None,
            ghost=self.ghost.recolored(GHOST) if self.ghost else None,
            score=self.score,
            level=self.level,
            lines=self.lines,
            messages=tuple(self.messages),
            game_time=self.game_time,
        )

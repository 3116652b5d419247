"""Input events and controller state"""
import enum
from dataclasses import dataclass


class Command(enum.Enum):
    ROTATE_LEFT = "rotate_left"
    ROTATE_RIGHT = "rotate_right"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    HARD_DROP = "hard_drop"
    SOFT_DROP = "soft_drop"
    HOLD = "hold"
    QUIT = "quit"


class KeyState(enum.Enum):
    PRESSED = "pressed"
    RELEASED = "released"


@dataclass(frozen=True)
class Input:
    """One key edge, due at `frame` (times the frame period) on the game clock."""
    command: Command
    state: KeyState
    frame: int

    @property
    def pressed(self) -> bool:
        return self.state is KeyState.PRESSED


@dataclass
class ControllerState:
    """Physical direction keys currently down."""
    left: bool = False
    right: bool = False


@dataclass
class CommandState:
    """Directions the engine is acting on.

    Differs from ControllerState when both directions are held: the most
    recent press wins.
    """
    left: bool = False
    right: bool = False
    down: bool = False

    @property
    def direction(self) -> int:
        return int(self.right) - int(self.left)

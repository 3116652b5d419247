import pygame

from main import parse_args, translate_event
from tetris_input import Command, CommandState, Input, KeyState
from tetris_layout import COLS, ROWS, compute_dims


def test_command_direction():
    assert CommandState().direction == 0
    assert CommandState(left=True).direction == -1
    assert CommandState(right=True).direction == 1


def test_key_events_become_inputs():
    e = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT)
    assert translate_event(e, 3) == Input(Command.MOVE_LEFT, KeyState.PRESSED, 3)
    e = pygame.event.Event(pygame.KEYUP, key=pygame.K_SPACE)
    assert translate_event(e, 4) == Input(Command.HARD_DROP, KeyState.RELEASED, 4)
    e = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F5)
    assert translate_event(e, 4) is None


def test_window_close_quits():
    e = pygame.event.Event(pygame.QUIT)
    assert translate_event(e, 1) == Input(Command.QUIT, KeyState.RELEASED, 1)


def test_cli_defaults():
    args = parse_args([])
    assert args.seed == 0
    assert args.level == 1
    assert not args.verbose
    assert parse_args(["--seed", "9", "--level", "4", "-v"]).level == 4


def test_layout_fits_visible_field():
    d = compute_dims()
    assert (COLS, ROWS) == (10, 20)
    assert d.board_w == COLS * d.cell
    assert d.board_h == ROWS * d.cell
    assert d.board_x > d.held_x + d.held_w - 1
    assert d.total_w == d.panel_x + d.panel_w + d.margin

import argparse
import logging
import sys
from collections import deque

import pygame

from tetris import MAX_LEVEL, Tetris
from tetris_config import CONFIG
from tetris_input import Command, Input, KeyState
from tetris_layout import compute_dims
from tetris_render import RenderAssets

log = logging.getLogger("tetrino")

KEYMAP = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_z: Command.ROTATE_LEFT,
    pygame.K_x: Command.ROTATE_RIGHT,
    pygame.K_c: Command.HOLD,
    pygame.K_q: Command.QUIT,
}


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Falling-block puzzle game on a virtual clock.")
    p.add_argument("--seed", type=int, default=CONFIG["SEED"], help="piece randomizer seed")
    p.add_argument("--level", type=int, default=CONFIG["START_LEVEL"],
                   choices=range(1, MAX_LEVEL + 1), metavar=f"1..{MAX_LEVEL}",
                   help="starting level")
    p.add_argument("--cell-size", type=int, default=CONFIG["CELL_SIZE"], help="cell size in pixels")
    p.add_argument("-v", "--verbose", action="store_true", help="log every piece event")
    return p.parse_args(argv)


def setup_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def recreate_window(dims, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags)


def translate_event(e, frame):
    """pygame key event -> engine Input, or None for keys we don't use."""
    if e.type == pygame.QUIT:
        return Input(Command.QUIT, KeyState.RELEASED, frame)
    if e.type not in (pygame.KEYDOWN, pygame.KEYUP):
        return None
    command = KEYMAP.get(e.key)
    if command is None:
        return None
    state = KeyState.PRESSED if e.type == pygame.KEYDOWN else KeyState.RELEASED
    return Input(command, state, frame)


def run(game: Tetris):
    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.KEYUP])

    dims = compute_dims()
    screen = recreate_window(dims)
    pygame.display.set_caption("Tetrino")
    font = pygame.font.SysFont(None, 22)
    big_font = pygame.font.SysFont(None, 36)
    render = RenderAssets(dims, font, big_font)
    clock = pygame.time.Clock()

    inputs = deque()
    last = pygame.time.get_ticks() * 1000
    while True:
        clock.tick(CONFIG["TARGET_FPS"])
        now = pygame.time.get_ticks() * 1000
        elapsed = min(now - last, CONFIG["ELAPSED_CLAMP_US"])
        last = now

        frame = game.current_frame() + 1
        for e in pygame.event.get():
            event = translate_event(e, frame)
            if event is not None:
                inputs.append(event)

        if not game.tic(elapsed, inputs):
            break

        render.draw(screen, game.snapshot())
        pygame.display.flip()


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)
    CONFIG["SEED"] = args.seed
    CONFIG["START_LEVEL"] = args.level
    CONFIG["CELL_SIZE"] = args.cell_size

    game = Tetris(args.seed)
    try:
        run(game)
    except pygame.error as exc:
        log.error("display error: %s", exc)
        return 1
    finally:
        pygame.quit()
    log.info("bye: score %d, lines %d", game.score, game.lines)
    return 0


if __name__ == '__main__':
    sys.exit(main())

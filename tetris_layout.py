# tetris_layout.py
from dataclasses import dataclass
from tetris_config import CONFIG
from tetris import MATRIX_WIDTH, SKYLINE

COLS, ROWS = MATRIX_WIDTH, SKYLINE


@dataclass
class Dims:
    cell: int
    margin: int
    held_w: int
    panel_w: int
    board_w: int
    board_h: int
    total_w: int
    total_h: int
    held_x: int
    held_y: int
    board_x: int
    board_y: int
    panel_x: int
    panel_y: int

    def preview_cell(self) -> int:
        return max(12, int(self.cell * 0.75))


def compute_dims() -> Dims:
    cell = int(CONFIG["CELL_SIZE"])
    margin = 16
    panel_w = 220
    held_w = max(12, int(cell * 0.75)) * 4 + 24

    board_w = COLS * cell
    board_h = ROWS * cell

    total_w = margin + held_w + margin + board_w + margin + panel_w + margin
    total_h = margin + board_h + margin

    held_x = margin
    held_y = margin
    board_x = held_x + held_w + margin
    board_y = margin
    panel_x = board_x + board_w + margin
    panel_y = margin

    return Dims(
        cell=cell, margin=margin, held_w=held_w, panel_w=panel_w,
        board_w=board_w, board_h=board_h,
        total_w=total_w, total_h=total_h,
        held_x=held_x, held_y=held_y,
        board_x=board_x, board_y=board_y,
        panel_x=panel_x, panel_y=panel_y
    )

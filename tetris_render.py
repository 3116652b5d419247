"""
Rendering helpers for the pygame front-end.

- Pre-render block cell Surfaces per color (solid + ghost outline) and blit them.
- Pre-render static background (grid, held/next frames, panel) once per Dims.
- Cache HUD text surfaces; re-render only when values change.
- Everything is drawn from an engine Snapshot; nothing here touches the engine.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Optional
from tetris_layout import Dims, COLS, ROWS
from tetris import MATRIX_HEIGHT, SKYLINE, Phase, Snapshot
from tetris_piece import Tetrimino

# Colors per tetromino type
COLORS: Dict[str, Tuple[int,int,int]] = {
    "I": (102,224,255),
    "J": (106,119,255),
    "L": (255,158,94),
    "O": (255,224,102),
    "S": (94,224,142),
    "T": (200,119,255),
    "Z": (255,102,119),
    "G": (150,150,170),
}

TEXT = (200,210,240)
DIM_TEXT = (165,175,215)
HIDDEN_ROWS = MATRIX_HEIGHT - SKYLINE
MESSAGES_SHOWN = 5

WELCOME_TEXT = [
    "Ready?",
    "Press space to start",
    "",
    "z      rotate left",
    "x      rotate right",
    "c      hold",
    "←/→    move",
    "↓      soft drop",
    "space  hard drop",
    "q      quit",
]

@dataclass
class HudCache:
    score: int = -1
    level: int = -1
    lines: int = -1
    messages: Tuple[str, ...] = ()
    score_s: Optional[pygame.Surface] = None
    level_s: Optional[pygame.Surface] = None
    lines_s: Optional[pygame.Surface] = None
    message_s: List[pygame.Surface] = field(default_factory=list)
    labels: Optional[list] = None

class RenderAssets:
    """Holds all pre-rendered assets for fast blitting."""
    def __init__(self, dims: Dims, font: pygame.font.Font, big_font: pygame.font.Font):
        self.dims = dims
        self.font = font
        self.big_font = big_font
        self._make_static()
        self._make_cells()
        self.hud = HudCache()

    # ---------- Static background (grid + frames) ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10,13,34))
        grid_col = (40,50,90)
        for x in range(COLS+1):
            X = d.board_x + x*d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(ROWS+1):
            Y = d.board_y + y*d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.board_h)
        pygame.draw.rect(self.bg, (21,25,53), panel_rect)
        pygame.draw.rect(self.bg, (50,60,100), panel_rect, 1)
        # Preview frames for held (left) and next (panel)
        self.pv_cell = d.preview_cell()
        side = self.pv_cell*4 + 12
        self.held_frame = pygame.Rect(d.held_x, d.held_y + 28, side, side)
        self.next_frame = pygame.Rect(d.panel_x + 12, d.panel_y + 40, side, side)
        for frame in (self.held_frame, self.next_frame):
            pygame.draw.rect(self.bg, (15,18,40), frame)
            pygame.draw.rect(self.bg, (55,65,110), frame, 1)

    # ---------- Small cell sprites (solid + ghost outline) ----------
    def _make_cells(self):
        self.cell_surf: Dict[str, pygame.Surface] = {}
        self.ghost_surf: Dict[str, pygame.Surface] = {}
        self.preview_surf: Dict[str, pygame.Surface] = {}
        c = self.dims.cell
        for t, col in COLORS.items():
            s = pygame.Surface((c-2, c-2))
            s.fill(col)
            self.cell_surf[t] = s
            g = pygame.Surface((c-8, c-8), pygame.SRCALPHA)
            pygame.draw.rect(g, col, (0,0,c-8,c-8), 2)
            self.ghost_surf[t] = g
            p = pygame.Surface((self.pv_cell-2, self.pv_cell-2))
            p.fill(col)
            self.preview_surf[t] = p

    # ---------- Board ----------
    def cell_origin(self, bx: int, by: int) -> Tuple[int, int]:
        """Screen position of matrix cell (bx, by); by counts from the matrix top."""
        d = self.dims
        return d.board_x + bx*d.cell, d.board_y + (by - HIDDEN_ROWS)*d.cell

    def draw_matrix(self, screen: pygame.Surface, snap: Snapshot):
        for y in range(HIDDEN_ROWS, MATRIX_HEIGHT):
            for x, t in enumerate(snap.matrix.rows[y]):
                if t:
                    rx, ry = self.cell_origin(x, y)
                    screen.blit(self.cell_surf[t], (rx+1, ry+1))

    def draw_piece(self, screen: pygame.Surface, piece: Tetrimino, ghost: bool = False):
        for bx, by in piece.cells():
            if by < HIDDEN_ROWS:
                continue
            rx, ry = self.cell_origin(bx, by)
            if ghost:
                screen.blit(self.ghost_surf[piece.t], (rx+4, ry+4))
            else:
                screen.blit(self.cell_surf[piece.t], (rx+1, ry+1))

    def draw_preview(self, screen: pygame.Surface, piece: Optional[Tetrimino], frame: pygame.Rect):
        if piece is None or not piece.t:
            return
        cells = list(piece.image.cells())
        xs = [x for x, _, _ in cells]
        ys = [y for _, y, _ in cells]
        w = (max(xs) - min(xs) + 1) * self.pv_cell
        h = (max(ys) - min(ys) + 1) * self.pv_cell
        ox = frame.x + (frame.w - w) // 2
        oy = frame.y + (frame.h - h) // 2
        for x, y, _ in cells:
            rx = ox + (x - min(xs)) * self.pv_cell
            ry = oy + (y - min(ys)) * self.pv_cell
            screen.blit(self.preview_surf[piece.t], (rx+1, ry+1))

    # ---------- HUD / Panel ----------
    def draw_panel_hud(self, screen: pygame.Surface, snap: Snapshot):
        d = self.dims
        f = self.font
        if self.hud.labels is None:
            self.hud.labels = [
                (f.render("Held", True, TEXT), (d.held_x, d.held_y + 6)),
                (f.render("Next", True, TEXT), (d.panel_x + 12, d.panel_y + 14)),
            ]
        if snap.score != self.hud.score:
            self.hud.score = snap.score
            self.hud.score_s = f.render(f"Score: {snap.score}", True, TEXT)
        if snap.level != self.hud.level:
            self.hud.level = snap.level
            self.hud.level_s = f.render(f"Level: {snap.level}", True, TEXT)
        if snap.lines != self.hud.lines:
            self.hud.lines = snap.lines
            self.hud.lines_s = f.render(f"Lines: {snap.lines}", True, TEXT)
        if snap.messages != self.hud.messages:
            self.hud.messages = snap.messages
            self.hud.message_s = [f.render(m, True, DIM_TEXT) for m in snap.messages[:MESSAGES_SHOWN]]

        for surf, pos in self.hud.labels:
            screen.blit(surf, pos)
        y = self.next_frame.bottom + 20
        for surf in (self.hud.score_s, self.hud.level_s, self.hud.lines_s):
            screen.blit(surf, (d.panel_x + 12, y)); y += 24
        y += 12
        for surf in self.hud.message_s:
            screen.blit(surf, (d.panel_x + 12, y)); y += 20

    def draw_banner(self, screen: pygame.Surface, lines: List[str]):
        d = self.dims
        s = pygame.Surface((d.board_w - 16, 24*len(lines) + 32), pygame.SRCALPHA)
        s.fill((20,25,40,230))
        rect = s.get_rect(center=(d.board_x + d.board_w // 2, d.board_y + d.board_h // 2))
        screen.blit(s, rect)
        y = rect.y + 16
        for i, line in enumerate(lines):
            font = self.big_font if i == 0 else self.font
            text = font.render(line, True, (230,240,255))
            screen.blit(text, (rect.x + 16, y)); y += 24

    # ---------- Frame ----------
    def draw(self, screen: pygame.Surface, snap: Snapshot):
        screen.blit(self.bg, (0,0))
        self.draw_matrix(screen, snap)
        if snap.phase is Phase.PLAY:
            if snap.ghost is not None:
                self.draw_piece(screen, Tetrimino(snap.active.t, snap.ghost.rot, snap.ghost.pos), ghost=True)
            self.draw_piece(screen, snap.active)
        if snap.phase is not Phase.WELCOME:
            self.draw_preview(screen, snap.next, self.next_frame)
            self.draw_preview(screen, snap.held, self.held_frame)
        self.draw_panel_hud(screen, snap)
        if snap.phase is Phase.WELCOME:
            self.draw_banner(screen, WELCOME_TEXT)
        elif snap.phase is Phase.GAME_OVER:
            self.draw_banner(screen, ["Game Over", "Press space"])

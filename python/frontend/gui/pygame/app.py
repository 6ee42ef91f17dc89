"""Pygame GUI frontend — tile renderer, HUD, win overlay, victory sound."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pygame

from backend.engine.gameplay import TILE_SIZE, PuzzleEngine
from backend.engine.levelloader import Level
from backend.models.cell import Cell, Direction
from backend.models.grid import Position
from backend.models.highscore import HighScoreEntry, HighScoreManager

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_BLUE = (137, 180, 250)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_PEACH = (250, 179, 135)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
HUD_H = 56
MIN_W = 360
TILE_PAD = 6

_KEY_DIRS: dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}


# ---------------------------------------------------------------------------
# Victory sound
# ---------------------------------------------------------------------------
class _VictoryCue:
    """Plays ``victory.wav`` once per win event, if the file and mixer exist."""

    def __init__(self, path: Path) -> None:
        self._sound: pygame.mixer.Sound | None = None
        if not path.is_file():
            logger.info("No victory sound at %s", path)
            return
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self._sound = pygame.mixer.Sound(str(path))
        except pygame.error as exc:
            logger.warning("Failed to load victory sound %s: %s", path, exc)

    def play(self) -> None:
        if self._sound is not None:
            self._sound.play()


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, level: Level, data_dir: Path, assets_dir: Path) -> None:
        self._engine = PuzzleEngine.from_level(level)
        self._hs = HighScoreManager(data_dir / "highscores.json")

        pygame.init()
        board_w = self._engine.pixel_width
        self._win_w = max(MIN_W, board_w)
        self._win_h = self._engine.pixel_height + HUD_H
        self._ox = (self._win_w - board_w) // 2
        self._surf = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption(f"Sokoban — {level.name}")
        self._clock = pygame.time.Clock()

        self._f_big = pygame.font.SysFont("Helvetica", 48, bold=True)
        self._f_hud = pygame.font.SysFont("Helvetica", 20, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._cue = _VictoryCue(assets_dir / "victory.wav")

    # ── helpers ─────────────────────────────────────────────────────────────

    def _tile_rect(self, pos: Position) -> pygame.Rect:
        return pygame.Rect(
            self._ox + pos.x * TILE_SIZE,
            HUD_H + pos.y * TILE_SIZE,
            TILE_SIZE,
            TILE_SIZE,
        )

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_cell(self, cell: Cell, rect: pygame.Rect) -> None:
        pygame.draw.rect(self._surf, COL_MANTLE, rect)
        if cell is Cell.WALL:
            pygame.draw.rect(self._surf, COL_SURFACE1, rect.inflate(-2, -2), border_radius=4)
            return
        if cell.is_target:
            pygame.draw.circle(
                self._surf, COL_PINK, rect.center, TILE_SIZE // 6, width=3
            )
        if cell.has_crate:
            col = COL_GREEN if cell is Cell.CRATE_ON_TARGET else COL_PEACH
            inner = rect.inflate(-2 * TILE_PAD, -2 * TILE_PAD)
            pygame.draw.rect(self._surf, col, inner, border_radius=6)
            pygame.draw.rect(self._surf, COL_BASE, inner, width=3, border_radius=6)
            pygame.draw.line(self._surf, COL_BASE, inner.topleft, inner.bottomright, 3)
            pygame.draw.line(self._surf, COL_BASE, inner.topright, inner.bottomleft, 3)

    def _draw_player(self, rect: pygame.Rect, facing: Direction) -> None:
        radius = TILE_SIZE // 2 - TILE_PAD
        pygame.draw.circle(self._surf, COL_BLUE, rect.center, radius)
        dx, dy = facing.offset
        eye = (rect.centerx + dx * radius // 2, rect.centery + dy * radius // 2)
        pygame.draw.circle(self._surf, COL_BASE, eye, max(3, radius // 4))

    def _draw_hud(self) -> None:
        engine = self._engine
        pygame.draw.rect(self._surf, COL_SURFACE0, pygame.Rect(0, 0, self._win_w, HUD_H))
        self._surf.blit(
            self._f_hud.render(f"Time {engine.elapsed_time_string}", True, COL_TEXT),
            (10, 6),
        )
        moves = self._f_hud.render(f"Moves {engine.moves}", True, COL_YELLOW)
        self._surf.blit(moves, (self._win_w - moves.get_width() - 10, 6))
        keys = self._f_small.render(
            "Arrows/WASD move   X undo   Y redo   R reset   Esc quit",
            True,
            COL_OVERLAY0,
        )
        self._surf.blit(keys, ((self._win_w - keys.get_width()) // 2, HUD_H - 20))

    def _draw_win(self) -> None:
        shade = pygame.Surface((self._win_w, self._win_h), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 128))
        self._surf.blit(shade, (0, 0))
        lbl = self._f_big.render("You Win!", True, COL_YELLOW)
        self._surf.blit(
            lbl,
            (
                (self._win_w - lbl.get_width()) // 2,
                (self._win_h - lbl.get_height()) // 2,
            ),
        )

    def _draw(self) -> None:
        engine = self._engine
        self._surf.fill(COL_BASE)
        self._draw_hud()
        for pos in engine.grid.positions():
            rect = self._tile_rect(pos)
            self._draw_cell(engine.cell_at(pos), rect)
            if pos == engine.player:
                self._draw_player(rect, engine.facing)
        if engine.is_won:
            self._draw_win()

    # ── event handling ──────────────────────────────────────────────────────

    def _on_key(self, key: int) -> bool:
        engine = self._engine
        if key in _KEY_DIRS:
            engine.move(_KEY_DIRS[key])
        elif key in (pygame.K_x, pygame.K_u):
            engine.undo()
        elif key == pygame.K_y:
            engine.redo()
        elif key == pygame.K_r:
            engine.reset()
        elif key in (pygame.K_ESCAPE, pygame.K_q):
            return False
        return True

    def _check_win(self) -> None:
        engine = self._engine
        if not engine.consume_win_event():
            return
        self._cue.play()
        self._hs.add_score(
            engine.name,
            HighScoreEntry(
                moves=engine.moves,
                time=round(engine.elapsed_time, 2),
                date=datetime.now().strftime("%Y-%m-%d %H:%M"),
            ),
        )

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                if ev.type == pygame.KEYDOWN and not self._on_key(ev.key):
                    running = False
                    break

            self._check_win()
            delta = self._clock.tick(30) / 1000.0
            if not self._engine.is_won:
                self._engine.update_elapsed_time(delta)

            self._draw()
            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    level: Level, data_dir: Path = Path("data"), assets_dir: Path = Path("assets")
) -> None:
    """Launch the Pygame GUI on *level*, loading sounds from *assets_dir*."""
    app = PygameApp(level, data_dir, assets_dir)
    app.run_loop()

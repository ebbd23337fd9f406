"""Simple pygame front-end for the engine.

The window is only a renderer: it turns key presses into logical
:class:`~tetris_ultra.game_state.Action` values, hands them to a
:class:`~tetris_ultra.session.GameSession` and redraws from the session's
snapshots.  Gravity is driven by the session's scheduler on the same asyncio
loop as the window.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

import pygame

from .board import HEIGHT, WIDTH
from .game_state import Action
from .session import GameSession
from .snapshot import GHOST, Snapshot
from .tetromino import Piece

# Size of a single board cell in pixels
CELL_SIZE = 30
# Width of the side panel showing hold/next/stats
PANEL_WIDTH = 6 * CELL_SIZE
PREVIEW_CELL = 20
# Frames per second to run the game loop at
FPS = 60

BACKGROUND = (0, 0, 0)
GRID_LINE = (50, 50, 50)
GHOST_COLOR = (90, 90, 90)
TEXT_COLOR = (230, 230, 230)

KEY_ACTIONS: Dict[int, Action] = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_UP: Action.ROTATE,
    pygame.K_x: Action.ROTATE,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
    pygame.K_LSHIFT: Action.HOLD,
    pygame.K_ESCAPE: Action.TOGGLE_PAUSE,
}

LOGGER = logging.getLogger(__name__)


def action_for_key(key: int, session: GameSession) -> Optional[Action]:
    """Map a pygame key to an engine action.

    Space starts a new game when none is running (before the first game or
    after game over) and hard-drops otherwise.
    """

    state = session.state
    if key == pygame.K_SPACE and (not state.started or state.over):
        return Action.START
    return KEY_ACTIONS.get(key)


def handle_key(event: pygame.event.Event, session: GameSession) -> None:
    """Process keyboard events for piece movement."""

    action = action_for_key(event.key, session)
    if action is not None:
        session.dispatch(action)


def draw_board(screen: pygame.Surface, snapshot: Snapshot) -> None:
    """Render the board, ghost and active piece."""

    for r, row in enumerate(snapshot.grid):
        for c, cell in enumerate(row):
            rect = pygame.Rect(c * CELL_SIZE, r * CELL_SIZE, CELL_SIZE, CELL_SIZE)
            if cell == GHOST:
                pygame.draw.rect(screen, GHOST_COLOR, rect, 2)
            elif cell:
                pygame.draw.rect(screen, pygame.Color(cell), rect)
            pygame.draw.rect(screen, GRID_LINE, rect, 1)


def draw_preview(screen: pygame.Surface, piece: Optional[Piece], left: int, top: int) -> None:
    if piece is None:
        return
    color = pygame.Color(piece.color)
    for r, c in piece.cells():
        rect = pygame.Rect(left + c * PREVIEW_CELL, top + r * PREVIEW_CELL, PREVIEW_CELL, PREVIEW_CELL)
        pygame.draw.rect(screen, color, rect)
        pygame.draw.rect(screen, GRID_LINE, rect, 1)


def draw_panel(screen: pygame.Surface, font: pygame.font.Font, snapshot: Snapshot) -> None:
    """Render hold/next previews, stats and the current overlay message."""

    left = WIDTH * CELL_SIZE + 10
    lines = [
        ("HOLD", 10),
        ("NEXT", 110),
        (f"SCORE {snapshot.score}", 210),
        (f"LEVEL {snapshot.level}", 240),
        (f"LINES {snapshot.lines}", 270),
    ]
    if snapshot.combo > 0:
        lines.append((f"COMBO x{snapshot.combo}!", 300))
    if not snapshot.started:
        lines.append(("SPACE to start", 360))
    elif snapshot.game_over:
        lines.append(("GAME OVER", 360))
        lines.append(("SPACE to restart", 390))
    elif snapshot.paused:
        lines.append(("PAUSED", 360))
    for text, top in lines:
        screen.blit(font.render(text, True, TEXT_COLOR), (left, top))
    draw_preview(screen, snapshot.held, left, 40)
    draw_preview(screen, snapshot.next, left, 140)


class GameRunner:
    """Own the window and pump events until the user closes it."""

    def __init__(self, session: Optional[GameSession] = None) -> None:
        self.session = session or GameSession()
        self._dirty = True
        self.session.subscribe(self._on_change)

    def _on_change(self, _snapshot: Snapshot) -> None:
        self._dirty = True

    async def run(self) -> None:
        pygame.init()
        screen = pygame.display.set_mode((WIDTH * CELL_SIZE + PANEL_WIDTH, HEIGHT * CELL_SIZE))
        pygame.display.set_caption("Tetris Ultra")
        font = pygame.font.Font(None, 28)
        clock = pygame.time.Clock()
        LOGGER.info("Window opened")

        running = True
        try:
            while running:
                clock.tick(FPS)
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        handle_key(event, self.session)

                if self._dirty:
                    self._dirty = False
                    snapshot = self.session.snapshot()
                    screen.fill(BACKGROUND)
                    draw_board(screen, snapshot)
                    draw_panel(screen, font, snapshot)
                    pygame.display.flip()

                # Yield so the gravity timer can fire
                await asyncio.sleep(0)
        finally:
            self.session.close()
            pygame.quit()
            LOGGER.info("Window closed")


def main() -> None:
    asyncio.run(GameRunner().run())


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()

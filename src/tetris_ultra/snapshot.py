"""Read-only views of a game state for renderers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .game_state import GameState
from .tetromino import Piece, Position

# Marker placed in rendered cells covered only by the ghost piece.
GHOST = "ghost"

Cell = Optional[str]


def _overlay(grid: List[List[Cell]], piece: Piece, pos: Position, value: str, *, only_empty: bool) -> None:
    height = len(grid)
    width = len(grid[0]) if grid else 0
    for r, c in piece.blocks(pos):
        if 0 <= r < height and 0 <= c < width:
            if only_empty and grid[r][c] is not None:
                continue
            grid[r][c] = value


def render_grid(state: GameState) -> List[List[Cell]]:
    """Return the board with the ghost and active piece overlaid.

    Each cell is ``None`` when empty, a colour token for locked or active
    cells, or :data:`GHOST`.  The ghost is only drawn on empty cells and only
    when it sits below the active piece; active cells are drawn last.
    """

    board = state.board
    grid: List[List[Cell]] = [
        [board.color_at(r, c) for c in range(board.width)] for r in range(board.height)
    ]
    if state.active is not None:
        if state.ghost.y != state.position.y:
            _overlay(grid, state.active, state.ghost, GHOST, only_empty=True)
        _overlay(grid, state.active, state.position, state.active.color, only_empty=False)
    return grid


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs to draw one frame."""

    grid: Tuple[Tuple[Cell, ...], ...]
    next: Optional[Piece]
    held: Optional[Piece]
    score: int
    level: int
    lines: int
    combo: int
    started: bool
    paused: bool
    game_over: bool


def take_snapshot(state: GameState) -> Snapshot:
    return Snapshot(
        grid=tuple(tuple(row) for row in render_grid(state)),
        next=state.next,
        held=state.held,
        score=state.score,
        level=state.level,
        lines=state.lines,
        combo=state.combo,
        started=state.started,
        paused=state.paused,
        game_over=state.over,
    )


def format_ascii(snapshot: Snapshot) -> str:
    """Return ``snapshot`` as text: ``#`` for blocks, ``:`` for the ghost."""

    lines = [
        "".join(":" if cell == GHOST else "#" if cell else "." for cell in row)
        for row in snapshot.grid
    ]
    lines.append(f"score={snapshot.score} level={snapshot.level} lines={snapshot.lines} combo={snapshot.combo}")
    return "\n".join(lines)

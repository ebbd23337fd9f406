"""Collision and landing helpers shared by every transition."""

from __future__ import annotations

from .board import Board
from .tetromino import Piece, Position


def is_valid(piece: Piece, pos: Position, board: Board) -> bool:
    """Return ``True`` if ``piece`` may occupy ``pos`` on ``board``.

    A placement is rejected when any occupied cell of the shape falls outside
    the board's columns, below the last row, or onto a locked cell.  Cells above
    the top row are always allowed so pieces can sit partially above the
    visible board.  Movement, rotation, ghost projection and spawning all
    validate through this function.
    """

    for row, col in piece.blocks(pos):
        if col < 0 or col >= board.width or row >= board.height:
            return False
        if row >= 0 and not board.is_empty(row, col):
            return False
    return True


def ghost_position(piece: Piece, pos: Position, board: Board) -> Position:
    """Return the lowest position ``piece`` can fall to straight down from ``pos``."""

    y = pos.y
    while is_valid(piece, Position(pos.x, y + 1), board):
        y += 1
    return Position(pos.x, y)

"""Clockwise rotation with a simple shared wall-kick table."""

from __future__ import annotations

from typing import Optional, Tuple

from .board import Board
from .tetromino import Piece, Position, rotate_shape
from .utils import is_valid


# Offsets tried in order after rotating.  The same table is used for every
# piece kind and orientation.
WALL_KICKS: Tuple[Tuple[int, int], ...] = (
    (0, 0),
    (-1, 0),
    (1, 0),
    (0, -1),
    (-2, 0),
    (2, 0),
)


def try_rotate(piece: Piece, pos: Position, board: Board) -> Optional[Tuple[Piece, Position]]:
    """Rotate ``piece`` and return the first kicked placement that fits.

    Returns ``None`` when every offset in :data:`WALL_KICKS` collides.
    """

    rotated = piece.rotated()
    for dx, dy in WALL_KICKS:
        candidate = Position(pos.x + dx, pos.y + dy)
        if is_valid(rotated, candidate, board):
            return rotated, candidate
    return None

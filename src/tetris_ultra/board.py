"""Board representation for the playfield."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .tetromino import TETROMINO_COLORS, Piece, Position, TetrominoType


# Dimensions of the standard board.
WIDTH = 10
HEIGHT = 20

Grid = NDArray[np.uint8]

# Mapping from ``TetrominoType`` to the integer stored in the grid.  ``0``
# represents an empty cell.
PIECE_VALUES = {t: i + 1 for i, t in enumerate(TetrominoType)}
VALUE_PIECES = {v: t for t, v in PIECE_VALUES.items()}


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((HEIGHT, WIDTH), dtype=np.uint8)


class Board:
    """Fixed-size grid of locked cells.

    Placement operations (:meth:`lock_piece`, :meth:`clear_full_rows`) never
    mutate the board they are called on; they return a new board so that game
    states holding the old one stay consistent.
    """

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self, grid: Optional[Grid] = None) -> None:
        if grid is None:
            grid = create_empty_grid()
        grid = np.asarray(grid, dtype=np.uint8)
        if grid.shape != (self.height, self.width):
            raise ValueError(
                f"Board grid must be {self.height}x{self.width}, got {grid.shape}"
            )
        self.grid: Grid = grid

    def copy(self) -> "Board":
        """Return a writable copy, even of a frozen board."""

        return Board(self.grid.copy())

    def freeze(self) -> "Board":
        """Make the grid read-only in place and return ``self``.

        Writing to a frozen board raises ``ValueError`` from numpy.  Placement
        operations still work because they always write to a copy.
        """

        self.grid.flags.writeable = False
        return self

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_empty(self, row: int, col: int) -> bool:
        """Return ``True`` if the cell at ``(row, col)`` is empty.

        Any coordinates outside the board are treated as occupied.
        """

        if 0 <= row < self.height and 0 <= col < self.width:
            return bool(self.grid[row, col] == 0)
        return False

    def color_at(self, row: int, col: int) -> Optional[str]:
        """Return the colour token locked at ``(row, col)`` or ``None``."""

        value = self.get_cell(row, col)
        if value == 0:
            return None
        return TETROMINO_COLORS[VALUE_PIECES[value]]

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row] != 0))

    def lock_piece(self, piece: Piece, pos: Position) -> "Board":
        """Return a new board with ``piece`` written in at ``pos``.

        Cells that would land above row ``0`` are dropped.  The placement is
        assumed to have been validated already.
        """

        board = self.copy()
        coordinates = np.asarray(piece.blocks(pos), dtype=np.int16)
        if coordinates.size == 0:
            return board

        rows, cols = coordinates.T
        visible = rows >= 0
        rows, cols = rows[visible], cols[visible]
        if (
            np.any(rows >= self.height)
            or np.any(cols < 0)
            or np.any(cols >= self.width)
        ):
            raise IndexError("Block out of bounds")

        board.grid[rows, cols] = np.uint8(PIECE_VALUES[piece.kind])
        return board

    def clear_full_rows(self) -> tuple["Board", int]:
        """Remove completed rows and return ``(new_board, cleared)``.

        Remaining rows keep their relative order and empty rows are added at
        the top so the height is unchanged.
        """

        full_rows = np.all(self.grid != 0, axis=1)
        cleared = int(np.count_nonzero(full_rows))
        if not cleared:
            return self.copy(), 0
        remaining = self.grid[~full_rows]
        new_rows = np.zeros((cleared, self.width), dtype=self.grid.dtype)
        return Board(np.vstack((new_rows, remaining))), cleared

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    def __repr__(self) -> str:
        return f"Board(filled={int(np.count_nonzero(self.grid))})"

"""Tetromino catalogue, piece values and piece generators.

Each of the seven piece kinds is described by a boolean occupancy matrix in its
spawn orientation plus a display colour.  Pieces are immutable; rotating one
produces a new :class:`Piece` value (see :mod:`tetris_ultra.rotation`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Protocol, Tuple
import itertools
import random

Shape = Tuple[Tuple[bool, ...], ...]


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"


class Position(NamedTuple):
    """Top-left anchor of a shape's bounding box on the board."""

    x: int
    y: int


def _matrix(*rows: str) -> Shape:
    return tuple(tuple(ch == "#" for ch in row) for row in rows)


# Spawn orientations.  Rows are listed top to bottom.
TETROMINO_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _matrix("####"),
    TetrominoType.O: _matrix("##", "##"),
    TetrominoType.T: _matrix(".#.", "###"),
    TetrominoType.S: _matrix(".##", "##."),
    TetrominoType.Z: _matrix("##.", ".##"),
    TetrominoType.J: _matrix("#..", "###"),
    TetrominoType.L: _matrix("..#", "###"),
}

TETROMINO_COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "#00f0f0",
    TetrominoType.O: "#f0f000",
    TetrominoType.T: "#a000f0",
    TetrominoType.S: "#00f000",
    TetrominoType.Z: "#f00000",
    TetrominoType.J: "#0000f0",
    TetrominoType.L: "#f0a000",
}


def rotate_shape(shape: Shape) -> Shape:
    """Return ``shape`` rotated 90 degrees clockwise.

    The rows are reversed and then transposed, so cell ``(r, c)`` of the
    result is cell ``(R - 1 - c, r)`` of the source where ``R`` is the source
    row count.  Non-square shapes swap their width and height.
    """

    return tuple(tuple(column) for column in zip(*shape[::-1]))


@dataclass(frozen=True)
class Piece:
    """A tetromino in one rotation state."""

    kind: TetrominoType
    shape: Shape
    color: str

    @classmethod
    def of(cls, kind: TetrominoType) -> "Piece":
        """Return ``kind`` in its spawn orientation."""

        kind = TetrominoType(kind)
        return cls(kind=kind, shape=TETROMINO_SHAPES[kind], color=TETROMINO_COLORS[kind])

    @property
    def width(self) -> int:
        return len(self.shape[0]) if self.shape else 0

    @property
    def height(self) -> int:
        return len(self.shape)

    def cells(self) -> List[Tuple[int, int]]:
        """Return the ``(row, col)`` offsets of the occupied cells."""

        return [
            (r, c)
            for r, row in enumerate(self.shape)
            for c, filled in enumerate(row)
            if filled
        ]

    def blocks(self, pos: Position) -> List[Tuple[int, int]]:
        """Return the absolute ``(row, col)`` board coordinates at ``pos``."""

        return [(pos.y + r, pos.x + c) for r, c in self.cells()]

    def rotated(self) -> "Piece":
        """Return this piece turned 90 degrees clockwise."""

        return Piece(kind=self.kind, shape=rotate_shape(self.shape), color=self.color)


def spawn_position(piece: Piece, board_width: int) -> Position:
    """Return the horizontally centred spawn anchor for ``piece``."""

    return Position(board_width // 2 - piece.width // 2, 0)


class PieceSource(Protocol):
    """Anything able to hand out the next piece to play."""

    def next_piece(self) -> Piece:
        ...


class RandomPieceFactory:
    """Draw every piece uniformly at random from the seven kinds.

    The generator owns its own :class:`random.Random` so that a seed makes the
    whole piece sequence reproducible without touching global random state.
    There is no bag: the same kind may repeat any number of times.
    """

    def __init__(self, seed: Optional[int] = None, *, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random(seed)
        self._kinds = list(TetrominoType)

    def seed(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    def next_piece(self) -> Piece:
        return Piece.of(self._rng.choice(self._kinds))


class SequencePieceFactory:
    """Hand out pieces from a fixed, repeating sequence of kinds."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        kinds = [TetrominoType(k) for k in kinds]
        if not kinds:
            raise ValueError("Piece sequence must not be empty")
        self._kinds: Iterator[TetrominoType] = itertools.cycle(kinds)

    def next_piece(self) -> Piece:
        return Piece.of(next(self._kinds))

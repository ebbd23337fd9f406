"""Rule engine for a falling-block puzzle game."""

from .board import Board
from .tetromino import (
    Piece,
    PieceSource,
    Position,
    RandomPieceFactory,
    SequencePieceFactory,
    TetrominoType,
)
from .game_state import Action, GameState, Phase, apply_action, apply_tick, new_game
from .utils import ghost_position, is_valid
from .rotation import WALL_KICKS, try_rotate
from .snapshot import GHOST, Snapshot, render_grid, take_snapshot
from .scheduler import GravityScheduler
from .session import GameSession

__all__ = [
    "Board",
    "Piece",
    "PieceSource",
    "Position",
    "RandomPieceFactory",
    "SequencePieceFactory",
    "TetrominoType",
    "Action",
    "GameState",
    "Phase",
    "apply_action",
    "apply_tick",
    "new_game",
    "ghost_position",
    "is_valid",
    "WALL_KICKS",
    "try_rotate",
    "GHOST",
    "Snapshot",
    "render_grid",
    "take_snapshot",
    "GravityScheduler",
    "GameSession",
]

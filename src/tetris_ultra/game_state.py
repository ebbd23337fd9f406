"""Game state container and the transitions that advance it.

A :class:`GameState` is an immutable snapshot of a whole game.  The module
level functions :func:`new_game`, :func:`apply_action` and :func:`apply_tick`
take a state and return the next one; an action that is not allowed returns
the very same object so callers can cheaply detect a no-op with ``is``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional
import logging

from .board import Board
from .rotation import try_rotate
from .scoring import (
    SOFT_DROP_POINTS,
    gravity_interval_ms,
    hard_drop_score,
    level_for_lines,
    line_clear_score,
)
from .tetromino import Piece, PieceSource, Position, spawn_position
from .utils import ghost_position, is_valid


LOGGER = logging.getLogger(__name__)


class Phase(str, Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Action(str, Enum):
    """Logical player inputs understood by the engine."""

    START = "start"
    TOGGLE_PAUSE = "toggle_pause"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SOFT_DROP = "soft_drop"
    ROTATE = "rotate"
    HARD_DROP = "hard_drop"
    HOLD = "hold"


@dataclass(frozen=True)
class GameState:
    """Immutable state for a game session."""

    board: Board = field(default_factory=Board)
    active: Optional[Piece] = None
    position: Position = Position(0, 0)
    next: Optional[Piece] = None
    held: Optional[Piece] = None
    can_hold: bool = True
    ghost: Position = Position(0, 0)
    score: int = 0
    level: int = 1
    lines: int = 0
    combo: int = 0
    speed_ms: int = gravity_interval_ms(1)
    phase: Phase = Phase.NOT_STARTED

    @property
    def started(self) -> bool:
        return self.phase is not Phase.NOT_STARTED

    @property
    def paused(self) -> bool:
        return self.phase is Phase.PAUSED

    @property
    def over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def playing(self) -> bool:
        return self.phase is Phase.PLAYING


def new_game(pieces: PieceSource) -> GameState:
    """Return a fresh playing state with the first piece spawned."""

    state = GameState(next=pieces.next_piece(), phase=Phase.PLAYING)
    LOGGER.info("Game started")
    return spawn_next(state, pieces)


def spawn_next(state: GameState, pieces: PieceSource) -> GameState:
    """Bring the queued piece into play at the top centre of the board.

    If the piece does not fit at its spawn position the game is over and no
    piece becomes active.
    """

    piece = state.next or pieces.next_piece()
    pos = spawn_position(piece, state.board.width)
    if not is_valid(piece, pos, state.board):
        LOGGER.info("Game over: score=%d level=%d lines=%d", state.score, state.level, state.lines)
        return replace(
            state,
            active=None,
            next=piece,
            ghost=state.position,
            phase=Phase.GAME_OVER,
        )
    return replace(
        state,
        active=piece,
        position=pos,
        next=pieces.next_piece(),
        ghost=ghost_position(piece, pos, state.board),
        can_hold=True,
    )


def _move_to(state: GameState, active: Piece, pos: Position, score: int = 0) -> GameState:
    return replace(
        state,
        active=active,
        position=pos,
        ghost=ghost_position(active, pos, state.board),
        score=state.score + score,
    )


def _translate(state: GameState, dx: int, dy: int, score: int = 0) -> Optional[GameState]:
    pos = Position(state.position.x + dx, state.position.y + dy)
    if not is_valid(state.active, pos, state.board):
        return None
    return _move_to(state, state.active, pos, score)


def lock_active(state: GameState, pieces: PieceSource) -> GameState:
    """Lock the active piece, clear lines, score them and spawn the next piece."""

    board = state.board.lock_piece(state.active, state.position)
    board, cleared = board.clear_full_rows()
    LOGGER.debug("Locked %s at %s, cleared %d", state.active.kind.value, tuple(state.position), cleared)

    if cleared:
        combo = state.combo + 1
        lines = state.lines + cleared
        level = level_for_lines(lines)
        score = state.score + line_clear_score(cleared, combo, state.level)
        if level != state.level:
            LOGGER.info("Level up: %d -> %d", state.level, level)
        state = replace(
            state,
            board=board,
            combo=combo,
            lines=lines,
            level=level,
            score=score,
            speed_ms=gravity_interval_ms(level),
        )
    else:
        state = replace(state, board=board, combo=0)
    return spawn_next(state, pieces)


def hold(state: GameState, pieces: PieceSource) -> GameState:
    """Swap the active piece with the held one.

    Only one hold is allowed per piece until it locks.  With nothing held yet
    the active piece is set aside and the queued piece spawns; otherwise the
    held piece returns at the spawn position, provided it fits there.
    """

    if state.active is None or not state.can_hold or not state.playing:
        return state

    if state.held is None:
        state = spawn_next(replace(state, held=state.active), pieces)
    else:
        incoming = state.held
        pos = spawn_position(incoming, state.board.width)
        if not is_valid(incoming, pos, state.board):
            return state
        state = replace(state, held=state.active)
        state = _move_to(state, incoming, pos)

    if state.over:
        return state
    return replace(state, can_hold=False)


def hard_drop(state: GameState, pieces: PieceSource) -> GameState:
    rows = 0
    while is_valid(state.active, Position(state.position.x, state.position.y + rows + 1), state.board):
        rows += 1
    landed = Position(state.position.x, state.position.y + rows)
    state = replace(state, position=landed, ghost=landed, score=state.score + hard_drop_score(rows))
    return lock_active(state, pieces)


def toggle_pause(state: GameState) -> GameState:
    if state.phase is Phase.PLAYING:
        LOGGER.info("Paused")
        return replace(state, phase=Phase.PAUSED)
    if state.phase is Phase.PAUSED:
        LOGGER.info("Resumed")
        return replace(state, phase=Phase.PLAYING)
    return state


def apply_action(state: GameState, action: Action, pieces: PieceSource) -> GameState:
    """Return the state after the player performs ``action``.

    Raises:
        ValueError: If ``action`` is not a known :class:`Action`.
    """

    action = Action(action)
    if action is Action.START:
        return new_game(pieces)
    if action is Action.TOGGLE_PAUSE:
        return toggle_pause(state)
    if not state.playing or state.active is None:
        return state

    if action is Action.MOVE_LEFT:
        return _translate(state, -1, 0) or state
    if action is Action.MOVE_RIGHT:
        return _translate(state, 1, 0) or state
    if action is Action.SOFT_DROP:
        moved = _translate(state, 0, 1, SOFT_DROP_POINTS)
        return moved if moved is not None else lock_active(state, pieces)
    if action is Action.ROTATE:
        result = try_rotate(state.active, state.position, state.board)
        if result is None:
            return state
        return _move_to(state, *result)
    if action is Action.HARD_DROP:
        return hard_drop(state, pieces)
    return hold(state, pieces)


def apply_tick(state: GameState, pieces: PieceSource) -> GameState:
    """Advance gravity by one row, locking the piece when it cannot fall."""

    if not state.playing or state.active is None:
        return state
    moved = _translate(state, 0, 1)
    return moved if moved is not None else lock_active(state, pieces)

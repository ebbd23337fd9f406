from __future__ import annotations

from dataclasses import replace
import random

import pytest

from tetris_ultra.board import Board
from tetris_ultra.game_state import (
    Action,
    GameState,
    Phase,
    apply_action,
    apply_tick,
    new_game,
)
from tetris_ultra.scoring import gravity_interval_ms
from tetris_ultra.tetromino import (
    Piece,
    Position,
    RandomPieceFactory,
    SequencePieceFactory,
    TetrominoType,
)
from tetris_ultra.utils import is_valid

I, O, T = TetrominoType.I, TetrominoType.O, TetrominoType.T


def _start(*kinds: TetrominoType):
    pieces = SequencePieceFactory(kinds)
    return new_game(pieces), pieces


def _board_with_gaps(rows, gap_cols=(3, 4, 5, 6)) -> Board:
    board = Board()
    for row in rows:
        for col in range(board.width):
            if col not in gap_cols:
                board.set_cell(row, col, 1)
    return board


def test_new_game_spawns_centred_piece():
    state, _ = _start(I, O)
    assert state.phase is Phase.PLAYING
    assert state.started and not state.paused and not state.over
    assert state.active.kind is I
    assert state.position == Position(3, 0)
    assert state.next.kind is O
    assert state.ghost == Position(3, 19)
    assert (state.score, state.level, state.lines, state.combo) == (0, 1, 0, 0)
    assert state.speed_ms == 1000
    assert state.can_hold


def test_default_state_is_not_started():
    state = GameState()
    assert not state.started
    assert state.active is None


def test_move_left_right_and_walls():
    state, pieces = _start(O)
    left = apply_action(state, Action.MOVE_LEFT, pieces)
    assert left.position == Position(3, 0)
    assert left.ghost == Position(3, 18)

    at_wall = replace(state, position=Position(8, 0))
    assert apply_action(at_wall, Action.MOVE_RIGHT, pieces) is at_wall


def test_soft_drop_awards_point_but_gravity_does_not():
    state, pieces = _start(T)
    state = apply_action(state, Action.SOFT_DROP, pieces)
    assert state.position == Position(4, 1)
    assert state.score == 1

    state = apply_tick(state, pieces)
    assert state.position == Position(4, 2)
    assert state.score == 1


def test_soft_drop_into_floor_locks_without_point():
    state, pieces = _start(T, O)
    resting = replace(state, position=Position(4, 18))
    state = apply_action(resting, Action.SOFT_DROP, pieces)
    assert state.score == 0
    assert state.board.get_cell(19, 4) != 0
    assert state.active.kind is O
    assert state.position == Position(4, 0)


def test_hard_drop_awards_two_per_row_and_locks():
    state, pieces = _start(O, T)
    state = apply_action(state, Action.HARD_DROP, pieces)
    assert state.score == 36
    for row, col in ((18, 4), (18, 5), (19, 4), (19, 5)):
        assert state.board.get_cell(row, col) != 0
    assert state.active.kind is T
    assert state.combo == 0


def test_gravity_tick_locks_resting_piece():
    state, pieces = _start(O, T)
    state = replace(state, position=Position(4, 18))
    state = apply_tick(state, pieces)
    assert state.board.get_cell(19, 5) != 0
    assert state.active.kind is T
    assert state.can_hold


def test_combo_counts_consecutive_clearing_locks():
    state, pieces = _start(I, I, O)
    state = replace(state, board=_board_with_gaps((18, 19)))

    state = apply_action(state, Action.HARD_DROP, pieces)
    assert (state.lines, state.combo, state.score) == (1, 1, 38 + 150)

    state = apply_action(state, Action.HARD_DROP, pieces)
    assert (state.lines, state.combo, state.score) == (2, 2, 188 + 38 + 200)

    state = apply_action(state, Action.HARD_DROP, pieces)
    assert state.combo == 0
    assert state.score == 426 + 36
    assert state.lines == 2


def test_combo_grows_by_one_per_lock_not_per_line():
    state, pieces = _start(O, O)
    state = replace(state, board=_board_with_gaps((18, 19), gap_cols=(4, 5)))

    state = apply_action(state, Action.HARD_DROP, pieces)
    assert (state.lines, state.combo, state.score) == (2, 1, 36 + 350)

    state = replace(state, board=_board_with_gaps((18, 19), gap_cols=(4, 5)))
    state = apply_action(state, Action.HARD_DROP, pieces)
    assert state.lines == 4
    assert state.combo == 2
    assert state.score == 386 + 36 + (300 + 2 * 50)


def test_tenth_line_levels_up_and_speeds_gravity():
    state, pieces = _start(I, O)
    state = replace(state, board=_board_with_gaps((19,)), lines=9)
    state = apply_action(state, Action.HARD_DROP, pieces)
    assert state.lines == 10
    assert state.level == 2
    assert state.speed_ms == 900
    # Points use the level in force before the clear.
    assert state.score == 38 + 150


def test_line_points_multiplied_by_pre_clear_level():
    state, pieces = _start(I, O)
    state = replace(
        state,
        board=_board_with_gaps((19,)),
        lines=19,
        level=2,
        speed_ms=gravity_interval_ms(2),
    )
    state = apply_action(state, Action.HARD_DROP, pieces)
    assert state.score == 38 + 150 * 2
    assert state.level == 3
    assert state.speed_ms == 800


def test_rotate_action_updates_piece_and_ghost():
    state, pieces = _start(T)
    rotated = apply_action(state, Action.ROTATE, pieces)
    assert rotated.active.shape == Piece.of(T).rotated().shape
    assert rotated.ghost.x == rotated.position.x
    assert rotated.ghost == Position(4, 17)


def test_blocked_spawn_ends_game():
    state, pieces = _start(I, O)
    board = Board()
    board.set_cell(0, 4, 1)
    state = replace(state, board=board, position=Position(0, 19))

    state = apply_tick(state, pieces)

    assert state.phase is Phase.GAME_OVER
    assert state.over
    assert state.active is None
    assert state.board.get_cell(19, 0) != 0
    assert apply_tick(state, pieces) is state
    assert apply_action(state, Action.MOVE_LEFT, pieces) is state
    assert apply_action(state, Action.TOGGLE_PAUSE, pieces) is state


def test_start_after_game_over_resets_everything():
    state, pieces = _start(I, O)
    over = replace(state, phase=Phase.GAME_OVER, active=None, score=500, lines=12, level=2)
    fresh = apply_action(over, Action.START, pieces)
    assert fresh.phase is Phase.PLAYING
    assert (fresh.score, fresh.lines, fresh.level, fresh.combo) == (0, 0, 1, 0)
    assert fresh.held is None
    assert not fresh.board.grid.any()


def test_hold_only_once_per_piece():
    state, pieces = _start(T, O, I)
    held = apply_action(state, Action.HOLD, pieces)
    assert held.held.kind is T
    assert held.active.kind is O
    assert held.position == Position(4, 0)
    assert held.next.kind is I
    assert not held.can_hold

    assert apply_action(held, Action.HOLD, pieces) is held


def test_hold_swaps_after_lock():
    state, pieces = _start(T, O, I)
    state = apply_action(state, Action.HOLD, pieces)
    state = apply_action(state, Action.HARD_DROP, pieces)
    assert state.can_hold
    assert state.active.kind is I

    swapped = apply_action(state, Action.HOLD, pieces)
    assert swapped.active.kind is T
    assert swapped.held.kind is I
    assert swapped.position == Position(4, 0)
    assert swapped.next is state.next
    assert swapped.ghost == Position(4, 16)
    assert not swapped.can_hold


def test_hold_swap_rejected_when_held_piece_does_not_fit():
    state, pieces = _start(I, O)
    board = Board()
    board.set_cell(1, 5, 1)
    state = replace(state, board=board, held=Piece.of(T), position=Position(0, 10))
    assert apply_action(state, Action.HOLD, pieces) is state


def test_pause_blocks_movement_and_gravity():
    state, pieces = _start(T)
    paused = apply_action(state, Action.TOGGLE_PAUSE, pieces)
    assert paused.paused
    assert apply_action(paused, Action.MOVE_LEFT, pieces) is paused
    assert apply_action(paused, Action.HOLD, pieces) is paused
    assert apply_tick(paused, pieces) is paused
    resumed = apply_action(paused, Action.TOGGLE_PAUSE, pieces)
    assert resumed.playing


def test_not_started_ignores_everything_but_start():
    pieces = SequencePieceFactory([T])
    state = GameState()
    for action in Action:
        if action is Action.START:
            continue
        assert apply_action(state, action, pieces) is state
    assert apply_tick(state, pieces) is state


def test_unknown_action_raises():
    state, pieces = _start(T)
    with pytest.raises(ValueError):
        apply_action(state, "teleport", pieces)


def test_invariants_hold_during_random_play():
    pieces = RandomPieceFactory(seed=3)
    rng = random.Random(3)
    moves = [a for a in Action if a not in (Action.START, Action.TOGGLE_PAUSE)]
    state = new_game(pieces)
    for step in range(600):
        if state.over:
            state = apply_action(state, Action.START, pieces)
        if step % 3 == 0:
            state = apply_tick(state, pieces)
        else:
            state = apply_action(state, rng.choice(moves), pieces)

        assert state.board.grid.shape == (20, 10)
        assert state.level == state.lines // 10 + 1
        assert state.speed_ms == gravity_interval_ms(state.level)
        if not state.over:
            assert state.active is not None
            assert is_valid(state.active, state.position, state.board)
            assert state.ghost.x == state.position.x
            assert state.ghost.y >= state.position.y
            assert is_valid(state.active, state.ghost, state.board)
            assert not is_valid(
                state.active, Position(state.ghost.x, state.ghost.y + 1), state.board
            )
        else:
            assert state.active is None

"""Session coordinator tying the game state to the gravity timer and renderers."""

from __future__ import annotations

from typing import Callable, List, Optional
import logging

from .game_state import Action, GameState, apply_action, apply_tick
from .scheduler import GravityScheduler
from .snapshot import Snapshot, take_snapshot
from .tetromino import PieceSource, RandomPieceFactory


LOGGER = logging.getLogger(__name__)

Listener = Callable[[Snapshot], None]


class GameSession:
    """Own one game: its state, its piece source and its gravity timer.

    Every player action and every gravity tick produces a complete new
    :class:`GameState` which replaces the current one in a single assignment.
    The timer is then synchronised with the new state (armed while playing,
    re-armed when the speed changes, stopped otherwise) and listeners receive
    a :class:`Snapshot` of the committed state.
    """

    def __init__(
        self,
        pieces: Optional[PieceSource] = None,
        *,
        seed: Optional[int] = None,
        scheduler_factory: Callable[[Callable[[], None]], GravityScheduler] = GravityScheduler,
    ) -> None:
        self._pieces = pieces or RandomPieceFactory(seed)
        self._state = GameState()
        self._state.board.freeze()
        self._scheduler = scheduler_factory(self.tick)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GameState:
        """The committed state.  Its board is frozen, so it is safe to share."""

        return self._state

    @property
    def scheduler(self) -> GravityScheduler:
        return self._scheduler

    def snapshot(self) -> Snapshot:
        return take_snapshot(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> GameState:
        """Apply a player action and return the resulting state."""

        return self._commit(apply_action(self._state, action, self._pieces))

    def tick(self) -> GameState:
        """Apply one gravity step; called by the scheduler."""

        return self._commit(apply_tick(self._state, self._pieces))

    def close(self) -> None:
        self._scheduler.stop()

    def _commit(self, new: GameState) -> GameState:
        old = self._state
        if new is old:
            return old
        new.board.freeze()
        self._state = new
        self._sync_timer(old, new)
        snapshot = take_snapshot(new)
        for listener in list(self._listeners):
            listener(snapshot)
        return new

    def _sync_timer(self, old: GameState, new: GameState) -> None:
        if not new.playing:
            if self._scheduler.running:
                self._scheduler.stop()
            return
        if (
            not old.playing
            or not self._scheduler.running
            or self._scheduler.period_ms != new.speed_ms
        ):
            LOGGER.debug("Re-arming gravity at %d ms", new.speed_ms)
            self._scheduler.start(new.speed_ms)

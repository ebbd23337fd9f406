"""Simple ASCII demo for the engine.

Run with: `python -m tetris_ultra`

By default this prints a single frame composed of the board, the ghost and the
active piece.  ``--drops N`` hard-drops the first N pieces headlessly before
printing, and ``--pygame`` opens the playable window instead.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from . import Action, RandomPieceFactory, apply_action, new_game
from .snapshot import format_ascii, take_snapshot


LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="Seed for the piece generator.")
    parser.add_argument("--drops", type=int, default=0, help="Hard-drop this many pieces before printing.")
    parser.add_argument("--pygame", action="store_true", help="Open the pygame window and play.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def run_ascii(seed: int | None, drops: int) -> str:
    pieces = RandomPieceFactory(seed)
    state = new_game(pieces)
    for dropped in range(max(0, drops)):
        if state.over:
            LOGGER.info("Stopped after %d of %d drops", dropped, drops)
            break
        state = apply_action(state, Action.HARD_DROP, pieces)
    return format_ascii(take_snapshot(state))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s")

    if args.pygame:
        from .run_pygame import GameRunner
        from .session import GameSession

        asyncio.run(GameRunner(GameSession(seed=args.seed)).run())
        return

    print(run_ascii(args.seed, args.drops))


if __name__ == "__main__":
    main()

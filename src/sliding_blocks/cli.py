from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from sliding_blocks.game import Board, BoardError, BoardState, Randomizer, RandomizerConfig
from sliding_blocks.game.records import to_record
from sliding_blocks.layouts import LAYOUTS, build_board, parse_block
from sliding_blocks.solver import Solver, SolverConfig

logger = logging.getLogger(__name__)

_GLYPHS = {0: "·", 1: "o", 2: "=", 3: "|", 4: "#"}


def format_board(board: Board) -> str:
    grid = board.variant_grid()
    return "\n".join("".join(_GLYPHS[int(v)] for v in row) for row in grid)


def _board_from_args(args: argparse.Namespace) -> Board:
    if args.blocks:
        return build_board([parse_block(text) for text in args.blocks])
    return build_board(LAYOUTS[args.layout])


def cmd_solve(args: argparse.Namespace) -> int:
    board = _board_from_args(args)
    print(format_board(board))
    if board.state != BoardState.READY_TO_SOLVE:
        print("Board is not ready to solve", file=sys.stderr)
        return 2
    result = Solver(SolverConfig(max_states=args.max_states)).solve(board)
    if not result.solved:
        print(f"Unable to solve ({result.outcome.value}, {result.explored} states explored)")
        return 1
    print(f"Solved in {len(result.moves)} moves ({result.explored} states explored)")
    for i, move in enumerate(result.moves, start=1):
        print(f"{i:4d}: block {move.block_idx} {move.step.name.lower()}")
    return 0


def cmd_random(args: argparse.Namespace) -> int:
    board = Board()
    Randomizer(RandomizerConfig(seed=args.seed)).populate(board)
    print(format_board(board))
    print(json.dumps(to_record(board), indent=2))
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    from sliding_blocks.visualization.play import run

    run(_board_from_args(args) if (args.blocks or args.layout) else None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sliding-blocks", description="Build and solve sliding-block puzzles")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Find the shortest solution of a board")
    solve.add_argument("--layout", choices=sorted(LAYOUTS), default="easy")
    solve.add_argument("--blocks", nargs="+", metavar="V@R,C",
                       help="Explicit blocks, e.g. 4@0,1 1@4,0 (overrides --layout)")
    solve.add_argument("--max-states", type=int, default=SolverConfig.max_states)
    solve.set_defaults(func=cmd_solve)

    rand = sub.add_parser("random", help="Generate a random board")
    rand.add_argument("--seed", type=int, default=None)
    rand.set_defaults(func=cmd_random)

    play = sub.add_parser("play", help="Open the interactive viewer")
    play.add_argument("--layout", choices=sorted(LAYOUTS), default=None)
    play.add_argument("--blocks", nargs="+", metavar="V@R,C")
    play.set_defaults(func=cmd_play)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except BoardError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

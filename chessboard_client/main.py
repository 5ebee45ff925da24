"""
Terminal host for the session controller.

    python -m chessboard_client.main watch --seconds 30      # AI vs AI, print every new board
    python -m chessboard_client.main render board.json       # print a board snapshot from JSON
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from chessboard_client.api.models import AiVsAi
from chessboard_client.board.render import render_board
from chessboard_client.board.snapshot import BoardSnapshot
from chessboard_client.core.config import ClientConfig
from chessboard_client.core.shared_types import AiEngine
from chessboard_client.services.session_controller import GameSessionController

logger = logging.getLogger(__name__)


def _print_view(controller: GameSessionController) -> None:
    state = controller.game_state
    header = (
        f"turn {state.turn}, {state.current_player.lower()} to move"
        if state is not None
        else str(controller.phase)
    )
    if controller.last_error:
        header += f"  [{controller.last_error}]"
    print(header)
    print(render_board(controller.view()))
    print()


async def watch(config: ClientConfig, mode: AiVsAi, seconds: Optional[float]) -> None:
    """Let two AIs play and print the board whenever the turn changes."""
    controller = GameSessionController.from_config(config)
    last_turn: list[Optional[int]] = [None]

    def on_change(ctrl: GameSessionController) -> None:
        turn = ctrl.game_state.turn if ctrl.game_state is not None else None
        if turn != last_turn[0] or ctrl.last_error:
            last_turn[0] = turn
            _print_view(ctrl)

    controller.subscribe(on_change)
    controller.start(mode)
    try:
        if seconds is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(seconds)
    finally:
        await controller.close()


def render(path: str) -> None:
    """Same as the development page: paste an engine board representation, look at it."""
    if path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as file:
            raw = file.read()
    print(render_board(BoardSnapshot.model_validate(json.loads(raw))))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Chessboard client for the remote chess engine")
    subcommands = parser.add_subparsers(dest="command", required=True)

    watch_parser = subcommands.add_parser("watch", help="watch an AI vs AI game")
    watch_parser.add_argument("--seconds", type=float, default=None, help="stop after this many seconds")
    watch_parser.add_argument("--engine-a", type=AiEngine, default=AiEngine.MINIMAX, choices=list(AiEngine))
    watch_parser.add_argument("--engine-b", type=AiEngine, default=AiEngine.MINIMAX, choices=list(AiEngine))
    watch_parser.add_argument("--depth-a", type=int, default=3)
    watch_parser.add_argument("--depth-b", type=int, default=3)

    render_parser = subcommands.add_parser("render", help="print a board snapshot given as JSON")
    render_parser.add_argument("path", help="JSON file, or '-' for stdin")

    args = parser.parse_args(argv)
    config = ClientConfig.from_env()
    logging.basicConfig(level=config.log_level)

    if args.command == "render":
        render(args.path)
        return

    mode = AiVsAi(
        engine_a=args.engine_a,
        engine_b=args.engine_b,
        depth_a=args.depth_a,
        depth_b=args.depth_b,
    )
    try:
        asyncio.run(watch(config, mode, args.seconds))
    except KeyboardInterrupt:
        logger.info("Stopped by user")


if __name__ == "__main__":
    main()

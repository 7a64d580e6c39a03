from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

from ataxx.config import CONFIG, Config, load_config
from ataxx.core.board import Board, IllegalMoveError
from ataxx.core.types import Outcome, PieceColor, color_from_name, move_from_text, str_to_square
from ataxx.search.driver import decide

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  new              start a new game (red manual, blue auto)
  block CR         block square CR and its reflections, e.g. block c3
  auto COLOR       let the engine play COLOR (red or blue)
  manual COLOR     play COLOR by hand
  dump             print the board
  help             print this message
  quit             leave
  C0R0-C1R1        move a piece, e.g. a7-b6
  -                pass (only when no move is possible)"""

_RESULT_TEXT = {
    Outcome.RED_WINS: "Red wins.",
    Outcome.BLUE_WINS: "Blue wins.",
    Outcome.TIE: "Draw.",
}


def _default_players(config: Config) -> Dict[PieceColor, bool]:
    return {
        PieceColor.RED: config.game.red == "auto",
        PieceColor.BLUE: config.game.blue == "auto",
    }


class TextSession:
    """One game driven by text commands; output goes through SEND."""

    def __init__(self, send: Callable[[str], None], config: Config = CONFIG) -> None:
        self.send = send
        self.config = config
        self.board = Board.from_startpos()
        self.auto = _default_players(config)
        self.reported = False

    def error(self, reason: str) -> None:
        logger.debug("rejected: %s", reason)
        self.send(f"error: {reason}")

    def handle(self, line: str) -> bool:
        """Process one command line. Returns False once the session should end."""
        line = line.strip()
        if not line or line.startswith("#"):
            return True

        tokens = line.split()
        cmd, args = tokens[0].lower(), tokens[1:]

        if cmd == "quit":
            return False

        if cmd == "new":
            self.board = Board.from_startpos()
            self.auto = _default_players(self.config)
            self.reported = False

        elif cmd == "block":
            self._handle_block(args)

        elif cmd in ("auto", "manual"):
            self._handle_player(cmd, args)

        elif cmd == "dump":
            self.send(self.board.dump())

        elif cmd == "help":
            self.send(HELP_TEXT)

        else:
            self._handle_move(line)

        self.advance()
        return True

    def _handle_block(self, args: List[str]) -> None:
        if len(args) != 1:
            self.error("usage: block CR")
            return
        try:
            self.board.set_block(str_to_square(args[0].lower()))
        except ValueError as exc:
            self.error(str(exc))

    def _handle_player(self, cmd: str, args: List[str]) -> None:
        if len(args) != 1:
            self.error(f"usage: {cmd} COLOR")
            return
        try:
            color = color_from_name(args[0])
        except ValueError as exc:
            self.error(str(exc))
            return
        self.auto[color] = cmd == "auto"

    def _handle_move(self, text: str) -> None:
        move = move_from_text(text)
        if move is None:
            self.error(f"unknown command: {text!r}")
            return
        try:
            self.board.play(move)
        except IllegalMoveError as exc:
            self.error(str(exc))

    def advance(self) -> None:
        """Let the engine move while it is on turn, and report a finished game once."""
        while not self.reported:
            outcome = self.board.outcome()
            if outcome != Outcome.IN_PROGRESS:
                self.send(_RESULT_TEXT[outcome])
                self.reported = True
                return

            side = self.board.side_to_move
            if not self.auto[side]:
                return

            move = decide(
                self.board,
                side,
                depth=self.config.search.depth,
                alternate=self.config.search.alternate_sense,
            )
            self.board.make_move(move)
            if move.is_pass:
                self.send(f"{side.display()} passes.")
            else:
                self.send(f"{side.display()} moves {move.text()}.")


def text_loop(
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    config: Config = CONFIG,
) -> None:
    def send(line: str) -> None:
        stdout.write(line + "\n")
        stdout.flush()

    session = TextSession(send, config)
    session.advance()
    for raw in stdin:
        if not session.handle(raw):
            break


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play Ataxx against the engine from the terminal.")
    parser.add_argument("--config", help="TOML configuration file")
    parser.add_argument("--depth", type=int, help="search depth (overrides the configuration)")
    parser.add_argument(
        "--alternate-sense",
        action="store_true",
        help="use textbook alternating alpha-beta instead of the classic search",
    )
    parser.add_argument("--log-level", help="logging level, e.g. INFO or DEBUG")
    args = parser.parse_args(argv)

    # CLI overrides apply to a private copy, not the shared CONFIG
    config = Config.load_from_toml(args.config) if args.config else load_config()
    if args.depth is not None:
        config.search.depth = args.depth
    if args.alternate_sense:
        config.search.alternate_sense = True

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    text_loop(sys.stdin, sys.stdout, config)


if __name__ == "__main__":
    main()

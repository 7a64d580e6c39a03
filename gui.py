import logging
import sys
from typing import Dict, Optional, Tuple

import pygame

from ataxx.config import CONFIG, Config
from ataxx.core.board import Board, IllegalMoveError
from ataxx.core.types import (
    PASS,
    SIDE,
    Move,
    Outcome,
    PieceColor,
    on_board,
    square_index,
    square_to_str,
)
from ataxx.search.driver import decide


RED_COLOR = (220, 30, 30)
BLUE_COLOR = (30, 60, 220)
LINE_COLOR = (0, 0, 0)
BLANK_COLOR = (255, 255, 255)
SELECTED_COLOR = (150, 150, 150)
LAST_MOVE_COLOR = (225, 225, 170)
BLOCK_COLOR = (0, 0, 0)

RESULT_TEXT = {
    Outcome.RED_WINS: "Red wins.",
    Outcome.BLUE_WINS: "Blue wins.",
    Outcome.TIE: "Draw.",
}

# --------------------------------------------------------------------
# Utility: pixel <-> square
# --------------------------------------------------------------------

def square_at(x: int, y: int, square_size: int) -> Optional[int]:
    """
    Square under pixel (x, y), or None off the board.
    Row 7 is drawn at the top, column a on the left.
    """
    if x < 0 or y < 0:
        return None
    col = x // square_size
    row = SIDE - 1 - y // square_size
    if not on_board(col, row):
        return None
    return square_index(col, row)


def square_origin(sq: int, square_size: int) -> Tuple[int, int]:
    """Top-left pixel of square SQ."""
    row, col = divmod(sq, SIDE)
    return col * square_size, (SIDE - 1 - row) * square_size

# --------------------------------------------------------------------
# Ataxx GUI
# --------------------------------------------------------------------

class AtaxxGUI:
    def __init__(self, board: Board, config: Config = CONFIG):
        pygame.init()
        pygame.display.set_caption("Ataxx")
        self.config = config
        self.square_size = config.ui.square_size
        self.board_size = self.square_size * SIDE
        self.info_height = 90
        self.width = max(self.board_size, 360)
        self.height = self.board_size + self.info_height

        self.screen = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 22)
        self.small_font = pygame.font.SysFont("consolas", 16)

        self.board = board
        self.auto: Dict[PieceColor, bool] = {
            PieceColor.RED: config.game.red == "auto",
            PieceColor.BLUE: config.game.blue == "auto",
        }
        self.selected: Optional[int] = None
        self.block_mode = False
        self.last_move: Optional[Move] = None
        self.reported = False
        self.status_message = "Click a piece, then its destination. b: blocks, p: pass, n: new"
        self.running = True

    def run(self):
        while self.running:
            self.clock.tick(self.config.ui.fps)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)
                elif event.type == pygame.KEYDOWN:
                    self.handle_key(event)

            self.draw()
            pygame.display.flip()
            # Engine thinks after the human move is on screen.
            self.advance()

        pygame.quit()
        sys.exit(0)

    def handle_key(self, event):
        if event.key == pygame.K_b:
            self.set_block_mode(not self.block_mode)
        elif event.key == pygame.K_p:
            self.submit(PASS)
        elif event.key == pygame.K_n:
            self.new_game()
        elif event.key == pygame.K_ESCAPE:
            self.selected = None

    def set_block_mode(self, on: bool):
        self.block_mode = on
        self.selected = None
        self.status_message = "Block mode: click squares to block" if on else "Block mode off"

    def new_game(self):
        self.board.reset_to_startpos()
        self.selected = None
        self.last_move = None
        self.reported = False
        self.set_block_mode(False)
        self.status_message = "New game"

    def handle_click(self, pos: Tuple[int, int]):
        sq = square_at(pos[0], pos[1], self.square_size)
        if sq is None:
            return

        if self.block_mode:
            try:
                self.board.set_block(sq)
            except ValueError as exc:
                self.status_message = f"Cannot block: {exc}"
                return
            self.status_message = f"Blocked {square_to_str(sq)}"
            return

        if self.selected is None:
            if self.board.squares[sq] == self.board.side_to_move:
                self.selected = sq
            else:
                self.status_message = f"Select a {self.board.side_to_move.display()} piece"
            return

        move = Move(self.selected, sq)
        self.selected = None
        self.submit(move)

    def submit(self, move: Move):
        side = self.board.side_to_move
        if self.auto[side] and not self.board.is_game_over():
            self.status_message = f"{side.display()} is played by the engine"
            return
        try:
            self.board.play(move)
        except IllegalMoveError as exc:
            self.status_message = f"Invalid move: {exc}"
            return
        self.last_move = move
        self.block_mode = False
        self.status_message = f"Played: {move.text()}"

    def advance(self):
        if self.reported:
            return
        outcome = self.board.outcome()
        if outcome != Outcome.IN_PROGRESS:
            self.status_message = RESULT_TEXT[outcome]
            self.reported = True
            return

        side = self.board.side_to_move
        if not self.auto[side]:
            return
        # The search blocks the loop; show the status and keep the window responsive first.
        self.status_message = f"Engine ({side.display()}) is thinking..."
        self.draw()
        pygame.display.flip()
        pygame.event.pump()
        move = decide(
            self.board,
            side,
            depth=self.config.search.depth,
            alternate=self.config.search.alternate_sense,
        )
        self.board.make_move(move)
        self.last_move = move
        if move.is_pass:
            self.status_message = f"Engine ({side.display()}) passes"
        else:
            self.status_message = f"Engine ({side.display()}): {move.text()}"

    def draw(self):
        self.screen.fill(BLANK_COLOR)
        self.draw_board()
        self.draw_info_panel()

    def draw_board(self):
        s = self.square_size
        for sq, piece in enumerate(self.board.squares):
            x, y = square_origin(sq, s)

            if sq == self.selected:
                pygame.draw.rect(self.screen, SELECTED_COLOR, (x, y, s, s))
            elif self.last_move is not None and not self.last_move.is_pass and sq == self.last_move.to_sq:
                pygame.draw.rect(self.screen, LAST_MOVE_COLOR, (x, y, s, s))

            if piece in (PieceColor.RED, PieceColor.BLUE):
                color = RED_COLOR if piece == PieceColor.RED else BLUE_COLOR
                pygame.draw.circle(self.screen, color, (x + s // 2, y + s // 2), self.config.ui.piece_radius)
            elif piece == PieceColor.BLOCKED:
                self.draw_block(x, y)

        for i in range(SIDE + 1):
            pygame.draw.line(self.screen, LINE_COLOR, (s * i, 0), (s * i, self.board_size))
            pygame.draw.line(self.screen, LINE_COLOR, (0, s * i), (self.board_size, s * i))

    def draw_block(self, x: int, y: int):
        s = self.square_size
        t = s // 5
        f = s * 4 // 5
        h = s // 2
        inset = (s - self.config.ui.block_width) // 2
        width = self.config.ui.block_width
        pygame.draw.rect(self.screen, BLOCK_COLOR, (x + inset, y + inset, width, width))
        pygame.draw.rect(self.screen, BLANK_COLOR, (x + t, y + t, 3 * s // 5, 3 * s // 5))
        pygame.draw.circle(self.screen, BLOCK_COLOR, (x + h, y + h), s // 10)
        for start, end in (
            ((x + t, y + t), (x + f, y + f)),
            ((x + f, y + t), (x + t, y + f)),
            ((x + h, y + t), (x + h, y + f)),
            ((x + t, y + h), (x + f, y + h)),
        ):
            pygame.draw.line(self.screen, BLOCK_COLOR, start, end, 5)

    def draw_info_panel(self):
        panel_y = self.board_size
        pygame.draw.rect(self.screen, (30, 30, 30), (0, panel_y, self.width, self.info_height))

        stm_text = f"{self.board.side_to_move.display()} to move"
        if self.block_mode:
            stm_text += "  [block mode]"
        stm_surf = self.font.render(stm_text, True, (220, 220, 220))
        self.screen.blit(stm_surf, (10, panel_y + 8))

        counts = "Red {}  Blue {}".format(
            self.board.num_pieces(PieceColor.RED), self.board.num_pieces(PieceColor.BLUE)
        )
        counts_surf = self.small_font.render(counts, True, (200, 200, 200))
        self.screen.blit(counts_surf, (10, panel_y + 38))

        status_surf = self.small_font.render(self.status_message, True, (200, 200, 0))
        self.screen.blit(status_surf, (10, panel_y + 62))


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------

def main():
    logging.basicConfig(level=CONFIG.log_level.upper())
    board = Board.from_startpos()
    gui = AtaxxGUI(board)
    gui.run()

if __name__ == "__main__":
    main()

"""Game state, movement rules and move records for a two-player game."""

from __future__ import annotations

from typing import Callable, Optional

from .pieces import Piece, PieceType, Step, initial_pieces
from .sounds import Sound, SoundPlayer

__all__ = ["relation", "GameClock", "Board"]

NO_PIECE = -1
BLACK_KING = 4
RED_KING = 20

_SECONDS_PER_DAY = 24 * 60 * 60

# Pieces whose notation ends in a rank count unless they move sideways.
_LINE_MOVERS = frozenset({PieceType.BING, PieceType.PAO, PieceType.CHE, PieceType.JIANG})


def relation(row1: int, col1: int, row2: int, col2: int) -> int:
    """Ten times the row distance plus the column distance between two squares."""
    return abs(row1 - row2) * 10 + abs(col1 - col2)


class GameClock:
    """Elapsed play time with the start/pause/continue button state."""

    def __init__(self) -> None:
        self.seconds = 0
        self.running = False
        self.label = "开始"
        self.enabled = True

    def start_or_pause(self) -> bool:
        """Toggle between running and paused; return whether it now runs."""
        self.label = "继续" if self.running else "暂停"
        self.running = not self.running
        return self.running

    def tick(self) -> str:
        """Advance one second if running, and return the displayed time."""
        if self.running:
            self.seconds = (self.seconds + 1) % _SECONDS_PER_DAY
            self.label = "暂停"
        return self.display()

    def reset(self) -> None:
        """Stop and clear the clock and re-enable its button."""
        self.seconds = 0
        self.running = False
        self.label = "开始"
        self.enabled = True

    def display(self) -> str:
        """The elapsed time as hh:mm:ss."""
        hours, rest = divmod(self.seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class Board:
    """The board, whose turn it is, the selection and the move history."""

    def __init__(
        self,
        sounds: Optional[SoundPlayer] = None,
        on_game_over: Optional[Callable[[str, str], object]] = None,
    ) -> None:
        self.sounds = sounds if sounds is not None else SoundPlayer()
        self.on_game_over = on_game_over
        self.clock = GameClock()
        self.pieces: list[Piece] = []
        self.steps: list[Step] = []
        self.reset()

    def reset(self) -> None:
        """Set up a fresh game with red to move and the clock cleared."""
        self.pieces = initial_pieces()
        self.steps = []
        self.select_id = NO_PIECE
        self.checked_id = NO_PIECE
        self.red_turn = True
        self.over = False
        self.show_step = True
        self.text_record = ""
        self.clock.reset()

    # -- basic queries and mutations ------------------------------------

    def is_red(self, piece_id: int) -> bool:
        return self.pieces[piece_id].red

    def is_dead(self, piece_id: int) -> bool:
        if piece_id == NO_PIECE:
            return True
        return self.pieces[piece_id].dead

    def kill_stone(self, piece_id: int) -> None:
        if piece_id != NO_PIECE:
            self.pieces[piece_id].dead = True

    def relive_stone(self, piece_id: int) -> None:
        if piece_id != NO_PIECE:
            self.pieces[piece_id].dead = False

    def move_stone(self, move_id: int, row: int, col: int) -> None:
        """Place a piece on a square and pass the turn."""
        piece = self.pieces[move_id]
        piece.row, piece.col = row, col
        self.red_turn = not self.red_turn

    def same_color(self, move_id: int, kill_id: int) -> bool:
        if move_id == NO_PIECE or kill_id == NO_PIECE:
            return False
        return self.is_red(move_id) == self.is_red(kill_id)

    def stone_at(self, row: int, col: int) -> int:
        """Id of the live piece on a square, or -1 if it is empty."""
        for piece_id, piece in enumerate(self.pieces):
            if piece.row == row and piece.col == col and not piece.dead:
                return piece_id
        return NO_PIECE

    def count_between(self, row1: int, col1: int, row2: int, col2: int) -> Optional[int]:
        """Live pieces strictly between two squares on one line; None if not on a line."""
        if (row1 != row2 and col1 != col2) or (row1 == row2 and col1 == col2):
            return None
        if row1 == row2:
            low, high = sorted((col1, col2))
            squares = ((row1, col) for col in range(low + 1, high))
        else:
            low, high = sorted((row1, row2))
            squares = ((row, col1) for row in range(low + 1, high))
        return sum(1 for row, col in squares if self.stone_at(row, col) != NO_PIECE)

    def has_piece(self, row: int, col: int) -> bool:
        return any(p.row == row and p.col == col for p in self.pieces if not p.dead)

    def kings_facing(self) -> bool:
        """Whether the two kings stand on one file with nothing between them."""
        black, red = self.pieces[BLACK_KING], self.pieces[RED_KING]
        if black.dead or red.dead or black.col != red.col:
            return False
        return not any(self.has_piece(row, black.col) for row in range(black.row + 1, red.row))

    def check_winner(self) -> Optional[str]:
        """End the game if a king has fallen; return "red", "black" or None."""
        black_dead = self.pieces[BLACK_KING].dead
        red_dead = self.pieces[RED_KING].dead
        if black_dead and not red_dead:
            self._finish("本局结束，红方胜利.")
            return "red"
        if red_dead and not black_dead:
            self._finish("本局结束，黑方胜利.")
            return "black"
        return None

    def _finish(self, message: str) -> None:
        self.sounds.play(Sound.WIN)
        self.over = True
        if self.clock.running:
            self.clock.running = False
        self.clock.enabled = False
        if self.on_game_over is not None:
            self.on_game_over("提示", message)

    # -- movement rules --------------------------------------------------

    def can_move(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        """Whether ``move_id`` may go to (row, col), capturing ``kill_id``.

        Targeting a piece of the same colour switches the selection to it.
        """
        if self.same_color(move_id, kill_id):
            self.select_id = kill_id
            return False
        rule = {
            PieceType.JIANG: self._can_move_jiang,
            PieceType.SHI: self._can_move_shi,
            PieceType.XIANG: self._can_move_xiang,
            PieceType.MA: self._can_move_ma,
            PieceType.CHE: self._can_move_che,
            PieceType.PAO: self._can_move_pao,
            PieceType.BING: self._can_move_bing,
        }[self.pieces[move_id].type]
        return rule(move_id, kill_id, row, col)

    def _in_palace(self, move_id: int, row: int, col: int) -> bool:
        if col < 3 or col > 5:
            return False
        return row >= 7 if self.is_red(move_id) else row <= 2

    def _distance(self, move_id: int, row: int, col: int) -> int:
        piece = self.pieces[move_id]
        return relation(piece.row, piece.col, row, col)

    def _can_move_jiang(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        if kill_id != NO_PIECE and self.pieces[kill_id].type == PieceType.JIANG:
            return self._can_move_che(move_id, kill_id, row, col)
        if not self._in_palace(move_id, row, col):
            return False
        return self._distance(move_id, row, col) in (1, 10)

    def _can_move_shi(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        if not self._in_palace(move_id, row, col):
            return False
        return self._distance(move_id, row, col) == 11

    def _can_move_xiang(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        if self._distance(move_id, row, col) != 22:
            return False
        piece = self.pieces[move_id]
        if self.stone_at((piece.row + row) // 2, (piece.col + col) // 2) != NO_PIECE:
            return False
        return row >= 4 if self.is_red(move_id) else row <= 5

    def _can_move_ma(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        distance = self._distance(move_id, row, col)
        piece = self.pieces[move_id]
        if distance == 12:
            leg = (piece.row, (piece.col + col) // 2)
        elif distance == 21:
            leg = ((piece.row + row) // 2, piece.col)
        else:
            return False
        return self.stone_at(*leg) == NO_PIECE

    def _can_move_che(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        piece = self.pieces[move_id]
        return self.count_between(piece.row, piece.col, row, col) == 0

    def _can_move_pao(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        piece = self.pieces[move_id]
        screens = self.count_between(row, col, piece.row, piece.col)
        return screens == (0 if kill_id == NO_PIECE else 1)

    def _can_move_bing(self, move_id: int, kill_id: int, row: int, col: int) -> bool:
        if self._distance(move_id, row, col) not in (1, 10):
            return False
        current = self.pieces[move_id].row
        if self.is_red(move_id):
            if row > current:
                return False
            if current >= 5 and current == row:
                return False
        else:
            if row < current:
                return False
            if current <= 4 and current == row:
                return False
        return True

    def can_select(self, piece_id: int) -> bool:
        return self.red_turn == self.pieces[piece_id].red

    def is_general(self) -> bool:
        """Whether the side to move has its king under attack."""
        general = RED_KING if self.red_turn else BLACK_KING
        target = self.pieces[general]
        row, col = target.row, target.col
        for piece_id, piece in enumerate(self.pieces):
            if piece_id >= 16 and self.red_turn:
                break
            if self.can_move(piece_id, general, row, col) and not piece.dead:
                return True
        return False

    # -- interaction -----------------------------------------------------

    def click_square(self, row: int, col: int) -> None:
        """Handle a click on a board square; ignored once the game is over."""
        if self.over:
            return
        self.click_pieces(self.stone_at(row, col), row, col)

    def click_pieces(self, piece_id: int, row: int, col: int) -> None:
        """Select ``piece_id`` or move the selected piece to (row, col)."""
        if self.select_id == NO_PIECE:
            self.try_select(piece_id)
        else:
            self.try_move(piece_id, row, col)
        self.clock.running = False
        self.clock.start_or_pause()

    def try_select(self, piece_id: int) -> None:
        if piece_id == NO_PIECE or not self.can_select(piece_id):
            return
        self.select_id = piece_id
        self.sounds.play(Sound.SELECT)

    def try_move(self, kill_id: int, row: int, col: int) -> None:
        if kill_id != NO_PIECE and self.same_color(kill_id, self.select_id):
            self.try_select(kill_id)
            return
        if self.can_move(self.select_id, kill_id, row, col):
            self.do_move(self.select_id, kill_id, row, col)
            self.select_id = NO_PIECE

    def do_move(self, move_id: int, kill_id: int, row: int, col: int) -> None:
        """Record and carry out a move, then play the matching sounds."""
        piece = self.pieces[move_id]
        self.steps.append(Step(move_id, kill_id, piece.row, piece.col, row, col))
        self.text_record = self.text_step(move_id, row, col)

        self.kill_stone(kill_id)
        self.move_stone(move_id, row, col)
        self.check_winner()

        self.sounds.play(Sound.MOVE if kill_id == NO_PIECE else Sound.EAT)
        if self.is_general():
            self.sounds.play(Sound.GENERAL)

    def text_step(self, move_id: int, row: int, col: int) -> str:
        """Notation for moving ``move_id`` from its square to (row, col)."""
        piece = self.pieces[move_id]
        text = piece.name(piece.red) + piece.col_text(piece.col) + piece.row_text(row)
        if piece.type in _LINE_MOVERS:
            if piece.row == row:
                return text + piece.col_text(col)
            return text + piece.move_text(piece.row, row)
        return text + piece.col_text(col)

    def back_one(self) -> Optional[Step]:
        """Take back the last move; return it, or None if there is none."""
        if not self.steps or self.over:
            return None
        step = self.steps.pop()
        self.relive_stone(step.kill_id)
        self.move_stone(step.move_id, step.row_from, step.col_from)
        self.sounds.play(Sound.BACK)
        return step
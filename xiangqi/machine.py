"""A game against a simple computer opponent playing black."""

from __future__ import annotations

import random
from typing import Callable, Iterator, Optional

from .board import NO_PIECE, Board
from .pieces import PieceType, Step
from .sounds import SoundPlayer

__all__ = ["MachineGame"]

BLACK_IDS = range(0, 16)
RED_IDS = range(16, 32)
ROWS = 10
COLS = 9

PIECE_SCORES = {
    PieceType.JIANG: 200,
    PieceType.SHI: 20,
    PieceType.XIANG: 40,
    PieceType.MA: 60,
    PieceType.CHE: 100,
    PieceType.PAO: 80,
    PieceType.BING: 10,
}


class MachineGame(Board):
    """Red is played by clicks; black answers each red move by itself.

    Black takes the capture that leaves the best material balance, and
    otherwise plays a random non-capturing move.
    """

    def __init__(
        self,
        sounds: Optional[SoundPlayer] = None,
        on_game_over: Optional[Callable[[str, str], object]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        super().__init__(sounds, on_game_over)

    # -- move generation -------------------------------------------------

    def _black_candidates(self) -> Iterator[tuple[int, int, int]]:
        for move_id in BLACK_IDS:
            if self.pieces[move_id].dead:
                continue
            for row in range(ROWS):
                for col in range(COLS):
                    yield move_id, row, col

    def _red_at(self, row: int, col: int) -> int:
        for piece_id in RED_IDS:
            piece = self.pieces[piece_id]
            if piece.row == row and piece.col == col and not piece.dead:
                return piece_id
        return NO_PIECE

    def _step(self, move_id: int, kill_id: int, row: int, col: int) -> Step:
        piece = self.pieces[move_id]
        return Step(move_id, kill_id, piece.row, piece.col, row, col)

    def capture_steps(self) -> list[Step]:
        """Every legal move of a live black piece that captures a red piece."""
        steps = []
        for move_id, row, col in self._black_candidates():
            kill_id = self._red_at(row, col)
            if kill_id != NO_PIECE and self.can_move(move_id, kill_id, row, col):
                steps.append(self._step(move_id, kill_id, row, col))
        return steps

    def quiet_steps(self) -> list[Step]:
        """Every legal move of a live black piece onto an empty square."""
        steps = []
        for move_id, row, col in self._black_candidates():
            if self.stone_at(row, col) == NO_PIECE and self.can_move(move_id, NO_PIECE, row, col):
                steps.append(self._step(move_id, NO_PIECE, row, col))
        return steps

    # -- evaluation -------------------------------------------------------

    def fake_move(self, step: Step) -> None:
        """Apply ``step`` tentatively, without recording it."""
        if step.kill_id != NO_PIECE:
            self.pieces[step.kill_id].dead = True
        piece = self.pieces[step.move_id]
        piece.row, piece.col = step.row_to, step.col_to
        self.red_turn = not self.red_turn

    def unfake_move(self, step: Step) -> None:
        """Undo a move applied by :meth:`fake_move`."""
        if step.kill_id != NO_PIECE:
            self.pieces[step.kill_id].dead = False
        piece = self.pieces[step.move_id]
        piece.row, piece.col = step.row_from, step.col_from
        self.red_turn = not self.red_turn

    def calc_score(self) -> int:
        """Material of live black pieces minus that of live red pieces."""
        black = sum(PIECE_SCORES[self.pieces[i].type] for i in BLACK_IDS if not self.pieces[i].dead)
        red = sum(PIECE_SCORES[self.pieces[i].type] for i in RED_IDS if not self.pieces[i].dead)
        return black - red

    def best_move(self) -> Optional[Step]:
        """The move black will play, or None if black has no move at all."""
        best: Optional[Step] = None
        best_score = -10000
        for step in self.capture_steps():
            self.fake_move(step)
            score = self.calc_score()
            self.unfake_move(step)
            if score > best_score:
                best_score, best = score, step
        if best is not None:
            return best

        quiet = self.quiet_steps()
        if not quiet:
            self.check_winner()
            return None
        return self.rng.choice(quiet)

    def machine_move(self) -> Optional[Step]:
        """Play black's move and pass the turn; return the move played."""
        step = self.best_move()
        if step is None:
            return None
        mover = self.pieces[step.move_id]
        if step.kill_id == NO_PIECE:
            mover.row, mover.col = step.row_to, step.col_to
        else:
            victim = self.pieces[step.kill_id]
            victim.dead = True
            mover.row, mover.col = victim.row, victim.col
            self.select_id = NO_PIECE
        self.red_turn = not self.red_turn
        return step

    # -- interaction -------------------------------------------------------

    def choose_or_move(self, piece_id: int, row: int, col: int) -> None:
        """Select a red piece, or move the selected piece to (row, col)."""
        if self.select_id == NO_PIECE:
            if self.checked_id != NO_PIECE:
                if self.pieces[self.checked_id].red:
                    self.select_id = piece_id
                else:
                    self.select_id = NO_PIECE
                    return
        elif self.can_move(self.select_id, self.checked_id, row, col):
            mover = self.pieces[self.select_id]
            mover.row, mover.col = row, col
            if self.checked_id != NO_PIECE:
                self.pieces[self.checked_id].dead = True
            self.select_id = NO_PIECE
            self.red_turn = not self.red_turn
        self.check_winner()

    def click_pieces(self, piece_id: int, row: int, col: int) -> None:
        """Handle red's click; once red has moved, black replies at once."""
        self.checked_id = piece_id
        if not self.red_turn:
            return
        self.choose_or_move(piece_id, row, col)
        if not self.red_turn:
            self.machine_move()
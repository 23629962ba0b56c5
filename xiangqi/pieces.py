"""Pieces, their starting layout and the notation helpers for move records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = ["PieceType", "Piece", "Step", "initial_piece", "initial_pieces"]


class PieceType(IntEnum):
    """Kinds of pieces, in the order used for scoring tables."""

    JIANG = 0
    SHI = 1
    XIANG = 2
    MA = 3
    CHE = 4
    PAO = 5
    BING = 6


_RED_NAMES = {
    PieceType.CHE: "俥",
    PieceType.MA: "傌",
    PieceType.PAO: "炮",
    PieceType.BING: "兵",
    PieceType.JIANG: "帥",
    PieceType.SHI: "仕",
    PieceType.XIANG: "相",
}

_BLACK_NAMES = {
    PieceType.CHE: "車",
    PieceType.MA: "馬",
    PieceType.PAO: "砲",
    PieceType.BING: "卒",
    PieceType.JIANG: "將",
    PieceType.SHI: "士",
    PieceType.XIANG: "象",
}

RED_COLUMNS = ("九", "八", "七", "六", "五", "四", "三", "二", "一")
BLACK_COLUMNS = ("1", "2", "3", "4", "5", "6", "7", "8", "9")
RED_COUNTS = ("一", "二", "三", "四", "五", "六", "七", "八", "九")

# The sixteen black pieces (top side); red mirrors them through the centre.
_LAYOUT = (
    (0, 0, PieceType.CHE),
    (0, 1, PieceType.MA),
    (0, 2, PieceType.XIANG),
    (0, 3, PieceType.SHI),
    (0, 4, PieceType.JIANG),
    (0, 5, PieceType.SHI),
    (0, 6, PieceType.XIANG),
    (0, 7, PieceType.MA),
    (0, 8, PieceType.CHE),
    (2, 1, PieceType.PAO),
    (2, 7, PieceType.PAO),
    (3, 0, PieceType.BING),
    (3, 2, PieceType.BING),
    (3, 4, PieceType.BING),
    (3, 6, PieceType.BING),
    (3, 8, PieceType.BING),
)

PIECE_COUNT = 2 * len(_LAYOUT)


@dataclass
class Piece:
    """One piece on the board."""

    row: int
    col: int
    type: PieceType
    red: bool
    dead: bool = False

    def name(self, red_side: bool) -> str:
        """The character shown for this piece's type on the given side."""
        names = _RED_NAMES if red_side else _BLACK_NAMES
        return names[self.type]

    def col_text(self, col: int) -> str:
        """Notation for a file, counted from this piece's own side."""
        if not 0 <= col < len(BLACK_COLUMNS):
            raise ValueError(f"column out of range: {col}")
        return RED_COLUMNS[col] if self.red else BLACK_COLUMNS[col]

    def row_text(self, row_to: int) -> str:
        """Direction word for a move from the current row to ``row_to``."""
        if self.row == row_to:
            return "平"
        forward = self.row > row_to if self.red else self.row < row_to
        return "进" if forward else "退"

    def move_text(self, row_from: int, row_to: int) -> str:
        """Notation for the number of ranks travelled."""
        distance = abs(row_from - row_to)
        if not 1 <= distance <= len(RED_COUNTS):
            raise ValueError(f"invalid rank distance: {distance}")
        table = RED_COUNTS if self.red else BLACK_COLUMNS
        return table[distance - 1]


@dataclass(frozen=True)
class Step:
    """A recorded move: which piece went where, and what it captured (-1 for none)."""

    move_id: int
    kill_id: int
    row_from: int
    col_from: int
    row_to: int
    col_to: int


def initial_piece(piece_id: int) -> Piece:
    """The piece with the given id in its starting position.

    Ids 0-15 are black, 16-31 red.
    """
    if not 0 <= piece_id < PIECE_COUNT:
        raise ValueError(f"piece id out of range: {piece_id}")
    if piece_id < len(_LAYOUT):
        row, col, kind = _LAYOUT[piece_id]
        return Piece(row=row, col=col, type=kind, red=False)
    row, col, kind = _LAYOUT[piece_id - len(_LAYOUT)]
    return Piece(row=9 - row, col=8 - col, type=kind, red=True)


def initial_pieces() -> list[Piece]:
    """All 32 pieces in their starting positions, indexed by id."""
    return [initial_piece(piece_id) for piece_id in range(PIECE_COUNT)]
"""
Pieces and their movement rules.

A piece is a small mutable record (kind, color, coordinates, pawn first-turn
flag). It carries no reference to the board it stands on: every query takes
the board as an argument, so a piece can never outlive or mutate the board's
state on its own.

Movement rules are plain functions keyed on the python-chess piece type:

    - step-wise kinds (king, knight) try a fixed list of offsets once
    - sliding kinds (rook, bishop, queen) walk each direction until blocked
    - pawns have their own forward/double-step/diagonal-capture rule

Everything here is purely geometric. Whether a move would leave the mover's
own king in check is decided by :mod:`chesscore.rules`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, NamedTuple

import chess

from chesscore.constants import (
    BOARD_SIZE,
    MAX_SLIDE,
    PAWN_DIRECTION,
    SLIDING_DIRECTIONS,
    STEP_OFFSETS,
)

if TYPE_CHECKING:
    from chesscore.board import Board


class Move(NamedTuple):
    """Target coordinate of a move, relative to whichever piece makes it."""

    x: int
    y: int


@dataclass
class Piece:
    """
    One piece on the grid.

    Attributes:
        piece_type: python-chess piece type (``chess.PAWN`` ... ``chess.KING``).
        color:      ``chess.WHITE`` or ``chess.BLACK``.
        x:          Row, 0 = black's back rank.
        y:          Column, 0 = the a-file.
        first_turn: Pawns only: True until the pawn has moved, which is what
                    allows the two-square advance. Ignored for other kinds.
    """

    piece_type: chess.PieceType
    color: chess.Color
    x: int
    y: int
    first_turn: bool = True

    @property
    def direction(self) -> int:
        """Row delta of a forward pawn step for this piece's color."""
        return PAWN_DIRECTION[self.color]

    @property
    def position(self) -> Move:
        return Move(self.x, self.y)

    @property
    def symbol(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        return chess.Piece(self.piece_type, self.color).symbol()

    @property
    def name(self) -> str:
        return chess.piece_name(self.piece_type)

    def copy(self) -> Piece:
        return replace(self)

    def __repr__(self) -> str:
        return f"Piece({self.symbol!r}, x={self.x}, y={self.y})"


# ---------------------------------------------------------------------------
# Shared primitives
# ---------------------------------------------------------------------------


def is_outside(x: int, y: int) -> bool:
    """True iff (x, y) is off the 8x8 grid."""
    return not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE)


def is_valid_target(piece: Piece, board: Board, x: int, y: int) -> bool:
    """True iff (x, y) holds a piece of the other color, i.e. can be captured."""
    if is_outside(x, y):
        return False
    target = board.grid[x][y]
    return target is not None and target.color != piece.color


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


def _step_moves(piece: Piece, board: Board) -> list[Move]:
    moves = []
    for dx, dy in STEP_OFFSETS[piece.piece_type]:
        x, y = piece.x + dx, piece.y + dy
        if is_outside(x, y):
            continue
        if board.grid[x][y] is None or is_valid_target(piece, board, x, y):
            moves.append(Move(x, y))
    return moves


def _sliding_moves(piece: Piece, board: Board) -> list[Move]:
    moves = []
    for dx, dy in SLIDING_DIRECTIONS[piece.piece_type]:
        for n in range(1, MAX_SLIDE + 1):
            x, y = piece.x + n * dx, piece.y + n * dy
            if is_outside(x, y):
                break
            if board.grid[x][y] is not None:
                if is_valid_target(piece, board, x, y):
                    moves.append(Move(x, y))
                break
            moves.append(Move(x, y))
    return moves


def _pawn_moves(piece: Piece, board: Board) -> list[Move]:
    """
    Forward one, forward two on the first turn, and the two diagonal captures.

    The first-turn flag is only read here. Board.move() is the one place that
    clears it, so this function can be called any number of times.
    """
    moves = []
    one = piece.x + piece.direction
    two = piece.x + 2 * piece.direction

    if not is_outside(one, piece.y) and board.grid[one][piece.y] is None:
        moves.append(Move(one, piece.y))
        if piece.first_turn and not is_outside(two, piece.y) and board.grid[two][piece.y] is None:
            moves.append(Move(two, piece.y))

    for dy in (-1, 1):
        if is_valid_target(piece, board, one, piece.y + dy):
            moves.append(Move(one, piece.y + dy))

    return moves


MOVE_GENERATORS: dict[chess.PieceType, Callable[[Piece, Board], list[Move]]] = {
    chess.PAWN:   _pawn_moves,
    chess.KNIGHT: _step_moves,
    chess.BISHOP: _sliding_moves,
    chess.ROOK:   _sliding_moves,
    chess.QUEEN:  _sliding_moves,
    chess.KING:   _step_moves,
}


def possible_moves(piece: Piece, board: Board) -> list[Move]:
    """
    Geometric moves for ``piece`` on ``board``, including captures.

    Does not consider whether the move leaves the mover's own king in check;
    use :func:`chesscore.rules.get_legal_moves` for that.

    Args:
        piece: A piece standing on ``board``.
        board: The board to read occupancy from. Not modified.

    Returns:
        Target coordinates in generator order.
    """
    return MOVE_GENERATORS[piece.piece_type](piece, board)

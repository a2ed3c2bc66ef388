"""
Static evaluation: material plus piece-square tables.

The search needs a number for any position it stops at. This module sums,
for every piece on the board, its material value plus a positional bonus
read from the piece-square table for its kind, and subtracts black's total
from white's.

Unlike a negamax evaluation, the score is always from white's point of view:
positive means white is better. The minimax search in
:mod:`chesscore.search` has white maximize and black minimize this number,
so no sign flipping happens anywhere.

Table lookup convention:
    - White piece on (x, y): ``PST_WHITE[kind][x][y]``
    - Black piece on (x, y): ``PST_BLACK[kind][x][y]``, which is the white
      table with its rows reversed, so black's back rank (row 0) reads the
      row written for white's back rank (row 7).
"""

import chess

from chesscore.board import Board
from chesscore.constants import PIECE_VALUES, PST


def piece_value(piece_type: chess.PieceType, color: chess.Color, x: int, y: int) -> float:
    """Material plus positional bonus of one piece, always non-signed."""
    return PIECE_VALUES[piece_type] + PST[color][piece_type][x][y]


def evaluate_board(board: Board) -> float:
    """
    Score ``board`` from white's perspective.

    Args:
        board: The position to score. Not modified.

    Returns:
        Sum over white pieces minus sum over black pieces. The starting
        position scores 0.0; being a queen up is worth roughly +90.

    Example:
        >>> evaluate_board(Board.standard())
        0.0
    """
    score = 0.0
    for row in board.grid:
        for piece in row:
            if piece is None:
                continue
            value = piece_value(piece.piece_type, piece.color, piece.x, piece.y)
            if piece.color == chess.WHITE:
                score += value
            else:
                score -= value
    return score

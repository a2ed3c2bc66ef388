"""
Rules engine: check detection, the legal-move filter, checkmate and stalemate.

Every safety question is answered by simulation. A move is legal when,
after playing it on a copy of the board, the mover's king cannot be captured
by any opposing piece's geometric move. There is no incremental attack map
and no undo stack; each candidate move costs one board clone.

Conventions:
    - ``color`` always names the side being asked about. ``is_checkmated(b,
      chess.BLACK)`` means "is black checkmated", never "has black
      checkmated its opponent".
    - A missing king means no check is possible. That never happens in a
      real game, but every query here tolerates it instead of failing.
"""

from __future__ import annotations

import enum

import chess

from chesscore.board import Board
from chesscore.pieces import Move, Piece, possible_moves


class GameStatus(str, enum.Enum):
    """Position status from the point of view of the side to move."""

    ONGOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def is_king_in_check(board: Board, color: chess.Color) -> bool:
    """
    True iff some piece of the other color could capture ``color``'s king.

    Args:
        board: Position to inspect. Not modified.
        color: The side whose king is examined.
    """
    king = board.find_king(color)
    if king is None:
        return False
    for piece in board.get_pieces(not color):
        for move in possible_moves(piece, board):
            if move.x == king.x and move.y == king.y:
                return True
    return False


def is_valid_move(board: Board, piece: Piece, move: Move) -> bool:
    """True iff playing ``move`` does not leave ``piece``'s own king in check."""
    simulated = board.clone_board()
    twin = simulated.piece_at(piece.x, piece.y)
    simulated.move(twin, move)
    return not is_king_in_check(simulated, piece.color)


def get_legal_moves(board: Board, piece: Piece) -> list[Move]:
    """Geometric moves of ``piece`` that keep its own king safe."""
    return [move for move in possible_moves(piece, board) if is_valid_move(board, piece, move)]


def has_legal_move(board: Board, color: chess.Color) -> bool:
    """True iff at least one piece of ``color`` has a legal move."""
    return any(get_legal_moves(board, piece) for piece in board.get_pieces(color))


def is_checkmated(board: Board, color: chess.Color) -> bool:
    """
    True iff ``color`` is in check and no move gets its king out of check.

    Works on a single clone: every geometric move of every ``color`` piece is
    tried in place with ``Board.probe`` and undone immediately, stopping at
    the first escape found.
    """
    if not is_king_in_check(board, color):
        return False

    simulated = board.clone_board()
    for piece in simulated.get_pieces(color):
        for move in possible_moves(piece, simulated):
            with simulated.probe(piece, move):
                if not is_king_in_check(simulated, color):
                    return False
    return True


def is_stalemate(board: Board, color: chess.Color) -> bool:
    """True iff ``color`` is not in check but has no legal move."""
    if is_king_in_check(board, color):
        return False
    return not has_legal_move(board, color)


def game_status(board: Board, color: chess.Color) -> GameStatus:
    """Classify the position for ``color``, the side about to move."""
    if is_king_in_check(board, color):
        return GameStatus.CHECKMATE if is_checkmated(board, color) else GameStatus.CHECK
    return GameStatus.ONGOING if has_legal_move(board, color) else GameStatus.STALEMATE

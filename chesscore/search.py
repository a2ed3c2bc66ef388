"""
Search entry point: minimax with alpha-beta pruning over cloned boards.

The tree is built from whole-board copies. Each child position is a
``clone_board()`` of its parent with one legal move applied, so no branch
ever shares mutable state with another and nothing needs to be undone.

Conventions:
    - Scores come from :func:`chesscore.evaluate.evaluate_board` and are
      always from white's point of view. White is the maximizing player,
      black the minimizing one.
    - ``depth`` counts remaining plies. Depth 0 is a leaf and returns the
      static evaluation.
    - A side with no legal move at a nonzero depth is a terminal node. A
      checkmated side scores ``CHECKMATE_SCORE + depth`` against itself
      (the extra depth makes quicker mates look better to the winner);
      stalemate scores ``DRAW_SCORE``. Returning the infinite starting value
      there instead would let a lost branch look like a won one.

Cost model:
    Generating one child costs one board clone. Children are produced
    lazily, so siblings cut off by alpha-beta are never cloned. Run
    tools/bench.py to measure node counts and timings per depth.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple

import chess

from chesscore.board import Board, square_name
from chesscore.constants import CHECKMATE_SCORE, DRAW_SCORE
from chesscore.evaluate import evaluate_board
from chesscore.pieces import Move, Piece, possible_moves
from chesscore.rules import is_king_in_check

_log = logging.getLogger(__name__)


class Candidate(NamedTuple):
    """
    One child of a search node.

    Attributes:
        board: A clone of the parent board with ``move`` already applied.
        piece: The moving piece as it stands on the parent board.
        move:  Destination of the move.
    """

    board: Board
    piece: Piece
    move: Move


class AIMove(NamedTuple):
    """
    Result of :func:`generate_ai_move`.

    Attributes:
        piece:  The piece to move, on the board passed to the search.
        source: Where that piece stood when the search ran.
        move:   Its destination. Apply with ``board.move(piece, move)``.
        score:  Minimax value of the chosen line (white's perspective).
        nodes:  Number of positions visited by the search.
    """

    piece: Piece
    source: Move
    move: Move
    score: float
    nodes: int


@dataclass
class SearchState:
    """
    Bookkeeping for one search.

    Attributes:
        node_count: Positions visited, counting the root's children and every
                    node below them.
        start_time: Monotonic clock timestamp when the search began.
    """

    node_count: int = 0
    start_time: float = field(default_factory=time.monotonic)

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.start_time) * 1000


def _iter_possible_boards(board: Board, color: chess.Color) -> Iterator[Candidate]:
    # The clone made to play the move doubles as the check-safety simulation,
    # so this yields exactly the boards that rules.get_legal_moves allows.
    for piece in board.get_pieces(color):
        for move in possible_moves(piece, board):
            child = board.clone_board()
            child.move(child.piece_at(piece.x, piece.y), move)
            if not is_king_in_check(child, color):
                yield Candidate(child, piece, move)


def generate_possible_boards(board: Board, color: chess.Color) -> list[Candidate]:
    """
    Every position ``color`` can reach with one legal move.

    Args:
        board: Parent position. Not modified.
        color: Side to move.

    Returns:
        One Candidate per legal move, pieces in row-major order and moves in
        generator order.
    """
    return list(_iter_possible_boards(board, color))


def _terminal_score(board: Board, color: chess.Color, depth: int) -> float:
    """Score for a node where ``color`` is to move and has no legal move."""
    if not is_king_in_check(board, color):
        return DRAW_SCORE
    mate = CHECKMATE_SCORE + depth
    return -mate if color == chess.WHITE else mate


def minimax(
    board: Board,
    depth: int,
    maximizing_player: bool,
    alpha: float = -math.inf,
    beta: float = math.inf,
    state: SearchState | None = None,
) -> float:
    """
    Minimax search with alpha-beta pruning.

    White maximizes and black minimizes the evaluation. The window
    [alpha, beta] holds the best score each side can already force
    elsewhere in the tree; once ``beta <= alpha`` the remaining siblings
    cannot change the result and are skipped.

    Args:
        board:             Position to search. Not modified.
        depth:             Remaining plies. 0 returns the static evaluation.
        maximizing_player: True when white is to move at this node.
        alpha:             Best score white can already guarantee.
        beta:              Best score black can already guarantee.
        state:             Optional node counter shared across the search.

    Returns:
        The minimax value of ``board`` from white's point of view.
    """
    if state is not None:
        state.node_count += 1

    if depth == 0:
        return evaluate_board(board)

    color = chess.WHITE if maximizing_player else chess.BLACK
    searched = False

    if maximizing_player:
        best = -math.inf
        for child in _iter_possible_boards(board, color):
            searched = True
            best = max(best, minimax(child.board, depth - 1, False, alpha, beta, state))
            alpha = max(alpha, best)
            if beta <= alpha:
                break
    else:
        best = math.inf
        for child in _iter_possible_boards(board, color):
            searched = True
            best = min(best, minimax(child.board, depth - 1, True, alpha, beta, state))
            beta = min(beta, best)
            if beta <= alpha:
                break

    if not searched:
        return _terminal_score(board, color, depth)
    return best


def generate_ai_move(board: Board, depth: int, maximizing_player: bool) -> AIMove | None:
    """
    Pick a move for the side given by ``maximizing_player``.

    Plays white when ``maximizing_player`` is True and black otherwise. Each
    root move is scored by a full-window ``minimax`` at ``depth - 1``; the
    best score wins, and on a tie the later candidate replaces the earlier
    one.

    Args:
        board:             Current position. Not modified.
        depth:             Total plies to look ahead, counting the move
                           being chosen. Values below 1 are treated as 1.
        maximizing_player: True to move for white, False for black.

    Returns:
        The chosen AIMove, or None if the side to move has no legal move
        (the game is already over).
    """
    depth = max(depth, 1)
    color = chess.WHITE if maximizing_player else chess.BLACK
    state = SearchState()

    best: Candidate | None = None
    best_score = 0.0

    for candidate in _iter_possible_boards(board, color):
        score = minimax(candidate.board, depth - 1, not maximizing_player, state=state)
        if best is None or (score >= best_score if maximizing_player else score <= best_score):
            best = candidate
            best_score = score

    if best is None:
        _log.debug("no legal move for %s", chess.COLOR_NAMES[color])
        return None

    _log.debug(
        "ai move %s%s depth=%d score=%.1f nodes=%d time=%.0fms",
        square_name(best.piece.x, best.piece.y),
        square_name(*best.move),
        depth,
        best_score,
        state.node_count,
        state.elapsed_ms,
    )
    return AIMove(best.piece, best.piece.position, best.move, best_score, state.node_count)

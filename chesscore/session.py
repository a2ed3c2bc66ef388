"""
Game controller: turn order, piece selection, and move application.

The whole per-game state machine is an immutable :class:`GameState` value.
Each transition takes the board and the current state and returns the next
state; the board is the only thing that is mutated, and only when a move is
actually applied.

    SELECTING --select own piece--> SHOWING_MOVES --listed target--> (move)
        (move) --> SELECTING        if the next side can still play
        (move) --> GAME_OVER        on checkmate (winner set) or stalemate

Invalid input never raises. Selecting an empty square or an opponent's
piece returns the state unchanged, and ``play_move`` reports a rejected
target through its boolean result without touching the board.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

import chess

from chesscore.board import Board, square_name
from chesscore.constants import DEFAULT_SEARCH_DEPTH, ENGINE_COLOR
from chesscore.pieces import Move
from chesscore.rules import GameStatus, game_status, get_legal_moves
from chesscore.search import AIMove, generate_ai_move

_log = logging.getLogger(__name__)


class GameMode(str, enum.Enum):
    NORMAL = "normal"  # human vs human
    AI = "ai"          # human (white) vs engine (black)


class Phase(str, enum.Enum):
    SELECTING = "selecting"
    SHOWING_MOVES = "showing_moves"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameState:
    """
    Snapshot of one game's controller state.

    Attributes:
        mode:        Whether the engine answers black's moves.
        turn:        Side to move.
        phase:       Where the turn is in the select/move cycle.
        selected:    Coordinates of the selected piece in SHOWING_MOVES.
        legal_moves: Targets offered for the selected piece.
        status:      Status of the side to move after the last move.
        winner:      Winning color after checkmate, else None.
    """

    mode: GameMode = GameMode.NORMAL
    turn: chess.Color = chess.WHITE
    phase: Phase = Phase.SELECTING
    selected: Move | None = None
    legal_moves: tuple[Move, ...] = ()
    status: GameStatus = GameStatus.ONGOING
    winner: chess.Color | None = None

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.GAME_OVER


def new_game(mode: GameMode = GameMode.NORMAL) -> tuple[Board, GameState]:
    """Fresh board in the starting position and the matching initial state."""
    return Board.standard(), GameState(mode=GameMode(mode))


def select_piece(board: Board, state: GameState, square: tuple[int, int]) -> GameState:
    """
    Select the piece on ``square`` and list its legal moves.

    Anything other than a piece of the side to move (an empty square, an
    opponent's piece, a finished game) is ignored: the same state comes
    back. Selecting again while moves are shown replaces the selection.
    """
    if state.is_over:
        return state
    x, y = square
    piece = board.piece_at(x, y)
    if piece is None or piece.color != state.turn:
        return state
    return replace(
        state,
        phase=Phase.SHOWING_MOVES,
        selected=Move(x, y),
        legal_moves=tuple(get_legal_moves(board, piece)),
    )


def _after_move(board: Board, state: GameState) -> GameState:
    turn = not state.turn
    status = game_status(board, turn)
    if status == GameStatus.CHECKMATE:
        _log.info("checkmate, %s wins", chess.COLOR_NAMES[state.turn])
        return GameState(mode=state.mode, turn=turn, phase=Phase.GAME_OVER, status=status, winner=state.turn)
    if status == GameStatus.STALEMATE:
        _log.info("stalemate with %s to move", chess.COLOR_NAMES[turn])
        return GameState(mode=state.mode, turn=turn, phase=Phase.GAME_OVER, status=status)
    return GameState(mode=state.mode, turn=turn, status=status)


def play_move(board: Board, state: GameState, target: tuple[int, int]) -> tuple[GameState, bool]:
    """
    Move the selected piece to ``target`` if that target was offered.

    Returns:
        ``(next_state, True)`` after applying the move, or
        ``(state, False)`` when nothing is selected, the game is over, or
        ``target`` is not among the selected piece's legal moves. A rejected
        move never reaches ``Board.move``.
    """
    target = Move(*target)
    if state.phase != Phase.SHOWING_MOVES or target not in state.legal_moves:
        return state, False
    piece = board.piece_at(*state.selected)
    board.move(piece, target)
    return _after_move(board, state), True


def ai_reply(
    board: Board,
    state: GameState,
    depth: int = DEFAULT_SEARCH_DEPTH,
) -> tuple[GameState, AIMove | None]:
    """
    Let the engine move when the game is in AI mode and it is the engine's turn.

    Returns:
        The next state and the move played, or the unchanged state and None
        when the engine is not supposed to move (wrong mode, wrong turn,
        game over).
    """
    if state.mode != GameMode.AI or state.turn != ENGINE_COLOR or state.is_over:
        return state, None

    result = generate_ai_move(board, depth, state.turn == chess.WHITE)
    if result is None:
        # Status evaluation after the previous move ends the game first.
        return state, None

    _log.debug("engine plays %s%s", square_name(*result.source), square_name(*result.move))
    board.move(result.piece, result.move)
    return _after_move(board, state), result


def check_square(board: Board, state: GameState) -> Move | None:
    """Square of the side-to-move's king when it is in check, for highlighting."""
    if state.status not in (GameStatus.CHECK, GameStatus.CHECKMATE):
        return None
    king = board.find_king(state.turn)
    return king.position if king is not None else None

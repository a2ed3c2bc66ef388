import chess

from chesscore.board import Board
from chesscore.pieces import Move
from chesscore.rules import GameStatus
from chesscore.session import (
    GameMode,
    GameState,
    Phase,
    ai_reply,
    check_square,
    new_game,
    play_move,
    select_piece,
)


def _play(board: Board, state: GameState, source: tuple, target: tuple) -> GameState:
    state = select_piece(board, state, source)
    state, applied = play_move(board, state, target)
    assert applied, f"{source}->{target} was rejected"
    return state


def test_new_game_starts_with_white_selecting() -> None:
    board, state = new_game()
    assert board.to_fen() == Board.standard().to_fen()
    assert state.turn == chess.WHITE
    assert state.phase == Phase.SELECTING
    assert state.mode == GameMode.NORMAL
    assert not state.is_over


def test_new_game_accepts_mode_string() -> None:
    _, state = new_game("ai")
    assert state.mode == GameMode.AI


def test_selecting_own_piece_lists_its_moves() -> None:
    board, state = new_game()
    selected = select_piece(board, state, (7, 1))
    assert selected.phase == Phase.SHOWING_MOVES
    assert selected.selected == Move(7, 1)
    assert sorted(selected.legal_moves) == [Move(5, 0), Move(5, 2)]


def test_invalid_selection_is_ignored() -> None:
    board, state = new_game()
    assert select_piece(board, state, (4, 4)) is state
    assert select_piece(board, state, (1, 4)) is state


def test_reselecting_replaces_selection() -> None:
    board, state = new_game()
    state = select_piece(board, state, (7, 1))
    state = select_piece(board, state, (6, 4))
    assert state.selected == Move(6, 4)
    assert sorted(state.legal_moves) == [Move(4, 4), Move(5, 4)]


def test_illegal_target_is_rejected_without_touching_board() -> None:
    board, state = new_game()
    fen = board.to_fen()
    selected = select_piece(board, state, (6, 4))
    after, applied = play_move(board, selected, (3, 4))
    assert applied is False
    assert after is selected
    assert board.to_fen() == fen


def test_move_without_selection_is_rejected() -> None:
    board, state = new_game()
    after, applied = play_move(board, state, (4, 4))
    assert applied is False
    assert after is state


def test_legal_move_flips_turn() -> None:
    board, state = new_game()
    state = _play(board, state, (6, 4), (4, 4))
    pawn = board.piece_at(4, 4)
    assert pawn.piece_type == chess.PAWN and pawn.first_turn is False
    assert board.piece_at(6, 4) is None
    assert state.turn == chess.BLACK
    assert state.phase == Phase.SELECTING
    assert state.status == GameStatus.ONGOING
    assert state.selected is None and state.legal_moves == ()


def test_fools_mate_ends_the_game() -> None:
    board, state = new_game()
    state = _play(board, state, (6, 5), (5, 5))  # f3
    state = _play(board, state, (1, 4), (3, 4))  # e5
    state = _play(board, state, (6, 6), (4, 6))  # g4
    state = _play(board, state, (0, 3), (4, 7))  # Qh4#

    assert state.phase == Phase.GAME_OVER
    assert state.status == GameStatus.CHECKMATE
    assert state.winner == chess.BLACK
    assert state.turn == chess.WHITE
    assert check_square(board, state) == Move(7, 4)
    assert select_piece(board, state, (6, 0)) is state


def test_check_is_reported_for_next_side() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
    state = GameState()
    state = _play(board, state, (7, 0), (0, 0))
    assert state.status == GameStatus.CHECK
    assert state.phase == Phase.SELECTING
    assert check_square(board, state) == Move(0, 4)


def test_stalemating_move_ends_the_game_without_winner() -> None:
    board = Board.from_fen("k7/8/8/1Q6/8/8/8/7K w - - 0 1")
    state = _play(board, GameState(), (3, 1), (2, 1))
    assert state.phase == Phase.GAME_OVER
    assert state.status == GameStatus.STALEMATE
    assert state.winner is None
    assert check_square(board, state) is None


def test_ai_reply_only_in_ai_mode() -> None:
    board, state = new_game(GameMode.NORMAL)
    state = _play(board, state, (6, 4), (4, 4))
    after, result = ai_reply(board, state, depth=1)
    assert result is None
    assert after is state


def test_ai_reply_waits_for_engine_turn() -> None:
    board, state = new_game(GameMode.AI)
    after, result = ai_reply(board, state, depth=1)
    assert result is None
    assert after is state


def test_ai_reply_plays_black() -> None:
    board, state = new_game(GameMode.AI)
    state = _play(board, state, (6, 4), (4, 4))
    state, result = ai_reply(board, state, depth=1)

    assert result is not None
    assert result.piece.color == chess.BLACK
    assert board.piece_at(*result.move) is result.piece
    assert board.piece_at(*result.source) is None
    assert state.turn == chess.WHITE
    assert state.phase == Phase.SELECTING
    assert state.mode == GameMode.AI


def test_ai_reply_delivers_mate() -> None:
    board = Board.from_fen("r5k1/8/8/8/8/8/5PPP/7K b - - 0 1")
    state = GameState(mode=GameMode.AI, turn=chess.BLACK)
    state, result = ai_reply(board, state, depth=2)
    assert result.source == Move(0, 0)
    assert result.move == Move(7, 0)
    assert state.status == GameStatus.CHECKMATE
    assert state.is_over
    assert state.winner == chess.BLACK

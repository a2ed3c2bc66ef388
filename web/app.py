"""
FastAPI web application for the chess rules and search core.

Exposes the game controller over HTTP so a browser front end (or any other
client) can play a full game without knowing the rules itself:

    POST   /api/games                 start a game ("normal" or "ai" mode)
    GET    /api/games/{id}            current snapshot
    DELETE /api/games/{id}            drop the game
    POST   /api/games/{id}/select     legal targets for one piece
    POST   /api/games/{id}/move       play a move (+ engine reply in AI mode)
    POST   /api/move                  stateless best move for a FEN

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool,
  which is the correct pattern for CPU-bound blocking calls like the search.
- Games live in process memory. Each game has its own lock so two requests
  for the same game are applied one after the other; different games never
  share a board. At most MAX_GAMES are kept; finished games go first.
- If the engine fails while replying, the human move is undone as well.
- Coordinates are grid coordinates: x is the row (0 = black's back rank),
  y the column (0 = the a-file).
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field

import chess
from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel, Field, field_validator

from chesscore.board import Board, square_name
from chesscore.constants import DEFAULT_SEARCH_DEPTH, MAX_SEARCH_DEPTH
from chesscore.rules import GameStatus, game_status
from chesscore.search import AIMove, generate_ai_move
from chesscore.session import (
    GameMode,
    GameState,
    ai_reply,
    check_square,
    new_game,
    play_move,
    select_piece,
)

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Chess AI", version="1.0.0")

# Upper bound on games kept in memory. Finished games are evicted first,
# then the oldest.
MAX_GAMES = 1000


def _clamp_depth(v: int) -> int:
    return max(1, min(v, MAX_SEARCH_DEPTH))


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class Square(BaseModel):
    """Grid coordinates of one square."""

    x: int = Field(ge=0, le=7)
    y: int = Field(ge=0, le=7)


class NewGameRequest(BaseModel):
    """
    Client request to start a game.

    Fields:
        mode:  "normal" for two humans, "ai" to have the engine play black.
        depth: Search depth for the engine, clamped to [1, MAX_SEARCH_DEPTH].
    """

    mode: GameMode = GameMode.NORMAL
    depth: int = DEFAULT_SEARCH_DEPTH

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        """Clamp depth to a safe operating range."""
        return _clamp_depth(v)


class MoveRequest(BaseModel):
    source: Square
    target: Square


class EngineMove(BaseModel):
    """
    A move chosen by the engine.

    Fields:
        source, target: Grid coordinates of the move.
        move:  The same move as from-to algebraic squares, e.g. "e7e5".
        score: Minimax score, positive when white is better.
        nodes: Positions visited by the search.
    """

    source: Square
    target: Square
    move: str
    score: float
    nodes: int


class GameResponse(BaseModel):
    """
    Snapshot of a game after any request.

    Fields:
        id:          Game identifier.
        mode:        "normal" or "ai".
        fen:         Current placement and side to move.
        turn:        "white" or "black".
        phase:       "selecting", "showing_moves" or "game_over".
        status:      "ongoing", "check", "checkmate" or "stalemate".
        winner:      "white"/"black" after checkmate, else null.
        check:       Square of the king in check, else null.
        engine_move: The engine's reply to the last move, if it made one.
    """

    id: str
    mode: GameMode
    fen: str
    turn: str
    phase: str
    status: GameStatus
    winner: str | None = None
    check: Square | None = None
    engine_move: EngineMove | None = None


class SelectResponse(BaseModel):
    square: Square
    moves: list[Square]


class BestMoveRequest(BaseModel):
    """
    Stateless engine request.

    Fields:
        fen:   FEN of the position; its side-to-move field picks the side.
        depth: Search depth, clamped to [1, MAX_SEARCH_DEPTH].
    """

    fen: str
    depth: int = DEFAULT_SEARCH_DEPTH

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        """Clamp depth to a safe operating range."""
        return _clamp_depth(v)


class BestMoveResponse(BaseModel):
    move: str
    fen: str
    score: float
    nodes: int


# ---------------------------------------------------------------------------
# Game registry
# ---------------------------------------------------------------------------


@dataclass
class _Game:
    board: Board
    state: GameState
    depth: int
    lock: threading.Lock = field(default_factory=threading.Lock)
    engine_move: EngineMove | None = None


_games: dict[str, _Game] = {}
_games_lock = threading.Lock()


def _get_game(game_id: str) -> _Game:
    with _games_lock:
        game = _games.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail=f"Unknown game: {game_id}")
    return game


def _register(game_id: str, game: _Game) -> None:
    """Store ``game``, evicting finished or old games once MAX_GAMES is reached."""
    with _games_lock:
        while len(_games) >= MAX_GAMES:
            finished = next((gid for gid, g in _games.items() if g.state.is_over), None)
            evicted = finished if finished is not None else next(iter(_games))
            del _games[evicted]
            _log.info("Evicted game id=%s", evicted)
        _games[game_id] = game


def _engine_move(result: AIMove) -> EngineMove:
    return EngineMove(
        source=Square(x=result.source.x, y=result.source.y),
        target=Square(x=result.move.x, y=result.move.y),
        move=square_name(*result.source) + square_name(*result.move),
        score=result.score,
        nodes=result.nodes,
    )


def _snapshot(game_id: str, game: _Game) -> GameResponse:
    state = game.state
    king = check_square(game.board, state)
    return GameResponse(
        id=game_id,
        mode=state.mode,
        fen=game.board.to_fen(state.turn),
        turn=chess.COLOR_NAMES[state.turn],
        phase=state.phase.value,
        status=state.status,
        winner=chess.COLOR_NAMES[state.winner] if state.winner is not None else None,
        check=Square(x=king.x, y=king.y) if king is not None else None,
        engine_move=game.engine_move,
    )


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/games", response_model=GameResponse, status_code=201)
def api_new_game(request: NewGameRequest) -> GameResponse:
    """Start a new game in the standard position with white to move."""
    board, state = new_game(request.mode)
    game_id = uuid.uuid4().hex
    game = _Game(board=board, state=state, depth=request.depth)
    _register(game_id, game)
    _log.info("New game id=%s mode=%s depth=%d", game_id, request.mode.value, request.depth)
    return _snapshot(game_id, game)


@app.get("/api/games/{game_id}", response_model=GameResponse)
def api_get_game(game_id: str) -> GameResponse:
    game = _get_game(game_id)
    with game.lock:
        return _snapshot(game_id, game)


@app.delete("/api/games/{game_id}", status_code=204)
def api_delete_game(game_id: str) -> Response:
    with _games_lock:
        if _games.pop(game_id, None) is None:
            raise HTTPException(status_code=404, detail=f"Unknown game: {game_id}")
    return Response(status_code=204)


@app.post("/api/games/{game_id}/select", response_model=SelectResponse)
def api_select(game_id: str, square: Square) -> SelectResponse:
    """
    Legal targets for the piece on ``square``.

    Selecting an empty square or a piece of the side not to move is not an
    error: the response simply lists no moves.
    """
    game = _get_game(game_id)
    with game.lock:
        state = select_piece(game.board, game.state, (square.x, square.y))
        if state is game.state:
            return SelectResponse(square=square, moves=[])
        game.state = state
        return SelectResponse(square=square, moves=[Square(x=m.x, y=m.y) for m in state.legal_moves])


@app.post("/api/games/{game_id}/move", response_model=GameResponse)
def api_move_piece(game_id: str, request: MoveRequest) -> GameResponse:
    """
    Play ``source`` -> ``target`` and, in AI mode, the engine's answer.

    Raises:
        HTTPException 404: Unknown game.
        HTTPException 409: The game is already over.
        HTTPException 400: The move is not legal in the current position.
        HTTPException 500: The engine failed while choosing its reply.
    """
    game = _get_game(game_id)
    with game.lock:
        if game.state.is_over:
            raise HTTPException(status_code=409, detail=f"Game is already over: {game.state.status.value}")

        source = (request.source.x, request.source.y)
        board_before, state_before = game.board.clone_board(), game.state
        state = select_piece(game.board, game.state, source)
        applied = False
        if state.selected == source:
            state, applied = play_move(game.board, state, (request.target.x, request.target.y))
        if not applied:
            raise HTTPException(
                status_code=400,
                detail=f"Illegal move: {square_name(*source)}{square_name(request.target.x, request.target.y)}",
            )

        try:
            state, reply = ai_reply(game.board, state, game.depth)
        except Exception as exc:
            # Roll back the human move as well: in AI mode the engine's side
            # is never handed to the client.
            game.board = board_before
            game.state = state_before
            _log.exception("Engine search failed for game=%s", game_id)
            raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

        game.engine_move = _engine_move(reply) if reply is not None else None
        game.state = state
        return _snapshot(game_id, game)


@app.post("/api/move", response_model=BestMoveResponse)
def api_best_move(request: BestMoveRequest) -> BestMoveResponse:
    """
    Compute the engine's best move for the side to move in ``fen``.

    Raises:
        HTTPException 400: Malformed FEN, impossible position (e.g. the side
                           not to move is in check) or game already over.
        HTTPException 500: Engine returned no move.
    """
    try:
        position = chess.Board(request.fen)
        board = Board.from_fen(request.fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc
    if not position.is_valid():
        raise HTTPException(status_code=400, detail=f"Invalid position: {position.status()!r}")

    turn = position.turn
    status = game_status(board, turn)
    if status in (GameStatus.CHECKMATE, GameStatus.STALEMATE):
        raise HTTPException(status_code=400, detail=f"Game is already over: {status.value}")

    try:
        result = generate_ai_move(board, request.depth, turn == chess.WHITE)
    except Exception as exc:
        _log.exception("Engine search failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if result is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    move = square_name(*result.source) + square_name(*result.move)
    _log.info(
        "Move=%s score=%.1f depth=%d nodes=%d fen=%s",
        move,
        result.score,
        request.depth,
        result.nodes,
        request.fen[:40],
    )

    board.move(result.piece, result.move)
    return BestMoveResponse(
        move=move,
        fen=board.to_fen(not turn),
        score=result.score,
        nodes=result.nodes,
    )

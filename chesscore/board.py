"""
The 8x8 board: piece placement, lookup, cloning, and the raw move primitive.

The board owns its pieces. ``grid[x][y]`` holds a :class:`Piece` or None,
with row 0 being black's back rank and column 0 the a-file, so the grid
prints top-down exactly like a FEN string reads.

``Board.move`` performs no legality checking at all. It is the same
primitive for real moves and for what-if simulation; legality is the
caller's job (see :mod:`chesscore.rules`). Simulation either works on a
``clone_board()`` copy or inside ``probe()``, which puts everything back on
exit.

FEN import/export goes through python-chess, which also gives us square
names and an ASCII diagram for free. Castling and en-passant information is
dropped on import: neither exists in this game.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import chess

from chesscore.constants import BACK_RANK, BOARD_SIZE, HOME_ROW, PAWN_ROW
from chesscore.pieces import Move, Piece


def to_square(x: int, y: int) -> chess.Square:
    """python-chess square for grid coordinates (x = row from the top)."""
    return chess.square(y, BOARD_SIZE - 1 - x)


def coordinates(square: chess.Square) -> Move:
    """Grid coordinates for a python-chess square."""
    return Move(BOARD_SIZE - 1 - chess.square_rank(square), chess.square_file(square))


def square_name(x: int, y: int) -> str:
    """Algebraic name, e.g. (6, 4) -> 'e2'."""
    return chess.square_name(to_square(x, y))


def _empty_grid() -> list[list[Piece | None]]:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


class Board:
    """
    Grid of pieces for one game.

    Attributes:
        grid: 8x8 list of rows; each cell is a Piece or None.
    """

    def __init__(self) -> None:
        self.grid: list[list[Piece | None]] = _empty_grid()

    @classmethod
    def standard(cls) -> Board:
        """A board with the standard starting position."""
        board = cls()
        board.setup_pieces()
        return board

    @classmethod
    def from_fen(cls, fen: str) -> Board:
        """
        Build a board from a FEN string (the placement field is enough).

        Only piece placement is read. Pawns standing on their starting row
        keep their double step; every other pawn is treated as having moved.

        Raises:
            ValueError: python-chess could not parse the FEN.
        """
        position = chess.Board(fen)
        board = cls()
        for square, piece in position.piece_map().items():
            x, y = coordinates(square)
            first_turn = piece.piece_type != chess.PAWN or x == PAWN_ROW[piece.color]
            board.place(piece.piece_type, piece.color, x, y, first_turn=first_turn)
        return board

    # -----------------------------------------------------------------------
    # Placement
    # -----------------------------------------------------------------------

    def setup_pieces(self) -> None:
        """Clear the grid and place the standard 32-piece starting position."""
        self.grid = _empty_grid()
        for color in (chess.BLACK, chess.WHITE):
            for y, piece_type in enumerate(BACK_RANK):
                self.place(piece_type, color, HOME_ROW[color], y)
                self.place(chess.PAWN, color, PAWN_ROW[color], y)

    def place(
        self,
        piece_type: chess.PieceType,
        color: chess.Color,
        x: int,
        y: int,
        first_turn: bool = True,
    ) -> Piece:
        """Put a new piece on (x, y), replacing whatever was there."""
        if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
            raise ValueError(f"square ({x}, {y}) is off the board")
        piece = Piece(piece_type, color, x, y, first_turn)
        self.grid[x][y] = piece
        return piece

    def remove(self, x: int, y: int) -> Piece | None:
        piece = self.grid[x][y]
        self.grid[x][y] = None
        return piece

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def piece_at(self, x: int, y: int) -> Piece | None:
        return self.grid[x][y]

    def pieces(self) -> list[Piece]:
        """Every piece on the board in row-major order."""
        return [piece for row in self.grid for piece in row if piece is not None]

    def get_pieces(self, color: chess.Color) -> list[Piece]:
        """
        All pieces of ``color`` in row-major scan order.

        The order is what makes search and checkmate scans deterministic;
        nothing depends on it for correctness.
        """
        return [piece for row in self.grid for piece in row if piece is not None and piece.color == color]

    def find_king(self, color: chess.Color) -> Piece | None:
        """The first king of ``color`` in row-major order, or None."""
        for row in self.grid:
            for piece in row:
                if piece is not None and piece.piece_type == chess.KING and piece.color == color:
                    return piece
        return None

    # -----------------------------------------------------------------------
    # Copying and moving
    # -----------------------------------------------------------------------

    def clone_board(self) -> Board:
        """
        Independent deep copy: a new grid holding new piece objects.

        The clone shares no mutable state with this board, so anything done
        to it (moves, captures, first-turn flags) is invisible here.
        """
        clone = Board()
        clone.grid = [[piece.copy() if piece is not None else None for piece in row] for row in self.grid]
        return clone

    def move(
        self,
        piece: Piece,
        target: tuple[int, int],
        grid: list[list[Piece | None]] | None = None,
    ) -> None:
        """
        Relocate ``piece`` to ``target`` unconditionally.

        Clears the origin cell, overwrites the destination (capturing
        whatever stood there), updates the piece's coordinates, and ends a
        pawn's first turn. No legality checking whatsoever: passing a target
        that did not come from the rules engine corrupts the position.

        Args:
            piece:  The piece to move. Must stand on ``grid``.
            target: (x, y) destination.
            grid:   Grid to move on. Defaults to this board's own grid.
        """
        grid = self.grid if grid is None else grid
        x, y = target
        if piece.piece_type == chess.PAWN:
            piece.first_turn = False
        grid[piece.x][piece.y] = None
        grid[x][y] = piece
        piece.x, piece.y = x, y

    @contextmanager
    def probe(self, piece: Piece, target: tuple[int, int]) -> Iterator[Piece | None]:
        """
        Apply a move for the duration of a ``with`` block, then undo it.

        Yields the captured piece (or None). On exit the origin and target
        cells, the piece's coordinates and its first-turn flag are restored,
        leaving the grid exactly as it was, including on early return or an
        exception inside the block.
        """
        origin_x, origin_y = piece.x, piece.y
        x, y = target
        captured = self.grid[x][y]
        first_turn = piece.first_turn
        self.move(piece, target)
        try:
            yield captured
        finally:
            self.grid[x][y] = captured
            self.grid[origin_x][origin_y] = piece
            piece.x, piece.y = origin_x, origin_y
            piece.first_turn = first_turn

    # -----------------------------------------------------------------------
    # Interop
    # -----------------------------------------------------------------------

    def to_chess(self, turn: chess.Color = chess.WHITE) -> chess.Board:
        """python-chess board with the same placement and no castling rights."""
        position = chess.Board(None)
        position.turn = turn
        for piece in self.pieces():
            position.set_piece_at(to_square(piece.x, piece.y), chess.Piece(piece.piece_type, piece.color))
        return position

    def to_fen(self, turn: chess.Color = chess.WHITE) -> str:
        return self.to_chess(turn).fen()

    def __str__(self) -> str:
        return str(self.to_chess())

    def __repr__(self) -> str:
        return f"Board({self.to_chess().board_fen()!r})"

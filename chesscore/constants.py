"""
Engine constants: board geometry, piece values, positional tables, and
search parameters.

All numeric constants used throughout the engine are defined here so that
the move generators, the evaluation, and the search never introduce their
own magic numbers.

Coordinates are grid coordinates, not python-chess squares: ``x`` is the row
(0 = black's back rank, 7 = white's back rank) and ``y`` is the column
(0 = the a-file). The positional tables below are laid out the same way, so
a white piece on ``(x, y)`` reads ``table[x][y]`` directly.
"""

import chess

# ---------------------------------------------------------------------------
# Board geometry
# ---------------------------------------------------------------------------

BOARD_SIZE: int = 8

# Standard back rank, file a to file h.
BACK_RANK: tuple[chess.PieceType, ...] = (
    chess.ROOK, chess.KNIGHT, chess.BISHOP, chess.QUEEN,
    chess.KING, chess.BISHOP, chess.KNIGHT, chess.ROOK,
)

# Rows the pieces start on. Pawns on their home row still have the double step.
HOME_ROW: dict[chess.Color, int] = {chess.WHITE: 7, chess.BLACK: 0}
PAWN_ROW: dict[chess.Color, int] = {chess.WHITE: 6, chess.BLACK: 1}

# Pawns of each color only ever move along x in this direction.
PAWN_DIRECTION: dict[chess.Color, int] = {chess.WHITE: -1, chess.BLACK: 1}

# ---------------------------------------------------------------------------
# Movement vectors (dx, dy)
# ---------------------------------------------------------------------------

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 0), (0, 1), (-1, 0), (0, -1),
    (1, 1), (1, -1), (-1, 1), (-1, -1),
)

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (2, 1), (2, -1), (-2, 1), (-2, -1),
    (1, 2), (1, -2), (-1, 2), (-1, -2),
)

ROOK_DIRECTIONS: tuple[tuple[int, int], ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))
BISHOP_DIRECTIONS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))

SLIDING_DIRECTIONS: dict[chess.PieceType, tuple[tuple[int, int], ...]] = {
    chess.ROOK:   ROOK_DIRECTIONS,
    chess.BISHOP: BISHOP_DIRECTIONS,
    chess.QUEEN:  ROOK_DIRECTIONS + BISHOP_DIRECTIONS,
}

STEP_OFFSETS: dict[chess.PieceType, tuple[tuple[int, int], ...]] = {
    chess.KING:   KING_OFFSETS,
    chess.KNIGHT: KNIGHT_OFFSETS,
}

# A sliding piece can never travel further than this in one direction.
MAX_SLIDE: int = BOARD_SIZE - 1

# ---------------------------------------------------------------------------
# Piece values
# ---------------------------------------------------------------------------
# Material on the "1 pawn = 10" scale. The king's value is counted for both
# sides, so it cancels out unless a king is actually missing from the board.

PAWN_VALUE: int = 10
KNIGHT_VALUE: int = 30
BISHOP_VALUE: int = 30
ROOK_VALUE: int = 50
QUEEN_VALUE: int = 90
KING_VALUE: int = 900

PIECE_VALUES: dict[chess.PieceType, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   KING_VALUE,
}

# ---------------------------------------------------------------------------
# Positional tables (white's point of view, row 0 = black's back rank)
# ---------------------------------------------------------------------------
# Hand-tuned bonuses for central control and typical good squares. These
# tables set the engine's playing style; do not edit them casually.

PAWN_TABLE: list[list[float]] = [
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0],
    [5.0,  5.0,  5.0,  5.0,  5.0,  5.0,  5.0,  5.0],
    [1.0,  1.0,  2.0,  3.0,  3.0,  2.0,  1.0,  1.0],
    [0.5,  0.5,  1.0,  2.5,  2.5,  1.0,  0.5,  0.5],
    [0.0,  0.0,  0.0,  2.0,  2.0,  0.0,  0.0,  0.0],
    [0.5, -0.5, -1.0,  0.0,  0.0, -1.0, -0.5,  0.5],
    [0.5,  1.0,  1.0, -2.0, -2.0,  1.0,  1.0,  0.5],
    [0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0],
]

KNIGHT_TABLE: list[list[float]] = [
    [-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0],
    [-4.0, -2.0,  0.0,  0.0,  0.0,  0.0, -2.0, -4.0],
    [-3.0,  0.0,  1.0,  1.5,  1.5,  1.0,  0.0, -3.0],
    [-3.0,  0.5,  1.5,  2.0,  2.0,  1.5,  0.5, -3.0],
    [-3.0,  0.0,  1.5,  2.0,  2.0,  1.5,  0.0, -3.0],
    [-3.0,  0.5,  1.0,  1.5,  1.5,  1.0,  0.5, -3.0],
    [-4.0, -2.0,  0.0,  0.5,  0.5,  0.0, -2.0, -4.0],
    [-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0],
]

BISHOP_TABLE: list[list[float]] = [
    [-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0],
    [-1.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -1.0],
    [-1.0,  0.0,  0.5,  1.0,  1.0,  0.5,  0.0, -1.0],
    [-1.0,  0.5,  0.5,  1.0,  1.0,  0.5,  0.5, -1.0],
    [-1.0,  0.0,  1.0,  1.0,  1.0,  1.0,  0.0, -1.0],
    [-1.0,  1.0,  1.0,  1.0,  1.0,  1.0,  1.0, -1.0],
    [-1.0,  0.5,  0.0,  0.0,  0.0,  0.0,  0.5, -1.0],
    [-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0],
]

ROOK_TABLE: list[list[float]] = [
    [ 0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0],
    [ 0.5,  1.0,  1.0,  1.0,  1.0,  1.0,  1.0,  0.5],
    [-0.5,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5],
    [-0.5,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5],
    [-0.5,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5],
    [-0.5,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5],
    [-0.5,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5],
    [ 0.0,  0.0,  0.0,  0.5,  0.5,  0.0,  0.0,  0.0],
]

QUEEN_TABLE: list[list[float]] = [
    [-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0],
    [-1.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -1.0],
    [-1.0,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -1.0],
    [-0.5,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -0.5],
    [ 0.0,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -0.5],
    [-1.0,  0.5,  0.5,  0.5,  0.5,  0.5,  0.0, -1.0],
    [-1.0,  0.0,  0.5,  0.0,  0.0,  0.0,  0.0, -1.0],
    [-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0],
]

KING_TABLE: list[list[float]] = [
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0],
    [-2.0, -3.0, -3.0, -4.0, -4.0, -3.0, -3.0, -2.0],
    [-1.0, -2.0, -2.0, -2.0, -2.0, -2.0, -2.0, -1.0],
    [ 2.0,  2.0,  0.0,  0.0,  0.0,  0.0,  2.0,  2.0],
    [ 2.0,  3.0,  1.0,  0.0,  0.0,  1.0,  3.0,  2.0],
]

PST_WHITE: dict[chess.PieceType, list[list[float]]] = {
    chess.PAWN:   PAWN_TABLE,
    chess.KNIGHT: KNIGHT_TABLE,
    chess.BISHOP: BISHOP_TABLE,
    chess.ROOK:   ROOK_TABLE,
    chess.QUEEN:  QUEEN_TABLE,
    chess.KING:   KING_TABLE,
}

# Black reads the same tables with the rows reversed (its back rank is row 0).
PST_BLACK: dict[chess.PieceType, list[list[float]]] = {
    piece_type: table[::-1] for piece_type, table in PST_WHITE.items()
}

PST: dict[chess.Color, dict[chess.PieceType, list[list[float]]]] = {
    chess.WHITE: PST_WHITE,
    chess.BLACK: PST_BLACK,
}

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# A mated side scores CHECKMATE_SCORE plus the remaining search depth, so a
# quicker mate always looks more extreme than a slower one. The value sits
# far above any reachable material total (2 * (900 + 8*10 + ... ) < 4000).

CHECKMATE_SCORE: int = 100_000
DRAW_SCORE: int = 0

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------

DEFAULT_SEARCH_DEPTH: int = 3

# Upper bound accepted from callers over HTTP. Depth 5 from a middlegame
# position takes minutes with full-board cloning.
MAX_SEARCH_DEPTH: int = 4

# In AI mode the human plays white and the engine answers with black.
ENGINE_COLOR: chess.Color = chess.BLACK

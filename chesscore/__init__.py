"""
Chess rules and search core.

This package implements the rules of a two-player chess game (without
castling, en passant or promotion) and a minimax AI opponent with
alpha-beta pruning and a material plus piece-square-table evaluation.

Modules:
    constants — Board geometry, piece values, PST arrays, search parameters
    pieces    — Piece record and per-kind geometric move generators
    board     — 8x8 grid, cloning, the raw move primitive, FEN interop
    rules     — Check, legal moves, checkmate, stalemate
    evaluate  — Static evaluation (material + piece-square tables)
    search    — Minimax with alpha-beta, AI move selection
    session   — Game controller state machine (select, move, AI reply)
"""

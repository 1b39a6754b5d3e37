import os
import sys
import pytest

# Add project root to sys.path (so tests can import hazardchess.*)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(PROJECT_ROOT)

from hazardchess.engine import HazardChessEngine
from hazardchess.types import Piece, PieceKind


def clear_pieces(engine):
    """Remove every piece from the board (hazards and reveal state untouched)."""
    for cell in engine.grid.iter_cells():
        cell.piece = None


def place(engine, row, col, kind, is_white, has_moved=False):
    """Put a new piece on (row, col) and return it."""
    piece = Piece(kind, is_white, has_moved)
    engine.grid.cells[row][col].piece = piece
    return piece


def place_kings(engine, white=(7, 7), black=(0, 7)):
    """Both kings, out of the way in the right-hand column by default."""
    place(engine, white[0], white[1], PieceKind.KING, True)
    place(engine, black[0], black[1], PieceKind.KING, False)


@pytest.fixture
def make_engine():
    """Returns a function that builds a seeded engine with a fixed hazard layout."""
    def _make(height=8, hazards=(), seed=1234, **kwargs):
        return HazardChessEngine(height, 2, seed=seed, hazards=hazards, **kwargs)
    return _make

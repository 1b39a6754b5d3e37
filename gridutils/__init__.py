"""
Hazard Chess - Grid Utilities Package
Square-grid neighbour helpers and algebraic square notation.
"""
from .neighbors import chebyshev_neighbors, KING_DELTAS
from .notation import square_name, move_text

__all__ = ['chebyshev_neighbors', 'KING_DELTAS', 'square_name', 'move_text']

# gridutils/neighbors.py
"""
Neighbour calculation for rectangular square grids.

Two cells are neighbours when their Chebyshev distance is exactly 1, i.e. the
up-to-8 cells a chess king could step to. Results are clipped to the grid.

Row 0 is the top of the board (black's back rank); columns run left to right.
"""

from __future__ import annotations
from typing import List, Tuple


# Deltas in row-major scan order
KING_DELTAS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),  # up-left
    (-1,  0),  # up
    (-1,  1),  # up-right
    ( 0, -1),  # left
    ( 0,  1),  # right
    ( 1, -1),  # down-left
    ( 1,  0),  # down
    ( 1,  1),  # down-right
)


def chebyshev_neighbors(r: int, c: int, rows: int, cols: int) -> List[Tuple[int, int]]:
    """
    Return in-bounds neighbour coordinates of (r, c) on a rows x cols grid.

    Args:
        r: Row index (0-based)
        c: Column index (0-based)
        rows: Number of rows in the grid
        cols: Number of columns in the grid

    Returns:
        List of (row, col) pairs in row-major order. Empty when (r, c) itself
        is outside the grid.
    """
    if not (0 <= r < rows and 0 <= c < cols):
        return []

    neighbors: List[Tuple[int, int]] = []
    for dr, dc in KING_DELTAS:
        nr, nc = r + dr, c + dc
        if 0 <= nr < rows and 0 <= nc < cols:
            neighbors.append((nr, nc))

    return neighbors

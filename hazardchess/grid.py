"""
Grid - board cell storage for the Hazard Chess engine.

Fixed-width, configurable-height rectangle of Cells. The grid owns the cells
and answers coordinate queries; it knows nothing about turns or history.
Hazard counts are precomputed in bulk with numpy and can be recounted per
cell during reveal.
"""
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from gridutils.neighbors import chebyshev_neighbors
from hazardchess.config import BOARD_WIDTH, MIN_HEIGHT
from hazardchess.types import Cell, CellSnapshot, Coord, Piece, PieceKind

BACK_RANK: Tuple[PieceKind, ...] = (
    PieceKind.ROOK, PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.QUEEN,
    PieceKind.KING, PieceKind.BISHOP, PieceKind.KNIGHT, PieceKind.ROOK,
)


class Grid:
    """
    Rectangular board of cells.

    Responsibilities:
        - Allocate rows x width cells once (never resized)
        - Bounds-checked cell lookup
        - Neighbour enumeration and hazard counting
        - Whole-board snapshot and restore

    Attributes:
        rows: Board height
        width: Board width (8 for standard play)
        cells: rows x width list of Cell
    """

    def __init__(self, rows: int, width: int = BOARD_WIDTH):
        """
        Initialize an empty grid.

        Args:
            rows: Number of rows (at least 4)
            width: Number of columns (must be > 0)
        """
        if rows < MIN_HEIGHT or width <= 0:
            raise ValueError(f"Grid dimensions must be at least {MIN_HEIGHT} rows and 1 column: {rows}x{width}")

        self.rows: int = rows
        self.width: int = width
        self.cells: List[List[Cell]] = [
            [Cell(r, c) for c in range(width)] for r in range(rows)
        ]

    # =============================================================================
    # CELL QUERIES
    # =============================================================================

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.width

    def cell(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at (row, col), or None when out of bounds."""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        cell = self.cell(row, col)
        return cell.piece if cell is not None else None

    def iter_cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for row in self.cells:
            yield from row

    def neighbors(self, row: int, col: int) -> List[Cell]:
        """Up-to-8 neighbouring cells of (row, col), row-major order."""
        return [self.cells[nr][nc] for nr, nc in chebyshev_neighbors(row, col, self.rows, self.width)]

    def find_piece(self, piece: Piece) -> List[Coord]:
        """Every coordinate holding exactly this piece object."""
        return [cell.position for cell in self.iter_cells() if cell.piece is piece]

    # =============================================================================
    # SETUP
    # =============================================================================

    def setup_pieces(self) -> None:
        """Place both armies: black on rows 0-1, white on the bottom two rows."""
        if self.width != len(BACK_RANK):
            raise ValueError(f"Standard setup needs {len(BACK_RANK)} columns, grid has {self.width}")
        bottom = self.rows - 1
        for col, kind in enumerate(BACK_RANK):
            self.cells[0][col].piece = Piece(kind, is_white=False)
            self.cells[bottom][col].piece = Piece(kind, is_white=True)
        for col in range(self.width):
            self.cells[1][col].piece = Piece(PieceKind.PAWN, is_white=False)
            self.cells[bottom - 1][col].piece = Piece(PieceKind.PAWN, is_white=True)

    def set_hazards(self, coords: Iterable[Coord]) -> int:
        """
        Replace the hazard layout and recompute every adjacency count.

        Args:
            coords: Hazard coordinates; out-of-bounds entries are ignored

        Returns:
            Number of hazards actually placed
        """
        for cell in self.iter_cells():
            cell.hazard = False
        placed = 0
        for r, c in coords:
            cell = self.cell(r, c)
            if cell is not None and not cell.hazard:
                cell.hazard = True
                placed += 1
        self.update_hazard_counts()
        return placed

    # =============================================================================
    # HAZARD COUNTS
    # =============================================================================

    def hazard_mask(self) -> np.ndarray:
        """Boolean rows x width array of hazard truth."""
        return np.array([[cell.hazard for cell in row] for row in self.cells], dtype=bool)

    def hazard_count_matrix(self) -> np.ndarray:
        """Adjacent-hazard count for every cell (the cell itself excluded)."""
        padded = np.pad(self.hazard_mask().astype(np.int8), 1)
        counts = np.zeros((self.rows, self.width), dtype=np.int8)
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                counts += padded[1 + dr:1 + dr + self.rows, 1 + dc:1 + dc + self.width]
        return counts

    def update_hazard_counts(self) -> None:
        """Store the adjacent-hazard count on every cell."""
        counts = self.hazard_count_matrix()
        for cell in self.iter_cells():
            cell.adjacent_hazard_count = int(counts[cell.row, cell.col])

    def count_adjacent_hazards(self, row: int, col: int) -> int:
        return sum(1 for n in self.neighbors(row, col) if n.hazard)

    def count_flagged_neighbors(self, row: int, col: int) -> int:
        return sum(1 for n in self.neighbors(row, col) if n.flagged)

    def hazard_total(self) -> int:
        return int(self.hazard_mask().sum())

    # =============================================================================
    # SNAPSHOT / RESTORE
    # =============================================================================

    def snapshot(self) -> Tuple[Tuple[CellSnapshot, ...], ...]:
        return tuple(tuple(cell.snapshot() for cell in row) for row in self.cells)

    def restore(self, cells: Sequence[Sequence[CellSnapshot]]) -> None:
        """Copy a snapshot back into the live cells. Shape must match."""
        if len(cells) != self.rows or any(len(row) != self.width for row in cells):
            raise ValueError(f"Snapshot shape does not match {self.rows}x{self.width} grid")
        for live_row, snap_row in zip(self.cells, cells):
            for cell, snap in zip(live_row, snap_row):
                cell.restore(snap)

"""
Piece movement rules for Hazard Chess.

Each piece kind has one pure legality function. They consult only board
occupancy, never hazard or reveal state, and never mutate anything. The
orchestrator performs the move after `can_move` returns True.
"""
from typing import Callable, Dict, List, Tuple

from hazardchess.grid import Grid
from hazardchess.types import Coord, Piece, PieceKind

MoveRule = Callable[[Piece, int, int, int, int, Grid], bool]

KNIGHT_JUMPS: Tuple[Tuple[int, int], ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


def _destination_ok(piece: Piece, dr: int, dc: int, grid: Grid) -> bool:
    """Destination must be empty or hold an enemy piece."""
    target = grid.cells[dr][dc].piece
    return target is None or target.is_white != piece.is_white


def _path_clear(sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    """True if every cell strictly between source and destination is empty."""
    step_r, step_c = _sign(dr - sr), _sign(dc - sc)
    r, c = sr + step_r, sc + step_c
    while (r, c) != (dr, dc):
        if grid.cells[r][c].piece is not None:
            return False
        r += step_r
        c += step_c
    return True


def pawn_direction(piece: Piece) -> int:
    """White pawns move toward row 0, black pawns toward the last row."""
    return -1 if piece.is_white else 1


def pawn_start_row(piece: Piece, rows: int) -> int:
    return rows - 2 if piece.is_white else 1


def promotion_row(piece: Piece, rows: int) -> int:
    return 0 if piece.is_white else rows - 1


# =============================================================================
# PER-KIND RULES
# =============================================================================

def _rook_can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    if sr != dr and sc != dc:
        return False
    return _path_clear(sr, sc, dr, dc, grid) and _destination_ok(piece, dr, dc, grid)


def _bishop_can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    if abs(dr - sr) != abs(dc - sc):
        return False
    return _path_clear(sr, sc, dr, dc, grid) and _destination_ok(piece, dr, dc, grid)


def _queen_can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    straight = sr == dr or sc == dc
    diagonal = abs(dr - sr) == abs(dc - sc)
    if not (straight or diagonal):
        return False
    return _path_clear(sr, sc, dr, dc, grid) and _destination_ok(piece, dr, dc, grid)


def _knight_can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    if (dr - sr, dc - sc) not in KNIGHT_JUMPS:
        return False
    return _destination_ok(piece, dr, dc, grid)


def _king_can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    if max(abs(dr - sr), abs(dc - sc)) != 1:
        return False
    return _destination_ok(piece, dr, dc, grid)


def _pawn_can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    """
    Pawn rules: single push, double push from the start row, diagonal capture,
    and a loose en passant.

    The en passant branch accepts a diagonal step onto an empty cell whenever
    the cell beside the pawn (source row, destination column) holds an enemy
    pawn that has moved at least once. It does not require that pawn's last
    move to have been a double step, and the side pawn is not removed.
    """
    step = pawn_direction(piece)
    target = grid.cells[dr][dc].piece

    # Single push
    if sc == dc and dr == sr + step:
        return target is None

    # Double push
    if sc == dc and dr == sr + 2 * step:
        if piece.has_moved or sr != pawn_start_row(piece, grid.rows):
            return False
        return grid.cells[sr + step][sc].piece is None and target is None

    if abs(dc - sc) == 1 and dr == sr + step:
        # Diagonal capture
        if target is not None:
            return target.is_white != piece.is_white
        # En passant (loose)
        side = grid.cells[sr][dc].piece
        return (
            side is not None
            and side.kind is PieceKind.PAWN
            and side.is_white != piece.is_white
            and side.has_moved
        )

    return False


MOVE_RULES: Dict[PieceKind, MoveRule] = {
    PieceKind.PAWN: _pawn_can_move,
    PieceKind.KNIGHT: _knight_can_move,
    PieceKind.BISHOP: _bishop_can_move,
    PieceKind.ROOK: _rook_can_move,
    PieceKind.QUEEN: _queen_can_move,
    PieceKind.KING: _king_can_move,
}


# =============================================================================
# PUBLIC API
# =============================================================================

def can_move(piece: Piece, sr: int, sc: int, dr: int, dc: int, grid: Grid) -> bool:
    """
    Check whether piece standing on (sr, sc) may move to (dr, dc).

    Args:
        piece: The moving piece (normally the occupant of (sr, sc))
        sr, sc: Source coordinates
        dr, dc: Destination coordinates
        grid: Board to read occupancy from

    Returns:
        True if the move is legal by occupancy alone
    """
    if not (grid.in_bounds(sr, sc) and grid.in_bounds(dr, dc)):
        return False
    if (sr, sc) == (dr, dc):
        return False
    return MOVE_RULES[piece.kind](piece, sr, sc, dr, dc, grid)


def legal_destinations(piece: Piece, row: int, col: int, grid: Grid) -> List[Coord]:
    """All destinations `can_move` accepts for piece at (row, col), row-major."""
    return [
        (tr, tc)
        for tr in range(grid.rows)
        for tc in range(grid.width)
        if can_move(piece, row, col, tr, tc, grid)
    ]

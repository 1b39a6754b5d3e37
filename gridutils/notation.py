"""
Algebraic square names for log lines ("e2", "e2 → e4").
Row 0 is the top rank, so rank numbers count up from the bottom row.
"""
from typing import Tuple

FILES = "abcdefghijklmnopqrstuvwxyz"


def square_name(row: int, col: int, height: int) -> str:
    """Convert grid coordinates to an algebraic name like 'e4'."""
    if not (0 <= col < len(FILES)):
        return f"{row},{col}"
    return f"{FILES[col]}{height - row}"


def move_text(src: Tuple[int, int], dst: Tuple[int, int], height: int) -> str:
    """Format a move as 'e2 → e4'."""
    return f"{square_name(src[0], src[1], height)} → {square_name(dst[0], dst[1], height)}"

"""
Shared types for the Hazard Chess engine.
Separated to avoid circular imports between modules.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

Coord = Tuple[int, int]


class PieceKind(Enum):
    """The six chess piece kinds."""
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"

    @property
    def letter(self) -> str:
        return "N" if self is PieceKind.KNIGHT else self.value[0].upper()


class GameStatus(Enum):
    """Orchestrator states."""
    AWAITING_MOVE = "awaiting_move"
    GAME_OVER = "game_over"


@dataclass(frozen=True, eq=False)
class Piece:
    """
    A chess piece as an immutable value record.

    Equality is identity: two white pawns are different pieces, and a trigger
    piece is located on the board with `is`. Marking a pawn as moved returns a
    new record via `moved()`.
    """
    kind: PieceKind
    is_white: bool
    has_moved: bool = False

    def moved(self) -> "Piece":
        if self.has_moved:
            return self
        return replace(self, has_moved=True)

    @property
    def is_king(self) -> bool:
        return self.kind is PieceKind.KING

    def __str__(self):
        return self.kind.letter if self.is_white else self.kind.letter.lower()


@dataclass(frozen=True)
class CellSnapshot:
    """Point-in-time copy of one cell's game state."""
    piece: Optional[Piece]
    revealed: bool
    exploded: bool
    hazard: bool
    flagged: bool
    adjacent_hazard_count: int


@dataclass
class Cell:
    """One board square: occupant plus hazard/reveal/flag state."""
    row: int
    col: int
    piece: Optional[Piece] = None
    revealed: bool = False
    exploded: bool = False
    hazard: bool = False
    flagged: bool = False
    adjacent_hazard_count: int = 0

    @property
    def position(self) -> Coord:
        return (self.row, self.col)

    def can_show_number(self) -> bool:
        """True if a UI should draw this cell's hazard count."""
        return self.revealed and not self.exploded and self.adjacent_hazard_count > 0

    def snapshot(self) -> CellSnapshot:
        return CellSnapshot(
            piece=self.piece,
            revealed=self.revealed,
            exploded=self.exploded,
            hazard=self.hazard,
            flagged=self.flagged,
            adjacent_hazard_count=self.adjacent_hazard_count,
        )

    def restore(self, snap: CellSnapshot) -> None:
        self.piece = snap.piece
        self.revealed = snap.revealed
        self.exploded = snap.exploded
        self.hazard = snap.hazard
        self.flagged = snap.flagged
        self.adjacent_hazard_count = snap.adjacent_hazard_count


@dataclass(frozen=True)
class TurnState:
    """Whose move it is and whether (and by whom) the game has been won."""
    white_to_move: bool = True
    game_over: bool = False
    winner_is_white: Optional[bool] = None


class Move(NamedTuple):
    """A from/to pair as returned by the move selector."""
    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @property
    def source(self) -> Coord:
        return (self.from_row, self.from_col)

    @property
    def destination(self) -> Coord:
        return (self.to_row, self.to_col)


class TurnAction(NamedTuple):
    """What the built-in opponent did on its turn."""
    action: str                     # "move" or "quick_reveal"
    move: Optional[Move] = None
    cell: Optional[Coord] = None


@dataclass
class RevealOutcome:
    """What a reveal, flood, or chord did to the board."""
    opened: List[Coord] = field(default_factory=list)
    exploded: List[Coord] = field(default_factory=list)
    destroyed: List[Piece] = field(default_factory=list)

    @property
    def any_opened(self) -> bool:
        return bool(self.opened)

    @property
    def destroyed_kings(self) -> List[Piece]:
        return [p for p in self.destroyed if p.is_king]

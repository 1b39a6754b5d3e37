"""
HazardChessEngine - turn and move orchestrator for Hazard Chess.

Chess legality and the hazard field are two independent rule systems; this
class is the only place that mutates the grid and the turn state together.
Every state-changing operation (move, chord, flag toggle) records a snapshot
first so it can be undone.

Expected failures (illegal moves, out-of-bounds coordinates, no-op chords,
empty history) are reported with False/None return values and leave the
state untouched. Exceptions are reserved for programming errors such as an
invalid board size.
"""
import logging
import random
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from gridutils.notation import move_text, square_name
from hazardchess.config import EngineConfig
from hazardchess.grid import Grid
from hazardchess.hazards import HazardField
from hazardchess.history import Snapshot, SnapshotHistory
from hazardchess.pieces import can_move, legal_destinations, promotion_row
from hazardchess.selector import MoveSelector
from hazardchess.types import (
    Cell,
    Coord,
    GameStatus,
    Move,
    Piece,
    PieceKind,
    RevealOutcome,
    TurnAction,
    TurnState,
)

logger = logging.getLogger(__name__)

PROMOTION_KINDS = (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT)


class HazardChessEngine:
    """
    Game state manager for chess on a minesweeper field.

    Responsibilities:
        - Own the grid, turn state, and undo history for one game
        - Validate and perform moves, flag toggles, and chords
        - Translate hazard outcomes (destroyed kings) into a game result
        - Expose the built-in black opponent

    Attributes:
        grid: Live board (replaced on reset, never resized)
        turn: Current TurnState
        history: Snapshot undo stack
        hazard_level: Density hint given at construction (informational)
        rng: Random source for hazard placement and move jitter
    """

    def __init__(self, height: int = 8, hazard_level: int = 2, *,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 hazards: Optional[Iterable[Coord]] = None,
                 config: Optional[EngineConfig] = None):
        """
        Start a new game.

        Args:
            height: Number of rows (at least 4)
            hazard_level: Hazard density hint, kept for callers
            seed: Seed for a private random.Random (ignored if rng is given)
            rng: Random source to use instead of a seeded one
            hazards: Fixed hazard coordinates; random placement when None
            config: Engine settings
        """
        self.config: EngineConfig = config or EngineConfig()
        self.hazard_level: int = hazard_level
        self.rng: random.Random = rng if rng is not None else random.Random(seed)
        self.history: SnapshotHistory = SnapshotHistory(max_history=self.config.max_history)
        self.turn: TurnState = TurnState()
        self._new_grid(height, hazards)

    def _new_grid(self, height: int, hazards: Optional[Iterable[Coord]]) -> None:
        """Allocate a fresh grid with both armies and a hazard layout."""
        grid = Grid(height)
        grid.setup_pieces()
        self.grid: Grid = grid
        self.hazard_field: HazardField = HazardField(grid, self.rng, self.config)
        self.selector: MoveSelector = MoveSelector(grid, self.rng, self.config.weights)

        if hazards is None:
            self.hazard_field.place_hazards()
        else:
            grid.set_hazards(hazards)

    def reset(self, hazards: Optional[Iterable[Coord]] = None) -> None:
        """Discard the current game and start a fresh one of the same size."""
        self.history.clear_history()
        self.turn = TurnState()
        self._new_grid(self.grid.rows, hazards)

    # =============================================================================
    # STATE QUERIES
    # =============================================================================

    @property
    def height(self) -> int:
        return self.grid.rows

    @property
    def width(self) -> int:
        return self.grid.width

    def cell(self, row: int, col: int) -> Optional[Cell]:
        """
        Get the cell at (row, col).

        The returned Cell is the live one; callers should treat it as
        read-only and go through the engine for every change.
        """
        return self.grid.cell(row, col)

    def is_game_over(self) -> bool:
        return self.turn.game_over

    def winner(self) -> Optional[bool]:
        """True if white won, False if black won, None while undecided."""
        return self.turn.winner_is_white

    def is_white_to_move(self) -> bool:
        return self.turn.white_to_move

    def status(self) -> GameStatus:
        return GameStatus.GAME_OVER if self.turn.game_over else GameStatus.AWAITING_MOVE

    def legal_moves_from(self, row: int, col: int) -> List[Coord]:
        """Destinations the piece on (row, col) may move to (empty if none)."""
        piece = self.grid.piece_at(row, col)
        if piece is None:
            return []
        return legal_destinations(piece, row, col, self.grid)

    def snapshot(self) -> Snapshot:
        """Value copy of the full live state."""
        return Snapshot(cells=self.grid.snapshot(), turn=self.turn)

    # =============================================================================
    # TURN STATE (internal)
    # =============================================================================

    def _flip_turn(self) -> None:
        self.turn = replace(self.turn, white_to_move=not self.turn.white_to_move)

    def _end_game(self, white_wins: bool, reason: str) -> None:
        self.turn = replace(self.turn, game_over=True, winner_is_white=white_wins)
        logger.info("Game over: %s wins (%s)", "white" if white_wins else "black", reason)

    def _apply_outcome(self, outcome: RevealOutcome) -> None:
        """A destroyed king hands the game to the other colour."""
        for king in outcome.destroyed_kings:
            self._end_game(not king.is_white, "king destroyed by hazard")

    def _save_snapshot(self, description: str) -> None:
        self.history.push(self.snapshot(), description)

    # =============================================================================
    # MOVES
    # =============================================================================

    def move_piece(self, sr: int, sc: int, dr: int, dc: int) -> bool:
        """
        Move the piece on (sr, sc) to (dr, dc).

        Sequence: legality check, snapshot, relocation (capture), hazard
        consequence at the destination, automatic safety chord, turn flip.

        Args:
            sr, sc: Source coordinates
            dr, dc: Destination coordinates

        Returns:
            True if the move was made; False leaves all state unchanged
        """
        if self.turn.game_over:
            return False

        src = self.grid.cell(sr, sc)
        dst = self.grid.cell(dr, dc)
        if src is None or dst is None or src.piece is None:
            return False

        piece = src.piece
        label = move_text((sr, sc), (dr, dc), self.height)
        if not can_move(piece, sr, sc, dr, dc, self.grid):
            logger.debug("Rejected %s %s", piece, label)
            return False

        self._save_snapshot(f"{piece} {label}")

        mover = piece.moved() if piece.kind is PieceKind.PAWN else piece
        captured = dst.piece
        dst.piece = mover
        src.piece = None

        if captured is not None and captured.is_king:
            self._end_game(mover.is_white, "king captured")

        if dst.hazard and not dst.exploded:
            # Stepped onto a live hazard: the mover is destroyed
            self._apply_outcome(self.hazard_field.detonate(dr, dc))
        else:
            self._apply_outcome(self.hazard_field.reveal_cell(dr, dc))
            if dst.can_show_number():
                self._quick_reveal(dst, mover, consume_turn=False, record=False)

        self._flip_turn()
        return True

    # =============================================================================
    # HAZARD OPERATIONS
    # =============================================================================

    def reveal_cell(self, row: int, col: int) -> None:
        """Reveal (row, col) with flood fill. Not recorded in history."""
        self._apply_outcome(self.hazard_field.reveal_cell(row, col))

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle the flag on (row, col).

        Allowed on unrevealed, exploded, or occupied cells. Refused on a
        revealed cell holding a piece of the side not to move. Never changes
        whose turn it is.

        Returns:
            True if the flag changed
        """
        if self.turn.game_over:
            return False

        cell = self.grid.cell(row, col)
        if cell is None:
            return False
        if cell.revealed and cell.piece is not None and cell.piece.is_white != self.turn.white_to_move:
            return False
        if cell.revealed and not cell.exploded and cell.piece is None:
            return False

        action = "Unflag" if cell.flagged else "Flag"
        self._save_snapshot(f"{action} {square_name(row, col, self.height)}")
        cell.flagged = not cell.flagged
        return True

    def check_quick_reveal(self, cell: Optional[Cell], trigger_piece: Optional[Piece] = None,
                           consume_turn: bool = True) -> bool:
        """
        Chord around a satisfied numbered cell.

        Args:
            cell: Revealed numbered cell of this engine's grid
            trigger_piece: Piece removed if the chord sets off a hazard
            consume_turn: Flip the turn when the chord opens anything

        Returns:
            True if at least one cell was opened
        """
        if self.turn.game_over or cell is None:
            return False
        if self.grid.cell(cell.row, cell.col) is not cell:
            return False
        return self._quick_reveal(cell, trigger_piece, consume_turn, record=True)

    def _quick_reveal(self, cell: Cell, trigger_piece: Optional[Piece],
                      consume_turn: bool, record: bool) -> bool:
        if not self.hazard_field.is_chordable(cell):
            return False

        # Provisional snapshot; dropped again if nothing opens
        if record:
            self._save_snapshot(f"Quick reveal {square_name(cell.row, cell.col, self.height)}")

        outcome = self.hazard_field.chord(cell, trigger_piece)
        if not outcome.any_opened:
            if record:
                self.history.discard_last()
            return False

        self._apply_outcome(outcome)
        if consume_turn:
            self._flip_turn()
        return True

    # =============================================================================
    # PROMOTION
    # =============================================================================

    def pending_promotion(self) -> Optional[Coord]:
        """Coordinates of a pawn standing on its promotion row, if any."""
        for row in (0, self.height - 1):
            for cell in self.grid.cells[row]:
                piece = cell.piece
                if piece is not None and piece.kind is PieceKind.PAWN \
                        and promotion_row(piece, self.height) == row:
                    return cell.position
        return None

    def promote_pawn(self, row: int, col: int, kind: PieceKind = PieceKind.QUEEN) -> bool:
        """
        Replace a pawn on its promotion row with a piece of the chosen kind.

        Part of the move that reached the row: no snapshot is taken, so
        undoing that move also undoes the promotion.
        """
        if kind not in PROMOTION_KINDS:
            return False
        cell = self.grid.cell(row, col)
        if cell is None or cell.piece is None or cell.piece.kind is not PieceKind.PAWN:
            return False
        pawn = cell.piece
        if promotion_row(pawn, self.height) != row:
            return False

        cell.piece = Piece(kind, pawn.is_white, has_moved=True)
        logger.debug("Pawn promoted to %s at %s", kind.value, square_name(row, col, self.height))
        return True

    # =============================================================================
    # BUILT-IN OPPONENT
    # =============================================================================

    def choose_best_ai_move(self) -> Optional[Move]:
        """Best-scoring black move, or None if black has none or the game is over."""
        if self.turn.game_over:
            return None
        return self.selector.choose_best_move(is_white=False)

    def find_quick_reveal_candidate(self) -> Optional[Coord]:
        return self.selector.find_quick_reveal_candidate()

    def play_ai_turn(self) -> Optional[TurnAction]:
        """
        Let the built-in opponent (black) take its turn.

        Plays the best move and auto-promotes to a queen. With no legal move,
        falls back to a turn-consuming chord on the first satisfied number,
        using the black piece standing on it (if any) as the trigger.

        Returns:
            The action taken, or None if black could not act
        """
        if self.turn.game_over or self.turn.white_to_move:
            return None

        move = self.choose_best_ai_move()
        if move is not None:
            if not self.move_piece(*move):
                return None
            tr, tc = move.destination
            landed = self.grid.cells[tr][tc].piece
            if landed is not None and landed.kind is PieceKind.PAWN \
                    and promotion_row(landed, self.height) == tr:
                self.promote_pawn(tr, tc, PieceKind.QUEEN)
            return TurnAction("move", move=move)

        candidate = self.find_quick_reveal_candidate()
        if candidate is None:
            return None
        number_cell = self.grid.cell(*candidate)
        occupant = number_cell.piece
        trigger = occupant if occupant is not None and not occupant.is_white else None
        if self.check_quick_reveal(number_cell, trigger, consume_turn=True):
            return TurnAction("quick_reveal", cell=candidate)
        return None

    # =============================================================================
    # UNDO
    # =============================================================================

    def undo(self) -> bool:
        """Restore the state from before the last recorded operation."""
        snap = self.history.pop()
        if snap is None:
            return False
        self.grid.restore(snap.cells)
        self.turn = snap.turn
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def get_undo_description(self) -> Optional[str]:
        return self.history.get_undo_description()

    def clear_history(self) -> None:
        """Forget all snapshots; live state is untouched."""
        self.history.clear_history()

    def get_history_info(self) -> Dict[str, Any]:
        return self.history.get_history_info()

    # =============================================================================
    # STATISTICS
    # =============================================================================

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get board statistics.

        Returns:
            Dict with cell, hazard, flag, and piece counts plus turn and
            history information
        """
        stats = {
            "rows": self.height,
            "cols": self.width,
            "hazards": 0,
            "revealed_cells": 0,
            "exploded_cells": 0,
            "flagged_cells": 0,
            "white_pieces": 0,
            "black_pieces": 0,
        }

        for cell in self.grid.iter_cells():
            if cell.hazard:
                stats["hazards"] += 1
            if cell.revealed:
                stats["revealed_cells"] += 1
            if cell.exploded:
                stats["exploded_cells"] += 1
            if cell.flagged:
                stats["flagged_cells"] += 1
            if cell.piece is not None:
                stats["white_pieces" if cell.piece.is_white else "black_pieces"] += 1

        stats.update({
            "white_to_move": self.turn.white_to_move,
            "status": self.status().value,
            "winner_is_white": self.turn.winner_is_white,
            "can_undo": self.history.can_undo(),
            "total_snapshots": len(self.history),
        })
        return stats

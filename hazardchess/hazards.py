"""
Hazard field and reveal engine.

Places hazards at setup, reveals cells (flood-filling zero-count regions with
an explicit worklist), and performs the chord ("quick reveal") around a
satisfied numbered cell. Every mutating call returns a RevealOutcome
listing opened cells, explosions, and destroyed pieces. Turn state is not
touched here; the engine turns destroyed kings into a game result.
"""
import logging
import random
from typing import List, Optional

from gridutils.notation import square_name
from hazardchess.config import EngineConfig
from hazardchess.grid import Grid
from hazardchess.types import Cell, Piece, RevealOutcome

logger = logging.getLogger(__name__)


class HazardField:
    """Hazard placement and reveal operations over one Grid."""

    def __init__(self, grid: Grid, rng: random.Random, config: Optional[EngineConfig] = None):
        self.grid = grid
        self.rng = rng
        self.config = config or EngineConfig()

    # =============================================================================
    # PLACEMENT
    # =============================================================================

    def place_hazards(self) -> int:
        """
        Randomly place hazards on empty, hazard-free cells.

        Samples uniformly until the target count is reached or the attempt
        budget runs out. Falling short is not an error.

        Returns:
            Number of hazards placed
        """
        grid = self.grid
        target = self.config.hazard_target(grid.rows * grid.width)
        budget = target * self.config.placement_attempt_factor
        placed = 0
        attempts = 0

        while placed < target and attempts < budget:
            cell = grid.cells[self.rng.randrange(grid.rows)][self.rng.randrange(grid.width)]
            if not cell.hazard and cell.piece is None:
                cell.hazard = True
                placed += 1
            attempts += 1

        if placed < target:
            logger.debug("Placed %d of %d hazards after %d attempts", placed, target, attempts)
        grid.update_hazard_counts()
        return placed

    # =============================================================================
    # REVEAL
    # =============================================================================

    def _explode(self, cell: Cell, outcome: RevealOutcome) -> None:
        cell.revealed = True
        cell.exploded = True
        outcome.exploded.append(cell.position)
        if cell.piece is not None:
            outcome.destroyed.append(cell.piece)
            logger.debug("%s destroyed by hazard at %s", cell.piece,
                         square_name(cell.row, cell.col, self.grid.rows))
            cell.piece = None

    def detonate(self, row: int, col: int) -> RevealOutcome:
        """Reveal and explode a live hazard at (row, col), destroying its occupant."""
        outcome = RevealOutcome()
        cell = self.grid.cell(row, col)
        if cell is not None and cell.hazard and not cell.exploded:
            self._explode(cell, outcome)
        return outcome

    def reveal_cell(self, row: int, col: int) -> RevealOutcome:
        """
        Reveal (row, col), flood-filling through zero-count cells.

        No-op when out of bounds, already revealed, or flagged. A hazard
        explodes (destroying any occupant) and does not spread.
        """
        outcome = RevealOutcome()
        start = self.grid.cell(row, col)
        if start is None or start.revealed or start.flagged:
            return outcome

        if start.hazard:
            self._explode(start, outcome)
            return outcome

        self._flood_from(start, outcome)
        return outcome

    def _flood_from(self, start: Cell, outcome: RevealOutcome) -> None:
        """Open start and every cell reachable through zero-count cells."""
        stack: List[Cell] = [start]
        while stack:
            cell = stack.pop()
            # Hazards never get here: zero-count cells have no hazard neighbours
            if cell.revealed or cell.flagged:
                continue

            cell.revealed = True
            cell.adjacent_hazard_count = self.grid.count_adjacent_hazards(cell.row, cell.col)
            outcome.opened.append(cell.position)

            if cell.adjacent_hazard_count == 0:
                for neighbor in self.grid.neighbors(cell.row, cell.col):
                    if not neighbor.revealed and not neighbor.flagged:
                        stack.append(neighbor)

    # =============================================================================
    # CHORD / QUICK REVEAL
    # =============================================================================

    def is_chordable(self, cell: Optional[Cell]) -> bool:
        """A chord needs a revealed, non-exploded cell showing a positive number."""
        return cell is not None and cell.can_show_number()

    def chord(self, number_cell: Cell, trigger_piece: Optional[Piece] = None) -> RevealOutcome:
        """
        Reveal every unflagged, unrevealed neighbour of a satisfied number.

        Does nothing unless the flagged-neighbour count equals the cell's
        number. If anything explodes and trigger_piece is given, that piece
        is removed from every cell holding it.

        Args:
            number_cell: Revealed numbered cell to chord around
            trigger_piece: Piece penalised for an unsafe chord

        Returns:
            RevealOutcome; `any_opened` is False for a no-op
        """
        outcome = RevealOutcome()
        if not self.is_chordable(number_cell):
            return outcome

        row, col = number_cell.row, number_cell.col
        required = number_cell.adjacent_hazard_count
        flagged = self.grid.count_flagged_neighbors(row, col)
        if flagged != required:
            logger.debug("Chord at %s refused: %d flags for number %d",
                         square_name(row, col, self.grid.rows), flagged, required)
            return outcome

        for neighbor in self.grid.neighbors(row, col):
            if neighbor.flagged or neighbor.revealed:
                continue
            if neighbor.hazard:
                # Opened, but as an explosion
                outcome.opened.append(neighbor.position)
                self._explode(neighbor, outcome)
            else:
                self._flood_from(neighbor, outcome)

        if outcome.exploded and trigger_piece is not None:
            for r, c in self.grid.find_piece(trigger_piece):
                self.grid.cells[r][c].piece = None
                outcome.destroyed.append(trigger_piece)
                logger.debug("Trigger piece %s removed at %s after unsafe chord",
                             trigger_piece, square_name(r, c, self.grid.rows))

        return outcome

"""
Heuristic move selection for the built-in opponent.

Read-only: enumerates every legal move for one side, scores each with a
weighted sum (material, hazard knowledge, centrality, pawn progress, random
jitter) and returns the best. Safe to run on a worker thread as long as
nothing mutates the grid meanwhile.
"""
import logging
import random
from typing import List, Optional, Tuple

from hazardchess.config import HeuristicWeights
from hazardchess.grid import Grid
from hazardchess.pieces import can_move, pawn_direction
from hazardchess.types import Cell, Coord, Move, Piece, PieceKind

logger = logging.getLogger(__name__)


class MoveSelector:
    """Scores and picks moves from the current grid state."""

    def __init__(self, grid: Grid, rng: random.Random, weights: Optional[HeuristicWeights] = None):
        self.grid = grid
        self.rng = rng
        self.weights = weights or HeuristicWeights()

    # =============================================================================
    # RISK ESTIMATION
    # =============================================================================

    def estimate_risk(self, cell: Cell) -> float:
        """
        Guess how likely an unrevealed cell is to hold a hazard.

        Averages the counts of already-revealed neighbours and adds a penalty
        per flagged neighbour. With no revealed neighbour the default risk
        is returned.
        """
        w = self.weights
        known = 0
        total = 0
        flagged = 0
        for neighbor in self.grid.neighbors(cell.row, cell.col):
            if neighbor.revealed:
                known += 1
                total += neighbor.adjacent_hazard_count
            if neighbor.flagged:
                flagged += 1

        if known == 0:
            return w.default_risk
        avg = total / known
        return min(w.max_risk, (avg + flagged * w.flagged_neighbor_risk) / w.risk_divisor)

    # =============================================================================
    # SCORING
    # =============================================================================

    def score_move(self, piece: Piece, to_row: int, to_col: int) -> float:
        """Heuristic score for moving piece to (to_row, to_col), jitter excluded."""
        w = self.weights
        grid = self.grid
        dest = grid.cells[to_row][to_col]
        score = 0.0

        # Material
        if dest.piece is not None and dest.piece.is_white != piece.is_white:
            score += w.capture_base + w.piece_value(dest.piece.kind) * w.capture_per_value

        # Hazard knowledge
        if dest.revealed:
            if dest.exploded:
                score -= w.exploded_penalty
            elif dest.adjacent_hazard_count == 0:
                score += w.safe_zero_bonus
            else:
                score += max(0.0, w.safe_number_ceiling - dest.adjacent_hazard_count)
        else:
            score -= self.estimate_risk(dest) * w.risk_penalty
            score += w.unrevealed_bonus

        # Centrality
        center_dist = abs(to_row - grid.rows // 2) + abs(to_col - grid.width // 2)
        score += (w.centrality_base - center_dist) * w.centrality_scale

        # Pawn progress toward promotion
        if piece.kind is PieceKind.PAWN:
            start = grid.rows - 1 if piece.is_white else 0
            ranks_advanced = (to_row - start) * pawn_direction(piece)
            score += ranks_advanced * w.pawn_advance

        return score

    def candidate_moves(self, is_white: bool) -> List[Tuple[Move, Piece]]:
        """Every legal move for one side, row-major by source then destination."""
        grid = self.grid
        moves: List[Tuple[Move, Piece]] = []
        for cell in grid.iter_cells():
            piece = cell.piece
            if piece is None or piece.is_white != is_white:
                continue
            for tr in range(grid.rows):
                for tc in range(grid.width):
                    if can_move(piece, cell.row, cell.col, tr, tc, grid):
                        moves.append((Move(cell.row, cell.col, tr, tc), piece))
        return moves

    def choose_best_move(self, is_white: bool = False) -> Optional[Move]:
        """
        Pick the highest-scoring legal move for one side.

        Args:
            is_white: Side to choose for (the built-in opponent plays black)

        Returns:
            Best Move, or None when the side has no legal move
        """
        best: Optional[Move] = None
        best_score = float("-inf")
        candidates = self.candidate_moves(is_white)

        for move, piece in candidates:
            score = self.score_move(piece, move.to_row, move.to_col)
            score += self.rng.random() * self.weights.jitter
            if score > best_score:
                best, best_score = move, score

        if best is not None:
            logger.debug("Selected %s from %d candidates (score %.2f)", best, len(candidates), best_score)
        return best

    # =============================================================================
    # QUICK REVEAL CANDIDATES
    # =============================================================================

    def find_quick_reveal_candidate(self) -> Optional[Coord]:
        """
        First numbered cell (row-major) whose flags already satisfy its number
        and which still has a hidden, unflagged neighbour.
        """
        for cell in self.grid.iter_cells():
            if not cell.can_show_number():
                continue
            neighbors = self.grid.neighbors(cell.row, cell.col)
            flagged = sum(1 for n in neighbors if n.flagged)
            has_hidden = any(not n.revealed and not n.flagged for n in neighbors)
            if flagged == cell.adjacent_hazard_count and has_hidden:
                return cell.position
        return None

"""
Engine configuration for Hazard Chess.

Module-level defaults plus two frozen dataclasses that the engine accepts at
construction. There is no config file; callers override fields directly,
e.g. ``EngineConfig(max_history=50)``.
"""
from dataclasses import dataclass, field
from typing import Dict

from hazardchess.types import PieceKind

# Board
BOARD_WIDTH = 8
MIN_HEIGHT = 4          # two home ranks per side

# Hazard placement
MIN_HAZARDS = 5
CELLS_PER_HAZARD = 8
PLACEMENT_ATTEMPT_FACTOR = 20

# Undo history
MAX_HISTORY = 200

# Material values used by the move selector (king dwarfs everything)
PIECE_VALUES: Dict[PieceKind, int] = {
    PieceKind.KING: 1000,
    PieceKind.QUEEN: 9,
    PieceKind.ROOK: 5,
    PieceKind.BISHOP: 3,
    PieceKind.KNIGHT: 3,
    PieceKind.PAWN: 1,
}


@dataclass(frozen=True)
class HeuristicWeights:
    """Weights for the move selector's scoring terms."""
    capture_base: float = 200.0
    capture_per_value: float = 40.0
    exploded_penalty: float = 500.0
    safe_zero_bonus: float = 30.0
    safe_number_ceiling: float = 8.0
    risk_penalty: float = 80.0
    unrevealed_bonus: float = 2.0
    centrality_base: float = 14.0
    centrality_scale: float = 0.5
    pawn_advance: float = 0.3
    jitter: float = 0.5
    # Risk estimation for unrevealed cells
    default_risk: float = 0.12
    flagged_neighbor_risk: float = 0.9
    risk_divisor: float = 6.0
    max_risk: float = 0.85
    piece_values: Dict[PieceKind, int] = field(default_factory=lambda: dict(PIECE_VALUES))

    def piece_value(self, kind: PieceKind) -> int:
        return self.piece_values.get(kind, 1)


@dataclass(frozen=True)
class EngineConfig:
    """Hazard and history settings for one engine instance (width is always BOARD_WIDTH)."""
    max_history: int = MAX_HISTORY
    min_hazards: int = MIN_HAZARDS
    cells_per_hazard: int = CELLS_PER_HAZARD
    placement_attempt_factor: int = PLACEMENT_ATTEMPT_FACTOR
    weights: HeuristicWeights = field(default_factory=HeuristicWeights)

    def hazard_target(self, total_cells: int) -> int:
        """Number of hazards to aim for on a board of total_cells."""
        return max(self.min_hazards, total_cells // self.cells_per_hazard)

"""
Hazard Chess - Core Package
Grid model, piece legality, hazard field, undo history, and move selection.
"""
from .types import Cell, GameStatus, Move, Piece, PieceKind, TurnAction, TurnState
from .config import EngineConfig, HeuristicWeights
from .grid import Grid
from .history import Snapshot, SnapshotHistory
from .engine import HazardChessEngine

__all__ = ['HazardChessEngine', 'Grid', 'Cell', 'Piece', 'PieceKind', 'Move', 'GameStatus',
           'TurnAction', 'TurnState', 'EngineConfig', 'HeuristicWeights', 'Snapshot', 'SnapshotHistory']

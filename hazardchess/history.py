"""
Snapshot history for undo in Hazard Chess.

Every state-changing operation pushes a full snapshot before it mutates the
board. An operation that turns out to be a no-op discards its own snapshot.
The stack is bounded; the oldest entries fall off first.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from hazardchess.config import MAX_HISTORY
from hazardchess.types import CellSnapshot, TurnState


@dataclass(frozen=True)
class Snapshot:
    """Full copy of grid cells and turn state. Compares by value."""
    cells: Tuple[Tuple[CellSnapshot, ...], ...]
    turn: TurnState


@dataclass(frozen=True)
class HistoryEntry:
    """A snapshot plus a description of the operation it precedes."""
    snapshot: Snapshot
    description: str


class SnapshotHistory:
    """Bounded undo stack of snapshots."""

    def __init__(self, max_history: int = MAX_HISTORY):
        if max_history <= 0:
            raise ValueError(f"max_history must be positive: {max_history}")
        self.max_history = max_history
        self.entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def push(self, snapshot: Snapshot, description: str = "") -> None:
        """Record a snapshot taken before a mutation."""
        self.entries.append(HistoryEntry(snapshot, description))

        # Limit history size
        overflow = len(self.entries) - self.max_history
        if overflow > 0:
            del self.entries[:overflow]

    def discard_last(self) -> bool:
        """Drop the most recent snapshot without restoring it (no-op operations)."""
        if not self.entries:
            return False
        self.entries.pop()
        return True

    def pop(self) -> Optional[Snapshot]:
        """Remove and return the most recent snapshot, or None if empty."""
        if not self.entries:
            return None
        return self.entries.pop().snapshot

    def can_undo(self) -> bool:
        return bool(self.entries)

    def get_undo_description(self) -> Optional[str]:
        """Get description of the operation that would be undone."""
        if not self.entries:
            return None
        return self.entries[-1].description

    def clear_history(self) -> None:
        self.entries.clear()

    def get_history_info(self) -> Dict[str, Any]:
        """Get information about current history state."""
        return {
            "total_snapshots": len(self.entries),
            "max_history": self.max_history,
            "can_undo": self.can_undo(),
            "undo_description": self.get_undo_description(),
        }

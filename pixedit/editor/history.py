"""
Snapshot history for the PixEdit editor.

Every committed edit stores the full merged image. The stack is linear:
committing after an undo drops the redo branch, and when the capacity is
exceeded the oldest snapshot is evicted so the undo floor moves forward.
"""

from dataclasses import dataclass
from typing import List, Optional

from PySide6.QtGui import QImage

from pixedit.services.logging_service import get_logger

DEFAULT_MAX_HISTORY = 50


@dataclass(frozen=True)
class HistoryEntry:
    """An immutable merged snapshot and the ordinal it was committed with."""
    image: QImage
    ordinal: int


class HistoryStack:
    """
    Linear undo/redo stack of full-surface snapshots.

    Entries past current_index are only reachable through redo().
    """

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY) -> None:
        if max_size < 1:
            raise ValueError("History needs room for at least one entry")
        self._logger = get_logger(__name__)
        self._max_size = max_size
        self._entries: List[HistoryEntry] = []
        self._current: int = -1
        self._next_ordinal: int = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def current_index(self) -> int:
        """Index of the snapshot the surface currently shows (-1 if empty)."""
        return self._current

    @property
    def current(self) -> Optional[HistoryEntry]:
        if self._current < 0:
            return None
        return self._entries[self._current]

    @property
    def can_undo(self) -> bool:
        return self._current > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._current < len(self._entries) - 1

    def entries(self) -> List[HistoryEntry]:
        """Return a copy of the entry list, oldest first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._current = -1
        self._next_ordinal = 0

    def reset(self, snapshot: QImage) -> None:
        """Start a fresh history whose only entry is snapshot."""
        self.clear()
        self.commit(snapshot)

    def commit(self, snapshot: QImage) -> HistoryEntry:
        """
        Record a new snapshot after the current one.

        Redo entries are discarded first. If the stack is then over
        capacity the oldest entry is dropped and the cursor stays on the
        last entry.
        """
        del self._entries[self._current + 1:]

        entry = HistoryEntry(snapshot.copy(), self._next_ordinal)
        self._next_ordinal += 1
        self._entries.append(entry)

        if len(self._entries) > self._max_size:
            self._entries.pop(0)
        else:
            self._current += 1

        self._logger.debug(
            f"History commit #{entry.ordinal}: {self._current + 1}/{len(self._entries)}"
        )
        return entry

    def undo(self) -> Optional[HistoryEntry]:
        """Step back one entry. Returns the entry to restore, or None."""
        if not self.can_undo:
            return None
        self._current -= 1
        return self._entries[self._current]

    def redo(self) -> Optional[HistoryEntry]:
        """Step forward one entry. Returns the entry to restore, or None."""
        if not self.can_redo:
            return None
        self._current += 1
        return self._entries[self._current]

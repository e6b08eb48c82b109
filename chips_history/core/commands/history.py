"""
History Store - undo/redo stacks for committed commands.

Entries live in a single list with a cursor:

    entries = [e0, e1, e2, e3, e4]
                          ^ cursor = 3

entries[:cursor] is the undo stack (oldest first, e2 is current) and
entries[cursor:] is the redo stack (e3 is the next to redo). Undo and redo
only move the cursor, so an entry is always in exactly one stack.
"""
import uuid
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .base import Command
from .errors import EmptyHistoryError

UNDO = "undo"
REDO = "redo"


def _new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class HistoryEntry:
    """
    Immutable record of one committed (possibly merged) command.

    Attributes:
        id: Opaque identifier, stable for the entry's lifetime
        timestamp: Monotonic commit time in milliseconds
        description: Human-readable label for history panels
        command: The command owned by this entry
        merged_count: Number of commands folded into this entry
    """
    command: Command = field(compare=False)
    timestamp: int
    description: str
    id: str = field(default_factory=_new_entry_id)
    merged_count: int = 1

    @classmethod
    def create(cls, command: Command, timestamp: int) -> "HistoryEntry":
        return cls(command=command, timestamp=timestamp, description=command.description)

    def merged(self, timestamp: int) -> "HistoryEntry":
        """Entry describing this entry's command after it absorbed another one."""
        return replace(
            self,
            timestamp=timestamp,
            description=self.command.description,
            merged_count=self.merged_count + 1,
        )


class HistoryStore:
    """
    Undo and redo stacks with a bounded undo side.

    Owned by CommandManager; nothing else should mutate it.
    """

    def __init__(self, max_size: int = 100):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._entries: List[HistoryEntry] = []
        self._cursor = 0
        self._max_size = max_size

    # --- size ---

    @property
    def max_size(self) -> int:
        return self._max_size

    def resize(self, max_size: int) -> List[HistoryEntry]:
        """
        Change the undo stack bound.

        Returns:
            Entries evicted to satisfy the new bound (oldest first)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        return self._evict()

    @property
    def undo_size(self) -> int:
        return self._cursor

    @property
    def redo_size(self) -> int:
        return len(self._entries) - self._cursor

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries)

    # --- reads ---

    def peek_undo(self) -> HistoryEntry:
        """Current entry (top of the undo stack)."""
        if not self.can_undo:
            raise EmptyHistoryError(UNDO)
        return self._entries[self._cursor - 1]

    def peek_redo(self) -> HistoryEntry:
        """Next entry to redo (top of the redo stack)."""
        if not self.can_redo:
            raise EmptyHistoryError(REDO)
        return self._entries[self._cursor]

    def top(self) -> Optional[HistoryEntry]:
        return self._entries[self._cursor - 1] if self.can_undo else None

    def undo_entries(self) -> List[HistoryEntry]:
        """Undo stack, oldest first."""
        return self._entries[:self._cursor]

    def redo_entries(self) -> List[HistoryEntry]:
        """Redo stack, next to redo first."""
        return self._entries[self._cursor:]

    def locate(self, entry_id: str) -> Optional[Tuple[str, int]]:
        """
        Find an entry relative to the current position.

        Returns:
            (UNDO, depth) where depth 0 is the current entry,
            (REDO, position) where position 0 is the next to redo,
            or None when the id is unknown.
        """
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                if index < self._cursor:
                    return UNDO, self._cursor - 1 - index
                return REDO, index - self._cursor
        return None

    def find(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    # --- mutations ---

    def push(self, entry: HistoryEntry) -> List[HistoryEntry]:
        """
        Append a new current entry, dropping the redo stack.

        Returns:
            Entries evicted from the bottom of the undo stack
        """
        del self._entries[self._cursor:]
        self._entries.append(entry)
        self._cursor += 1
        return self._evict()

    def replace_top(self, entry: HistoryEntry) -> None:
        """Swap the current entry for its merged version (same id)."""
        top = self.peek_undo()
        if top.id != entry.id:
            raise ValueError(f"Cannot replace entry {top.id} with {entry.id}")
        self._entries[self._cursor - 1] = entry

    def clear_redo(self) -> None:
        del self._entries[self._cursor:]

    def step_back(self) -> HistoryEntry:
        """Move the current entry onto the redo stack."""
        entry = self.peek_undo()
        self._cursor -= 1
        return entry

    def step_forward(self) -> HistoryEntry:
        """
        Move the next redo entry onto the undo stack.

        Evicts from the bottom when a resize left the redo side larger
        than the room remaining under max_size.
        """
        entry = self.peek_redo()
        self._cursor += 1
        self._evict()
        return entry

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = 0

    def _evict(self) -> List[HistoryEntry]:
        excess = self._cursor - self._max_size
        if excess <= 0:
            return []
        evicted = self._entries[:excess]
        del self._entries[:excess]
        self._cursor -= excess
        return evicted

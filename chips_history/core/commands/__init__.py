"""
Command History System.

Provides undo/redo infrastructure for card editing:
- Command / MergeableCommand: reversible units of work
- HistoryEntry / HistoryStore: committed commands and the undo/redo stacks
- CommandManager: execute/undo/redo/go_to_history with merging and a
  single-flight guard
- HistoryPanelModel: UI-facing observer of history events
- Reusable commands (SetPropertyCommand, CompositeCommand)
"""
from .base import Command, MergeableCommand
from .errors import (
    FailureReason,
    CommandHistoryError,
    HistoryBusyError,
    EmptyHistoryError,
    HistoryNotFoundError,
    CommandExecutionError,
    HistoryTraversalError,
)
from .history import HistoryEntry, HistoryStore
from .manager import CommandManager, ManagerState, NavigationResult
from .panel import HistoryPanelModel, HistoryRow
from .examples import SetPropertyCommand, CompositeCommand

__all__ = [
    # Base interfaces
    "Command",
    "MergeableCommand",
    # Errors
    "FailureReason",
    "CommandHistoryError",
    "HistoryBusyError",
    "EmptyHistoryError",
    "HistoryNotFoundError",
    "CommandExecutionError",
    "HistoryTraversalError",
    # Systems
    "HistoryEntry",
    "HistoryStore",
    "CommandManager",
    "ManagerState",
    "NavigationResult",
    "HistoryPanelModel",
    "HistoryRow",
    # Reusable implementations
    "SetPropertyCommand",
    "CompositeCommand",
]

"""
chips-history - undo/redo engine for the Chips card editor.

Usage:
    from chips_history import create_command_manager, SetPropertyCommand

    manager = await create_command_manager()
    await manager.execute(SetPropertyCommand(card, "title", "Draft"))
    await manager.undo()
"""
from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .core.commands import (
    SetPropertyCommand,
    CompositeCommand,
    FailureReason,
    CommandHistoryError,
    HistoryBusyError,
    HistoryNotFoundError,
    CommandExecutionError,
    HistoryTraversalError,
    NavigationResult,
    ManagerState,
)

__version__ = "1.0.0"

__all__ = _core_all + [
    "SetPropertyCommand",
    "CompositeCommand",
    "FailureReason",
    "CommandHistoryError",
    "HistoryBusyError",
    "HistoryNotFoundError",
    "CommandExecutionError",
    "HistoryTraversalError",
    "NavigationResult",
    "ManagerState",
]

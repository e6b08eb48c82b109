"""
Command history errors.

Every failure carries a FailureReason so UI code can tell "nothing to do"
apart from "something went wrong" without parsing messages.
"""
from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    BUSY = "busy"
    EMPTY = "empty"
    NOT_FOUND = "not-found"
    COMMAND_ERROR = "command-error"


class CommandHistoryError(Exception):
    """Base class for all command history failures."""
    reason: FailureReason = FailureReason.COMMAND_ERROR


class HistoryBusyError(CommandHistoryError):
    """A mutating call arrived while another one is still in flight."""
    reason = FailureReason.BUSY

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot {operation}: another history operation is in progress")


class EmptyHistoryError(CommandHistoryError):
    reason = FailureReason.EMPTY

    def __init__(self, stack: str):
        self.stack = stack
        super().__init__(f"The {stack} stack is empty")


class HistoryNotFoundError(CommandHistoryError):
    reason = FailureReason.NOT_FOUND

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"History entry not found: {entry_id}")


class CommandExecutionError(CommandHistoryError):
    """
    The underlying command raised during execute, undo or redo.

    The original exception is available as __cause__ (and `error`).
    """
    reason = FailureReason.COMMAND_ERROR

    def __init__(self, action: str, description: str,
                 error: Optional[BaseException] = None, message: Optional[str] = None):
        self.action = action
        self.description = description
        self.error = error
        super().__init__(message or f"{action} failed for '{description}': {error}")


class HistoryTraversalError(CommandExecutionError):
    """A go_to_history traversal stopped part way; completed steps are kept."""

    def __init__(self, target_id: str, action: str, description: str,
                 steps_completed: int, steps_planned: int,
                 error: Optional[BaseException] = None):
        self.target_id = target_id
        self.steps_completed = steps_completed
        self.steps_planned = steps_planned
        super().__init__(
            action, description, error,
            message=(f"Navigation to {target_id} stopped after {steps_completed}/{steps_planned} steps: "
                     f"{action} failed for '{description}': {error}"),
        )

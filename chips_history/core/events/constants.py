"""
Event Type Constants.

Event names published by the command history engine.
Use these constants with EventBus instead of string literals.

Usage:
    from chips_history.core.events import Events, EventBus

    event_bus.subscribe(Events.STATE_CHANGED, on_state_changed)
"""


class Events:
    """
    Standard event type constants for EventBus.

    Payloads:
        COMMAND_EXECUTED / COMMAND_UNDONE / COMMAND_REDONE:
            {"command": HistoryEntry, "history": [HistoryEntry, ...]}
        COMMAND_FAILED:
            {"action": str, "description": str, "error": Exception}
        HISTORY_CLEARED:
            {}
        STATE_CHANGED:
            {"canUndo": bool, "canRedo": bool}
    """

    # Command lifecycle
    COMMAND_EXECUTED = "command:executed"
    COMMAND_UNDONE = "command:undone"
    COMMAND_REDONE = "command:redone"
    COMMAND_FAILED = "command:failed"

    # History state
    HISTORY_CLEARED = "history:cleared"
    STATE_CHANGED = "state:changed"

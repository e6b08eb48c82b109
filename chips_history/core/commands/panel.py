"""
History panel model.

Keeps a render-ready view of the history for the history panel and the
undo/redo toolbar buttons, refreshed from CommandManager events.
"""
from dataclasses import dataclass
from typing import List, Optional
from loguru import logger

from .manager import CommandManager, NavigationResult
from ..base_system import BaseSystem
from ..decorators import subscribe_event
from ..events import EventBus, Events, Signal


@dataclass(frozen=True)
class HistoryRow:
    id: str
    description: str
    is_current: bool = False
    is_undone: bool = False


class HistoryPanelModel(BaseSystem):
    """
    Observer of CommandManager events for UI binding.

    Rows are in chronological order: applied entries first (oldest at the
    top, the current one flagged), followed by undone entries in redo order.

    Usage:
        panel = locator.register_system(HistoryPanelModel)
        await locator.start_all()
        panel.changed.connect(lambda model: render(model.rows))

        # Clicking a row
        await panel.select(row.id)
    """
    depends_on = [EventBus, CommandManager]

    def __init__(self, locator, config):
        super().__init__(locator, config)
        self._manager: Optional[CommandManager] = None
        self.rows: List[HistoryRow] = []
        self.can_undo = False
        self.can_redo = False
        self.last_error: Optional[str] = None
        self.changed = Signal("HistoryPanelChanged")

    async def initialize(self):
        self._manager = self.locator.get_system(CommandManager)
        self.refresh()
        await super().initialize()

    async def shutdown(self):
        self.rows = []
        await super().shutdown()

    def refresh(self) -> None:
        """Rebuild rows from the manager's current history."""
        applied = list(reversed(self._manager.get_history()))
        undone = self._manager.get_redo_history()

        rows = [
            HistoryRow(entry.id, entry.description, is_current=(index == len(applied) - 1))
            for index, entry in enumerate(applied)
        ]
        rows.extend(HistoryRow(entry.id, entry.description, is_undone=True) for entry in undone)

        self.rows = rows
        self.can_undo = self._manager.can_undo()
        self.can_redo = self._manager.can_redo()
        self.changed.emit(self)

    async def select(self, entry_id: str) -> NavigationResult:
        """Jump to the entry behind a clicked row."""
        return await self._manager.go_to_history(entry_id)

    @subscribe_event(Events.COMMAND_EXECUTED, Events.COMMAND_UNDONE,
                     Events.COMMAND_REDONE, Events.HISTORY_CLEARED)
    def on_history_changed(self, data):
        self.last_error = None
        self.refresh()

    @subscribe_event(Events.STATE_CHANGED)
    def on_state_changed(self, data):
        self.can_undo = data["canUndo"]
        self.can_redo = data["canRedo"]

    @subscribe_event(Events.COMMAND_FAILED)
    def on_command_failed(self, data):
        self.last_error = f"{data['action'].capitalize()} failed: {data['description']}"
        logger.debug(f"History panel: {self.last_error}")
        self.changed.emit(self)

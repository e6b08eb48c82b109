"""
Command Manager - undo/redo orchestration.

Runs Commands, records them in the HistoryStore, merges rapid adjacent
commands, navigates to arbitrary history points and announces every
transition on the EventBus.
"""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from loguru import logger

from .base import Command, invoke
from .errors import (
    CommandExecutionError,
    HistoryBusyError,
    HistoryNotFoundError,
    HistoryTraversalError,
)
from .history import HistoryEntry, HistoryStore, UNDO
from ..base_system import BaseSystem
from ..decorators import system
from ..events import EventBus, Events
from ..service_decorator import Service


def monotonic_ms() -> int:
    """Monotonic clock in whole milliseconds."""
    return int(time.monotonic() * 1000)


class ManagerState(str, Enum):
    IDLE = "idle"
    BUSY = "busy"


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a successful go_to_history call."""
    target_id: str
    direction: Optional[str]  # "undo", "redo" or None when already there
    steps: int


@Service
@system(depends_on=[EventBus])
class CommandManager(BaseSystem):
    """
    Executes Commands with undo/redo support.

    Features:
    - Single-flight guard: one execute/undo/redo/navigation at a time
    - Merging of adjacent commands within the merge window
    - Jump to any history entry (go_to_history)
    - Bounded undo history (history.max_history)
    - Lifecycle events on the EventBus

    Usage:
        manager = locator.get_system(CommandManager)

        await manager.execute(AddElementCommand(card, "x"))
        await manager.undo()
        await manager.redo()

        for entry in manager.get_history():
            print(entry.id, entry.description)
        await manager.go_to_history(entry.id)
    """

    def __init__(self, locator, config, event_bus: Optional[EventBus] = None,
                 clock: Callable[[], int] = monotonic_ms):
        """
        Initialize CommandManager.

        Args:
            locator: ServiceLocator instance
            config: ConfigManager instance (reads the `history` section)
            event_bus: Channel for lifecycle events (resolved from the
                locator on initialize when omitted)
            clock: Millisecond clock used for entry timestamps
        """
        super().__init__(locator, config)
        settings = config.data.history
        self._store = HistoryStore(settings.max_history)
        self._merge_window = settings.merge_window
        self._debug = settings.debug
        self._event_bus = event_bus
        self._clock = clock
        self._executing = False
        # Only the entry created or extended by the latest execute accepts merges.
        self._merge_candidate_id: Optional[str] = None

    async def initialize(self) -> None:
        """Resolve the EventBus and start following config changes."""
        if self._event_bus is None:
            try:
                self._event_bus = self.locator.get_system(EventBus)
            except KeyError:
                logger.warning("CommandManager: EventBus not registered, history events disabled")
        self.config.on_changed.connect(self._on_config_changed)
        await super().initialize()

    async def shutdown(self) -> None:
        """Drop all history and stop following config changes."""
        self.config.on_changed.disconnect(self._on_config_changed)
        self._store.clear()
        self._merge_candidate_id = None
        await super().shutdown()

    # --- state ---

    @property
    def state(self) -> ManagerState:
        return ManagerState.BUSY if self._executing else ManagerState.IDLE

    @property
    def is_executing(self) -> bool:
        return self._executing

    @property
    def max_history(self) -> int:
        return self._store.max_size

    @property
    def merge_window(self) -> int:
        return self._merge_window

    def can_undo(self) -> bool:
        return self._store.can_undo

    def can_redo(self) -> bool:
        return self._store.can_redo

    @property
    def undo_description(self) -> Optional[str]:
        """Description of the next undo action."""
        top = self._store.top()
        return top.description if top else None

    @property
    def redo_description(self) -> Optional[str]:
        """Description of the next redo action."""
        if self._store.can_redo:
            return self._store.peek_redo().description
        return None

    def get_history(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """
        Undo stack, most recent first.

        Args:
            limit: Maximum number of entries to return
        """
        entries = self._store.undo_entries()
        entries.reverse()
        if limit is not None:
            entries = entries[:max(limit, 0)]
        return entries

    def get_redo_history(self) -> List[HistoryEntry]:
        """Redo stack, next to redo first."""
        return self._store.redo_entries()

    def get_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        return self._store.find(entry_id)

    # --- mutations ---

    async def execute(self, command: Command) -> HistoryEntry:
        """
        Execute a command and record it in history.

        Args:
            command: Command to execute

        Returns:
            The new entry, or the current entry if the command was merged into it

        Raises:
            HistoryBusyError: Another operation is in flight
            CommandExecutionError: command.execute() raised; history unchanged
        """
        self._acquire("execute")
        try:
            try:
                await invoke(command.execute)
            except Exception as e:
                error = await self._command_failed("execute", command.description, e)
                raise error from e

            now = self._clock()
            entry = self._merge_into_top(command, now)
            if entry is None:
                entry = HistoryEntry.create(command, now)
                evicted = self._store.push(entry)
                if evicted:
                    self._trace(f"Evicted {len(evicted)} oldest history entries")
            else:
                self._store.clear_redo()
            self._merge_candidate_id = entry.id

            self._trace(f"Executed: {entry.description}")
            await self._publish(Events.COMMAND_EXECUTED, {"command": entry, "history": self.get_history()})
            await self._publish_state()
            return entry
        finally:
            self._executing = False

    async def undo(self) -> bool:
        """
        Undo the current entry.

        Returns:
            True if undo was performed, False if nothing to undo

        Raises:
            HistoryBusyError: Another operation is in flight
            CommandExecutionError: command.undo() raised; entry stays on the undo stack
        """
        self._ensure_idle("undo")
        if not self._store.can_undo:
            return False

        self._executing = True
        try:
            await self._undo_step()
            return True
        finally:
            self._executing = False

    async def redo(self) -> bool:
        """
        Redo the next undone entry.

        Returns:
            True if redo was performed, False if nothing to redo

        Raises:
            HistoryBusyError: Another operation is in flight
            CommandExecutionError: command.redo() raised; entry stays on the redo stack
        """
        self._ensure_idle("redo")
        if not self._store.can_redo:
            return False

        self._executing = True
        try:
            await self._redo_step()
            return True
        finally:
            self._executing = False

    async def go_to_history(self, target_id: str) -> NavigationResult:
        """
        Undo or redo until `target_id` is the current entry.

        Completed steps are kept when a later step fails.

        Raises:
            HistoryBusyError: Another operation is in flight
            HistoryNotFoundError: No entry with that id
            HistoryTraversalError: A step failed; carries steps_completed
        """
        self._ensure_idle("navigate")
        location = self._store.locate(target_id)
        if location is None:
            logger.warning(f"Cannot navigate to unknown history entry {target_id}")
            raise HistoryNotFoundError(target_id)

        direction, position = location
        planned = position if direction == UNDO else position + 1
        if planned == 0:
            return NavigationResult(target_id, None, 0)

        step = self._undo_step if direction == UNDO else self._redo_step
        completed = 0
        self._executing = True
        try:
            for _ in range(planned):
                try:
                    await step()
                except CommandExecutionError as e:
                    raise HistoryTraversalError(
                        target_id, e.action, e.description, completed, planned, e.error
                    ) from e.error
                completed += 1
        finally:
            self._executing = False

        self._trace(f"Navigated to {target_id}: {completed} {direction} step(s)")
        return NavigationResult(target_id, direction, completed)

    async def clear(self) -> None:
        """Clear all undo/redo history."""
        self._acquire("clear")
        try:
            self._store.clear()
            self._merge_candidate_id = None
            self._trace("History cleared")
            await self._publish(Events.HISTORY_CLEARED, {})
            await self._publish_state()
        finally:
            self._executing = False

    # --- internals ---

    def _ensure_idle(self, operation: str) -> None:
        if self._executing:
            logger.warning(f"Rejected {operation}: history is busy")
            raise HistoryBusyError(operation)

    def _acquire(self, operation: str) -> None:
        # No await between the check and the assignment.
        self._ensure_idle(operation)
        self._executing = True

    async def _undo_step(self) -> HistoryEntry:
        entry = self._store.peek_undo()
        try:
            await invoke(entry.command.undo)
        except Exception as e:
            error = await self._command_failed("undo", entry.description, e)
            raise error from e

        self._store.step_back()
        self._merge_candidate_id = None
        self._trace(f"Undone: {entry.description}")
        await self._publish(Events.COMMAND_UNDONE, {"command": entry, "history": self.get_history()})
        await self._publish_state()
        return entry

    async def _redo_step(self) -> HistoryEntry:
        entry = self._store.peek_redo()
        try:
            await invoke(entry.command.redo)
        except Exception as e:
            error = await self._command_failed("redo", entry.description, e)
            raise error from e

        self._store.step_forward()
        self._merge_candidate_id = None
        self._trace(f"Redone: {entry.description}")
        await self._publish(Events.COMMAND_REDONE, {"command": entry, "history": self.get_history()})
        await self._publish_state()
        return entry

    def _merge_into_top(self, command: Command, now: int) -> Optional[HistoryEntry]:
        """Fold `command` into the current entry if the merge policy allows it."""
        top = self._store.top()
        if top is None or top.id != self._merge_candidate_id:
            return None
        if now - top.timestamp > self._merge_window:
            return None

        candidate = top.command
        if not candidate.supports_merge:
            return None

        try:
            if not candidate.can_merge_with(command):
                return None
            candidate.merge_with(command)
        except Exception as e:
            logger.error(f"Merge of '{command.description}' into '{top.description}' failed: {e}")
            return None

        merged = top.merged(now)
        self._store.replace_top(merged)
        self._trace(f"Merged '{command.description}' into entry {merged.id}")
        return merged

    async def _command_failed(self, action: str, description: str, error: Exception) -> CommandExecutionError:
        logger.error(f"{action.capitalize()} failed for '{description}': {error}")
        await self._publish(Events.COMMAND_FAILED, {
            "action": action,
            "description": description,
            "error": error,
        })
        return CommandExecutionError(action, description, error)

    async def _publish(self, event: str, data: Dict[str, Any]) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(event, data)

    async def _publish_state(self) -> None:
        await self._publish(Events.STATE_CHANGED, {
            "canUndo": self._store.can_undo,
            "canRedo": self._store.can_redo,
        })

    def _trace(self, message: str) -> None:
        if self._debug:
            logger.debug(message)

    def _on_config_changed(self, section: str, key: str, value: Any) -> None:
        if section != "history":
            return
        if key == "max_history":
            evicted = self._store.resize(value)
            logger.info(f"History limit set to {value} ({len(evicted)} entries evicted)")
        elif key == "merge_window":
            self._merge_window = value
        elif key == "debug":
            self._debug = value

"""
Reusable Commands - common command implementations.

Provides:
- SetPropertyCommand: property setter with undo, merges repeated sets
- CompositeCommand: group multiple commands as one history entry
"""
from typing import Any, List, Optional

from .base import Command, MergeableCommand, invoke


_MISSING = object()


class SetPropertyCommand(MergeableCommand):
    """
    Set an attribute on a target object with undo support.

    Captures the old value on construction. Consecutive sets of the same
    property on the same target merge into one entry, keeping the first
    old value and the latest new value (e.g. dragging a card window).

    Example:
        cmd = SetPropertyCommand(window, "position", (120, 80))
        await manager.execute(cmd)

        # Later: undo restores the original position
        await manager.undo()
    """

    def __init__(self, target: Any, property_name: str, new_value: Any,
                 old_value: Any = _MISSING, label: Optional[str] = None):
        """
        Args:
            target: Object to modify
            property_name: Name of attribute to change
            new_value: New value to set
            old_value: Previous value (captured from target if omitted)
            label: Description override
        """
        self.target = target
        self.property_name = property_name
        self.new_value = new_value
        self.old_value = getattr(target, property_name, None) if old_value is _MISSING else old_value
        self._label = label

    @property
    def description(self) -> str:
        return self._label or f"Set {self.property_name} to {self.new_value}"

    async def execute(self) -> None:
        setattr(self.target, self.property_name, self.new_value)

    async def undo(self) -> None:
        setattr(self.target, self.property_name, self.old_value)

    def can_merge_with(self, other: Command) -> bool:
        return (
            isinstance(other, SetPropertyCommand)
            and other.target is self.target
            and other.property_name == self.property_name
        )

    def merge_with(self, other: "SetPropertyCommand") -> None:
        self.new_value = other.new_value
        if other._label:
            self._label = other._label


class CompositeCommand(Command):
    """
    Groups multiple commands as a single undoable unit.

    Sub-commands execute in order and undo in reverse order. If a
    sub-command fails during execute, the ones already applied are undone
    before the error propagates, so a failed composite leaves no effect.

    Example:
        commands = [
            SetPropertyCommand(card, "title", "Draft"),
            SetPropertyCommand(card, "theme", "dark"),
        ]
        await manager.execute(CompositeCommand(commands, "Restyle card"))

        # Single undo reverts both changes
        await manager.undo()
    """

    def __init__(self, commands: List[Command],
                 description: str = "Composite Command"):
        self._commands = list(commands)
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    @property
    def commands(self) -> List[Command]:
        return list(self._commands)

    async def execute(self) -> None:
        """Execute all sub-commands in order."""
        done: List[Command] = []
        try:
            for cmd in self._commands:
                await invoke(cmd.execute)
                done.append(cmd)
        except Exception:
            for cmd in reversed(done):
                await invoke(cmd.undo)
            raise

    async def undo(self) -> None:
        """Undo all sub-commands in reverse order."""
        for cmd in reversed(self._commands):
            await invoke(cmd.undo)

    async def redo(self) -> None:
        """Redo all sub-commands in order."""
        for cmd in self._commands:
            await invoke(cmd.redo)

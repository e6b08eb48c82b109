"""
Command Pattern - Base Interfaces.

Provides:
- Command: reversible unit of work executed through CommandManager
- MergeableCommand: Command that can absorb an adjacent command
"""
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar


async def invoke(operation: Callable[[], Any]) -> None:
    """Call a command operation and await the result when it is awaitable."""
    result = operation()
    if inspect.isawaitable(result):
        await result


class Command(ABC):
    """
    Reversible unit of work supplied by editing features.

    execute/undo/redo may be coroutine functions or plain functions; the
    CommandManager awaits whatever they return when it is awaitable.

    Example:
        class RenameCardCommand(Command):
            def __init__(self, card, old_name, new_name):
                self.card = card
                self.old_name = old_name
                self.new_name = new_name

            @property
            def description(self) -> str:
                return f"Rename to {self.new_name}"

            async def execute(self):
                await self.card.rename(self.new_name)

            async def undo(self):
                await self.card.rename(self.old_name)
    """

    #: Capability tag checked by the merge policy.
    supports_merge: ClassVar[bool] = False

    @property
    def description(self) -> str:
        """
        Human-readable description for UI display.

        Returns:
            Description string (default: class name)
        """
        return self.__class__.__name__

    @abstractmethod
    async def execute(self) -> None:
        """
        Execute the command (forward operation).

        Called once when the command is first run.
        """

    @abstractmethod
    async def undo(self) -> None:
        """
        Reverse the command.

        Must restore state to exactly what it was before execute().
        """

    async def redo(self) -> None:
        """
        Re-apply the command after undo.

        Default implementation calls execute().
        Override if redo requires different logic.
        """
        await self.execute()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.description!r}>"


class MergeableCommand(Command):
    """
    Command that can fold an adjacent command into itself.

    A drag gesture emitting many "move" commands, for example, collapses
    into one undoable step when the commands arrive inside the merge window.
    """

    supports_merge: ClassVar[bool] = True

    @abstractmethod
    def can_merge_with(self, other: Command) -> bool:
        """Return True when `other` can be absorbed by this command."""

    @abstractmethod
    def merge_with(self, other: Command) -> None:
        """
        Absorb `other` in place. `other` is discarded afterwards.

        Must be atomic: either absorb `other` completely or raise without
        touching this command. When it raises, the manager records `other`
        as its own entry, so a half-applied merge would be undone twice.
        """

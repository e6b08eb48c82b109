"""Test doubles: commands, clock and event recorder."""
import asyncio
from typing import List

from chips_history.core.commands.base import Command, MergeableCommand
from chips_history.core.events import EventBus


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class Card:
    """Minimal card document the test commands edit."""

    def __init__(self):
        self.items: List[str] = []
        self.position = (0, 0)


class AddItemCommand(Command):
    def __init__(self, card: Card, item: str):
        self.card = card
        self.item = item
        self.calls: List[str] = []

    @property
    def description(self) -> str:
        return f"Add {self.item}"

    async def execute(self):
        self.calls.append("execute")
        self.card.items.append(self.item)

    async def undo(self):
        self.calls.append("undo")
        self.card.items.remove(self.item)

    async def redo(self):
        self.calls.append("redo")
        self.card.items.append(self.item)


class MoveCommand(MergeableCommand):
    def __init__(self, card: Card, dx: int, dy: int):
        self.card = card
        self.dx = dx
        self.dy = dy

    @property
    def description(self) -> str:
        return f"Move by ({self.dx}, {self.dy})"

    def execute(self):
        x, y = self.card.position
        self.card.position = (x + self.dx, y + self.dy)

    def undo(self):
        x, y = self.card.position
        self.card.position = (x - self.dx, y - self.dy)

    def redo(self):
        self.execute()

    def can_merge_with(self, other) -> bool:
        return isinstance(other, MoveCommand) and other.card is self.card

    def merge_with(self, other) -> None:
        self.dx += other.dx
        self.dy += other.dy


class FailingCommand(Command):
    """Raises from the operations named in `fail_on`."""

    def __init__(self, card: Card, item: str, fail_on=("execute",)):
        self.card = card
        self.item = item
        self.fail_on = set(fail_on)

    @property
    def description(self) -> str:
        return f"Flaky {self.item}"

    async def execute(self):
        if "execute" in self.fail_on:
            raise RuntimeError("execute exploded")
        self.card.items.append(self.item)

    async def undo(self):
        if "undo" in self.fail_on:
            raise RuntimeError("undo exploded")
        self.card.items.remove(self.item)

    async def redo(self):
        if "redo" in self.fail_on:
            raise RuntimeError("redo exploded")
        self.card.items.append(self.item)


class SlowCommand(Command):
    """Blocks in execute/undo until `release` is set."""

    def __init__(self, label: str = "Slow"):
        self.label = label
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    @property
    def description(self) -> str:
        return self.label

    async def execute(self):
        self.started.set()
        await self.release.wait()

    async def undo(self):
        self.started.set()
        await self.release.wait()


class EventRecorder:
    """Collects (event, data) pairs published on an EventBus."""

    def __init__(self, bus: EventBus, events):
        self.received = []
        for event in events:
            bus.subscribe(event, self._make_handler(event))

    def _make_handler(self, event):
        def handler(data):
            self.received.append((event, data))
        handler.__name__ = f"record_{event}"
        return handler

    def names(self) -> List[str]:
        return [name for name, _ in self.received]

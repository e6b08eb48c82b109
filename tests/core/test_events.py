"""
Notification channel - Signal, EventBus and history lifecycle events.
"""
from unittest.mock import MagicMock, AsyncMock

import pytest

from chips_history.core.commands.errors import CommandExecutionError
from chips_history.core.events import EventBus, Events, Signal
from tests.helpers import AddItemCommand, EventRecorder, FailingCommand

ALL_EVENTS = [
    Events.COMMAND_EXECUTED,
    Events.COMMAND_UNDONE,
    Events.COMMAND_REDONE,
    Events.COMMAND_FAILED,
    Events.HISTORY_CLEARED,
    Events.STATE_CHANGED,
]


# --- Signal ---

def test_signal_emit():
    signal = Signal("test_signal")
    callback = MagicMock()

    signal.connect(callback)
    signal.emit("arg1", 123)

    callback.assert_called_with("arg1", 123)


def test_signal_disconnect():
    signal = Signal("test_signal")
    callback = MagicMock()

    signal.connect(callback)
    signal.disconnect(callback)
    signal.emit("arg1")

    callback.assert_not_called()


def test_signal_subscriber_error_does_not_stop_others():
    signal = Signal("test_signal")
    good = MagicMock()
    signal.connect(MagicMock(side_effect=RuntimeError("bad")))
    signal.connect(good)

    signal.emit(1)

    good.assert_called_once_with(1)


# --- EventBus ---

class TestEventBus:

    @pytest.fixture
    def event_bus(self):
        return EventBus(MagicMock(), MagicMock())

    @pytest.mark.asyncio
    async def test_initialize_and_shutdown(self, event_bus):
        await event_bus.initialize()
        assert event_bus.is_ready is True

        event_bus.subscribe("x", lambda data: None)
        await event_bus.shutdown()
        assert event_bus.subscriber_count("x") == 0

    @pytest.mark.asyncio
    async def test_publish_to_sync_and_async_handlers(self, event_bus):
        sync_handler = MagicMock()
        async_handler = AsyncMock()

        async def wrapped(data):
            await async_handler(data)

        event_bus.subscribe("state:changed", sync_handler)
        event_bus.subscribe("state:changed", wrapped)
        await event_bus.publish("state:changed", {"canUndo": True})

        sync_handler.assert_called_once_with({"canUndo": True})
        async_handler.assert_awaited_once_with({"canUndo": True})

    def test_subscribe_duplicate_handler(self, event_bus):
        def handler(data):
            pass

        event_bus.subscribe("e", handler)
        event_bus.subscribe("e", handler)
        assert event_bus.subscriber_count("e") == 1

        event_bus.unsubscribe("e", handler)
        assert event_bus.subscriber_count("e") == 0

    @pytest.mark.asyncio
    async def test_handler_error_is_isolated(self, event_bus):
        received = []

        def broken(data):
            raise ValueError("boom")

        def working(data):
            received.append(data)

        event_bus.subscribe("e", broken)
        event_bus.subscribe("e", working)
        await event_bus.publish("e", 1)

        assert received == [1]


# --- History events ---

class TestHistoryEvents:

    @pytest.mark.asyncio
    async def test_execute_emits_executed_then_state(self, manager, bus, card):
        recorder = EventRecorder(bus, ALL_EVENTS)

        entry = await manager.execute(AddItemCommand(card, "x"))

        assert recorder.names() == [Events.COMMAND_EXECUTED, Events.STATE_CHANGED]
        executed = recorder.received[0][1]
        assert executed["command"] is entry
        assert executed["history"] == [entry]
        assert recorder.received[1][1] == {"canUndo": True, "canRedo": False}

    @pytest.mark.asyncio
    async def test_undo_redo_events(self, manager, bus, card):
        entry = await manager.execute(AddItemCommand(card, "x"))
        recorder = EventRecorder(bus, ALL_EVENTS)

        await manager.undo()
        await manager.redo()

        assert recorder.names() == [
            Events.COMMAND_UNDONE, Events.STATE_CHANGED,
            Events.COMMAND_REDONE, Events.STATE_CHANGED,
        ]
        undone = recorder.received[0][1]
        assert undone["command"] is entry
        assert undone["history"] == []
        assert recorder.received[1][1] == {"canUndo": False, "canRedo": True}
        assert recorder.received[2][1]["history"] == [entry]

    @pytest.mark.asyncio
    async def test_undo_on_empty_emits_nothing(self, manager, bus):
        recorder = EventRecorder(bus, ALL_EVENTS)

        assert await manager.undo() is False
        assert await manager.redo() is False

        assert recorder.received == []

    @pytest.mark.asyncio
    async def test_clear_events(self, manager, bus, card):
        await manager.execute(AddItemCommand(card, "x"))
        recorder = EventRecorder(bus, ALL_EVENTS)

        await manager.clear()

        assert recorder.received == [
            (Events.HISTORY_CLEARED, {}),
            (Events.STATE_CHANGED, {"canUndo": False, "canRedo": False}),
        ]

    @pytest.mark.asyncio
    async def test_failure_emits_failed_only(self, manager, bus, card):
        recorder = EventRecorder(bus, ALL_EVENTS)

        with pytest.raises(CommandExecutionError):
            await manager.execute(FailingCommand(card, "x"))

        assert recorder.names() == [Events.COMMAND_FAILED]
        payload = recorder.received[0][1]
        assert payload["action"] == "execute"
        assert payload["description"] == "Flaky x"
        assert isinstance(payload["error"], RuntimeError)

    @pytest.mark.asyncio
    async def test_navigation_emits_per_step(self, manager, bus, card, clock):
        first = await manager.execute(AddItemCommand(card, "a"))
        clock.advance(1000)
        await manager.execute(AddItemCommand(card, "b"))
        clock.advance(1000)
        await manager.execute(AddItemCommand(card, "c"))
        recorder = EventRecorder(bus, [Events.COMMAND_UNDONE])

        await manager.go_to_history(first.id)

        assert recorder.names() == [Events.COMMAND_UNDONE, Events.COMMAND_UNDONE]

    @pytest.mark.asyncio
    async def test_handler_mutation_is_rejected_but_logged(self, manager, bus, card):
        attempts = []

        async def undo_on_execute(data):
            try:
                await manager.undo()
            except Exception as e:
                attempts.append(e)
                raise

        bus.subscribe(Events.COMMAND_EXECUTED, undo_on_execute)

        await manager.execute(AddItemCommand(card, "x"))

        assert len(attempts) == 1
        assert card.items == ["x"]
        assert manager.can_undo()


def test_event_names():
    names = {value for key, value in vars(Events).items() if key.isupper()}

    assert names == {
        "command:executed",
        "command:undone",
        "command:redone",
        "command:failed",
        "history:cleared",
        "state:changed",
    }
    assert not hasattr(EventBus, "publish_sync")

"""
EventBus - Notification channel for history observers.

Single in-process publish/subscribe hub used by the CommandManager to
announce state transitions to UI observers (history panel, toolbar).
"""
import inspect
from typing import Any, Callable, Dict, List
from loguru import logger

from chips_history.core.base_system import BaseSystem


class EventBus(BaseSystem):
    """
    Unified event bus for application-wide pub/sub.

    Usage:
        # Subscribe
        event_bus.subscribe("state:changed", on_state_changed)

        # Publish
        await event_bus.publish("state:changed", {"canUndo": True, "canRedo": False})
    """

    def __init__(self, locator, config):
        super().__init__(locator, config)
        self._subscribers: Dict[str, List[Callable]] = {}

    async def initialize(self):
        """Initialize event bus."""
        logger.info("EventBus initialized")
        await super().initialize()

    async def shutdown(self):
        """Shutdown event bus."""
        self._subscribers.clear()
        await super().shutdown()

    def subscribe(self, event: str, handler: Callable) -> None:
        """
        Subscribe to an event.

        Args:
            event: Event name (e.g., "command:executed", "state:changed")
            handler: Callback function (sync or async)
        """
        if event not in self._subscribers:
            self._subscribers[event] = []

        if handler not in self._subscribers[event]:
            self._subscribers[event].append(handler)
            logger.debug(f"Subscribed to {event}: {getattr(handler, '__name__', handler)}")

    def unsubscribe(self, event: str, handler: Callable) -> None:
        """
        Unsubscribe from an event.

        Args:
            event: Event name
            handler: Handler to remove
        """
        if event in self._subscribers and handler in self._subscribers[event]:
            self._subscribers[event].remove(handler)
            logger.debug(f"Unsubscribed from {event}: {getattr(handler, '__name__', handler)}")

    def subscriber_count(self, event: str) -> int:
        return len(self._subscribers.get(event, []))

    async def publish(self, event: str, data: Any = None) -> None:
        """
        Publish an event to all subscribers.

        Handler errors are logged and never reach the publisher.

        Args:
            event: Event name
            data: Optional data to pass to handlers
        """
        handlers = list(self._subscribers.get(event, []))

        for handler in handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler(data)
                else:
                    handler(data)
            except Exception as e:
                logger.error(f"Error in handler for {event}: {e}")

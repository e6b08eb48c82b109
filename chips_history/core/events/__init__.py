"""
Event System - Pub/Sub Messaging.

Provides:
- Signal: Simple observer pattern for sync notifications (e.g., config changes)
- EventBus: Async pub/sub used to announce history transitions
- Events: Event type constants for type-safe subscriptions

Usage:
    from chips_history.core.events import EventBus, Events

    event_bus.subscribe(Events.COMMAND_EXECUTED, on_executed)
"""
from .observer import Signal
from .bus import EventBus
from .constants import Events


__all__ = ["Signal", "EventBus", "Events"]

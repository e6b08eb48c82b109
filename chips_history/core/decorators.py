"""
Decorator Utilities.

Provides syntactic sugar for wiring systems together.
"""
from typing import Type, TypeVar, Optional, List

T = TypeVar('T')


def system(depends_on: Optional[List[Type]] = None):
    """
    Decorator to declare a system's start-up dependencies.

    Args:
        depends_on: List of system types this depends on

    Usage:
        @system(depends_on=[EventBus])
        class CommandManager(BaseSystem):
            pass
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls.depends_on = depends_on or []
        return cls
    return decorator


def subscribe_event(*event_types: str):
    """
    Decorator to mark a method as an event subscriber.

    Args:
        *event_types: Event types to subscribe to

    Usage:
        @subscribe_event("command:executed", "command:undone")
        def on_history_event(self, data):
            pass
    """
    def decorator(func):
        func._subscribed_events = list(event_types)
        return func
    return decorator

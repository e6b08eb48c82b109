"""
Context managers and factories for assembling the history engine.

Provides async helpers for cleaner service lifecycle handling in the
editor, tests and scripts.
"""
from contextlib import asynccontextmanager
from typing import Callable, Optional
from loguru import logger

from .config import ConfigManager
from .events import EventBus
from .locator import ServiceLocator
from .commands.manager import CommandManager, monotonic_ms


async def create_command_manager(config: Optional[ConfigManager] = None,
                                 clock: Callable[[], int] = monotonic_ms) -> CommandManager:
    """
    Build a started CommandManager with its own locator and EventBus.

    Example:
        manager = await create_command_manager()
        await manager.execute(SetPropertyCommand(card, "title", "Draft"))

    Args:
        config: Configuration (in-memory defaults when omitted)
        clock: Millisecond clock for entry timestamps

    Returns:
        Initialized CommandManager
    """
    locator = ServiceLocator(config=config or ConfigManager(None))
    locator.register_system(EventBus)
    manager = locator.register_system(CommandManager, clock=clock)
    await locator.start_all()
    return manager


@asynccontextmanager
async def managed_history(config_path: Optional[str] = None,
                          clock: Callable[[], int] = monotonic_ms):
    """
    Async context manager for a complete history engine.

    Registers EventBus and CommandManager on a fresh ServiceLocator, starts
    them, and shuts them down on exit.

    Example:
        async with managed_history("config.json") as locator:
            manager = locator.get_system(CommandManager)
            await manager.execute(cmd)

    Args:
        config_path: Path to config file (in-memory defaults when omitted)
        clock: Millisecond clock for entry timestamps

    Yields:
        Started ServiceLocator
    """
    locator = ServiceLocator(config_path=config_path)
    locator.register_system(EventBus)
    locator.register_system(CommandManager, clock=clock)
    await locator.start_all()
    logger.info("managed_history: history engine started")

    try:
        yield locator
    finally:
        await locator.stop_all()
        logger.info("managed_history: history engine stopped")

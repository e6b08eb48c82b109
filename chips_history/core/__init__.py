"""
Core package for the card editor's command history engine.
"""
from .base_system import BaseSystem
from .config import ConfigManager, AppConfig, HistorySettings, GeneralSettings
from .locator import ServiceLocator
from .events import EventBus, Events, Signal
from .logging import setup_logging
from .commands import (
    Command,
    MergeableCommand,
    CommandManager,
    HistoryEntry,
    HistoryStore,
    HistoryPanelModel,
)
from .context import create_command_manager, managed_history

__all__ = [
    "BaseSystem",
    "ConfigManager",
    "AppConfig",
    "HistorySettings",
    "GeneralSettings",
    "ServiceLocator",
    "EventBus",
    "Events",
    "Signal",
    "setup_logging",
    "Command",
    "MergeableCommand",
    "CommandManager",
    "HistoryEntry",
    "HistoryStore",
    "HistoryPanelModel",
    "create_command_manager",
    "managed_history",
]

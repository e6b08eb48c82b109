"""Shared fixtures for the history engine tests."""
import pytest
import pytest_asyncio

from chips_history.core.commands.manager import CommandManager
from chips_history.core.config import ConfigManager
from chips_history.core.events import EventBus
from chips_history.core.locator import ServiceLocator
from tests.helpers import Card, FakeClock


@pytest.fixture
def card():
    return Card()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return ConfigManager(None)


@pytest_asyncio.fixture
async def locator(config, clock):
    locator = ServiceLocator(config=config)
    locator.register_system(EventBus)
    locator.register_system(CommandManager, clock=clock)
    await locator.start_all()
    yield locator
    await locator.stop_all()


@pytest.fixture
def bus(locator) -> EventBus:
    return locator.get_system(EventBus)


@pytest.fixture
def manager(locator) -> CommandManager:
    return locator.get_system(CommandManager)

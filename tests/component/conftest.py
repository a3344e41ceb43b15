"""
Component Test Configuration

Fully wired membership stack over the in-memory document store.

Usage:
    pytest tests/component -v
"""
import pytest
import pytest_asyncio

from teamdesk.core.config import AuthConfig, StoreConfig, TeamdeskConfig
from teamdesk.membership_service.factory import create_membership_stack
from tests.fixtures import RecordingEventBus, ScriptedAlertChannel, TickingClock


@pytest.fixture
def alert_channel():
    return ScriptedAlertChannel()


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
def teamdesk_config():
    return TeamdeskConfig(
        environment="testing",
        store=StoreConfig(backend="memory"),
        auth=AuthConfig(bcrypt_rounds=4),
    )


@pytest_asyncio.fixture
async def stack(alert_channel, event_bus, teamdesk_config):
    stack = create_membership_stack(
        alert_channel,
        config=teamdesk_config,
        clock=TickingClock(),
        event_bus=event_bus,
    )
    await stack.initialize()
    yield stack
    await stack.close()

"""
Shared Test Fixtures

Centralized factories and test doubles used across all test layers.

Structure:
    - common.py: ID generators, clock, event bus, store and alert doubles
    - membership_fixtures.py: principal factories
"""

from .common import (
    FailingEventBus,
    FlakyDocumentStore,
    RecordingEventBus,
    ScriptedAlertChannel,
    TickingClock,
    make_email,
    make_org_id,
    make_user_id,
    pending_emails,
)
from .membership_fixtures import make_principal, register_principal, reload

__all__ = [
    "FailingEventBus",
    "FlakyDocumentStore",
    "RecordingEventBus",
    "ScriptedAlertChannel",
    "TickingClock",
    "make_email",
    "make_org_id",
    "make_user_id",
    "pending_emails",
    "make_principal",
    "register_principal",
    "reload",
]

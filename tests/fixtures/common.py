"""
Common/Shared Fixtures

Base factories and test doubles used across test layers.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Set, Tuple

from teamdesk.core.document_store import InMemoryDocumentStore


def make_user_id() -> str:
    """Generate a unique user ID"""
    return f"usr_test_{uuid.uuid4().hex[:12]}"


def make_org_id() -> str:
    """Generate a unique organization ID"""
    return f"org_test_{uuid.uuid4().hex[:12]}"


def make_email(prefix: Optional[str] = None) -> str:
    """Generate a unique email"""
    prefix = prefix or f"test_{uuid.uuid4().hex[:8]}"
    return f"{prefix}@example.com"


class TickingClock:
    """Deterministic clock advancing one second per reading"""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


class RecordingEventBus:
    """Event bus double keeping every published event"""

    def __init__(self):
        self.events = []

    async def publish_event(self, event) -> None:
        self.events.append(event)

    def types(self) -> List[str]:
        return [event.type for event in self.events]


class FailingEventBus:
    """Event bus whose publish always fails"""

    async def publish_event(self, event) -> None:
        raise ConnectionError("event bus unavailable")


class FlakyDocumentStore(InMemoryDocumentStore):
    """
    In-memory store that fails selected calls.

    fail_on(method, collection, times) makes the next ``times`` calls of
    ``method`` against ``collection`` raise ConnectionError.
    """

    def __init__(self):
        super().__init__()
        self._failures: Dict[Tuple[str, str], int] = {}
        self.writes: List[Tuple[str, str]] = []

    def fail_on(self, method: str, collection: str, times: int = 1) -> None:
        self._failures[(method, collection)] = times

    def _maybe_fail(self, method: str, collection: str) -> None:
        remaining = self._failures.get((method, collection), 0)
        if remaining > 0:
            self._failures[(method, collection)] = remaining - 1
            raise ConnectionError(f"{method} on {collection} failed")

    async def get(self, collection, doc_id):
        self._maybe_fail("get", collection)
        return await super().get(collection, doc_id)

    async def put(self, collection, doc_id, data, merge=False):
        self._maybe_fail("put", collection)
        self.writes.append((collection, doc_id))
        await super().put(collection, doc_id, data, merge=merge)

    async def query(self, collection, predicates):
        self._maybe_fail("query", collection)
        return await super().query(collection, predicates)

    async def create_with_generated_id(self, collection, data):
        self._maybe_fail("create_with_generated_id", collection)
        return await super().create_with_generated_id(collection, data)


class ScriptedAlertChannel:
    """Alert channel answering confirm() from a script of booleans"""

    def __init__(self, answers: Optional[List[bool]] = None, default: bool = False):
        self.answers = list(answers or [])
        self.default = default
        self.prompts: List[Tuple[str, str]] = []
        self.notifications: List[Tuple[str, str]] = []

    async def confirm(self, title, message, accept_label="Accept", decline_label="Decline") -> bool:
        self.prompts.append((title, message))
        if self.answers:
            return self.answers.pop(0)
        return self.default

    async def notify(self, title, message) -> None:
        self.notifications.append((title, message))


def pending_emails(organizations) -> Set[str]:
    """Union of pending invite emails across organizations"""
    emails: Set[str] = set()
    for organization in organizations:
        emails.update(organization.pending_invites)
    return emails

"""
Domain event envelope and event bus interface

Membership operations publish events through an optional bus. Publication is
best effort: a missing or failing bus never fails the operation that emitted
the event.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable


class EventType(Enum):
    """Event subjects"""

    ORG_CREATED = "organization.created"
    ORG_MEMBER_ROLE_CHANGED = "organization.member_role_changed"
    ORG_MEMBER_REMOVED = "organization.member_removed"

    INVITATION_SENT = "invitation.sent"
    INVITATION_ACCEPTED = "invitation.accepted"
    INVITATION_DECLINED = "invitation.declined"


class ServiceSource(Enum):
    """Emitting component"""

    MEMBERSHIP_SERVICE = "membership_service"
    SESSION_SERVICE = "session_service"


class Event:
    """Event model"""

    def __init__(
        self,
        event_type: EventType,
        source: ServiceSource,
        data: Dict[str, Any],
        subject: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = str(uuid.uuid4())
        self.type = event_type.value
        self.source = source.value
        self.data = data
        self.subject = subject
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "source": self.source,
            "subject": self.subject,
            "data": self.data,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
            "version": self.version,
        }


@runtime_checkable
class EventBusProtocol(Protocol):
    """Event bus interface"""

    async def publish_event(self, event: Event) -> None:
        """Publish event"""
        ...


__all__ = ["EventType", "ServiceSource", "Event", "EventBusProtocol"]

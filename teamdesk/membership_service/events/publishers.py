"""
Membership Event Publishers

Publication is best effort: failures are logged and never propagate to the
operation that produced the event.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from ...core.events import Event, EventType, ServiceSource
from .models import (
    InvitationAcceptedEvent,
    InvitationDeclinedEvent,
    InvitationSentEvent,
    MemberRemovedEvent,
    MemberRoleChangedEvent,
    OrganizationCreatedEvent,
)

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


async def _publish(event_bus, event_type: EventType, payload: BaseModel, subject: str) -> None:
    if not event_bus:
        logger.debug(f"Event bus not available, skipping {event_type.value}")
        return

    try:
        event = Event(
            event_type=event_type,
            source=ServiceSource.MEMBERSHIP_SERVICE,
            data=payload.model_dump(exclude={"metadata"}),
            subject=subject,
            metadata=payload.metadata or {},
        )
        await event_bus.publish_event(event)
        logger.info(f"Published {event_type.value} event for {subject}")
    except Exception as e:
        logger.error(f"Error publishing {event_type.value} event: {e}")


async def publish_organization_created(
    event_bus,
    organization_id: str,
    organization_name: str,
    created_by: str,
    metadata: Optional[dict] = None
):
    await _publish(event_bus, EventType.ORG_CREATED, OrganizationCreatedEvent(
        organization_id=organization_id,
        organization_name=organization_name,
        created_by=created_by,
        timestamp=_timestamp(),
        metadata=metadata or {},
    ), organization_id)


async def publish_invitation_sent(
    event_bus,
    invitation_id: str,
    organization_id: str,
    email: str,
    invited_by: str,
    metadata: Optional[dict] = None
):
    await _publish(event_bus, EventType.INVITATION_SENT, InvitationSentEvent(
        invitation_id=invitation_id,
        organization_id=organization_id,
        email=email,
        invited_by=invited_by,
        timestamp=_timestamp(),
        metadata=metadata or {},
    ), invitation_id)


async def publish_invitation_accepted(
    event_bus,
    invitation_id: str,
    organization_id: str,
    user_id: str,
    email: str,
    role: str,
    accepted_at: str,
    metadata: Optional[dict] = None
):
    await _publish(event_bus, EventType.INVITATION_ACCEPTED, InvitationAcceptedEvent(
        invitation_id=invitation_id,
        organization_id=organization_id,
        user_id=user_id,
        email=email,
        role=role,
        accepted_at=accepted_at,
        timestamp=_timestamp(),
        metadata=metadata or {},
    ), invitation_id)


async def publish_invitation_declined(
    event_bus,
    invitation_id: str,
    organization_id: str,
    email: str,
    declined_at: str,
    metadata: Optional[dict] = None
):
    await _publish(event_bus, EventType.INVITATION_DECLINED, InvitationDeclinedEvent(
        invitation_id=invitation_id,
        organization_id=organization_id,
        email=email,
        declined_at=declined_at,
        timestamp=_timestamp(),
        metadata=metadata or {},
    ), invitation_id)


async def publish_member_role_changed(
    event_bus,
    organization_id: str,
    user_id: str,
    old_role: str,
    new_role: str,
    changed_by: str,
    metadata: Optional[dict] = None
):
    await _publish(event_bus, EventType.ORG_MEMBER_ROLE_CHANGED, MemberRoleChangedEvent(
        organization_id=organization_id,
        user_id=user_id,
        old_role=old_role,
        new_role=new_role,
        changed_by=changed_by,
        timestamp=_timestamp(),
        metadata=metadata or {},
    ), organization_id)


async def publish_member_removed(
    event_bus,
    organization_id: str,
    user_id: str,
    removed_by: str,
    metadata: Optional[dict] = None
):
    await _publish(event_bus, EventType.ORG_MEMBER_REMOVED, MemberRemovedEvent(
        organization_id=organization_id,
        user_id=user_id,
        removed_by=removed_by,
        timestamp=_timestamp(),
        metadata=metadata or {},
    ), organization_id)

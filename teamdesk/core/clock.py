"""
Clock abstraction

Member join timestamps are embedded inside the organization's member list,
where server-assigned timestamps are not available, so every timestamp is
taken from an injected clock.
"""
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockProtocol(Protocol):
    """Source of timezone-aware UTC timestamps"""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["ClockProtocol", "SystemClock"]

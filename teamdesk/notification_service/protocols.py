"""
Notification Service Protocols - DI Interfaces
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class AlertChannelProtocol(Protocol):
    """Presents a yes/no choice to the user"""

    async def confirm(
        self,
        title: str,
        message: str,
        accept_label: str = "Accept",
        decline_label: str = "Decline",
    ) -> bool:
        """Return True when the user picks the accept action"""
        ...

    async def notify(self, title: str, message: str) -> None:
        """Show an informational message"""
        ...


__all__ = ["AlertChannelProtocol"]

"""
Notification Service

Accept/decline prompts for pending invitations.
"""

from .invitation_prompt import InvitationChoice, InvitationDecision, InvitationPrompt
from .protocols import AlertChannelProtocol

__all__ = [
    "AlertChannelProtocol",
    "InvitationChoice",
    "InvitationDecision",
    "InvitationPrompt",
]

#!/usr/bin/env python3
"""Membership workflow configuration"""
import os
from dataclasses import dataclass


def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class MembershipConfig:
    """Membership workflow switches"""

    # Append an entry to organizations/<id>/activities after each mutation
    activity_log_enabled: bool = True

    # After a declined prompt, offer the next pending invitation
    offer_all_pending_invitations: bool = True

    @classmethod
    def from_env(cls) -> 'MembershipConfig':
        return cls(
            activity_log_enabled=_bool(os.getenv("ACTIVITY_LOG_ENABLED", "true")),
            offer_all_pending_invitations=_bool(os.getenv("OFFER_ALL_PENDING_INVITATIONS", "true")),
        )

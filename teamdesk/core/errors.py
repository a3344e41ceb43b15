"""
Shared exception hierarchy

Every error raised by teamdesk derives from TeamdeskError so UI code can
catch the whole family in one place.
"""
from typing import Optional


class TeamdeskError(Exception):
    """Base exception for teamdesk"""
    pass


class ValidationError(TeamdeskError):
    """Malformed input, rejected before any write"""
    pass


class NotFoundError(TeamdeskError):
    """Referenced organization, invitation or principal does not exist"""
    pass


class PersistenceError(TeamdeskError):
    """Underlying document store call failed"""
    pass


class AuthError(TeamdeskError):
    """Authentication failure mapped from a provider error code"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


__all__ = [
    "TeamdeskError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "AuthError",
]

"""
Session Service Models

Principal profiles and the values exchanged with the auth provider.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..organization_service.models import MemberRole


class AuthUser(BaseModel):
    """Identity returned by the auth provider"""
    uid: str
    email: str
    display_name: Optional[str] = None


class Principal(BaseModel):
    """Authenticated user profile"""
    user_id: str = Field(..., description="Stable ID assigned by the auth provider")
    email: str
    display_name: Optional[str] = None
    # organization_id is None if and only if role is None
    organization_id: Optional[str] = None
    role: Optional[MemberRole] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_affiliated(self) -> bool:
        return self.organization_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"user_id"})

    @classmethod
    def from_document(cls, user_id: str, data: Dict[str, Any]) -> "Principal":
        return cls(user_id=user_id, **data)


class SignInContext(BaseModel):
    """What sign-in listeners learn about the authentication that just happened"""
    is_new_account: bool = False
    access_key: Optional[str] = None

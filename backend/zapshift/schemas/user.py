"""
zapShift Backend — User Schemas
=================================

User documents are created on first sign-in from the frontend. The role is
always assigned server-side; a submitted `role` is ignored on create.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Roles an admin may assign through PATCH /users/{id}/role
ASSIGNABLE_ROLES = ("admin", "user")

DEFAULT_ROLE = "user"


class UserCreate(BaseModel):
    """Body of POST /users. Unknown fields (photoURL, provider data) are stored as sent."""
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    email: str = Field(min_length=1, description="Unique lookup key")
    name: Optional[str] = None


class UserRoleUpdate(BaseModel):
    """Body of PATCH /users/{id}/role. The value is checked against ASSIGNABLE_ROLES by the service."""
    role: str


class RoleResponse(BaseModel):
    success: bool = True
    role: str

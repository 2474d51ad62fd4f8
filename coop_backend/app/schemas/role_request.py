"""
Role request schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal, Optional
from coop_backend.app.models.enums import AppRole, RoleRequestStatus


class RoleRequestCreate(BaseModel):
    """Ask for one or more additional roles."""
    requested_roles: List[AppRole] = Field(..., min_length=1, description="Roles being requested")
    justification: str = Field(..., min_length=1, max_length=2000, description="Why the roles are needed")


class RoleRequestDecision(BaseModel):
    action: Literal["approve", "reject"]
    notes: Optional[str] = Field(None, max_length=500)


class RoleRequestResponse(BaseModel):
    id: int
    requester_id: int
    requested_role: AppRole
    justification: str
    status: RoleRequestStatus
    reviewed_by: Optional[int]
    reviewed_at: Optional[datetime]
    notes: Optional[str]
    created_at: datetime
    
    class Config:
        from_attributes = True


class RoleRequestCreatedResponse(BaseModel):
    message: str
    requests: List[RoleRequestResponse]
    administrators_notified: int


class RoleRequestDecisionResponse(BaseModel):
    message: str
    request: RoleRequestResponse
    role_assigned: bool

"""
Role directory and role selector schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Literal


class RoleDisplayResponse(BaseModel):
    role: str
    label: str
    icon: str
    badge_variant: str
    
    class Config:
        from_attributes = True


class RoleOptionResponse(BaseModel):
    role: str
    label: str
    icon: str
    badge_variant: str
    is_active: bool


class RoleSelectorResponse(BaseModel):
    """
    Role selector for the current session.
    
    `badge` mode carries no options; `menu` lists every assigned role.
    """
    mode: Literal["badge", "menu"]
    active: RoleDisplayResponse
    options: List[RoleOptionResponse] = []


class SwitchRoleRequest(BaseModel):
    role: str = Field(..., min_length=1, description="Role to act under")


class SwitchRoleResponse(BaseModel):
    message: str
    remembered: bool = True
    selector: RoleSelectorResponse

"""
Role directory and active-role API endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.db.session import get_db
from coop_backend.app.core.redis_client import get_redis
from coop_backend.app.core.dependencies import get_current_user
from coop_backend.app.schemas.roles import (
    RoleDisplayResponse, RoleOptionResponse, RoleSelectorResponse, SwitchRoleRequest, SwitchRoleResponse
)
from coop_backend.app.services.active_role import (
    RoleSelectorView, build_role_selector, get_assigned_roles, resolve_active_role, switch_active_role
)
from coop_backend.app.services.audit import log_event, AuditAction
from coop_backend.app.services.role_directory import ROLE_DIRECTORY

router = APIRouter(prefix="/roles", tags=["Roles"])
session_router = APIRouter(prefix="/session", tags=["Session"])


def selector_response(view: RoleSelectorView) -> RoleSelectorResponse:
    return RoleSelectorResponse(
        mode=view.mode,
        active=RoleDisplayResponse.model_validate(view.active),
        options=[
            RoleOptionResponse(
                role=option.display.role,
                label=option.display.label,
                icon=option.display.icon,
                badge_variant=option.display.badge_variant,
                is_active=option.is_active
            )
            for option in view.options
        ]
    )


@router.get("/directory", response_model=List[RoleDisplayResponse])
async def list_role_directory():
    """Display entry (label, icon, badge) for every known role."""
    return [RoleDisplayResponse.model_validate(display) for display in ROLE_DIRECTORY.values()]


@session_router.get("/role-selector", response_model=RoleSelectorResponse)
async def get_role_selector(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis)
):
    """
    Role selector for the signed-in user.
    
    A single badge when at most one role is assigned, a menu otherwise.
    """
    user_id = current_user["user_id"]
    roles = await get_assigned_roles(db, user_id)
    active = await resolve_active_role(redis, user_id, roles)
    return selector_response(build_role_selector(roles, active))


@session_router.put("/active-role", response_model=SwitchRoleResponse)
async def change_active_role(
    body: SwitchRoleRequest,
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis)
):
    """
    Switch the role the session acts under.
    
    Only assigned roles are accepted (400 otherwise).
    """
    user_id = current_user["user_id"]
    roles = await get_assigned_roles(db, user_id)
    view = await switch_active_role(redis, user_id, roles, body.role)
    
    await log_event(
        db=db,
        action=AuditAction.ROLE_SWITCHED,
        actor_id=user_id,
        actor_email=current_user.get("sub"),
        metadata={"role": body.role},
        ip_address=request.client.host if request.client else None
    )
    
    message = f"You are now using the role: {view.active.label}"
    if not view.remembered:
        message += " (this choice could not be saved and will not be remembered)"
    
    return SwitchRoleResponse(
        message=message,
        remembered=view.remembered,
        selector=selector_response(view)
    )

"""
Active role selection and persistence.

Every signed-in user acts under exactly one of their assigned roles.
The choice is remembered in Redis per user; when nothing usable is
stored, the highest-priority assigned role wins. Users without any
assigned role act as DEFAULT_ROLE.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.core.config import settings
from coop_backend.app.core.exceptions import RoleNotAssignedError
from coop_backend.app.models.enums import AppRole
from coop_backend.app.models.user import UserRoleAssignment
from coop_backend.app.services.role_directory import RoleDisplay, describe_role

logger = logging.getLogger(__name__)

DEFAULT_ROLE: str = settings.default_role

ROLE_PRIORITY: Tuple[str, ...] = (
    AppRole.ADMINISTRATOR.value,
    AppRole.PRESIDENT.value,
    AppRole.MANAGER.value,
    AppRole.EMPLOYEE.value,
    AppRole.PARTNER.value,
    AppRole.OFFICIAL.value,
    AppRole.DRIVER.value,
    AppRole.CLIENT.value,
)

ACTIVE_ROLE_PREFIX = "active_role:"


@dataclass(frozen=True)
class RoleOption:
    display: RoleDisplay
    is_active: bool


@dataclass(frozen=True)
class RoleSelectorView:
    """
    What the role selector shows.
    
    mode is "badge" (single role, nothing to switch) or "menu".
    """
    mode: str
    active: RoleDisplay
    options: List[RoleOption] = field(default_factory=list)
    remembered: bool = True


def _unique(roles: Iterable[str]) -> List[str]:
    seen = []
    for role in roles:
        role = role.value if isinstance(role, AppRole) else str(role)
        if role not in seen:
            seen.append(role)
    return seen


def select_active_role(assigned: Sequence[str], stored: Optional[str] = None) -> str:
    """
    Pick the role a user acts under.
    
    Args:
        assigned: Roles held by the user
        stored: Previously chosen role, if any
        
    Returns:
        stored when it is still assigned, otherwise the first assigned
        role by priority, otherwise DEFAULT_ROLE
    """
    roles = _unique(assigned)
    if stored and stored in roles:
        return stored
    for candidate in ROLE_PRIORITY:
        if candidate in roles:
            return candidate
    if roles:
        return roles[0]
    return DEFAULT_ROLE


def build_role_selector(assigned: Sequence[str], active: Optional[str]) -> RoleSelectorView:
    """
    Build the selector for a user's roles.
    
    Zero or one assigned role renders as a single badge. More than one
    renders as a menu listing every assigned role.
    """
    roles = _unique(assigned)
    if not active or (roles and active not in roles):
        active = select_active_role(roles)
    
    if len(roles) <= 1:
        return RoleSelectorView(mode="badge", active=describe_role(active))
    
    options = [RoleOption(display=describe_role(role), is_active=(role == active)) for role in roles]
    return RoleSelectorView(mode="menu", active=describe_role(active), options=options)


async def get_assigned_roles(db: AsyncSession, user_id: int) -> List[str]:
    result = await db.execute(
        select(UserRoleAssignment.role)
        .where(UserRoleAssignment.user_id == user_id)
        .order_by(UserRoleAssignment.id)
    )
    return [role.value for role in result.scalars().all()]


async def load_stored_role(redis, user_id: int) -> Optional[str]:
    try:
        return await redis.get(f"{ACTIVE_ROLE_PREFIX}{user_id}")
    except Exception:
        logger.exception("Could not read active role", extra={"user_id": user_id})
        return None


async def store_active_role(redis, user_id: int, role: str) -> bool:
    try:
        await redis.set(f"{ACTIVE_ROLE_PREFIX}{user_id}", role, ex=settings.active_role_ttl_seconds)
        return True
    except Exception:
        logger.exception("Could not persist active role", extra={"user_id": user_id})
        return False


async def resolve_active_role(redis, user_id: int, assigned: Sequence[str]) -> str:
    """Active role for a user, remembering the pick when it changed."""
    stored = await load_stored_role(redis, user_id)
    active = select_active_role(assigned, stored)
    if assigned and active != stored:
        await store_active_role(redis, user_id, active)
    return active


async def switch_active_role(redis, user_id: int, assigned: Sequence[str], role: str) -> RoleSelectorView:
    """
    Make role the user's active role.
    
    remembered is False on the returned view when the choice could not
    be stored; later reads then fall back to priority selection.
    
    Raises:
        RoleNotAssignedError: role is not one of the user's roles
    """
    if role not in _unique(assigned):
        raise RoleNotAssignedError(role)
    
    remembered = await store_active_role(redis, user_id, role)
    if remembered:
        logger.info("Active role switched", extra={"user_id": user_id, "role": role})
    else:
        logger.warning("Active role switched but not persisted", extra={"user_id": user_id, "role": role})
    
    view = build_role_selector(assigned, role)
    return replace(view, remembered=remembered)

"""
Security guards for role-based access control.
"""

from typing import List
from fastapi import Depends
from coop_backend.app.models.enums import AppRole
from coop_backend.app.core.dependencies import get_current_user
from coop_backend.app.core.exceptions import InsufficientPermissionsError


def require_role(allowed_roles: List[AppRole]):
    """
    Dependency factory for role-based access control.
    
    The caller passes when any role assigned in their token is allowed,
    independent of which role is currently active.
    
    Usage:
        @router.get("/role-requests")
        async def list_requests(current_user: dict = Depends(require_role([AppRole.ADMINISTRATOR]))):
            ...
    
    Raises:
        InsufficientPermissionsError if none of the user's roles is in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        user_roles = current_user.get("roles")
        
        if not user_roles:
            raise InsufficientPermissionsError("Role information missing from token")
        
        allowed = {role.value for role in allowed_roles}
        if not allowed.intersection(user_roles):
            raise InsufficientPermissionsError(
                f"Access denied. Required role: {', '.join(role.value for role in allowed_roles)}",
                details={"required_roles": sorted(allowed)}
            )
        
        return current_user
    
    return role_checker


require_administrator = require_role([AppRole.ADMINISTRATOR])

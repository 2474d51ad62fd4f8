"""
Authentication API endpoints.

Provides login and current-user endpoints for the dashboard.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from coop_backend.app.db.session import get_db
from coop_backend.app.core.redis_client import get_redis
from coop_backend.app.models.user import User, Profile
from coop_backend.app.schemas.auth import UserLogin, TokenResponse, UserResponse, ProfileResponse
from coop_backend.app.core.security import verify_password
from coop_backend.app.core.jwt import create_access_token
from coop_backend.app.core.dependencies import get_current_user
from coop_backend.app.core.exceptions import AuthenticationError
from coop_backend.app.services.active_role import get_assigned_roles, resolve_active_role
from coop_backend.app.services.audit import log_auth_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis)
):
    """
    Login user and return JWT token.
    
    The token carries every assigned role; the active role is resolved
    from the stored choice or by priority.
    Logs successful and failed login attempts for security monitoring.
    """
    email = credentials.email.strip().lower()
    ip_address = request.client.host if request.client else None
    
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    
    if not user or not verify_password(credentials.password, user.hashed_password):
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id if user else None,
            email=email,
            ip_address=ip_address,
            metadata={"reason": "Invalid password" if user else "User not found"}
        )
        raise AuthenticationError("Invalid credentials")
    
    if not user.is_active:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id,
            email=email,
            ip_address=ip_address,
            metadata={"reason": "Account is inactive"}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )
    
    roles = await get_assigned_roles(db, user.id)
    active_role = await resolve_active_role(redis, user.id, roles)
    
    access_token = create_access_token(data={
        "sub": user.email,
        "user_id": user.id,
        "roles": roles
    })
    
    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=user.id,
        email=user.email,
        ip_address=ip_address
    )
    
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        email=user.email,
        roles=roles,
        active_role=active_role
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis)
):
    """
    Get current authenticated user information.
    
    Roles are read from the database, not the token, so grants made
    after login show up here.
    """
    user_id = current_user.get("user_id")
    
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    
    profile_result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    profile = profile_result.scalar_one_or_none()
    
    roles = await get_assigned_roles(db, user_id)
    active_role = await resolve_active_role(redis, user_id, roles)
    
    return UserResponse(
        id=user.id,
        email=user.email,
        is_active=user.is_active,
        created_at=user.created_at,
        profile=ProfileResponse.model_validate(profile) if profile else None,
        roles=roles,
        active_role=active_role
    )

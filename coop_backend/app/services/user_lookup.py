"""
Account lookup by email.

The account query must succeed; the profile and role reads that
follow are best effort and degrade to null / no roles.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.models.user import User, Profile, UserRoleAssignment
from coop_backend.app.schemas.user_lookup import LookupAccount, LookupProfile, UserLookupResponse

logger = logging.getLogger(__name__)


class InvalidEmailError(ValueError):
    pass


def normalize_email(raw) -> str:
    """
    Trim and lowercase an email address.
    
    Raises:
        InvalidEmailError: value is missing, not a string, or has no "@"
    """
    if not isinstance(raw, str):
        raise InvalidEmailError("invalid email")
    email = raw.strip().lower()
    if not email or "@" not in email:
        raise InvalidEmailError("invalid email")
    return email


async def find_account(db: AsyncSession, email: str) -> Optional[User]:
    """Case-insensitive match on the stored email. Errors propagate."""
    result = await db.execute(
        select(User).where(func.lower(func.trim(User.email)) == email).order_by(User.id).limit(1)
    )
    return result.scalar_one_or_none()


async def fetch_profile(db: AsyncSession, user_id: int) -> Optional[LookupProfile]:
    try:
        result = await db.execute(select(Profile).where(Profile.user_id == user_id))
        profile = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception("Profile fetch failed", extra={"user_id": user_id})
        await db.rollback()
        return None
    return LookupProfile.model_validate(profile) if profile else None


async def fetch_roles(db: AsyncSession, user_id: int) -> List[str]:
    try:
        result = await db.execute(
            select(UserRoleAssignment.role)
            .where(UserRoleAssignment.user_id == user_id)
            .order_by(UserRoleAssignment.id)
        )
        return [role.value for role in result.scalars().all()]
    except SQLAlchemyError:
        logger.exception("Roles fetch failed", extra={"user_id": user_id})
        await db.rollback()
        return []


async def lookup_user(db: AsyncSession, email: str) -> UserLookupResponse:
    """
    Look an account up by an already-normalised email.
    
    Raises:
        SQLAlchemyError: the account query itself failed
    """
    account = await find_account(db, email)
    if account is None:
        logger.info("No account for email", extra={"email": email})
        return UserLookupResponse(exists=False)
    
    profile = await fetch_profile(db, account.id)
    roles = await fetch_roles(db, account.id)
    
    return UserLookupResponse(
        exists=True,
        user=LookupAccount(id=account.id, email=account.email.strip().lower()),
        profile=profile,
        roles=roles
    )

"""
Demo account provisioning.

Creates (or repairs) one demo account per cooperative role so the
dashboard can be explored under every role.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.core.security import get_password_hash
from coop_backend.app.models.enums import AppRole, ProvisioningStatus
from coop_backend.app.models.user import User, Profile, UserRoleAssignment
from coop_backend.app.schemas.provisioning import (
    ProvisioningCredentials, ProvisioningResultItem, ProvisioningResponse, ProvisioningSummary
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoAccount:
    email: str
    password: str
    first_name: str
    middle_name: Optional[str]
    surname_1: str
    surname_2: Optional[str]
    id_number: str
    phone: str
    address: str
    role: AppRole


DEMO_ACCOUNTS: Tuple[DemoAccount, ...] = (
    DemoAccount("admin@cooperativa.com", "admin123", "Carlos", "Eduardo", "Pérez", "González",
                "1700000001", "0987654321", "Av. Principal 123, Quito", AppRole.ADMINISTRATOR),
    DemoAccount("presidente@cooperativa.com", "presidente123", "María", "Elena", "Rodríguez", "Vásquez",
                "1700000002", "0987654322", "Calle Real 456, Quito", AppRole.PRESIDENT),
    DemoAccount("manager@cooperativa.com", "manager123", "Luis", "Antonio", "Morales", "Torres",
                "1700000003", "0987654323", "Sector Norte 789, Quito", AppRole.MANAGER),
    DemoAccount("empleado@cooperativa.com", "empleado123", "Ana", "Cristina", "Herrera", "Jiménez",
                "1700000004", "0987654324", "Zona Sur 321, Quito", AppRole.EMPLOYEE),
    DemoAccount("socio@cooperativa.com", "socio123", "Roberto", "Francisco", "Castillo", "Mendoza",
                "1700000005", "0987654325", "Barrio Central 654, Quito", AppRole.PARTNER),
    DemoAccount("conductor@cooperativa.com", "conductor123", "Miguel", "Ángel", "Vargas", "Ruiz",
                "1700000006", "0987654326", "Sector Este 987, Quito", AppRole.DRIVER),
    DemoAccount("oficial@cooperativa.com", "oficial123", "Patricia", "Isabel", "Salinas", "Paredes",
                "1700000007", "0987654327", "Zona Oeste 147, Quito", AppRole.OFFICIAL),
    DemoAccount("cliente@cooperativa.com", "cliente123", "Diego", "Andrés", "Ramírez", "Silva",
                "1700000008", "0987654328", "Sector Urbano 258, Quito", AppRole.CLIENT),
)


def _profile_for(user_id: int, account: DemoAccount) -> Profile:
    return Profile(
        user_id=user_id,
        first_name=account.first_name,
        middle_name=account.middle_name,
        surname_1=account.surname_1,
        surname_2=account.surname_2,
        id_number=account.id_number,
        phone=account.phone,
        address=account.address,
    )


async def _repair_account(db: AsyncSession, user: User, account: DemoAccount) -> ProvisioningResultItem:
    """Add whatever profile or role an existing demo account is missing."""
    repaired = []
    
    profile_result = await db.execute(select(Profile.id).where(Profile.user_id == user.id))
    if profile_result.scalar_one_or_none() is None:
        db.add(_profile_for(user.id, account))
        repaired.append("profile")
    
    role_result = await db.execute(
        select(UserRoleAssignment.id).where(
            UserRoleAssignment.user_id == user.id,
            UserRoleAssignment.role == account.role
        )
    )
    if role_result.scalar_one_or_none() is None:
        db.add(UserRoleAssignment(user_id=user.id, role=account.role))
        repaired.append("role")
    
    if not repaired:
        return ProvisioningResultItem(
            email=account.email,
            status=ProvisioningStatus.ALREADY_EXISTS,
            message="User already exists"
        )
    
    await db.commit()
    return ProvisioningResultItem(
        email=account.email,
        status=ProvisioningStatus.UPDATED,
        message=f"User updated ({', '.join(repaired)})"
    )


async def provision_account(db: AsyncSession, account: DemoAccount) -> ProvisioningResultItem:
    """
    Provision a single demo account.
    
    Failures are reported as an ERROR result; the session is rolled
    back so the next account starts clean.
    """
    try:
        result = await db.execute(select(User).where(func.lower(func.trim(User.email)) == account.email.strip().lower()))
        existing = result.scalar_one_or_none()
        if existing is not None:
            return await _repair_account(db, existing, account)
        
        user = User(
            email=account.email,
            hashed_password=get_password_hash(account.password),
            is_active=True
        )
        db.add(user)
        await db.flush()
        
        db.add(_profile_for(user.id, account))
        db.add(UserRoleAssignment(user_id=user.id, role=account.role))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Provisioning failed for %s: %s", account.email, exc)
        return ProvisioningResultItem(
            email=account.email,
            status=ProvisioningStatus.ERROR,
            message=str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc)
        )
    
    return ProvisioningResultItem(
        email=account.email,
        status=ProvisioningStatus.SUCCESS,
        message="User created",
        credentials=ProvisioningCredentials(
            email=account.email,
            role=account.role.value,
            password=account.password
        )
    )


def summarize_results(results: List[ProvisioningResultItem], total: int) -> ProvisioningSummary:
    def count(status: ProvisioningStatus) -> int:
        return sum(1 for item in results if item.status == status)
    
    return ProvisioningSummary(
        total=total,
        created=count(ProvisioningStatus.SUCCESS),
        errors=count(ProvisioningStatus.ERROR),
        existing=count(ProvisioningStatus.ALREADY_EXISTS)
    )


async def provision_demo_accounts(
    db: AsyncSession,
    accounts: Tuple[DemoAccount, ...] = DEMO_ACCOUNTS
) -> ProvisioningResponse:
    """
    Provision every demo account in order.
    
    Returns:
        Per-account results in input order and the aggregate summary
    """
    results = []
    for account in accounts:
        results.append(await provision_account(db, account))
    
    summary = summarize_results(results, total=len(accounts))
    logger.info(
        "Demo provisioning finished",
        extra={"created_count": summary.created, "error_count": summary.errors, "existing_count": summary.existing}
    )
    return ProvisioningResponse(success=True, results=results, summary=summary)

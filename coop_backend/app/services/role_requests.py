"""
Role request workflow.

A member asks for extra roles; every administrator is notified. An
administrator approves or rejects each request and the requester is
notified of the outcome.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.core.exceptions import ResourceNotFoundError, RoleRequestAlreadyProcessedError
from coop_backend.app.models.enums import AppRole, RoleRequestStatus
from coop_backend.app.models.notification import NotificationType
from coop_backend.app.models.role_request import RoleRequest
from coop_backend.app.models.user import Profile, UserRoleAssignment
from coop_backend.app.services.notification_service import NotificationService
from coop_backend.app.services.role_directory import role_label

logger = logging.getLogger(__name__)


async def _requester_name(db: AsyncSession, user_id: int, fallback: str) -> str:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    profile = result.scalar_one_or_none()
    return profile.display_name if profile else fallback


async def create_role_requests(
    db: AsyncSession,
    requester_id: int,
    requester_email: str,
    roles: Sequence[AppRole],
    justification: str
) -> Tuple[List[RoleRequest], int]:
    """
    Create one pending request per role and notify administrators.
    
    Returns:
        The created requests and how many administrators were notified
    """
    unique_roles = list(dict.fromkeys(roles))
    requests = [
        RoleRequest(
            requester_id=requester_id,
            requested_role=role,
            justification=justification,
            status=RoleRequestStatus.PENDING
        )
        for role in unique_roles
    ]
    db.add_all(requests)
    await db.flush()
    
    name = await _requester_name(db, requester_id, requester_email)
    roles_text = ", ".join(role_label(role) for role in unique_roles)
    notified = await NotificationService.notify_role(
        db,
        AppRole.ADMINISTRATOR,
        title="Additional role request",
        message=f"{name} has requested the roles: {roles_text}. Justification: {justification}",
        type=NotificationType.ROLE_REQUEST,
        metadata={
            "requester_id": requester_id,
            "requested_roles": [role.value for role in unique_roles],
            "request_ids": [request.id for request in requests],
        }
    )
    
    await db.commit()
    for request in requests:
        await db.refresh(request)
    return requests, notified


async def list_pending_requests(db: AsyncSession, limit: int = 100) -> List[RoleRequest]:
    result = await db.execute(
        select(RoleRequest)
        .where(RoleRequest.status == RoleRequestStatus.PENDING)
        .order_by(RoleRequest.created_at, RoleRequest.id)
        .limit(limit)
    )
    return result.scalars().all()


async def _assign_role(db: AsyncSession, user_id: int, role: AppRole) -> bool:
    existing = await db.execute(
        select(UserRoleAssignment.id).where(
            UserRoleAssignment.user_id == user_id,
            UserRoleAssignment.role == role
        )
    )
    if existing.scalar_one_or_none() is not None:
        return True
    try:
        async with db.begin_nested():
            db.add(UserRoleAssignment(user_id=user_id, role=role))
    except SQLAlchemyError:
        # The request stays approved even if the grant fails
        logger.exception("Role assignment failed", extra={"user_id": user_id, "role": role.value})
        return False
    return True


async def decide_role_request(
    db: AsyncSession,
    request_id: int,
    reviewer_id: int,
    action: str,
    notes: Optional[str] = None
) -> Tuple[RoleRequest, bool]:
    """
    Approve or reject a pending request.
    
    Raises:
        ResourceNotFoundError: no such request
        RoleRequestAlreadyProcessedError: request is not pending
        
    Returns:
        The updated request and whether the role is now assigned
    """
    result = await db.execute(select(RoleRequest).where(RoleRequest.id == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise ResourceNotFoundError("Role request", request_id)
    if request.status != RoleRequestStatus.PENDING:
        raise RoleRequestAlreadyProcessedError(request_id, request.status.value)
    
    approved = action == "approve"
    request.status = RoleRequestStatus.APPROVED if approved else RoleRequestStatus.REJECTED
    request.reviewed_by = reviewer_id
    request.reviewed_at = datetime.now(timezone.utc)
    request.notes = notes
    
    role_assigned = False
    if approved:
        role_assigned = await _assign_role(db, request.requester_id, request.requested_role)
    
    status_text = "approved" if approved else "rejected"
    message = f"Your request for the role of {role_label(request.requested_role)} has been {status_text}."
    if notes:
        message += f" Notes: {notes}"
    
    await NotificationService.create_notification(
        db,
        user_id=request.requester_id,
        title=f"Role request {status_text}",
        message=message,
        type=NotificationType.ROLE_RESPONSE,
        metadata={
            "request_id": request.id,
            "action": action,
            "role": request.requested_role.value,
        }
    )
    
    await db.commit()
    await db.refresh(request)
    return request, role_assigned

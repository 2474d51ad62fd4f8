"""
Role Request API Endpoints.

Members request additional roles; administrators decide on them.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.db.session import get_db
from coop_backend.app.core.dependencies import get_current_user
from coop_backend.app.core.guards import require_administrator
from coop_backend.app.schemas.role_request import (
    RoleRequestCreate, RoleRequestDecision, RoleRequestResponse,
    RoleRequestCreatedResponse, RoleRequestDecisionResponse
)
from coop_backend.app.services.audit import log_event, AuditAction
from coop_backend.app.services.role_requests import (
    create_role_requests, decide_role_request, list_pending_requests
)

router = APIRouter(prefix="/role-requests", tags=["Role Requests"])


@router.post("", response_model=RoleRequestCreatedResponse, status_code=status.HTTP_201_CREATED)
async def request_roles(
    body: RoleRequestCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Request one or more additional roles.
    
    Every administrator receives a notification.
    """
    requests, notified = await create_role_requests(
        db,
        requester_id=current_user["user_id"],
        requester_email=current_user.get("sub", ""),
        roles=body.requested_roles,
        justification=body.justification
    )
    
    await log_event(
        db=db,
        action=AuditAction.ROLE_REQUESTED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        metadata={"roles": [request.requested_role.value for request in requests]}
    )
    
    return RoleRequestCreatedResponse(
        message="Role request sent",
        requests=[RoleRequestResponse.model_validate(request) for request in requests],
        administrators_notified=notified
    )


@router.get("", response_model=List[RoleRequestResponse])
async def list_role_requests(
    admin: dict = Depends(require_administrator),
    db: AsyncSession = Depends(get_db)
):
    """Pending role requests, oldest first (administrator only)."""
    requests = await list_pending_requests(db)
    return [RoleRequestResponse.model_validate(request) for request in requests]


@router.post("/{request_id}/decision", response_model=RoleRequestDecisionResponse)
async def decide_on_role_request(
    body: RoleRequestDecision,
    request_id: int = Path(..., description="Role request ID"),
    admin: dict = Depends(require_administrator),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a pending role request (administrator only).
    
    Approval grants the role; the requester is notified either way.
    """
    role_request, role_assigned = await decide_role_request(
        db,
        request_id=request_id,
        reviewer_id=admin["user_id"],
        action=body.action,
        notes=body.notes
    )
    
    approved = body.action == "approve"
    await log_event(
        db=db,
        action=AuditAction.ROLE_REQUEST_APPROVED if approved else AuditAction.ROLE_REQUEST_REJECTED,
        actor_id=admin["user_id"],
        actor_email=admin.get("sub"),
        target_user_id=role_request.requester_id,
        metadata={
            "request_id": role_request.id,
            "role": role_request.requested_role.value,
            "role_assigned": role_assigned
        }
    )
    
    return RoleRequestDecisionResponse(
        message=f"Request {'approved' if approved else 'rejected'}",
        request=RoleRequestResponse.model_validate(role_request),
        role_assigned=role_assigned
    )

"""
Audit log API endpoint (administrator only).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.db.session import get_db
from coop_backend.app.core.guards import require_administrator
from coop_backend.app.schemas.audit import AuditLogResponse
from coop_backend.app.services.audit import get_audit_trail

router = APIRouter(prefix="/audit-log", tags=["Audit"])


@router.get("", response_model=List[AuditLogResponse])
async def list_audit_log(
    action: Optional[str] = Query(None, description="Filter by action, e.g. LOGIN_FAILED"),
    target_user_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    admin: dict = Depends(require_administrator),
    db: AsyncSession = Depends(get_db)
):
    """Most recent audit entries first."""
    return await get_audit_trail(db, target_user_id=target_user_id, action=action, limit=limit)

"""
create-test-users function.

Provisions one demo account per cooperative role.
"""

import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.api.functions.cors import (
    FUNCTION_METHODS, json_response, method_not_allowed, preflight_response
)
from coop_backend.app.db.session import get_db
from coop_backend.app.services.audit import record_event, AuditAction
from coop_backend.app.services.provisioning import provision_demo_accounts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Functions"])


@router.api_route("/create-test-users", methods=FUNCTION_METHODS)
async def create_test_users(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Provision the demo accounts. No request parameters.
    
    200 `{"success": true, "results": [...], "summary": {total, created, errors, existing}}`
    or 500 `{"error"}` when the run itself fails. Per-account failures
    are reported inside `results`.
    """
    if request.method == "OPTIONS":
        return preflight_response()
    if request.method != "POST":
        return method_not_allowed()
    
    try:
        outcome = await provision_demo_accounts(db)
    except Exception as exc:
        logger.exception("Error creating test users")
        return json_response({"error": str(exc) or "Internal server error"}, status_code=500)
    
    await record_event(db, AuditAction.DEMO_USERS_PROVISIONED, metadata=outcome.summary.model_dump())
    
    return json_response(outcome.model_dump(mode="json"))

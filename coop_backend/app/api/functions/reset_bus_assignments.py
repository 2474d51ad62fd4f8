"""
reset-bus-assignments function.

Trigger for the daily reset of bus driver/official assignments.
"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.api.functions.cors import (
    FUNCTION_METHODS, json_response, method_not_allowed, preflight_response
)
from coop_backend.app.db.session import get_db
from coop_backend.app.schemas.assignments import AssignmentResetFailure, AssignmentResetResponse
from coop_backend.app.services.audit import record_event, AuditAction
from coop_backend.app.services.bus_assignments import reset_daily_bus_assignments

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Functions"])


@router.api_route("/reset-bus-assignments", methods=FUNCTION_METHODS)
async def reset_bus_assignments(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Run the daily assignment reset. No request body.
    
    200 `{"success": true, "message", "timestamp", "buses_reset"}` or
    500 `{"success": false, "error"}`.
    """
    if request.method == "OPTIONS":
        return preflight_response()
    if request.method != "POST":
        return method_not_allowed({"success": False})
    
    logger.info("Starting daily bus assignment reset")
    try:
        buses_reset = await reset_daily_bus_assignments(db)
    except Exception as exc:
        logger.exception("Error resetting bus assignments")
        failure = AssignmentResetFailure(error=str(exc) or "Internal server error")
        return json_response(failure.model_dump(), status_code=500)
    
    await record_event(db, AuditAction.BUS_ASSIGNMENTS_RESET, metadata={"buses_reset": buses_reset})
    logger.info("Daily bus assignment reset completed", extra={"buses_reset": buses_reset})
    response = AssignmentResetResponse(
        message="Bus assignments reset completed successfully",
        timestamp=datetime.now(timezone.utc).isoformat(),
        buses_reset=buses_reset
    )
    return json_response(response.model_dump())

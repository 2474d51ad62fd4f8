"""
check-user function.

Looks an account up by email and returns its profile and roles.
"""

import json
import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.api.functions.cors import (
    FUNCTION_METHODS, json_response, method_not_allowed, preflight_response
)
from coop_backend.app.db.session import get_db
from coop_backend.app.services.user_lookup import InvalidEmailError, lookup_user, normalize_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Functions"])


@router.api_route("/check-user", methods=FUNCTION_METHODS)
async def check_user(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Request body: `{"email": "..."}`.
    
    Responses:
        400 `{"error": "empty body" | "invalid JSON" | "invalid email"}`
        200 `{"exists": false}`
        200 `{"exists": true, "user": {...}, "profile": {...} | null, "roles": [...]}`
        500 `{"error": "error querying users"}`
    """
    if request.method == "OPTIONS":
        return preflight_response()
    if request.method != "POST":
        return method_not_allowed()
    
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return json_response({"error": "invalid JSON"}, status_code=400)
    
    if not text.strip():
        return json_response({"error": "empty body"}, status_code=400)
    
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return json_response({"error": "invalid JSON"}, status_code=400)
    
    try:
        email = normalize_email(payload.get("email") if isinstance(payload, dict) else None)
    except InvalidEmailError:
        return json_response({"error": "invalid email"}, status_code=400)
    
    logger.info("Checking email", extra={"email": email})
    
    try:
        result = await lookup_user(db, email)
    except SQLAlchemyError:
        logger.exception("Account query failed")
        return json_response({"error": "error querying users"}, status_code=500)
    
    if not result.exists:
        return json_response({"exists": False})
    return json_response(result.model_dump(mode="json"))

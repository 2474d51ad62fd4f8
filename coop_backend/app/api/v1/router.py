"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from coop_backend.app.api.v1.endpoints import audit, auth, roles, fleet, role_requests, notifications

router = APIRouter()

router.include_router(auth.router)

# Role directory and the session's active role
router.include_router(roles.router)
router.include_router(roles.session_router)

# Dashboard fleet cards
router.include_router(fleet.router)

router.include_router(role_requests.router)
router.include_router(notifications.router)
router.include_router(audit.router)

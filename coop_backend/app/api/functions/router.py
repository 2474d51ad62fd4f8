"""
Function endpoints router.

Single-purpose handlers mounted under /functions/v1.
"""

from fastapi import APIRouter
from coop_backend.app.api.functions import check_user, create_test_users, reset_bus_assignments

router = APIRouter()

router.include_router(check_user.router)
router.include_router(reset_bus_assignments.router)
router.include_router(create_test_users.router)

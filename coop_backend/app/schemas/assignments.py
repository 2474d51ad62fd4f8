"""
Assignment reset function schemas.
"""

from pydantic import BaseModel


class AssignmentResetResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    buses_reset: int


class AssignmentResetFailure(BaseModel):
    success: bool = False
    error: str

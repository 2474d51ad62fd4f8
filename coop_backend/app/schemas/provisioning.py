"""
Demo account provisioning schemas.

Shared by the create-test-users function and the caller-side trigger.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from coop_backend.app.models.enums import ProvisioningStatus


class ProvisioningCredentials(BaseModel):
    """Credentials of a newly created account."""
    email: str
    role: str
    password: str


class ProvisioningResultItem(BaseModel):
    """Outcome for one demo account."""
    email: str
    status: ProvisioningStatus
    message: str = ""
    credentials: Optional[ProvisioningCredentials] = None


class ProvisioningSummary(BaseModel):
    """
    Aggregate counts as reported by the provisioning endpoint.
    
    There is no `updated` field; callers derive it from the results.
    """
    total: int = Field(0, ge=0)
    created: int = Field(0, ge=0)
    errors: int = Field(0, ge=0)
    existing: int = Field(0, ge=0)


class ProvisioningResponse(BaseModel):
    success: bool = True
    results: List[ProvisioningResultItem]
    summary: ProvisioningSummary

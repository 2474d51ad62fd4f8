"""
Fleet summary schemas.
"""

from pydantic import BaseModel
from typing import List, Optional
from coop_backend.app.services.fleet_summary import FleetSummaryState


class BusCardResponse(BaseModel):
    id: int
    plate: str
    title: str
    image_url: Optional[str] = None
    initials: str
    owner_name: Optional[str] = None
    owner_line: str
    driver_name: Optional[str] = None
    show_driver: bool
    official_name: Optional[str] = None
    
    class Config:
        from_attributes = True


class FleetSummaryResponse(BaseModel):
    state: FleetSummaryState
    buses: List[BusCardResponse] = []
    message: Optional[str] = None

"""
Fleet summary API endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.db.session import get_db
from coop_backend.app.core.dependencies import get_current_user
from coop_backend.app.schemas.fleet import BusCardResponse, FleetSummaryResponse
from coop_backend.app.services.fleet_summary import FleetSummaryState, load_fleet_summary

router = APIRouter(prefix="/fleet", tags=["Fleet"])

STATE_MESSAGES = {
    FleetSummaryState.EMPTY: "No buses in service",
    FleetSummaryState.FAILED: "Fleet data could not be loaded",
}


@router.get("/summary", response_model=FleetSummaryResponse)
async def get_fleet_summary(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Buses currently in service, as dashboard cards (at most four).
    
    `state` tells a legitimately empty fleet (`empty`) apart from a
    failed read (`failed`); both answer 200.
    """
    summary = await load_fleet_summary(db)
    return FleetSummaryResponse(
        state=summary.state,
        buses=[BusCardResponse.model_validate(card) for card in summary.buses],
        message=STATE_MESSAGES.get(summary.state)
    )

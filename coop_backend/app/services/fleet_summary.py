"""
Fleet summary service.

Reads the buses currently in service, with the display names of their
owner, driver and official, for the dashboard fleet cards.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from coop_backend.app.core.config import settings
from coop_backend.app.models.bus import Bus
from coop_backend.app.models.enums import BusStatus
from coop_backend.app.models.user import Profile

logger = logging.getLogger(__name__)

NO_OWNER_LINE = "No owner"


class FleetSummaryState(str, enum.Enum):
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class BusCard:
    id: int
    plate: str
    title: str
    image_url: Optional[str]
    initials: str
    owner_name: Optional[str]
    driver_name: Optional[str]
    official_name: Optional[str]
    
    @property
    def owner_line(self) -> str:
        return self.owner_name or NO_OWNER_LINE
    
    @property
    def show_driver(self) -> bool:
        return self.driver_name is not None


@dataclass(frozen=True)
class FleetSummary:
    state: FleetSummaryState
    buses: List[BusCard] = field(default_factory=list)
    error: Optional[str] = None


def card_initials(title: str) -> str:
    """First letters of up to two words of the title, uppercased."""
    words = [word for word in title.replace("-", " ").split() if word]
    return "".join(word[0] for word in words[:2]).upper()


def _display_name(first_name: Optional[str], surname: Optional[str]) -> Optional[str]:
    if first_name is None and surname is None:
        return None
    return " ".join(part for part in (first_name, surname) if part)


def build_bus_card(bus: Bus, owner: tuple, driver: tuple, official: tuple) -> BusCard:
    title = bus.alias or bus.plate
    return BusCard(
        id=bus.id,
        plate=bus.plate,
        title=title,
        image_url=bus.image_url,
        initials=card_initials(title),
        owner_name=_display_name(*owner),
        driver_name=_display_name(*driver),
        official_name=_display_name(*official),
    )


async def load_fleet_summary(db: AsyncSession, limit: Optional[int] = None) -> FleetSummary:
    """
    Load at most `limit` in-service buses as dashboard cards.
    
    A failed read produces FAILED, never EMPTY: EMPTY means the query
    succeeded and no bus is in service.
    """
    if limit is None:
        limit = settings.fleet_summary_limit
    
    owner = aliased(Profile, name="owner_profile")
    driver = aliased(Profile, name="driver_profile")
    official = aliased(Profile, name="official_profile")
    
    query = (
        select(
            Bus,
            owner.first_name, owner.surname_1,
            driver.first_name, driver.surname_1,
            official.first_name, official.surname_1,
        )
        .outerjoin(owner, owner.user_id == Bus.owner_id)
        .outerjoin(driver, driver.user_id == Bus.driver_id)
        .outerjoin(official, official.user_id == Bus.official_id)
        .where(Bus.status == BusStatus.IN_SERVICE)
        .order_by(Bus.created_at, Bus.id)
        .limit(limit)
    )
    
    try:
        result = await db.execute(query)
        rows = result.all()
    except SQLAlchemyError as exc:
        logger.exception("Fleet summary query failed")
        return FleetSummary(state=FleetSummaryState.FAILED, error=str(exc))
    
    cards = [
        build_bus_card(row[0], row[1:3], row[3:5], row[5:7])
        for row in rows
    ]
    
    if not cards:
        return FleetSummary(state=FleetSummaryState.EMPTY)
    return FleetSummary(state=FleetSummaryState.LOADED, buses=cards)

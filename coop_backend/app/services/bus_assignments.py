"""
Daily bus assignment reset.

Clears the driver and official assigned to every bus so each day
starts without carry-over assignments.
"""

import logging

from sqlalchemy import update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from coop_backend.app.models.bus import Bus

logger = logging.getLogger(__name__)


async def reset_daily_bus_assignments(db: AsyncSession) -> int:
    """
    Unassign drivers and officials from all buses in one transaction.
    
    Returns:
        Number of buses that had an assignment cleared
    """
    stmt = (
        update(Bus)
        .where(or_(Bus.driver_id.is_not(None), Bus.official_id.is_not(None)))
        .values(driver_id=None, official_id=None)
        .execution_options(synchronize_session=False)
    )
    try:
        result = await db.execute(stmt)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    
    logger.info("Bus assignments reset", extra={"buses_reset": result.rowcount})
    return result.rowcount

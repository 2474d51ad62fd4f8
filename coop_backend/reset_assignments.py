"""
Daily bus assignment reset, for cron.

Equivalent to POST /functions/v1/reset-bus-assignments without going
through HTTP. Exits non-zero when the reset fails.
"""

import asyncio
import logging
import sys

from coop_backend.app.core.config import settings
from coop_backend.app.db.session import AsyncSessionLocal, engine
from coop_backend.app.services.audit import record_event, AuditAction
from coop_backend.app.services.bus_assignments import reset_daily_bus_assignments

# Register referenced tables with Base
from coop_backend.app.models.user import User  # noqa: F401
from coop_backend.app.models.audit_log import AuditLog  # noqa: F401

logger = logging.getLogger("coop_backend.reset_assignments")


async def run_reset() -> int:
    async with AsyncSessionLocal() as db:
        buses_reset = await reset_daily_bus_assignments(db)
        await record_event(db, AuditAction.BUS_ASSIGNMENTS_RESET, metadata={"buses_reset": buses_reset, "source": "cli"})
    return buses_reset


async def _main() -> int:
    try:
        buses_reset = await run_reset()
    except Exception:
        logger.exception("Bus assignment reset failed")
        return 1
    finally:
        await engine.dispose()
    logger.info("Bus assignments reset", extra={"buses_reset": buses_reset})
    print(f"Bus assignments reset completed: {buses_reset} buses")
    return 0


def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(_main()))


if __name__ == "__main__":
    main()

"""
Database seeding script for development.

Provisions one demo account per role and a few sample buses so the
dashboard has something to show. Safe to run repeatedly.
"""

import asyncio

from sqlalchemy import select

from coop_backend.app.db.session import AsyncSessionLocal, Base, engine
from coop_backend.app.models.bus import Bus
from coop_backend.app.models.enums import BusStatus
from coop_backend.app.models.user import User
from coop_backend.app.services.provisioning import provision_demo_accounts

# Register remaining models with Base
from coop_backend.app.models.role_request import RoleRequest  # noqa: F401
from coop_backend.app.models.notification import Notification  # noqa: F401
from coop_backend.app.models.audit_log import AuditLog  # noqa: F401

# plate, alias, capacity, status, owner email, driver email, official email
SAMPLE_BUSES = (
    ("PBA-1001", "Unidad 01", 42, BusStatus.IN_SERVICE,
     "socio@cooperativa.com", "conductor@cooperativa.com", "oficial@cooperativa.com"),
    ("PBA-1002", "Unidad 02", 40, BusStatus.IN_SERVICE, "socio@cooperativa.com", None, None),
    ("PBA-1003", "Unidad 03", 38, BusStatus.AVAILABLE, "socio@cooperativa.com", None, None),
    ("PBA-1004", None, 45, BusStatus.MAINTENANCE, None, None, None),
)


async def _user_ids(db) -> dict:
    result = await db.execute(select(User.email, User.id))
    return {email: user_id for email, user_id in result.all()}


async def seed_buses(db) -> int:
    ids = await _user_ids(db)
    created = 0
    for plate, alias, capacity, status, owner, driver, official in SAMPLE_BUSES:
        existing = await db.execute(select(Bus.id).where(Bus.plate == plate))
        if existing.scalar_one_or_none() is not None:
            print(f"ℹ️  Bus {plate} already exists, skipping")
            continue
        db.add(Bus(
            plate=plate,
            alias=alias,
            capacity=capacity,
            status=status,
            owner_id=ids.get(owner),
            driver_id=ids.get(driver),
            official_id=ids.get(official),
        ))
        created += 1
        print(f"✅ Created bus {plate} ({status.value})")
    await db.commit()
    return created


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")
        
        outcome = await provision_demo_accounts(db)
        for item in outcome.results:
            print(f"   {item.status.value:<15} {item.email}  {item.message}")
        summary = outcome.summary
        print(f"✅ Accounts: {summary.created} created, {summary.existing} existing, {summary.errors} errors")
        
        buses = await seed_buses(db)
        print(f"✅ Buses: {buses} created")
    
    await engine.dispose()
    print("🎉 Seeding completed")


def main():
    asyncio.run(seed())


if __name__ == "__main__":
    main()

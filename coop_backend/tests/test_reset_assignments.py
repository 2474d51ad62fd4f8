"""
Tests for the daily bus assignment reset.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from coop_backend.app.models.audit_log import AuditLog
from coop_backend.app.models.bus import Bus
from coop_backend.app.models.enums import BusStatus
from coop_backend.app.services.bus_assignments import reset_daily_bus_assignments

URL = "/functions/v1/reset-bus-assignments"


@pytest.mark.asyncio
async def test_reset_clears_assignments(client, db_session, make_user, make_bus):
    driver = await make_user("driver@test.com", roles=["driver"])
    official = await make_user("official@test.com", roles=["official"])
    owner = await make_user("owner@test.com", roles=["partner"])
    owner_id = owner.id
    
    await make_bus("AAA-001", owner=owner, driver=driver, official=official)
    await make_bus("AAA-002", status=BusStatus.AVAILABLE, official=official)
    await make_bus("AAA-003", owner=owner)
    
    response = await client.post(URL)
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    data = response.json()
    assert data["success"] is True
    assert data["buses_reset"] == 2
    assert data["message"]
    assert data["timestamp"]
    
    db_session.expire_all()
    buses = (await db_session.execute(select(Bus).order_by(Bus.plate))).scalars().all()
    assert all(bus.driver_id is None and bus.official_id is None for bus in buses)
    # Status and ownership are untouched
    assert [bus.status for bus in buses] == [BusStatus.IN_SERVICE, BusStatus.AVAILABLE, BusStatus.IN_SERVICE]
    assert buses[0].owner_id == owner_id
    
    audit = (await db_session.execute(select(AuditLog).order_by(AuditLog.id))).scalars().all()
    assert audit[-1].action == "BUS_ASSIGNMENTS_RESET"


@pytest.mark.asyncio
async def test_reset_without_assignments(db_session, make_bus):
    await make_bus("AAA-001")
    assert await reset_daily_bus_assignments(db_session) == 0


@pytest.mark.asyncio
async def test_reset_failure_returns_500(client, mocker):
    mocker.patch(
        "coop_backend.app.api.functions.reset_bus_assignments.reset_daily_bus_assignments",
        side_effect=RuntimeError("db down")
    )
    
    response = await client.post(URL)
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "db down"}


@pytest.mark.asyncio
async def test_reset_preflight_and_method(client):
    assert (await client.options(URL)).status_code == 200
    
    response = await client.get(URL)
    assert response.status_code == 405
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_completed_reset(client, db_session, make_user, make_bus, mocker):
    driver = await make_user("driver@test.com", roles=["driver"])
    bus = await make_bus("AAA-001", driver=driver)
    bus_id = bus.id
    mocker.patch(
        "coop_backend.app.services.audit.log_event",
        side_effect=SQLAlchemyError("audit table locked")
    )
    
    response = await client.post(URL)
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["buses_reset"] == 1
    
    db_session.expire_all()
    driver_id = (await db_session.execute(select(Bus.driver_id).where(Bus.id == bus_id))).scalar_one()
    assert driver_id is None

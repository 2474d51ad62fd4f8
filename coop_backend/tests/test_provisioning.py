"""
Tests for demo account provisioning and its derived summary.
"""

import logging

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from coop_backend.app.models.audit_log import AuditLog
from coop_backend.app.models.enums import ProvisioningStatus
from coop_backend.app.models.user import User, Profile, UserRoleAssignment
from coop_backend.app.schemas.provisioning import ProvisioningResultItem, ProvisioningSummary
from coop_backend.app.services.provisioning import DEMO_ACCOUNTS, provision_demo_accounts
from coop_backend.app.services.provisioning_summary import (
    TONE_NEUTRAL, TONE_SUCCESS, count_updated, derive_provisioning_summary
)


def _item(email, status):
    return ProvisioningResultItem(email=email, status=status)


def test_updated_count_comes_from_results():
    results = [
        _item("a@x.com", ProvisioningStatus.SUCCESS),
        _item("b@x.com", ProvisioningStatus.UPDATED),
        _item("c@x.com", ProvisioningStatus.UPDATED),
        _item("d@x.com", ProvisioningStatus.ALREADY_EXISTS),
        _item("e@x.com", ProvisioningStatus.ERROR),
    ]
    summary = ProvisioningSummary(total=5, created=1, errors=1, existing=1)
    
    derived = derive_provisioning_summary(results, summary)
    
    assert count_updated(results) == 2
    assert derived.updated == 2
    assert derived.changed == 3
    assert derived.notice.tone == TONE_SUCCESS
    assert derived.notice.description == "1 created, 2 updated"


def test_updated_only_run_is_a_success():
    results = [_item("a@x.com", ProvisioningStatus.UPDATED)]
    derived = derive_provisioning_summary(results, ProvisioningSummary(total=1))
    assert derived.notice.tone == TONE_SUCCESS
    assert derived.notice.title == "Users provisioned"


def test_nothing_changed_is_neutral():
    results = [_item("a@x.com", ProvisioningStatus.ALREADY_EXISTS)]
    derived = derive_provisioning_summary(results, ProvisioningSummary(total=1, existing=1))
    assert derived.changed == 0
    assert derived.notice.tone == TONE_NEUTRAL
    assert derived.notice.title == "No changes"


@pytest.mark.asyncio
async def test_first_run_creates_every_account(db_session):
    outcome = await provision_demo_accounts(db_session)
    
    assert outcome.success is True
    assert outcome.summary.total == len(DEMO_ACCOUNTS)
    assert outcome.summary.created == len(DEMO_ACCOUNTS)
    assert all(item.status == ProvisioningStatus.SUCCESS for item in outcome.results)
    assert [item.email for item in outcome.results] == [account.email for account in DEMO_ACCOUNTS]
    assert outcome.results[0].credentials.password == "admin123"
    
    roles = (await db_session.execute(select(UserRoleAssignment.role))).scalars().all()
    assert {role.value for role in roles} == {account.role.value for account in DEMO_ACCOUNTS}


@pytest.mark.asyncio
async def test_second_run_reports_existing(db_session):
    await provision_demo_accounts(db_session)
    outcome = await provision_demo_accounts(db_session)
    
    assert outcome.summary.created == 0
    assert outcome.summary.existing == len(DEMO_ACCOUNTS)
    assert all(item.credentials is None for item in outcome.results)


@pytest.mark.asyncio
async def test_incomplete_account_is_repaired(db_session):
    account = DEMO_ACCOUNTS[0]
    await provision_demo_accounts(db_session, accounts=(account,))
    
    profile = (await db_session.execute(select(Profile))).scalar_one()
    await db_session.delete(profile)
    await db_session.commit()
    
    outcome = await provision_demo_accounts(db_session, accounts=(account,))
    
    assert outcome.results[0].status == ProvisioningStatus.UPDATED
    assert "profile" in outcome.results[0].message
    assert outcome.summary.created == 0
    assert outcome.summary.existing == 0


@pytest.mark.asyncio
async def test_failed_account_does_not_stop_the_run(db_session, make_user):
    # Another user already holds the first demo account's ID number
    squatter = await make_user("squatter@test.com")
    profile = (await db_session.execute(select(Profile).where(Profile.user_id == squatter.id))).scalar_one()
    profile.id_number = DEMO_ACCOUNTS[0].id_number
    await db_session.commit()
    
    outcome = await provision_demo_accounts(db_session, accounts=DEMO_ACCOUNTS[:2])
    
    assert outcome.results[0].status == ProvisioningStatus.ERROR
    assert outcome.results[1].status == ProvisioningStatus.SUCCESS
    assert outcome.summary.errors == 1
    assert outcome.summary.created == 1
    
    emails = (await db_session.execute(select(User.email))).scalars().all()
    assert DEMO_ACCOUNTS[0].email not in emails


@pytest.mark.asyncio
async def test_create_test_users_function(client, db_session):
    response = await client.post("/functions/v1/create-test-users")
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    
    data = response.json()
    assert data["success"] is True
    assert data["summary"] == {"total": 8, "created": 8, "errors": 0, "existing": 0}
    assert len(data["results"]) == 8
    
    audit = (await db_session.execute(select(AuditLog.action))).scalars().all()
    assert "DEMO_USERS_PROVISIONED" in audit


@pytest.mark.asyncio
async def test_create_test_users_preflight_and_method(client):
    preflight = await client.options("/functions/v1/create-test-users")
    assert preflight.status_code == 200
    assert "apikey" in preflight.headers["access-control-allow-headers"]
    
    response = await client.get("/functions/v1/create-test-users")
    assert response.status_code == 405


@pytest.mark.asyncio
async def test_create_test_users_unexpected_failure(client, mocker):
    mocker.patch(
        "coop_backend.app.api.functions.create_test_users.provision_demo_accounts",
        side_effect=RuntimeError("database unavailable")
    )
    
    response = await client.post("/functions/v1/create-test-users")
    assert response.status_code == 500
    assert response.json() == {"error": "database unavailable"}


@pytest.mark.asyncio
async def test_existing_account_matched_case_insensitively(db_session, make_user):
    await make_user("  Admin@Cooperativa.COM ", roles=["administrator"])
    
    outcome = await provision_demo_accounts(db_session, accounts=(DEMO_ACCOUNTS[0],))
    
    assert outcome.results[0].status == ProvisioningStatus.ALREADY_EXISTS
    assert outcome.summary.created == 0
    users = (await db_session.execute(select(User))).scalars().all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_create_test_users_with_info_logging(client, caplog):
    caplog.set_level(logging.INFO)
    
    response = await client.post("/functions/v1/create-test-users")
    
    assert response.status_code == 200
    records = [record for record in caplog.records if record.getMessage() == "Demo provisioning finished"]
    assert len(records) == 1
    assert records[0].created_count == 8
    assert records[0].existing_count == 0


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_provisioning(client, db_session, mocker):
    mocker.patch(
        "coop_backend.app.services.audit.log_event",
        side_effect=SQLAlchemyError("audit table locked")
    )
    
    response = await client.post("/functions/v1/create-test-users")
    
    assert response.status_code == 200
    assert response.json()["summary"]["created"] == 8
    emails = (await db_session.execute(select(User.email))).scalars().all()
    assert len(emails) == 8

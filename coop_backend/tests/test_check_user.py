"""
Tests for the check-user function.
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from coop_backend.app.services.user_lookup import (
    InvalidEmailError, fetch_profile, fetch_roles, normalize_email
)

URL = "/functions/v1/check-user"


@pytest.mark.asyncio
async def test_existing_user_case_insensitive(client, make_user):
    user = await make_user("admin@coop.com", roles=["administrator", "partner"], first_name="Carlos", surname="Pérez")
    
    response = await client.post(URL, json={"email": "  Admin@Coop.COM "})
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    
    data = response.json()
    assert data["exists"] is True
    assert data["user"] == {"id": user.id, "email": "admin@coop.com"}
    assert data["profile"]["first_name"] == "Carlos"
    assert data["profile"]["surname_1"] == "Pérez"
    assert data["roles"] == ["administrator", "partner"]


@pytest.mark.asyncio
async def test_unknown_user(client):
    response = await client.post(URL, json={"email": "ghost@coop.com"})
    assert response.status_code == 200
    assert response.json() == {"exists": False}


@pytest.mark.asyncio
async def test_user_without_profile_or_roles(client, make_user):
    await make_user("bare@coop.com", with_profile=False)
    
    data = (await client.post(URL, json={"email": "bare@coop.com"})).json()
    assert data["exists"] is True
    assert data["profile"] is None
    assert data["roles"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body, error", [
    (b"", "empty body"),
    (b"   \n", "empty body"),
    (b"{not json", "invalid JSON"),
    (b"\xff\xfe", "invalid JSON"),
    (b"{}", "invalid email"),
    (b'{"email": 42}', "invalid email"),
    (b'{"email": "no-at-sign"}', "invalid email"),
    (b'["admin@coop.com"]', "invalid email"),
])
async def test_bad_requests(client, body, error):
    response = await client.post(URL, content=body, headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": error}


@pytest.mark.asyncio
async def test_preflight(client):
    response = await client.options(URL)
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_wrong_method(client):
    response = await client.get(URL)
    assert response.status_code == 405
    assert response.json() == {"error": "method not allowed"}


@pytest.mark.asyncio
async def test_account_query_failure(client, mocker):
    mocker.patch(
        "coop_backend.app.api.functions.check_user.lookup_user",
        side_effect=SQLAlchemyError("connection lost")
    )
    
    response = await client.post(URL, json={"email": "admin@coop.com"})
    assert response.status_code == 500
    assert response.json() == {"error": "error querying users"}


def test_normalize_email():
    assert normalize_email("  Foo@Bar.COM ") == "foo@bar.com"
    for raw in (None, "", "   ", "foo", 7):
        with pytest.raises(InvalidEmailError):
            normalize_email(raw)


@pytest.mark.asyncio
async def test_profile_and_roles_reads_degrade(mocker):
    db = mocker.AsyncMock()
    db.execute.side_effect = SQLAlchemyError("boom")
    
    assert await fetch_profile(db, 1) is None
    assert await fetch_roles(db, 1) == []
    assert db.rollback.await_count == 2

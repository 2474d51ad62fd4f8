"""
Integration tests for role requests and notifications.
"""

import pytest
from sqlalchemy import select

from coop_backend.app.models.notification import Notification, NotificationType
from coop_backend.app.models.user import UserRoleAssignment


async def _roles_of(db_session, user_id):
    result = await db_session.execute(
        select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == user_id)
    )
    return {role.value for role in result.scalars().all()}


@pytest.mark.asyncio
async def test_request_notifies_administrators(client, db_session, make_user, auth_headers):
    await make_user("admin@coop.com", roles=["administrator"])
    member = await make_user("member@coop.com", roles=["client"], first_name="Diego", surname="Ramírez")
    
    response = await client.post(
        "/v1/role-requests",
        json={"requested_roles": ["driver", "partner", "driver"], "justification": "I own a bus"},
        headers=auth_headers(member, ["client"])
    )
    assert response.status_code == 201
    data = response.json()
    assert data["administrators_notified"] == 1
    assert [request["requested_role"] for request in data["requests"]] == ["driver", "partner"]
    assert all(request["status"] == "pending" for request in data["requests"])
    
    notification = (await db_session.execute(select(Notification))).scalar_one()
    assert notification.type == NotificationType.ROLE_REQUEST
    assert "Diego Ramírez" in notification.message
    assert "Conductor, Socio" in notification.message


@pytest.mark.asyncio
async def test_request_requires_roles(client, make_user, auth_headers):
    member = await make_user("member@coop.com", roles=["client"])
    
    response = await client.post(
        "/v1/role-requests",
        json={"requested_roles": [], "justification": "why not"},
        headers=auth_headers(member, ["client"])
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_only_administrators_list_requests(client, make_user, auth_headers):
    admin = await make_user("admin@coop.com", roles=["administrator"])
    member = await make_user("member@coop.com", roles=["client"])
    await client.post(
        "/v1/role-requests",
        json={"requested_roles": ["driver"], "justification": "licensed"},
        headers=auth_headers(member, ["client"])
    )
    
    forbidden = await client.get("/v1/role-requests", headers=auth_headers(member, ["client"]))
    assert forbidden.status_code == 403
    
    listed = await client.get("/v1/role-requests", headers=auth_headers(admin, ["administrator"]))
    assert listed.status_code == 200
    assert len(listed.json()) == 1


@pytest.mark.asyncio
async def test_approve_grants_role_and_notifies(client, db_session, make_user, auth_headers):
    admin = await make_user("admin@coop.com", roles=["administrator"])
    member = await make_user("member@coop.com", roles=["client"])
    created = await client.post(
        "/v1/role-requests",
        json={"requested_roles": ["driver"], "justification": "licensed"},
        headers=auth_headers(member, ["client"])
    )
    request_id = created.json()["requests"][0]["id"]
    admin_headers = auth_headers(admin, ["administrator"])
    
    response = await client.post(
        f"/v1/role-requests/{request_id}/decision",
        json={"action": "approve", "notes": "Welcome aboard"},
        headers=admin_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["role_assigned"] is True
    assert data["request"]["status"] == "approved"
    assert data["request"]["reviewed_by"] == admin.id
    
    assert await _roles_of(db_session, member.id) == {"client", "driver"}
    
    inbox = await client.get("/v1/notifications", headers=auth_headers(member, ["client"]))
    messages = inbox.json()
    assert len(messages) == 1
    assert messages[0]["type"] == "role_response"
    assert "approved" in messages[0]["message"]
    assert "Welcome aboard" in messages[0]["message"]
    
    again = await client.post(
        f"/v1/role-requests/{request_id}/decision",
        json={"action": "reject"},
        headers=admin_headers
    )
    assert again.status_code == 400
    assert again.json()["error_code"] == "ERR_ROLE_002"


@pytest.mark.asyncio
async def test_reject_leaves_roles_alone(client, db_session, make_user, auth_headers):
    admin = await make_user("admin@coop.com", roles=["administrator"])
    member = await make_user("member@coop.com", roles=["client"])
    created = await client.post(
        "/v1/role-requests",
        json={"requested_roles": ["manager"], "justification": "please"},
        headers=auth_headers(member, ["client"])
    )
    request_id = created.json()["requests"][0]["id"]
    
    response = await client.post(
        f"/v1/role-requests/{request_id}/decision",
        json={"action": "reject"},
        headers=auth_headers(admin, ["administrator"])
    )
    assert response.json()["role_assigned"] is False
    assert await _roles_of(db_session, member.id) == {"client"}


@pytest.mark.asyncio
async def test_decision_on_missing_request(client, make_user, auth_headers):
    admin = await make_user("admin@coop.com", roles=["administrator"])
    
    response = await client.post(
        "/v1/role-requests/999/decision",
        json={"action": "approve"},
        headers=auth_headers(admin, ["administrator"])
    )
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_mark_notifications_read(client, make_user, auth_headers):
    admin = await make_user("admin@coop.com", roles=["administrator"])
    member = await make_user("member@coop.com", roles=["client"])
    for role in ("driver", "official"):
        await client.post(
            "/v1/role-requests",
            json={"requested_roles": [role], "justification": "needed"},
            headers=auth_headers(member, ["client"])
        )
    headers = auth_headers(admin, ["administrator"])
    
    inbox = (await client.get("/v1/notifications", headers=headers)).json()
    assert len(inbox) == 2
    
    single = await client.patch(f"/v1/notifications/{inbox[0]['id']}/read", headers=headers)
    assert single.status_code == 200
    unread = (await client.get("/v1/notifications?unread_only=true", headers=headers)).json()
    assert len(unread) == 1
    
    bulk = await client.patch("/v1/notifications/read-all", headers=headers)
    assert bulk.json() == {"status": "success", "count": 1}
    
    # Someone else's notification is not found
    other = await client.patch(f"/v1/notifications/{inbox[1]['id']}/read", headers=auth_headers(member, ["client"]))
    assert other.status_code == 404

"""API tests for /v4/projects/{project_id}/members."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def add_member(client: AsyncClient, headers, project_id: int, as_user: str, **param):
    body = {"param": param} if param else None
    return await client.post(f"/v4/projects/{project_id}/members", json=body, headers=headers(as_user))


async def test_list_members(client: AsyncClient, headers, create_project, users):
    project = await create_project(owner="member")

    response = await client.get(f"/v4/projects/{project['id']}/members", headers=headers("member"))

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["metadata"]["totalCount"] == 1
    assert result["content"][0]["userId"] == users["member"]["user_id"]


async def test_outsider_cannot_list_members(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")

    response = await client.get(f"/v4/projects/{project['id']}/members", headers=headers("outsider"))

    assert response.status_code == 403


async def test_copilot_joins_as_copilot(client: AsyncClient, headers, create_project, users, bus):
    project = await create_project(owner="member")

    response = await add_member(client, headers, project["id"], "copilot", role="copilot")

    assert response.status_code == 201
    member = response.json()["result"]["content"]
    assert member["userId"] == users["copilot"]["user_id"]
    assert member["role"] == "copilot"
    assert member["isPrimary"] is True
    assert bus.payloads("project.member.added")[-1]["id"] == member["id"]


async def test_copilot_without_role_cannot_join(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")

    response = await add_member(client, headers, project["id"], "copilot")

    assert response.status_code == 403
    assert "account_manager" in response.json()["result"]["content"]["message"]


async def test_joining_twice_conflicts(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")
    assert (await add_member(client, headers, project["id"], "copilot", role="copilot")).status_code == 201

    response = await add_member(client, headers, project["id"], "copilot", role="copilot")

    assert response.status_code == 409


async def test_plain_user_cannot_join(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")

    response = await add_member(client, headers, project["id"], "outsider")

    assert response.status_code == 403


async def test_copilot_cannot_join_as_manager(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")

    response = await add_member(client, headers, project["id"], "copilot", role="manager")

    assert response.status_code == 403


async def test_admin_adds_another_user(client: AsyncClient, headers, create_project, users):
    project = await create_project(owner="member")

    response = await add_member(
        client, headers, project["id"], "admin", userId=users["outsider"]["user_id"], role="customer"
    )

    assert response.status_code == 201
    member = response.json()["result"]["content"]
    assert member["userId"] == users["outsider"]["user_id"]
    assert member["isPrimary"] is False


async def test_customer_cannot_add_another_user(client: AsyncClient, headers, create_project, users):
    project = await create_project(owner="member")

    response = await add_member(client, headers, project["id"], "member", userId=users["outsider"]["user_id"])

    assert response.status_code == 403


async def test_get_unknown_member_is_404(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")

    response = await client.get(f"/v4/projects/{project['id']}/members/999999", headers=headers("admin"))

    assert response.status_code == 404


async def test_promote_customer_to_primary(client: AsyncClient, headers, create_project, users, bus):
    project = await create_project(owner="member")
    added = await add_member(
        client, headers, project["id"], "admin", userId=users["outsider"]["user_id"], role="customer"
    )
    member_id = added.json()["result"]["content"]["id"]

    response = await client.patch(
        f"/v4/projects/{project['id']}/members/{member_id}",
        json={"param": {"isPrimary": True}},
        headers=headers("member"),
    )

    assert response.status_code == 200
    assert response.json()["result"]["content"]["isPrimary"] is True
    members = (await client.get(f"/v4/projects/{project['id']}/members", headers=headers("member"))).json()
    primaries = [m["userId"] for m in members["result"]["content"] if m["isPrimary"]]
    assert primaries == [users["outsider"]["user_id"]]
    assert bus.payloads("project.member.updated")[-1]["original"]["isPrimary"] is False


async def test_customer_cannot_update_copilot(client: AsyncClient, headers, create_project):
    project = await create_project(owner="member")
    joined = await add_member(client, headers, project["id"], "copilot", role="copilot")
    member_id = joined.json()["result"]["content"]["id"]

    response = await client.patch(
        f"/v4/projects/{project['id']}/members/{member_id}",
        json={"param": {"isPrimary": False}},
        headers=headers("member"),
    )

    assert response.status_code == 403


async def test_leaving_primary_hands_over(client: AsyncClient, headers, create_project, users, bus):
    project = await create_project(owner="member")
    await add_member(client, headers, project["id"], "admin", userId=users["outsider"]["user_id"], role="customer")
    own_id = project["members"][0]["id"]

    response = await client.delete(f"/v4/projects/{project['id']}/members/{own_id}", headers=headers("member"))

    assert response.status_code == 204
    members = (await client.get(f"/v4/projects/{project['id']}/members", headers=headers("admin"))).json()
    assert [(m["userId"], m["isPrimary"]) for m in members["result"]["content"]] == [
        (users["outsider"]["user_id"], True)
    ]
    assert bus.payloads("project.member.removed")[-1]["id"] == own_id

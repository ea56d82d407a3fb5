"""Unit tests for ProjectMemberService membership rules."""

import pytest

from projects_service.core.errors import ConflictError, ForbiddenError, NotFoundError
from projects_service.core.models.domain import AuthUser
from projects_service.core.models.io import ProjectMemberCreate, ProjectMemberUpdate
from projects_service.server.services import ProjectMemberService

CUSTOMER = AuthUser(user_id=40051331, roles=["Topcoder User"])
MANAGER = AuthUser(user_id=40051334, roles=["Topcoder User", "Connect Manager"])
ADMIN = AuthUser(user_id=40051333, roles=["Topcoder User", "administrator"])
COPILOT = AuthUser(user_id=40051332, roles=["Topcoder User", "Connect Copilot"])
COPILOT_MANAGER = AuthUser(user_id=40051336, roles=["Topcoder User", "Connect Copilot Manager"])
NO_ROLE = AuthUser(user_id=40051339, roles=["Unknown Role"])


@pytest.fixture
def service(session, bus):
    return ProjectMemberService(session, bus)


class TestAddMember:
    async def test_copilot_joins_with_copilot_role(self, service, bus, make_project):
        project = await make_project()

        member = await service.add_member(COPILOT, project.id, ProjectMemberCreate(role="copilot"))

        assert (member.user_id, member.role, member.is_primary) == (COPILOT.user_id, "copilot", True)
        assert bus.topics() == ["project.member.added"]
        assert bus.events[0][1]["userId"] == COPILOT.user_id

    async def test_copilot_without_role_is_forbidden(self, service, bus, make_project):
        """A copilot's default role is account_manager, which they may not hold."""
        project = await make_project()

        with pytest.raises(ForbiddenError, match='as "account_manager"'):
            await service.add_member(COPILOT, project.id, ProjectMemberCreate())

        assert bus.events == []

    async def test_second_holder_of_role_is_not_primary(self, service, make_project):
        project = await make_project(members=((1, "manager", True),))

        member = await service.add_member(MANAGER, project.id, ProjectMemberCreate())

        assert (member.role, member.is_primary) == ("manager", False)

    async def test_explicit_primary_demotes_previous(self, service, make_project):
        project = await make_project(members=((1, "manager", True),))

        await service.add_member(MANAGER, project.id, ProjectMemberCreate(is_primary=True))

        members = await service.list_members(project.id, "manager")
        assert [(m["userId"], m["isPrimary"]) for m in members] == [(1, False), (MANAGER.user_id, True)]

    async def test_role_must_fit_topcoder_roles(self, service, make_project):
        project = await make_project()

        with pytest.raises(ForbiddenError, match='as "manager"'):
            await service.add_member(COPILOT, project.id, ProjectMemberCreate(role="manager"))

    async def test_no_default_role(self, service, make_project):
        project = await make_project()

        with pytest.raises(ForbiddenError, match="default project role"):
            await service.add_member(NO_ROLE, project.id, ProjectMemberCreate())

    async def test_already_member(self, service, make_project):
        project = await make_project()

        with pytest.raises(ConflictError):
            await service.add_member(CUSTOMER, project.id, ProjectMemberCreate())

    async def test_adding_others_requires_admin(self, service, make_project):
        project = await make_project()

        with pytest.raises(ForbiddenError):
            await service.add_member(MANAGER, project.id, ProjectMemberCreate(user_id=555))

        member = await service.add_member(ADMIN, project.id, ProjectMemberCreate(user_id=555))
        assert (member.user_id, member.role, member.created_by) == (555, "customer", ADMIN.user_id)

    async def test_missing_project(self, service):
        with pytest.raises(NotFoundError):
            await service.add_member(COPILOT, 999, ProjectMemberCreate())


class TestReadMembers:
    async def test_list_and_get(self, service, make_project):
        project = await make_project(members=((1, "customer", True), (2, "copilot", True)))

        members = await service.list_members(project.id)
        member = await service.get_member(project.id, members[1]["id"])

        assert [m["userId"] for m in members] == [1, 2]
        assert member["role"] == "copilot"
        assert [m["userId"] for m in await service.list_members(project.id, "copilot")] == [2]

    async def test_member_of_other_project_not_found(self, service, make_project):
        first = await make_project(members=((1, "customer", True),))
        second = await make_project(members=((2, "customer", True),))
        member_id = (await service.list_members(second.id))[0]["id"]

        with pytest.raises(NotFoundError):
            await service.get_member(first.id, member_id)


class TestUpdateMember:
    async def test_promote_to_primary(self, service, bus, make_project):
        project = await make_project(members=((1, "customer", True), (2, "customer", False)))
        second = (await service.list_members(project.id))[1]

        updated = await service.update_member(CUSTOMER, project.id, second["id"], ProjectMemberUpdate(is_primary=True))

        assert updated["isPrimary"] is True
        assert [m["isPrimary"] for m in await service.list_members(project.id)] == [False, True]
        topic, payload = bus.events[-1]
        assert topic == "project.member.updated"
        assert payload["original"]["isPrimary"] is False

    async def test_non_customer_needs_manager_role(self, service, make_project):
        project = await make_project(members=((CUSTOMER.user_id, "customer", True), (2, "copilot", True)))
        copilot = (await service.list_members(project.id, "copilot"))[0]

        with pytest.raises(ForbiddenError):
            await service.update_member(CUSTOMER, project.id, copilot["id"], ProjectMemberUpdate(is_primary=False))

        updated = await service.update_member(MANAGER, project.id, copilot["id"], ProjectMemberUpdate(is_primary=False))
        assert updated["isPrimary"] is False

    async def test_change_to_copilot_restricted(self, service, make_project):
        project = await make_project(members=((1, "customer", True), (2, "customer", False)))
        second = (await service.list_members(project.id))[1]

        with pytest.raises(ForbiddenError, match="copilot"):
            await service.update_member(MANAGER, project.id, second["id"], ProjectMemberUpdate(role="copilot"))

        updated = await service.update_member(COPILOT_MANAGER, project.id, second["id"], ProjectMemberUpdate(role="copilot"))
        assert updated["role"] == "copilot"


class TestDeleteMember:
    async def test_primary_hands_over_to_oldest_same_role(self, service, bus, make_project):
        project = await make_project(
            members=((1, "customer", True), (2, "customer", False), (3, "customer", False))
        )
        primary = (await service.list_members(project.id))[0]

        await service.delete_member(CUSTOMER, project.id, primary["id"])

        remaining = await service.list_members(project.id)
        assert [(m["userId"], m["isPrimary"]) for m in remaining] == [(2, True), (3, False)]
        assert bus.events[-1][0] == "project.member.removed"

    async def test_member_may_leave(self, service, make_project):
        project = await make_project(members=((1, "customer", True), (COPILOT.user_id, "copilot", True)))
        copilot = (await service.list_members(project.id, "copilot"))[0]

        await service.delete_member(COPILOT, project.id, copilot["id"])

        assert [m["userId"] for m in await service.list_members(project.id)] == [1]

    async def test_customer_cannot_remove_copilot(self, service, make_project):
        project = await make_project(members=((CUSTOMER.user_id, "customer", True), (2, "copilot", True)))
        copilot = (await service.list_members(project.id, "copilot"))[0]

        with pytest.raises(ForbiddenError):
            await service.delete_member(CUSTOMER, project.id, copilot["id"])

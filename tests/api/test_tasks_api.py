# tests/api/test_tasks_api.py
"""
Tests for the task endpoints: CRUD, blocker bookkeeping, partial updates and
team isolation.
"""

import pytest

from conftest import API


async def create_task(client, session, **fields):
    payload = {"title": "Payment integration"}
    payload.update(fields)
    response = await client.post(f"{API}/tasks", json=payload, headers=session["headers"])
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTask:

    @pytest.mark.asyncio
    async def test_defaults(self, client, admin):
        task = await create_task(client, admin)

        assert task["status"] == "TODO"
        assert task["priority"] == "MEDIUM"
        assert task["team_id"] == admin["user"]["team_id"]
        assert task["blocked_at"] is None
        assert task["block_reason"] is None

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, client, admin):
        response = await client.post(f"{API}/tasks", json={"title": "  "}, headers=admin["headers"])

        assert response.status_code == 400
        assert response.json() == {"error": "Title is required"}

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client, admin):
        response = await client.post(
            f"{API}/tasks",
            json={"title": "A", "status": "PARKED"},
            headers=admin["headers"],
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_created_blocked(self, client, admin):
        task = await create_task(client, admin, status="BLOCKED", block_reason="waiting on design")

        assert task["blocked_at"] is not None
        assert task["block_reason"] == "waiting on design"

    @pytest.mark.asyncio
    async def test_reason_dropped_unless_blocked(self, client, admin):
        task = await create_task(client, admin, status="IN_PROGRESS", block_reason="stale")

        assert task["block_reason"] is None

    @pytest.mark.asyncio
    async def test_assignee_must_be_on_team(self, client, admin, rival):
        response = await client.post(
            f"{API}/tasks",
            json={"title": "A", "assigned_to_id": rival["user"]["id"]},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Assignee is not a member of this team"}

    @pytest.mark.asyncio
    async def test_assignee_is_embedded(self, client, admin, make_member):
        sarah = await make_member(admin, "sarah@sprintops.com")

        task = await create_task(client, admin, assigned_to_id=sarah["user"]["id"])

        assert task["assigned_to"]["name"] == "Sarah Miller"


class TestListAndGetTasks:

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, client, admin):
        first = await create_task(client, admin, title="first")
        second = await create_task(client, admin, title="second")

        response = await client.get(f"{API}/tasks", headers=admin["headers"])

        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_detail_includes_linked_bugs(self, client, admin):
        task = await create_task(client, admin)
        await client.post(
            f"{API}/bugs",
            json={"title": "Card declined", "linked_task_id": task["id"]},
            headers=admin["headers"],
        )

        response = await client.get(f"{API}/tasks/{task['id']}", headers=admin["headers"])

        assert response.status_code == 200
        assert [b["title"] for b in response.json()["linked_bugs"]] == ["Card declined"]

    @pytest.mark.asyncio
    async def test_unknown_task(self, client, admin):
        response = await client.get(f"{API}/tasks/9999", headers=admin["headers"])

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}


class TestUpdateTask:

    @pytest.mark.asyncio
    async def test_block_then_finish(self, client, admin):
        task = await create_task(client, admin, status="BLOCKED", block_reason="waiting on design")

        response = await client.patch(
            f"{API}/tasks/{task['id']}",
            json={"status": "DONE"},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "DONE"
        assert body["blocked_at"] is None
        assert body["block_reason"] is None

    @pytest.mark.asyncio
    async def test_entering_blocked(self, client, admin):
        task = await create_task(client, admin, status="IN_PROGRESS")

        response = await client.patch(
            f"{API}/tasks/{task['id']}",
            json={"status": "BLOCKED", "block_reason": "vendor outage"},
            headers=admin["headers"],
        )

        body = response.json()
        assert body["blocked_at"] is not None
        assert body["block_reason"] == "vendor outage"

    @pytest.mark.asyncio
    async def test_reason_only_update_keeps_blocked_at(self, client, admin):
        task = await create_task(client, admin, status="BLOCKED", block_reason="waiting on design")

        response = await client.patch(
            f"{API}/tasks/{task['id']}",
            json={"block_reason": "waiting on legal"},
            headers=admin["headers"],
        )

        body = response.json()
        assert body["block_reason"] == "waiting on legal"
        assert body["blocked_at"] == task["blocked_at"]

    @pytest.mark.asyncio
    async def test_absent_fields_untouched_and_null_clears(self, client, admin, make_member):
        sarah = await make_member(admin, "sarah@sprintops.com")
        task = await create_task(
            client, admin,
            description="Stripe checkout",
            assigned_to_id=sarah["user"]["id"],
            due_date="2026-11-02T17:00:00Z",
        )

        response = await client.patch(
            f"{API}/tasks/{task['id']}",
            json={"title": "Payments v2", "assigned_to_id": None},
            headers=admin["headers"],
        )

        body = response.json()
        assert body["title"] == "Payments v2"
        assert body["assigned_to_id"] is None
        assert body["description"] == "Stripe checkout"
        assert body["due_date"] is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,message", [
        ("title", "Title cannot be null"),
        ("status", "Status cannot be null"),
        ("priority", "Priority cannot be null"),
    ])
    async def test_required_fields_cannot_be_nulled(self, client, admin, field, message):
        task = await create_task(client, admin)

        response = await client.patch(
            f"{API}/tasks/{task['id']}",
            json={field: None},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": message}

    @pytest.mark.asyncio
    async def test_empty_title_rejected(self, client, admin):
        task = await create_task(client, admin)

        response = await client.patch(
            f"{API}/tasks/{task['id']}",
            json={"title": ""},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Title cannot be empty"}


class TestDeleteTask:

    @pytest.mark.asyncio
    async def test_delete_unlinks_bugs(self, client, admin):
        task = await create_task(client, admin)
        bug = (await client.post(
            f"{API}/bugs",
            json={"title": "Card declined", "linked_task_id": task["id"]},
            headers=admin["headers"],
        )).json()

        response = await client.delete(f"{API}/tasks/{task['id']}", headers=admin["headers"])

        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted"}

        bug = (await client.get(f"{API}/bugs/{bug['id']}", headers=admin["headers"])).json()
        assert bug["linked_task_id"] is None

        response = await client.get(f"{API}/tasks/{task['id']}", headers=admin["headers"])
        assert response.status_code == 404


class TestTaskIsolation:

    @pytest.mark.asyncio
    async def test_other_team_sees_404(self, client, admin, rival):
        task = await create_task(client, admin)

        for method in ("get", "patch", "delete"):
            kwargs = {"json": {"title": "hijacked"}} if method == "patch" else {}
            response = await getattr(client, method)(
                f"{API}/tasks/{task['id']}", headers=rival["headers"], **kwargs
            )
            assert response.status_code == 404

        listing = await client.get(f"{API}/tasks", headers=rival["headers"])
        assert listing.json() == []

        still_there = await client.get(f"{API}/tasks/{task['id']}", headers=admin["headers"])
        assert still_there.json()["title"] == "Payment integration"

    @pytest.mark.asyncio
    async def test_members_can_manage_tasks(self, client, admin, make_member):
        sarah = await make_member(admin, "sarah@sprintops.com")

        task = await create_task(client, sarah, title="From a member")
        response = await client.delete(f"{API}/tasks/{task['id']}", headers=sarah["headers"])

        assert response.status_code == 200


class TestOutOfRangeIds:
    """Ids beyond the integer column range behave like any other unknown id."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task_id", [2 ** 31, 2 ** 70])
    async def test_unknown_huge_id(self, client, admin, task_id):
        for method in ("get", "patch", "delete"):
            kwargs = {"json": {"title": "x"}} if method == "patch" else {}
            response = await getattr(client, method)(
                f"{API}/tasks/{task_id}", headers=admin["headers"], **kwargs
            )

            assert response.status_code == 404
            assert response.json() == {"error": "Task not found"}

    @pytest.mark.asyncio
    async def test_huge_assignee_rejected(self, client, admin):
        response = await client.post(
            f"{API}/tasks",
            json={"title": "A", "assigned_to_id": 2 ** 70},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Assignee is not a member of this team"}

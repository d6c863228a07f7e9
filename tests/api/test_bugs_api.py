# tests/api/test_bugs_api.py
"""
Tests for the bug endpoints.
"""

import pytest

from conftest import API


async def create_bug(client, session, **fields):
    payload = {"title": "Checkout crashes on Safari"}
    payload.update(fields)
    response = await client.post(f"{API}/bugs", json=payload, headers=session["headers"])
    assert response.status_code == 201, response.text
    return response.json()


async def create_task(client, session, title="Payment integration"):
    response = await client.post(f"{API}/tasks", json={"title": title}, headers=session["headers"])
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateBug:

    @pytest.mark.asyncio
    async def test_defaults(self, client, admin):
        bug = await create_bug(client, admin)

        assert bug["severity"] == "MEDIUM"
        assert bug["status"] == "OPEN"
        assert bug["linked_task_id"] is None
        assert bug["team_id"] == admin["user"]["team_id"]

    @pytest.mark.asyncio
    async def test_linked_task_is_embedded(self, client, admin):
        task = await create_task(client, admin)

        bug = await create_bug(client, admin, linked_task_id=task["id"], severity="CRITICAL")

        assert bug["linked_task"] == {"id": task["id"], "title": "Payment integration"}

    @pytest.mark.asyncio
    async def test_linked_task_must_be_on_team(self, client, admin, rival):
        foreign = await create_task(client, rival)

        response = await client.post(
            f"{API}/bugs",
            json={"title": "A", "linked_task_id": foreign["id"]},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Linked task not found"}

    @pytest.mark.asyncio
    async def test_invalid_severity_rejected(self, client, admin):
        response = await client.post(
            f"{API}/bugs",
            json={"title": "A", "severity": "APOCALYPTIC"},
            headers=admin["headers"],
        )

        assert response.status_code == 400


class TestListAndUpdateBugs:

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, client, admin):
        first = await create_bug(client, admin, title="first")
        second = await create_bug(client, admin, title="second")

        response = await client.get(f"{API}/bugs", headers=admin["headers"])

        assert [b["id"] for b in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_mark_fixed(self, client, admin):
        bug = await create_bug(client, admin)

        response = await client.patch(
            f"{API}/bugs/{bug['id']}",
            json={"status": "FIXED"},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        assert response.json()["status"] == "FIXED"
        assert response.json()["title"] == bug["title"]

    @pytest.mark.asyncio
    async def test_unlink_with_null(self, client, admin):
        task = await create_task(client, admin)
        bug = await create_bug(client, admin, linked_task_id=task["id"])

        response = await client.patch(
            f"{API}/bugs/{bug['id']}",
            json={"linked_task_id": None},
            headers=admin["headers"],
        )

        assert response.json()["linked_task_id"] is None
        assert response.json()["linked_task"] is None

    @pytest.mark.asyncio
    async def test_severity_cannot_be_nulled(self, client, admin):
        bug = await create_bug(client, admin)

        response = await client.patch(
            f"{API}/bugs/{bug['id']}",
            json={"severity": None},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Severity cannot be null"}


class TestDeleteBug:

    @pytest.mark.asyncio
    async def test_delete(self, client, admin):
        bug = await create_bug(client, admin)

        response = await client.delete(f"{API}/bugs/{bug['id']}", headers=admin["headers"])

        assert response.json() == {"message": "Bug deleted"}
        missing = await client.get(f"{API}/bugs/{bug['id']}", headers=admin["headers"])
        assert missing.status_code == 404
        assert missing.json() == {"error": "Bug not found"}

    @pytest.mark.asyncio
    async def test_other_team_cannot_delete(self, client, admin, rival):
        bug = await create_bug(client, admin)

        response = await client.delete(f"{API}/bugs/{bug['id']}", headers=rival["headers"])

        assert response.status_code == 404
        assert (await client.get(f"{API}/bugs/{bug['id']}", headers=admin["headers"])).status_code == 200


class TestOutOfRangeIds:

    @pytest.mark.asyncio
    async def test_unknown_huge_id(self, client, admin):
        response = await client.get(f"{API}/bugs/{2 ** 70}", headers=admin["headers"])

        assert response.status_code == 404
        assert response.json() == {"error": "Bug not found"}

    @pytest.mark.asyncio
    async def test_huge_linked_task_rejected(self, client, admin):
        response = await client.post(
            f"{API}/bugs",
            json={"title": "A", "linked_task_id": 2 ** 70},
            headers=admin["headers"],
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Linked task not found"}

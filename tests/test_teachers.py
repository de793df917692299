from datetime import datetime
from typing import Dict

import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

API = "/api/v1"


def _timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))

RESTRICTION = {
    "displayOrder": 1,
    "restrictedDay": "月曜",
    "restrictedPeriods": [1, 2],
    "restrictionLevel": "必須",
    "reason": "会議",
}


async def _create(client: AsyncClient, headers: Dict[str, str], **payload) -> dict:
    response = await client.post(f"{API}/teachers", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_teacher_normalizes_restriction_labels(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    data = await _create(
        client,
        auth_headers,
        name="田中太郎",
        email="tanaka@example.com",
        subjects=["数学", "理科"],
        grades=[1, 2],
        assignment_restrictions=[RESTRICTION],
    )
    assert data["subjects"] == ["数学", "理科"]
    assert data["grades"] == [1, 2]
    assert data["email"] == "tanaka@example.com"
    restriction = data["assignmentRestrictions"][0]
    assert restriction["restrictionLevel"] == "required"
    assert restriction["restrictedPeriods"] == [1, 2]
    assert data["assignment_restrictions"] == data["assignmentRestrictions"]
    assert data["created_at"] == data["updated_at"]


@pytest.mark.asyncio
async def test_create_teacher_rejects_bad_restriction(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    response = await client.post(
        f"{API}/teachers",
        json={
            "name": "佐藤",
            "assignmentRestrictions": [{"restrictedDay": "火曜", "restrictedPeriods": [], "restrictionLevel": "maybe"}],
        },
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_update_teacher_is_partial(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    created = await _create(
        client,
        auth_headers,
        name="鈴木",
        subjects=["英語"],
        grades=[3],
        assignmentRestrictions=[RESTRICTION],
    )
    response = await client.put(
        f"{API}/teachers/{created['id']}",
        json={"grades": [2, 3]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "鈴木"
    assert data["grades"] == [2, 3]
    assert data["subjects"] == ["英語"]
    assert len(data["assignmentRestrictions"]) == 1
    assert data["created_at"] == created["created_at"]
    assert _timestamp(data["updated_at"]) > _timestamp(created["updated_at"])


@pytest.mark.asyncio
async def test_list_teachers_filters_by_subject_and_grade(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    await _create(client, auth_headers, name="A先生", subjects=["数学"], grades=[1])
    await _create(client, auth_headers, name="B先生", subjects=["数学応用"], grades=[2])
    await _create(client, auth_headers, name="C先生", subjects=["国語"], grades=[1, 3])

    math = await client.get(f"{API}/teachers", params={"subject": "数学"}, headers=auth_headers)
    assert [t["name"] for t in math.json()["data"]["teachers"]] == ["A先生"]

    grade1 = await client.get(f"{API}/teachers", params={"grade": 1}, headers=auth_headers)
    assert [t["name"] for t in grade1.json()["data"]["teachers"]] == ["A先生", "C先生"]

    desc = await client.get(f"{API}/teachers", params={"order": "desc"}, headers=auth_headers)
    assert [t["name"] for t in desc.json()["data"]["teachers"]] == ["C先生", "B先生", "A先生"]


@pytest.mark.asyncio
async def test_unreadable_restrictions_are_returned_empty(
    client: AsyncClient, auth_headers: Dict[str, str], db_session: AsyncSession
) -> None:
    created = await _create(client, auth_headers, name="山本", assignmentRestrictions=[RESTRICTION])
    await db_session.execute(
        text("UPDATE teachers SET assignment_restrictions = '[{\"restrictedDay\": 5}]' WHERE id = :id"),
        {"id": created["id"]},
    )
    await db_session.commit()

    response = await client.get(f"{API}/teachers/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["assignmentRestrictions"] == []


@pytest.mark.asyncio
async def test_delete_teacher(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    created = await _create(client, auth_headers, name="高橋")
    response = await client.delete(f"{API}/teachers/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["deletedName"] == "高橋"

    missing = await client.get(f"{API}/teachers/{created['id']}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "TEACHER_NOT_FOUND"


@pytest.mark.asyncio
async def test_grades_outside_one_to_six_are_rejected(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    created = await client.post(
        f"{API}/teachers", json={"name": "伊藤", "grades": [7]}, headers=auth_headers
    )
    assert created.status_code == 400
    assert created.json()["error"] == "VALIDATION_ERROR"

    listed = await client.get(f"{API}/teachers", params={"grade": 7}, headers=auth_headers)
    assert listed.status_code == 400
    assert listed.json()["error"] == "VALIDATION_ERROR"

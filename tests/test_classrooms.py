from datetime import datetime
from typing import Dict

import pytest
from httpx import AsyncClient

API = "/api/v1"


def _timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client: AsyncClient, headers: Dict[str, str], **payload) -> dict:
    response = await client.post(f"{API}/classrooms", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_classroom_defaults(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    data = await _create(client, auth_headers, name="1年A組", type="普通教室", capacity=35)
    assert data["type"] == "普通教室"
    assert data["count"] == 1
    assert data["capacity"] == 35
    assert data["order"] == 1


@pytest.mark.asyncio
async def test_create_classroom_rejects_unknown_type_and_bad_count(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    response = await client.post(
        f"{API}/classrooms",
        json={"name": "倉庫", "type": "倉庫", "count": 0},
        headers=auth_headers,
    )
    assert response.status_code == 400
    fields = {issue["loc"][-1] for issue in response.json()["details"]["validationErrors"]}
    assert {"type", "count"} <= fields


@pytest.mark.asyncio
async def test_list_classrooms_summary_covers_all_matching_rows(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    await _create(client, auth_headers, name="普通教室", type="普通教室", capacity=30, count=10)
    await _create(client, auth_headers, name="理科室", type="理科室", capacity=40, count=2)
    await _create(client, auth_headers, name="体育館", type="体育館", count=1)

    response = await client.get(f"{API}/classrooms", params={"limit": 1}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["classrooms"]) == 1
    assert data["pagination"]["total"] == 3
    assert data["summary"] == {
        "totalCapacity": 30 * 10 + 40 * 2,
        "typeDistribution": {"普通教室": 10, "理科室": 2, "体育館": 1},
    }

    filtered = await client.get(
        f"{API}/classrooms", params={"capacity_min": 35}, headers=auth_headers
    )
    filtered_data = filtered.json()["data"]
    assert [c["name"] for c in filtered_data["classrooms"]] == ["理科室"]
    assert filtered_data["summary"] == {"totalCapacity": 80, "typeDistribution": {"理科室": 2}}


@pytest.mark.asyncio
async def test_list_classrooms_default_sort_is_newest_first(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    for name in ("音楽室1", "音楽室2", "音楽室3"):
        await _create(client, auth_headers, name=name, type="音楽室")

    response = await client.get(f"{API}/classrooms", params={"type": "音楽室"}, headers=auth_headers)
    assert [c["name"] for c in response.json()["data"]["classrooms"]] == ["音楽室3", "音楽室2", "音楽室1"]

    by_name = await client.get(
        f"{API}/classrooms", params={"sort": "name", "order": "asc"}, headers=auth_headers
    )
    assert [c["name"] for c in by_name.json()["data"]["classrooms"]] == ["音楽室1", "音楽室2", "音楽室3"]


@pytest.mark.asyncio
async def test_update_and_delete_classroom(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    created = await _create(client, auth_headers, name="図書室", type="図書室", capacity=50, location="2F")

    response = await client.put(
        f"{API}/classrooms/{created['id']}",
        json={"count": 2},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["count"] == 2
    assert data["capacity"] == 50
    assert data["location"] == "2F"
    assert data["created_at"] == created["created_at"]
    assert _timestamp(data["updated_at"]) > _timestamp(created["updated_at"])

    deleted = await client.delete(f"{API}/classrooms/{created['id']}", headers=auth_headers)
    assert deleted.json()["data"]["deletedId"] == created["id"]

    missing = await client.put(
        f"{API}/classrooms/{created['id']}", json={"count": 3}, headers=auth_headers
    )
    assert missing.status_code == 404
    assert missing.json()["error"] == "CLASSROOM_NOT_FOUND"


@pytest.mark.asyncio
async def test_capacity_above_limit_is_rejected(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    response = await client.post(
        f"{API}/classrooms",
        json={"name": "講堂", "type": "その他", "capacity": 101},
        headers=auth_headers,
    )
    assert response.status_code == 400
    fields = {issue["loc"][-1] for issue in response.json()["details"]["validationErrors"]}
    assert fields == {"capacity"}

from typing import Dict

import pytest
from httpx import AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.models import SchoolSettings

API = "/api/v1"

VALID = {
    "grade1Classes": 5,
    "grade2Classes": 4,
    "grade3Classes": 3,
    "dailyPeriods": 6,
    "saturdayPeriods": 0,
}


@pytest.mark.asyncio
async def test_get_default_settings_enhanced_view(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.get(f"{API}/school-settings", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == "default"
    assert data["grade1Classes"] == 4
    assert data["days"] == ["月曜", "火曜", "水曜", "木曜", "金曜"]
    assert data["grades"] == [1, 2, 3]
    assert data["classesPerGrade"]["3"] == ["A", "B", "C"]
    assert data["statistics"] == {
        "totalTeachers": 0,
        "totalSubjects": 0,
        "totalClassrooms": 0,
        "totalClasses": 11,
    }
    assert data["validation"]["isConfigured"] is False
    assert len(data["validation"]["warnings"]) == 2


@pytest.mark.asyncio
async def test_update_settings_reflects_live_counts(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    await client.post(f"{API}/teachers", json={"name": "田中"}, headers=auth_headers)
    await client.post(f"{API}/subjects", json={"name": "数学"}, headers=auth_headers)

    response = await client.put(
        f"{API}/school-settings",
        json={**VALID, "saturdayPeriods": 4},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["grade1Classes"] == 5
    assert data["days"][-1] == "土曜"

    fetched = (await client.get(f"{API}/school-settings", headers=auth_headers)).json()["data"]
    assert fetched["grade1Classes"] == 5
    assert fetched["statistics"]["totalTeachers"] == 1
    assert fetched["statistics"]["totalSubjects"] == 1
    assert fetched["validation"]["isConfigured"] is True
    assert fetched["validation"]["hasMinimumTeachers"] is False


@pytest.mark.asyncio
async def test_lenient_update_applies_defaults(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.put(
        f"{API}/school-settings",
        json={"grade1Classes": "6", "grade2Classes": "abc", "dailyPeriods": 7},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["grade1Classes"] == 6
    assert data["grade2Classes"] == 4
    assert data["grade3Classes"] == 3
    assert data["dailyPeriods"] == 7
    assert data["saturdayPeriods"] == 4


@pytest.mark.asyncio
async def test_lenient_update_still_rejects_out_of_range(
    client: AsyncClient, auth_headers: Dict[str, str]
) -> None:
    response = await client.put(
        f"{API}/school-settings",
        json={**VALID, "dailyPeriods": 12},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"

    unchanged = (await client.get(f"{API}/school-settings", headers=auth_headers)).json()["data"]
    assert unchanged["dailyPeriods"] == 6


@pytest.mark.asyncio
async def test_strict_update_rejects_invalid_input(
    client: AsyncClient, auth_headers: Dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "settings_strict_validation", True)
    response = await client.put(
        f"{API}/school-settings",
        json={"grade1Classes": "abc"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    issues = response.json()["details"]["validationErrors"]
    assert any(issue["loc"] == ["grade1Classes"] for issue in issues)


@pytest.mark.asyncio
async def test_missing_settings_row(
    client: AsyncClient, auth_headers: Dict[str, str], db_session: AsyncSession
) -> None:
    await db_session.execute(delete(SchoolSettings))
    await db_session.commit()

    response = await client.get(f"{API}/school-settings", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "SETTINGS_NOT_FOUND"

    recreated = await client.put(f"{API}/school-settings", json=VALID, headers=auth_headers)
    assert recreated.status_code == 200
    assert recreated.json()["data"]["grade1Classes"] == 5

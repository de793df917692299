from typing import Dict

import pytest
from httpx import AsyncClient
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Condition

API = "/api/v1"


@pytest.mark.asyncio
async def test_conditions_empty_before_first_save(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.get(f"{API}/conditions", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == "default"
    assert response.json()["data"]["conditions"] == ""


@pytest.mark.asyncio
async def test_save_conditions_stores_non_blank_lines(
    client: AsyncClient, auth_headers: Dict[str, str], db_session: AsyncSession
) -> None:
    response = await client.put(
        f"{API}/conditions",
        json={"conditions": "体育は午前中\n\n  数学は連続させない  \n"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["conditions"] == "体育は午前中\n数学は連続させない"

    row = (await db_session.execute(select(Condition))).scalar_one()
    assert row.data == '{"constraints": ["体育は午前中", "数学は連続させない"]}'

    again = await client.put(f"{API}/conditions", json={"conditions": "月曜1限は朝会"}, headers=auth_headers)
    assert again.json()["data"]["conditions"] == "月曜1限は朝会"


@pytest.mark.asyncio
async def test_legacy_plain_text_conditions_are_returned_as_is(
    client: AsyncClient, auth_headers: Dict[str, str], db_session: AsyncSession
) -> None:
    await db_session.execute(
        text("INSERT INTO conditions (id, data, created_at, updated_at) VALUES ('default', '土曜は半日', :now, :now)"),
        {"now": "2024-01-01 00:00:00.000000"},
    )
    await db_session.commit()

    response = await client.get(f"{API}/conditions", headers=auth_headers)
    assert response.json()["data"]["conditions"] == "土曜は半日"

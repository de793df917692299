from typing import Dict

import pytest
from httpx import AsyncClient

from app.auth.security import create_access_token
from app.core.config import settings

API = "/api/v1"


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get(f"{API}/subjects")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "UNAUTHORIZED"
    assert body["message"] == "Authorization token required"


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get(f"{API}/teachers", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client: AsyncClient) -> None:
    token = create_access_token(subject={"sub": "admin-1"}, expires_minutes=-1)
    response = await client.get(f"{API}/classrooms", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_without_subject_is_rejected(client: AsyncClient) -> None:
    token = create_access_token(subject={"role": "ADMIN"})
    response = await client.get(f"{API}/school-settings", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_valid_token_is_accepted(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    response = await client.get(f"{API}/conditions", headers=auth_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_auth_can_be_disabled(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "auth_enabled", False)
    response = await client.get(f"{API}/subjects")
    assert response.status_code == 200

"""Reservation endpoints and the error envelope."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


def _body(user, station, **overrides):
    body = {
        "userId": user.id,
        "stationId": station.id,
        "date": "2026-10-20T14:00:00Z",
        "hour": "14:00",
        "isGreen": True,
    }
    body.update(overrides)
    return body


class TestCreate:
    async def test_created_envelope(self, client: AsyncClient, driver, station):
        response = await client.post("/api/v1/reservations", json=_body(driver, station))
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        reservation = data["reservation"]
        assert reservation["status"] == "PENDING"
        assert reservation["earnedCoins"] == 50
        assert reservation["isGreen"] is True
        assert reservation["hour"] == "14:00"
        assert reservation["userId"] == driver.id
        assert data["pendingRewards"] == {"coins": 50, "co2Saved": 2.5, "campaignId": None}

    async def test_campaign_bonus(self, client: AsyncClient, driver, operator, station, make_campaign):
        campaign = await make_campaign(
            owner=operator, station=station, coin_reward=20,
            end_date=datetime.now(timezone.utc) + timedelta(days=1),
        )
        response = await client.post("/api/v1/reservations", json=_body(driver, station))
        data = response.json()
        assert data["reservation"]["earnedCoins"] == 70
        assert data["pendingRewards"]["campaignId"] == campaign.id

    @pytest.mark.parametrize("missing", ["userId", "stationId", "date", "hour", "isGreen"])
    async def test_missing_field_is_400(self, client: AsyncClient, driver, station, missing):
        body = _body(driver, station)
        del body[missing]
        response = await client.post("/api/v1/reservations", json=body)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "invalid_input"
        assert error["message"]

    async def test_string_is_green_rejected(self, client: AsyncClient, driver, station):
        response = await client.post("/api/v1/reservations", json=_body(driver, station, isGreen="true"))
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "isGreen must be a boolean"

    async def test_bad_date_rejected(self, client: AsyncClient, driver, station):
        response = await client.post("/api/v1/reservations", json=_body(driver, station, date="someday"))
        assert response.status_code == 400

    async def test_unknown_station_is_404(self, client: AsyncClient, driver, station):
        response = await client.post("/api/v1/reservations", json=_body(driver, station, stationId=9999))
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"code": "not_found", "message": "Station 9999 not found"},
        }

    async def test_non_object_body_is_400(self, client: AsyncClient):
        response = await client.post("/api/v1/reservations", json=[1, 2, 3])
        assert response.status_code == 400


class TestComplete:
    async def _create(self, client, driver, station, **overrides) -> int:
        response = await client.post("/api/v1/reservations", json=_body(driver, station, **overrides))
        return response.json()["reservation"]["id"]

    async def test_complete_without_body(self, client: AsyncClient, driver, station):
        reservation_id = await self._create(client, driver, station)
        response = await client.post(f"/api/v1/reservations/{reservation_id}/complete")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["reservation"]["status"] == "COMPLETED"
        assert data["reservation"]["earnedCoins"] == 50
        assert data["reservation"]["completedAt"] is not None
        assert data["user"] == {"id": driver.id, "coins": 50, "co2Saved": 2.5, "xp": 50}

    async def test_complete_with_overrides(self, client: AsyncClient, driver, station):
        reservation_id = await self._create(client, driver, station, isGreen=False)
        response = await client.post(
            f"/api/v1/reservations/{reservation_id}/complete", json={"earnedCoins": 70, "earnedXp": 10}
        )
        assert response.status_code == 200
        assert response.json()["user"] == {"id": driver.id, "coins": 70, "co2Saved": 0.5, "xp": 10}

    async def test_empty_object_body_uses_defaults(self, client: AsyncClient, driver, station):
        reservation_id = await self._create(client, driver, station)
        response = await client.post(f"/api/v1/reservations/{reservation_id}/complete", json={})
        assert response.json()["user"]["coins"] == 50

    async def test_negative_override_rejected(self, client: AsyncClient, driver, station):
        reservation_id = await self._create(client, driver, station)
        response = await client.post(
            f"/api/v1/reservations/{reservation_id}/complete", json={"earnedCoins": -5}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

    async def test_second_completion_is_400(self, client: AsyncClient, driver, station, auth_headers):
        reservation_id = await self._create(client, driver, station)
        first = await client.post(f"/api/v1/reservations/{reservation_id}/complete")
        assert first.status_code == 200

        second = await client.post(f"/api/v1/reservations/{reservation_id}/complete")
        assert second.status_code == 400
        assert second.json()["error"]["code"] == "already_completed"

        profile = await client.get("/api/v1/users/me", headers=auth_headers(driver))
        assert profile.json()["coins"] == 50

    async def test_unknown_reservation_is_404(self, client: AsyncClient):
        response = await client.post("/api/v1/reservations/31337/complete")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"


class TestIdBounds:
    """Ids outside the 32-bit column range are rejected before they reach the database."""

    async def test_oversized_user_id(self, client: AsyncClient, driver, station):
        response = await client.post("/api/v1/reservations", json=_body(driver, station, userId=10**20))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

    async def test_infinite_station_id(self, client: AsyncClient, driver, station):
        raw = (
            f'{{"userId": {driver.id}, "stationId": Infinity, "date": "2026-10-20",'
            ' "hour": "14:00", "isGreen": true}'
        )
        response = await client.post(
            "/api/v1/reservations", content=raw, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

    async def test_oversized_path_id(self, client: AsyncClient, db_engine):
        response = await client.post(f"/api/v1/reservations/{10**20}/complete")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

    async def test_zero_path_id(self, client: AsyncClient, db_engine):
        response = await client.post("/api/v1/reservations/0/complete")
        assert response.status_code == 400

    async def test_oversized_override(self, client: AsyncClient, driver, station):
        created = await client.post("/api/v1/reservations", json=_body(driver, station))
        reservation_id = created.json()["reservation"]["id"]
        response = await client.post(
            f"/api/v1/reservations/{reservation_id}/complete", json={"earnedCoins": 10**20}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

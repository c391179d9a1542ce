"""Station map, slots and operator management over HTTP."""

from httpx import AsyncClient

from smartcharge.db.models import Role


async def test_list_stations_is_public(client: AsyncClient, station, make_station):
    other = await make_station(name="Besiktas Pier", price=9.0)
    response = await client.get("/api/v1/stations")
    assert response.status_code == 200
    ids = {s["id"] for s in response.json()["stations"]}
    assert ids == {station.id, other.id}


async def test_station_detail(client: AsyncClient, station, operator):
    response = await client.get(f"/api/v1/stations/{station.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Kadikoy Hub"
    assert data["ownerId"] == operator.id
    assert data["density"] == 50


async def test_station_detail_not_found(client: AsyncClient, db_engine):
    response = await client.get("/api/v1/stations/424242")
    assert response.status_code == 404
    assert response.json()["success"] is False


async def test_slots(client: AsyncClient, station):
    response = await client.get(f"/api/v1/stations/{station.id}/slots")
    assert response.status_code == 200
    data = response.json()
    assert data["stationId"] == station.id
    assert data["basePrice"] == 8.5
    assert len(data["slots"]) == 24
    for slot in data["slots"]:
        assert 0 <= slot["load"] <= 100
        assert slot["coins"] == (50 if slot["isGreen"] else 10)


async def test_slots_unknown_station(client: AsyncClient, db_engine):
    response = await client.get("/api/v1/stations/999/slots")
    assert response.status_code == 404


class TestOperatorManagement:
    async def test_create(self, client: AsyncClient, operator, auth_headers):
        response = await client.post("/api/v1/stations", headers=auth_headers(operator), json={
            "name": "Levent Plaza", "price": 11.25, "lat": 41.08, "lng": 29.01,
        })
        assert response.status_code == 201
        data = response.json()
        assert data["ownerId"] == operator.id
        assert data["density"] == 50
        assert data["address"] is None

    async def test_create_rejects_bad_price(self, client: AsyncClient, operator, auth_headers):
        response = await client.post("/api/v1/stations", headers=auth_headers(operator), json={
            "name": "Free", "price": 0, "lat": 41.0, "lng": 29.0,
        })
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

    async def test_driver_cannot_create(self, client: AsyncClient, driver, auth_headers):
        response = await client.post("/api/v1/stations", headers=auth_headers(driver), json={
            "name": "Mine", "price": 5, "lat": 41.0, "lng": 29.0,
        })
        assert response.status_code == 403

    async def test_patch_own(self, client: AsyncClient, operator, station, auth_headers):
        response = await client.patch(f"/api/v1/stations/{station.id}", headers=auth_headers(operator), json={
            "price": 7.75, "address": "Rihtim Cd. 1",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 7.75
        assert data["address"] == "Rihtim Cd. 1"
        assert data["name"] == "Kadikoy Hub"

    async def test_patch_other_operators_station(self, client: AsyncClient, make_user, station, auth_headers):
        rival = await make_user(name="Rival", email="rival@power.com", role=Role.OPERATOR)
        response = await client.patch(
            f"/api/v1/stations/{station.id}", headers=auth_headers(rival), json={"price": 1.0}
        )
        assert response.status_code == 404

    async def test_mine(self, client: AsyncClient, operator, station, make_station, auth_headers):
        await make_station(name="Unowned")
        response = await client.get("/api/v1/stations/mine", headers=auth_headers(operator))
        data = response.json()
        assert [s["id"] for s in data["stations"]] == [station.id]
        assert data["stations"][0]["reservationCount"] == 0
        assert data["stations"][0]["status"] == "YELLOW"
        assert data["stats"] == {"totalRevenue": 0.0, "totalReservations": 0, "greenShare": 0.0, "avgLoad": 50.0}

    async def test_mine_counts_reservations(
        self, client: AsyncClient, operator, driver, station, make_station, auth_headers
    ):
        quiet = await make_station(owner=operator, name="Night Depot", price=6.0, density=20)
        elsewhere = await make_station(name="Not Ours")
        bookings = [(station, True), (station, False), (station, True), (quiet, False), (elsewhere, True)]
        ids = []
        for target, green in bookings:
            created = await client.post("/api/v1/reservations", json={
                "userId": driver.id, "stationId": target.id, "date": "2026-10-21", "hour": "01:00", "isGreen": green,
            })
            ids.append(created.json()["reservation"]["id"])
        for reservation_id in (ids[0], ids[1], ids[3]):
            await client.post(f"/api/v1/reservations/{reservation_id}/complete")

        data = (await client.get("/api/v1/stations/mine", headers=auth_headers(operator))).json()
        by_id = {s["id"]: s for s in data["stations"]}
        assert set(by_id) == {station.id, quiet.id}
        assert (by_id[station.id]["reservationCount"], by_id[station.id]["greenReservationCount"]) == (3, 2)
        assert by_id[station.id]["revenue"] == 17.0
        assert (by_id[quiet.id]["reservationCount"], by_id[quiet.id]["greenReservationCount"]) == (1, 0)
        assert by_id[quiet.id]["revenue"] == 6.0
        assert by_id[quiet.id]["status"] == "GREEN"
        assert data["stats"] == {"totalRevenue": 23.0, "totalReservations": 4, "greenShare": 0.5, "avgLoad": 35.0}


async def test_oversized_station_id(client: AsyncClient, db_engine):
    for path in (f"/api/v1/stations/{10**20}", f"/api/v1/stations/{2**31}/slots"):
        response = await client.get(path)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_input"

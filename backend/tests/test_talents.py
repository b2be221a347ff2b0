"""
Tests for the talent catalog: creation rules, filtered listing, ownership
and the explicit cascade on deletion.
"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient


def _talent_payload(**overrides) -> dict:
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    payload = {
        "title": "Home Baking",
        "description": "Bread and pastries from scratch",
        "category": "cooking",
        "location": "Busan",
        "is_online": False,
        "max_participants": 4,
        "slots": [
            {"date": tomorrow, "start_time": "9:00", "end_time": "11:00"},
            {"date": tomorrow, "start_time": "14:00", "end_time": "16:30"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_talent_with_slots(client: AsyncClient, owner, headers_for):
    response = await client.post("/api/v1/talents/", json=_talent_payload(), headers=headers_for(owner))
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["owner_id"] == owner.id
    assert data["owner"]["email"] == "owner@example.com"
    assert [s["start_time"] for s in data["slots"]] == ["09:00", "14:00"]
    assert all(s["current_participants"] == 0 for s in data["slots"])


@pytest.mark.asyncio
async def test_create_talent_requires_auth(client: AsyncClient):
    response = await client.post("/api/v1/talents/", json=_talent_payload())
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_offline_talent_needs_location(client: AsyncClient, owner, headers_for):
    response = await client.post(
        "/api/v1/talents/",
        json=_talent_payload(location="  "),
        headers=headers_for(owner),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Location is required for offline talents"


@pytest.mark.asyncio
async def test_online_talent_without_location(client: AsyncClient, owner, headers_for):
    response = await client.post(
        "/api/v1/talents/",
        json=_talent_payload(location=None, is_online=True),
        headers=headers_for(owner),
    )
    assert response.status_code == 201
    assert response.json()["data"]["location"] is None


@pytest.mark.asyncio
async def test_talent_needs_at_least_one_slot(client: AsyncClient, owner, headers_for):
    response = await client.post(
        "/api/v1/talents/", json=_talent_payload(slots=[]), headers=headers_for(owner)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_slot_in_the_past_rejected(client: AsyncClient, owner, headers_for):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    response = await client.post(
        "/api/v1/talents/",
        json=_talent_payload(slots=[{"date": yesterday, "start_time": "10:00", "end_time": "11:00"}]),
        headers=headers_for(owner),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Slot date can not be in the past"


@pytest.mark.asyncio
async def test_slot_end_must_follow_start(client: AsyncClient, owner, talent, headers_for):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    response = await client.post(
        f"/api/v1/talents/{talent.id}/slots",
        json={"date": tomorrow, "start_time": "12:00", "end_time": "12:00"},
        headers=headers_for(owner),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_slot_time_format(client: AsyncClient, owner, talent, headers_for):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    response = await client.post(
        f"/api/v1/talents/{talent.id}/slots",
        json={"date": tomorrow, "start_time": "25:00", "end_time": "26:00"},
        headers=headers_for(owner),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_add_slot_only_by_owner(client: AsyncClient, alice, talent, headers_for):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    response = await client.post(
        f"/api/v1/talents/{talent.id}/slots",
        json={"date": tomorrow, "start_time": "13:00", "end_time": "14:00"},
        headers=headers_for(alice),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_talents_filters(client: AsyncClient, talent, other_talent):
    response = await client.get("/api/v1/talents/")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    # Newest first
    assert [t["id"] for t in body["data"]] == [other_talent.id, talent.id]

    response = await client.get("/api/v1/talents/", params={"category": "music"})
    assert [t["id"] for t in response.json()["data"]] == [talent.id]

    response = await client.get("/api/v1/talents/", params={"is_online": "true"})
    assert [t["id"] for t in response.json()["data"]] == [other_talent.id]

    response = await client.get("/api/v1/talents/", params={"search": "LOOPS"})
    assert [t["id"] for t in response.json()["data"]] == [other_talent.id]

    response = await client.get("/api/v1/talents/", params={"location": "seo"})
    assert [t["id"] for t in response.json()["data"]] == [talent.id]


@pytest.mark.asyncio
async def test_list_talents_unknown_category(client: AsyncClient):
    response = await client.get("/api/v1/talents/", params={"category": "juggling"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_talent_with_slots(client: AsyncClient, talent, slot):
    response = await client.get(f"/api/v1/talents/{talent.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Guitar for Beginners"
    assert [s["id"] for s in data["slots"]] == [slot.id]


@pytest.mark.asyncio
async def test_get_talent_not_found(client: AsyncClient):
    response = await client.get("/api/v1/talents/99999")
    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_update_talent_only_by_owner(client: AsyncClient, alice, talent, headers_for):
    response = await client.put(
        f"/api/v1/talents/{talent.id}", json={"title": "Hijacked"}, headers=headers_for(alice)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_talent_switch_offline_needs_location(
    client: AsyncClient, owner, other_talent, headers_for
):
    response = await client.put(
        f"/api/v1/talents/{other_talent.id}",
        json={"is_online": False},
        headers=headers_for(owner),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_max_participants_below_bookings(
    client: AsyncClient, owner, alice, bob, talent, book, headers_for
):
    assert (await book(alice)).status_code == 201
    assert (await book(bob)).status_code == 201

    response = await client.put(
        f"/api/v1/talents/{talent.id}",
        json={"max_participants": 1},
        headers=headers_for(owner),
    )
    assert response.status_code == 400

    response = await client.put(
        f"/api/v1/talents/{talent.id}",
        json={"max_participants": 3, "title": "Guitar, Level 1"},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert response.json()["data"]["max_participants"] == 3
    assert response.json()["data"]["title"] == "Guitar, Level 1"


@pytest.mark.asyncio
async def test_delete_talent_cascades(
    client: AsyncClient, owner, alice, talent, slot, book, headers_for
):
    booking_id = (await book(alice)).json()["data"]["id"]

    response = await client.delete(f"/api/v1/talents/{talent.id}", headers=headers_for(owner))
    assert response.status_code == 200

    assert (await client.get(f"/api/v1/talents/{talent.id}")).status_code == 404
    assert (await client.get(f"/api/v1/talents/{talent.id}/slots")).status_code == 404

    bookings = await client.get("/api/v1/bookings/", headers=headers_for(alice))
    assert bookings.json()["count"] == 0
    gone = await client.get(f"/api/v1/bookings/{booking_id}", headers=headers_for(alice))
    assert gone.status_code == 404

    notifications = await client.get("/api/v1/notifications/", headers=headers_for(alice))
    types = [n["type"] for n in notifications.json()["data"]]
    assert types[0] == "talent_deleted"


@pytest.mark.asyncio
async def test_delete_talent_only_by_owner(client: AsyncClient, alice, talent, headers_for):
    response = await client.delete(f"/api/v1/talents/{talent.id}", headers=headers_for(alice))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_my_talents(client: AsyncClient, owner, talent, other_talent, headers_for):
    response = await client.get("/api/v1/users/my-talents", headers=headers_for(owner))
    assert response.status_code == 200
    assert response.json()["count"] == 2


@pytest.mark.asyncio
async def test_update_ignores_null_for_required_fields(
    client: AsyncClient, owner, other_talent, headers_for
):
    response = await client.put(
        f"/api/v1/talents/{other_talent.id}",
        json={"max_participants": None},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert response.json()["data"]["max_participants"] == 5

    response = await client.put(
        f"/api/v1/talents/{other_talent.id}",
        json={"is_online": None, "title": "Python, Day One"},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["is_online"] is True
    assert data["title"] == "Python, Day One"


@pytest.mark.asyncio
async def test_update_null_location_rejected_for_offline(
    client: AsyncClient, owner, talent, headers_for
):
    response = await client.put(
        f"/api/v1/talents/{talent.id}",
        json={"location": None},
        headers=headers_for(owner),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Location is required for offline talents"

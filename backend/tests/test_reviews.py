"""
Tests for the review gate and review reads.
"""

import pytest
from httpx import AsyncClient

from talentshare.services import review_service


@pytest.fixture
def review(client: AsyncClient, headers_for):
    """POST a review as the given user."""

    async def _review(user, booking_id, rating=5, comment="Great class"):
        return await client.post(
            "/api/v1/reviews/",
            json={"booking_id": booking_id, "rating": rating, "comment": comment},
            headers=headers_for(user),
        )

    return _review


@pytest.mark.asyncio
async def test_review_confirmed_booking(
    client: AsyncClient, owner, alice, talent, book, review, headers_for
):
    booking_id = (await book(alice)).json()["data"]["id"]

    response = await review(alice, booking_id, rating=4, comment="Patient and clear")
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["rating"] == 4
    assert data["talent_id"] == talent.id
    assert data["provider_id"] == owner.id
    assert data["reviewer"]["name"] == "Alice"
    assert data["talent"]["title"] == talent.title

    inbox = await client.get("/api/v1/notifications/", headers=headers_for(owner))
    assert inbox.json()["data"][0]["type"] == "review_received"


@pytest.mark.asyncio
async def test_review_twice(client: AsyncClient, alice, book, review):
    booking_id = (await book(alice)).json()["data"]["id"]
    assert (await review(alice, booking_id)).status_code == 201

    response = await review(alice, booking_id, rating=1, comment="Changed my mind")
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_REVIEW"


@pytest.mark.asyncio
async def test_review_cancelled_booking(client: AsyncClient, alice, book, review, headers_for):
    booking_id = (await book(alice)).json()["data"]["id"]
    await client.delete(f"/api/v1/bookings/{booking_id}", headers=headers_for(alice))

    response = await review(alice, booking_id)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"


@pytest.mark.asyncio
async def test_review_someone_elses_booking(client: AsyncClient, alice, bob, owner, book, review):
    booking_id = (await book(alice)).json()["data"]["id"]

    assert (await review(bob, booking_id)).status_code == 403
    assert (await review(owner, booking_id)).status_code == 403


@pytest.mark.asyncio
async def test_review_unknown_booking(client: AsyncClient, alice, review):
    assert (await review(alice, 99999)).status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 6, -1])
async def test_rating_out_of_range(client: AsyncClient, alice, book, review, rating):
    booking_id = (await book(alice)).json()["data"]["id"]

    response = await review(alice, booking_id, rating=rating)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
@pytest.mark.parametrize("comment", ["", "   ", "x" * 501])
async def test_comment_bounds(client: AsyncClient, alice, book, review, comment):
    booking_id = (await book(alice)).json()["data"]["id"]

    response = await review(alice, booking_id, comment=comment)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_comment_at_limit(client: AsyncClient, alice, book, review):
    booking_id = (await book(alice)).json()["data"]["id"]
    assert (await review(alice, booking_id, comment="x" * 500)).status_code == 201


@pytest.mark.asyncio
async def test_can_review(client: AsyncClient, alice, bob, book, review, headers_for):
    booking_id = (await book(alice)).json()["data"]["id"]
    url = f"/api/v1/reviews/can-review/{booking_id}"

    response = await client.get(url, headers=headers_for(alice))
    assert response.json() == {
        "success": True,
        "can_review": True,
        "reason": None,
        "review_id": None,
    }

    review_id = (await review(alice, booking_id)).json()["data"]["id"]
    response = await client.get(url, headers=headers_for(alice))
    body = response.json()
    assert body["can_review"] is False
    assert body["reason"] == "already reviewed"
    assert body["review_id"] == review_id

    assert (await client.get(url, headers=headers_for(bob))).status_code == 403


@pytest.mark.asyncio
async def test_can_review_cancelled(client: AsyncClient, alice, book, headers_for):
    booking_id = (await book(alice)).json()["data"]["id"]
    await client.delete(f"/api/v1/bookings/{booking_id}", headers=headers_for(alice))

    response = await client.get(f"/api/v1/reviews/can-review/{booking_id}", headers=headers_for(alice))
    assert response.json()["can_review"] is False
    assert response.json()["reason"] == "booking is not confirmed"


@pytest.mark.asyncio
async def test_talent_and_provider_reviews(
    client: AsyncClient, owner, alice, bob, talent, book, review
):
    await review(alice, (await book(alice)).json()["data"]["id"], rating=5)
    await review(bob, (await book(bob)).json()["data"]["id"], rating=4)

    response = await client.get(f"/api/v1/reviews/talent/{talent.id}")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["average_rating"] == 4.5

    response = await client.get(f"/api/v1/reviews/provider/{owner.id}")
    assert response.json()["count"] == 2

    empty = await client.get(f"/api/v1/reviews/provider/{alice.id}")
    assert empty.json()["count"] == 0
    assert empty.json()["average_rating"] == 0.0


@pytest.mark.asyncio
async def test_update_and_delete_review(client: AsyncClient, alice, bob, book, review, headers_for):
    booking_id = (await book(alice)).json()["data"]["id"]
    review_id = (await review(alice, booking_id)).json()["data"]["id"]

    response = await client.put(
        f"/api/v1/reviews/{review_id}", json={"rating": 3}, headers=headers_for(alice)
    )
    assert response.status_code == 200
    assert response.json()["data"]["rating"] == 3
    assert response.json()["data"]["comment"] == "Great class"

    response = await client.put(
        f"/api/v1/reviews/{review_id}", json={"rating": 9}, headers=headers_for(alice)
    )
    assert response.status_code == 400

    assert (await client.delete(f"/api/v1/reviews/{review_id}", headers=headers_for(bob))).status_code == 403
    assert (await client.delete(f"/api/v1/reviews/{review_id}", headers=headers_for(alice))).status_code == 200

    mine = await client.get("/api/v1/reviews/my-reviews", headers=headers_for(alice))
    assert mine.json()["count"] == 0


@pytest.mark.asyncio
async def test_second_review_rejected_by_unique_constraint(
    client: AsyncClient, monkeypatch, alice, talent, book, review
):
    """A review that slips past the existence check still fails as a duplicate."""
    booking_id = (await book(alice)).json()["data"]["id"]
    assert (await review(alice, booking_id)).status_code == 201

    async def no_existing_review(db, booking_id):
        return None

    monkeypatch.setattr(review_service, "_existing_review", no_existing_review)

    response = await review(alice, booking_id, rating=2, comment="Second opinion")
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_REVIEW"

    monkeypatch.undo()
    listing = await client.get(f"/api/v1/reviews/talent/{talent.id}")
    assert listing.json()["count"] == 1
    assert listing.json()["data"][0]["rating"] == 5

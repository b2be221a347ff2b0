"""
Tests for the capacity ledger: recount semantics and atomic admission.
"""

import asyncio

import pytest
from sqlalchemy import insert, update

from talentshare.core.exceptions import ConflictError
from talentshare.models import Booking, Slot
from talentshare.services import booking_service, capacity_ledger

from conftest import TestSessionLocal


async def _add_bookings(db, slot, users, status="confirmed"):
    for user in users:
        db.add(Booking(user_id=user.id, talent_id=slot.talent_id, slot_id=slot.id, status=status))
    await db.flush()


@pytest.mark.asyncio
async def test_recompute_counts_active_bookings(db_session, slot, alice, bob, carol):
    await _add_bookings(db_session, slot, [alice, bob])
    await _add_bookings(db_session, slot, [carol], status="cancelled")

    assert await capacity_ledger.recompute(db_session, slot.id) == 2
    assert await capacity_ledger.recompute(db_session, slot.id) == 2

    refreshed = await db_session.get(Slot, slot.id)
    assert refreshed.current_participants == 2


@pytest.mark.asyncio
async def test_recompute_repairs_drift(db_session, slot, alice):
    await _add_bookings(db_session, slot, [alice])
    await db_session.execute(
        update(Slot).where(Slot.id == slot.id).values(current_participants=7)
    )

    assert await capacity_ledger.recompute(db_session, slot.id) == 1


@pytest.mark.asyncio
async def test_admit_claims_a_seat(db_session, slot):
    await capacity_ledger.admit(db_session, slot.id, max_participants=2)
    await capacity_ledger.admit(db_session, slot.id, max_participants=2)

    with pytest.raises(ConflictError) as exc_info:
        await capacity_ledger.admit(db_session, slot.id, max_participants=2)
    assert exc_info.value.code == "CAPACITY_EXCEEDED"


@pytest.mark.asyncio
async def test_check_capacity(db_session, slot, talent):
    capacity_ledger.check_capacity(slot, talent)

    slot.current_participants = talent.max_participants
    with pytest.raises(ConflictError):
        capacity_ledger.check_capacity(slot, talent)


@pytest.mark.asyncio
async def test_max_active_participants(db_session, talent, slot, other_talent, alice, bob):
    assert await capacity_ledger.max_active_participants(db_session, talent.id) == 0

    await _add_bookings(db_session, slot, [alice, bob])
    await capacity_ledger.recompute(db_session, slot.id)

    assert await capacity_ledger.max_active_participants(db_session, talent.id) == 2
    assert await capacity_ledger.max_active_participants(db_session, other_talent.id) == 0


@pytest.mark.asyncio
async def test_concurrent_bookings_never_overbook(make_user, talent, slot):
    """Many simultaneous requests for a two-seat slot admit exactly two."""
    users = [await make_user(f"User {i}", f"user{i}@example.com") for i in range(8)]

    async def attempt(user):
        async with TestSessionLocal() as session:
            try:
                await booking_service.create_booking(session, user, talent.id, slot.id)
                await session.commit()
                return "ok"
            except ConflictError as e:
                await session.rollback()
                return e.code

    results = await asyncio.gather(*(attempt(u) for u in users))
    assert results.count("ok") == talent.max_participants
    assert sorted(r for r in results if r != "ok") == ["CAPACITY_EXCEEDED"] * (
        len(users) - talent.max_participants
    )

    async with TestSessionLocal() as session:
        stored = await session.get(Slot, slot.id)
        assert stored.current_participants == talent.max_participants
        assert await capacity_ledger.count_active_bookings(session, slot.id) == talent.max_participants


@pytest.mark.asyncio
async def test_duplicate_caught_by_unique_constraint(
    client, monkeypatch, alice, talent, slot, book, get_slot, headers_for
):
    """A row that appears after the duplicate pre-check is rejected by the store."""
    real_admit = capacity_ledger.admit

    async def admit_after_concurrent_insert(db, slot_id, max_participants):
        await db.execute(
            insert(Booking).values(
                user_id=alice.id, talent_id=talent.id, slot_id=slot_id, status="confirmed"
            )
        )
        await real_admit(db, slot_id, max_participants)

    monkeypatch.setattr(capacity_ledger, "admit", admit_after_concurrent_insert)

    response = await book(alice)
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_BOOKING"

    monkeypatch.undo()
    assert (await get_slot(slot.id)).current_participants == 0
    bookings = await client.get("/api/v1/bookings/", headers=headers_for(alice))
    assert bookings.json()["count"] == 0

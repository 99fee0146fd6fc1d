"""Tests for client lookup by normalized name."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from tailormate.database.models import Client
from tailormate.repositories import ClientRepository

BASE = datetime(2026, 5, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_find_by_name_prefers_most_recent_match(db_session, tailor_id):
    older = Client(tailor_id=tailor_id, full_name="Mario Rossi", created_at=BASE)
    newer = Client(tailor_id=tailor_id, full_name="MARIO B. ROSSI", created_at=BASE + timedelta(days=3))
    db_session.add_all([older, newer])
    await db_session.flush()

    found = await ClientRepository(db_session).find_by_name(tailor_id, "mario rossi")

    assert found.id == newer.id


@pytest.mark.asyncio
async def test_find_by_name_is_scoped_to_tailor(db_session, tailor_id):
    db_session.add(Client(tailor_id=uuid.uuid4(), full_name="Anna Bianchi"))
    await db_session.flush()

    assert await ClientRepository(db_session).find_by_name(tailor_id, "Anna Bianchi") is None


@pytest.mark.asyncio
async def test_find_by_name_escapes_like_wildcards(db_session, tailor_id):
    db_session.add(Client(tailor_id=tailor_id, full_name="Anna Bianchi"))
    await db_session.flush()
    repository = ClientRepository(db_session)

    assert await repository.find_candidates(tailor_id, "%") == []
    assert await repository.find_by_name(tailor_id, "A.") is None


@pytest.mark.asyncio
async def test_create_and_list(db_session, tailor_id):
    repository = ClientRepository(db_session)
    first = await repository.create_client(tailor_id, "Luca Verdi", email="luca@example.com")
    second = await repository.create_client(tailor_id, "Sara Neri", phone="+39 06 000")

    listed = await repository.list_for_tailor(tailor_id)

    assert {c.id for c in listed} == {first.id, second.id}
    assert await repository.get_for_tailor(tailor_id, first.id) is first
    assert await repository.get_for_tailor(uuid.uuid4(), first.id) is None


@pytest.mark.asyncio
async def test_update_patches_known_fields_only(db_session, tailor_id):
    repository = ClientRepository(db_session)
    client = await repository.create_client(tailor_id, "Luca Verdi")

    updated = await repository.update(client.id, phone="+39 02 111", nickname="ignored")

    assert updated is client
    assert client.phone == "+39 02 111"
    assert await repository.update(uuid.uuid4(), phone="x") is None


@pytest.mark.asyncio
async def test_find_candidates_ignores_periods_in_stored_names(db_session, tailor_id):
    stored = Client(tailor_id=tailor_id, full_name="Mario A.Rossi")
    db_session.add(stored)
    await db_session.flush()
    repository = ClientRepository(db_session)

    assert await repository.find_candidates(tailor_id, "arossi") == [stored]
    assert await repository.find_by_name(tailor_id, "Mario A.Rossi") is stored

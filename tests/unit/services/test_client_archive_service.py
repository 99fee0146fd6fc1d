"""Tests for the client archive and order listing services."""

from datetime import datetime, timedelta, timezone

import pytest

from tailormate.database.models import (
    Client,
    ClientFile,
    ClientMeasurement,
    ClientMeasurementValue,
    ClientNote,
    Order,
    OrderFile,
    OrderItem,
)
from tailormate.services.client_archive_service import ClientArchiveService
from tailormate.services.order_service import OrderService
from tailormate.services.storage_service import StorageService

BASE = datetime(2026, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    return StorageService(url="https://test.supabase.co", api_key="anon-key")


@pytest.mark.asyncio
async def test_list_clients_groups_duplicates(session_maker, tailor_id, storage):
    async with session_maker() as db:
        db.add_all([
            Client(tailor_id=tailor_id, full_name="Mario Rossi", created_at=BASE),
            Client(tailor_id=tailor_id, full_name="Anna Bianchi", created_at=BASE + timedelta(days=1)),
            Client(tailor_id=tailor_id, full_name="mario A. rossi", created_at=BASE + timedelta(days=2)),
        ])
        await db.commit()

    async with session_maker() as db:
        groups = await ClientArchiveService(db, storage).list_clients(tailor_id)

    assert [g.key for g in groups] == ["mario rossi", "anna bianchi"]
    assert groups[0].client.full_name == "mario A. rossi"
    assert len(groups[0].member_ids) == 2


@pytest.mark.asyncio
async def test_client_detail(session_maker, tailor_id, storage):
    async with session_maker() as db:
        client = Client(tailor_id=tailor_id, full_name="Anna Bianchi")
        db.add(client)
        await db.flush()
        session = ClientMeasurement(
            tailor_id=tailor_id, client_id=client.id, raw_text="Chest 108cm",
            structured_data={"chest": {"width": "108cm"}},
        )
        db.add(session)
        await db.flush()
        db.add_all([
            ClientMeasurementValue(measurement_id=session.id, garment="chest", key="width", value=108.0, unit="cm"),
            ClientNote(tailor_id=tailor_id, client_id=client.id, raw_text="", notes=["Slim fit"], source="ai"),
            ClientFile(client_id=client.id, storage_path="client-intake/1-card.jpg", original_name="card.jpg"),
        ])
        await db.commit()
        client_id = client.id

    async with session_maker() as db:
        detail = await ClientArchiveService(db, storage).get_client_detail(tailor_id, client_id)

    assert detail.client.full_name == "Anna Bianchi"
    assert len(detail.measurements) == 1
    assert [(v.key, v.value) for v in detail.measurements[0].values] == [("width", 108.0)]
    assert detail.notes[0].notes == ["Slim fit"]
    assert detail.files[0].public_url == (
        "https://test.supabase.co/storage/v1/object/public/customers/client-intake/1-card.jpg"
    )


@pytest.mark.asyncio
async def test_client_detail_unknown_client(db_session, tailor_id, storage):
    import uuid

    assert await ClientArchiveService(db_session, storage).get_client_detail(tailor_id, uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_list_orders(session_maker, tailor_id, storage):
    async with session_maker() as db:
        client = Client(tailor_id=tailor_id, full_name="Paolo Gallo")
        db.add(client)
        await db.flush()
        older = Order(tailor_id=tailor_id, client_id=client.id, order_number="ORD-000001", created_at=BASE)
        newer = Order(tailor_id=tailor_id, client_id=None, order_number="ORD-000002", created_at=BASE + timedelta(hours=1))
        db.add_all([older, newer])
        await db.flush()
        db.add_all([
            OrderItem(order_id=older.id, garment="Suit", quantity=1),
            OrderFile(order_id=older.id, storage_path="orders-intake/1-form.jpg", original_name="form.jpg"),
        ])
        await db.commit()

    async with session_maker() as db:
        orders = await OrderService(db, storage).list_orders(tailor_id)

    assert [o.order_number for o in orders] == ["ORD-000002", "ORD-000001"]
    assert orders[0].client_name is None
    assert orders[1].client_name == "Paolo Gallo"
    assert orders[1].status == "draft"
    assert [i.garment for i in orders[1].items] == ["Suit"]
    assert orders[1].files[0].public_url.endswith("/customers/orders-intake/1-form.jpg")

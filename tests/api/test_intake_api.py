"""Tests for the intake API endpoints."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from tailormate.api.v1.endpoints.intake import (
    get_extraction_service,
    get_intake_run,
    get_storage_service,
)
from tailormate.core.auth import get_current_session
from tailormate.core.database import get_async_session
from tailormate.core.exceptions import ExtractionServiceError, ReconciliationError
from tailormate.main import app
from tailormate.schemas.auth import ActorSession, CurrentUser
from tailormate.schemas.intake import (
    ExtractionResult,
    IntakeKind,
    ReconciliationOutcome,
    ReconciliationSummary,
)
from tailormate.services.extraction_service import ExtractionService
from tailormate.services.intake import IntakeRun, ReconciliationStage
from tailormate.services.storage_service import StorageService

CARD_RESULT = {
    "fileName": "card.jpg",
    "rawText": "Chest 108cm",
    "structured": {"full_name": "Anna Bianchi", "measurements": {"chest": {"width": "108cm"}}},
}


@pytest.fixture
def storage():
    service = Mock(spec=StorageService)
    service.upload = AsyncMock(side_effect=lambda bucket, path, *args, **kwargs: {"path": path})
    service.get_public_url = Mock(side_effect=lambda bucket, path: f"https://cdn.test/{bucket}/{path}")
    return service


@pytest.fixture
def extraction():
    service = Mock(spec=ExtractionService)
    service.extract = AsyncMock(return_value=[ExtractionResult.model_validate(CARD_RESULT)])
    return service


@pytest.fixture
def authenticated(actor_session, storage, extraction):
    app.dependency_overrides[get_current_session] = lambda: actor_session
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_extraction_service] = lambda: extraction


class TestAnalyzeEndpoint:

    def test_analyze_success(self, test_client: TestClient, authenticated, extraction, sample_jpeg) -> None:
        response = test_client.post(
            "/api/v1/intake/clients/analyze",
            files=[("files", ("card.jpg", sample_jpeg, "image/jpeg"))],
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] is True
        data = body["data"]
        assert data["kind"] == "clients"
        (document,) = data["documents"]
        assert document["name"] == "card.jpg"
        assert document["storage_path"].startswith("client-intake/")
        assert document["public_url"] == f"https://cdn.test/customers/{document['storage_path']}"
        assert document["has_preview"] is True
        assert data["results"][0]["fileName"] == "card.jpg"
        assert data["results"][0]["structured"]["full_name"] == "Anna Bianchi"
        extraction.extract.assert_awaited_once()

    def test_order_kind_uses_order_prefix(self, test_client: TestClient, authenticated) -> None:
        response = test_client.post(
            "/api/v1/intake/orders/analyze",
            files=[("files", ("form.pdf", b"%PDF-1.4", "application/pdf"))],
        )

        assert response.status_code == 200
        document = response.json()["data"]["documents"][0]
        assert document["storage_path"].startswith("orders-intake/")
        assert document["has_preview"] is False

    def test_extraction_failure_is_bad_gateway(self, test_client: TestClient, authenticated, extraction) -> None:
        extraction.extract.side_effect = ExtractionServiceError('{"error":"quota"}', status_code=429)

        response = test_client.post(
            "/api/v1/intake/clients/analyze",
            files=[("files", ("card.jpg", b"x", "image/jpeg"))],
        )

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["title"] == "Extraction Failed"
        assert detail["detail"] == '{"error":"quota"}'
        assert detail["instance"] == "/api/v1/intake/clients/analyze"

    def test_session_without_token_is_unauthorized(self, test_client: TestClient, authenticated, storage) -> None:
        app.dependency_overrides[get_current_session] = lambda: ActorSession(
            access_token="", user=CurrentUser(id="6a0c8f4e-2d1b-4c7a-9e55-0b3f1d2c4a10")
        )

        response = test_client.post(
            "/api/v1/intake/clients/analyze",
            files=[("files", ("card.jpg", b"x", "image/jpeg"))],
        )

        assert response.status_code == 401
        assert response.json()["detail"]["detail"] == "No active session"
        storage.upload.assert_not_called()

    def test_missing_authorization_header(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/v1/intake/clients/analyze",
            files=[("files", ("card.jpg", b"x", "image/jpeg"))],
        )

        assert response.status_code == 401

    def test_unknown_kind(self, test_client: TestClient, authenticated) -> None:
        response = test_client.post(
            "/api/v1/intake/invoices/analyze",
            files=[("files", ("card.jpg", b"x", "image/jpeg"))],
        )

        assert response.status_code == 422


class TestSaveEndpoint:

    @pytest.fixture
    def reconciliation(self):
        stage = Mock(spec=ReconciliationStage)
        summary = ReconciliationSummary(
            kind=IntakeKind.ORDER,
            outcomes=[ReconciliationOutcome(index=0, file_name="card.jpg", order_number="ORD-123456")],
        )
        stage.run = AsyncMock(return_value=summary)
        return stage

    @pytest.fixture
    def saving(self, authenticated, storage, extraction, reconciliation):
        db_session = Mock()
        app.dependency_overrides[get_async_session] = lambda: db_session
        app.dependency_overrides[get_intake_run] = lambda: IntakeRun(
            IntakeKind.ORDER, storage=storage, extraction=extraction, reconciliation=reconciliation
        )
        return db_session

    def test_save_success(self, test_client: TestClient, saving, reconciliation, actor_session) -> None:
        response = test_client.post(
            "/api/v1/intake/orders/save",
            json={
                "documents": [{"storage_path": "orders-intake/1-card.jpg", "original_name": "card.jpg"}],
                "results": [CARD_RESULT],
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["kind"] == "orders"
        assert data["processed"] == 1
        assert data["outcomes"][0]["order_number"] == "ORD-123456"

        session, db_session, results, documents = reconciliation.run.call_args.args
        assert session == actor_session
        assert db_session is saving
        assert results[0].structured.full_name == "Anna Bianchi"
        assert documents[0].storage_path == "orders-intake/1-card.jpg"

    def test_save_failure_is_server_error(self, test_client: TestClient, saving, reconciliation) -> None:
        reconciliation.run.side_effect = ReconciliationError("Failed to save card.jpg: constraint", result_index=0)

        response = test_client.post("/api/v1/intake/orders/save", json={"results": [CARD_RESULT]})

        assert response.status_code == 500
        assert response.json()["detail"]["title"] == "Save Failed"
        assert response.json()["detail"]["detail"] == "Failed to save card.jpg: constraint"

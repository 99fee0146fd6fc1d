"""Tests for the concurrent upload stage."""

import re
from unittest.mock import AsyncMock, Mock

import pytest

from tailormate.core.exceptions import SessionRequiredError, UploadError
from tailormate.schemas.auth import ActorSession, CurrentUser
from tailormate.schemas.intake import UploadedDocument
from tailormate.services.intake.upload_stage import UploadStage, build_storage_path
from tailormate.services.storage_service import StorageService


def _documents(*names):
    return [UploadedDocument(id=str(i), name=name, content=b"x", content_type="image/jpeg") for i, name in enumerate(names)]


@pytest.fixture
def storage():
    service = Mock(spec=StorageService)
    service.upload = AsyncMock(side_effect=lambda bucket, path, *args, **kwargs: {"path": path})
    return service


def test_storage_path_is_namespaced_and_unique():
    first = build_storage_path("client-intake", "card.jpg")
    second = build_storage_path("client-intake", "card.jpg")

    assert re.fullmatch(r"client-intake/[0-9a-f-]{36}-card\.jpg", first)
    assert first != second


@pytest.mark.asyncio
async def test_uploads_every_document_and_attaches_paths(storage, actor_session):
    stage = UploadStage(storage, "orders-intake", bucket="customers")
    documents = _documents("a.jpg", "b.jpg", "c.jpg")

    result = await stage.run(actor_session, documents)

    assert result is documents
    assert storage.upload.await_count == 3
    for doc in documents:
        assert doc.storage_path.startswith("orders-intake/")
        assert doc.storage_path.endswith(f"-{doc.name}")
    for call in storage.upload.call_args_list:
        assert call.args[0] == "customers"
        assert call.args[4] == actor_session.access_token


@pytest.mark.asyncio
async def test_one_failure_fails_the_batch(storage, actor_session):
    def upload(bucket, path, *args, **kwargs):
        if path.endswith("-c.jpg"):
            raise UploadError("Upload failed: quota exceeded")
        return {"path": path}

    storage.upload.side_effect = upload
    stage = UploadStage(storage, "client-intake", bucket="customers")
    documents = _documents("a.jpg", "b.jpg", "c.jpg", "d.jpg")

    with pytest.raises(UploadError, match="quota exceeded"):
        await stage.run(actor_session, documents)

    assert all(doc.storage_path is None for doc in documents)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "session",
    [
        None,
        ActorSession(access_token="", user=CurrentUser(id="6a0c8f4e-2d1b-4c7a-9e55-0b3f1d2c4a10")),
    ],
)
async def test_missing_session_fails_before_any_upload(storage, session):
    stage = UploadStage(storage, "client-intake", bucket="customers")

    with pytest.raises(SessionRequiredError):
        await stage.run(session, _documents("a.jpg"))

    storage.upload.assert_not_called()


@pytest.mark.asyncio
async def test_empty_batch_uploads_nothing(storage, actor_session):
    stage = UploadStage(storage, "client-intake", bucket="customers")

    assert await stage.run(actor_session, []) == []
    storage.upload.assert_not_called()

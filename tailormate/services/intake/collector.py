"""In-memory accumulation of documents selected for one intake run."""

import io
import uuid
from typing import Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from tailormate.schemas.intake import PreviewHandle, UploadedDocument
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)

# (filename, content, content type)
SelectedFile = Tuple[str, bytes, Optional[str]]


def make_preview(content: bytes, size: int = 256) -> Optional[PreviewHandle]:
    """JPEG thumbnail bounded by ``size`` pixels, or None if the bytes are not a readable image."""
    try:
        with Image.open(io.BytesIO(content)) as image:
            image.thumbnail((size, size))
            buffer = io.BytesIO()
            image.convert("RGB").save(buffer, format="JPEG")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        LOGGER.warning(f"Could not build preview: {e}")
        return None
    return PreviewHandle(content=buffer.getvalue())


class IntakeCollector:
    """Accumulates selected files; every selection appends to the batch."""

    def __init__(self, preview_size: int = 256):
        self.preview_size = preview_size
        self._documents: List[UploadedDocument] = []

    @property
    def documents(self) -> List[UploadedDocument]:
        return list(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def add(self, files: Optional[Iterable[SelectedFile]]) -> List[UploadedDocument]:
        """Append files to the batch and return the new documents.

        A None or empty selection is a no-op.
        """
        added: List[UploadedDocument] = []
        for name, content, content_type in files or []:
            document = UploadedDocument(
                id=str(uuid.uuid4()),
                name=name,
                content=content,
                content_type=content_type or "application/octet-stream",
            )
            if document.is_image:
                document.preview = make_preview(content, self.preview_size)
            added.append(document)

        self._documents.extend(added)
        if added:
            LOGGER.debug(f"Collected {len(added)} document(s), batch size {len(self._documents)}")
        return added

    def remove(self, document_id: str) -> bool:
        """Drop a document by id, releasing its preview. Returns False if unknown."""
        for index, document in enumerate(self._documents):
            if document.id == document_id:
                if document.preview:
                    document.preview.release()
                del self._documents[index]
                return True
        return False

    def clear(self) -> None:
        for document in self._documents:
            if document.preview:
                document.preview.release()
        self._documents = []

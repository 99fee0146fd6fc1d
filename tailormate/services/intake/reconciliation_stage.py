"""Turns reviewed extraction results into client, measurement and order rows."""

from typing import Callable, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.auth import require_session
from tailormate.core.config import IntakeSettings, settings
from tailormate.core.exceptions import ReconciliationError
from tailormate.database.models import Client
from tailormate.repositories import (
    ClientFileRepository,
    ClientNoteRepository,
    ClientRepository,
    MeasurementRepository,
    MeasurementValueRepository,
    OrderFileRepository,
    OrderItemRepository,
    OrderRepository,
)
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.intake import (
    ExtractionResult,
    IntakeKind,
    ReconciliationOutcome,
    ReconciliationSummary,
    StoredDocument,
)
from tailormate.utils.logging import get_logger
from tailormate.utils.measurements import flatten_measurements, measurement_rows
from tailormate.utils.order_numbers import generate_order_number

LOGGER = get_logger(__name__)


class ReconciliationStage:
    """Persists extraction results one at a time, in order.

    Each result's writes share one transaction, committed after its last
    write. A failing result is rolled back and stops the batch; results
    committed before it stay committed, and a retry writes them again.
    """

    def __init__(
        self,
        kind: IntakeKind,
        intake_settings: Optional[IntakeSettings] = None,
        order_number_factory: Optional[Callable[[], str]] = None,
    ):
        self.kind = kind
        self.config = intake_settings or settings.intake
        self.order_number_factory = order_number_factory or (
            lambda: generate_order_number(self.config.order_number_prefix)
        )

    async def run(
        self,
        session: Optional[ActorSession],
        db: AsyncSession,
        results: Sequence[ExtractionResult],
        documents: Sequence[StoredDocument] = (),
    ) -> ReconciliationSummary:
        """Reconcile every result against the tailor's clients.

        Args:
            session: Acting tailor
            db: Database session; committed once per written result
            results: Reviewed extraction results, processed in order
            documents: Stored documents of the run, linked to each new order
                (and to clients when client file links are enabled)

        Returns:
            Per-result outcomes

        Raises:
            SessionRequiredError: Without an active session
            ReconciliationError: On the first result whose writes fail
        """
        session = require_session(session)
        summary = ReconciliationSummary(kind=self.kind)
        documents = [doc for doc in documents if doc.storage_path]

        LOGGER.info(f"Reconciling {len(results)} {self.kind.value} intake result(s)")

        for index, result in enumerate(results):
            if not result.has_identity:
                LOGGER.info(f"Skipping result {index} ({result.file_name}): no client name")
                summary.outcomes.append(
                    ReconciliationOutcome(index=index, file_name=result.file_name, skipped=True)
                )
                continue

            try:
                outcome = await self._reconcile_one(session, db, index, result, documents)
                await db.commit()
            except Exception as e:
                await db.rollback()
                LOGGER.error(
                    f"Reconciliation failed at result {index} ({result.file_name}): {str(e)}",
                    exc_info=True,
                )
                raise ReconciliationError(
                    f"Failed to save {result.file_name or f'result {index + 1}'}: {str(e)}",
                    result_index=index,
                    original_error=e,
                )

            summary.outcomes.append(outcome)

        LOGGER.info(
            f"Reconciliation complete: {summary.processed} processed, {summary.skipped} skipped, "
            f"{summary.clients_created} client(s) created, {summary.orders_created} order(s) created"
        )
        return summary

    async def _reconcile_one(
        self,
        session: ActorSession,
        db: AsyncSession,
        index: int,
        result: ExtractionResult,
        documents: List[StoredDocument],
    ) -> ReconciliationOutcome:
        tailor_id = session.tailor_id
        fields = result.structured
        outcome = ReconciliationOutcome(index=index, file_name=result.file_name)

        client, created = await self._resolve_client(db, session, result)
        outcome.client_id = client.id
        outcome.client_created = created

        if self.kind == IntakeKind.ORDER:
            await self._write_order(db, session, client, result, documents, outcome)
        elif self.config.link_client_files and documents:
            linked = await ClientFileRepository(db).attach_files(client.id, documents)
            outcome.files_linked = len(linked)

        measurement = await MeasurementRepository(db).create_session(
            tailor_id=tailor_id,
            client_id=client.id,
            raw_text=result.raw_text,
            structured_data=fields.measurements,
        )
        outcome.measurement_id = measurement.id

        if fields.notes:
            note = await ClientNoteRepository(db).create_note(
                tailor_id=tailor_id,
                client_id=client.id,
                notes=fields.notes,
                raw_text=result.raw_text or "",
                source=self.config.note_source,
            )
            outcome.note_id = note.id

        flat = flatten_measurements(fields.measurements, unit=self.config.default_unit)
        if flat:
            values = await MeasurementValueRepository(db).bulk_create(
                measurement_rows(measurement.id, flat)
            )
            outcome.measurement_values = len(values)

        return outcome

    async def _resolve_client(
        self, db: AsyncSession, session: ActorSession, result: ExtractionResult
    ) -> Tuple[Client, bool]:
        fields = result.structured
        clients = ClientRepository(db)

        existing = await clients.find_by_name(session.tailor_id, fields.full_name)
        if existing is not None:
            LOGGER.debug(f"Reusing client {existing.id} for {result.file_name}")
            return existing, False

        client = await clients.create_client(
            tailor_id=session.tailor_id,
            full_name=fields.full_name.strip(),
            email=fields.email,
            phone=fields.phone,
        )
        return client, True

    async def _write_order(
        self,
        db: AsyncSession,
        session: ActorSession,
        client: Client,
        result: ExtractionResult,
        documents: List[StoredDocument],
        outcome: ReconciliationOutcome,
    ) -> None:
        order = await OrderRepository(db).create_order(
            tailor_id=session.tailor_id,
            client_id=client.id,
            order_number=self.order_number_factory(),
            status=self.config.order_status,
            notes=result.raw_text or None,
        )
        outcome.order_id = order.id
        outcome.order_number = order.order_number

        if documents:
            files = await OrderFileRepository(db).attach_files(order.id, documents)
            outcome.files_linked = len(files)

        if result.structured.order_items:
            items = await OrderItemRepository(db).add_items(order.id, result.structured.order_items)
            outcome.order_items = len(items)

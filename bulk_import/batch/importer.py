"""
Sequential bulk create loop with per-record failure isolation.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from bulk_import.core.errors import NothingToImportError
from bulk_import.core.models import ImportFailure, ImportResult, RawRecord
from bulk_import.observability import metrics
from bulk_import.observability.logger import get_logger, log_operation

logger = get_logger(__name__)

CreateOperation = Callable[[RawRecord], Awaitable[Any]]
ProgressCallback = Callable[[int], None]


def progress_percent(processed: int, total: int) -> int:
    """Percentage of processed rows, rounded half up."""
    return (200 * processed + total) // (2 * total)


class BulkImporter:
    """
    Creates records one at a time through an external create operation.

    Calls are awaited strictly in input order and never overlap, so progress
    increases monotonically and the backend sees one write at a time. A
    failing record is logged and counted; it never stops the batch.
    """

    def __init__(self, create: CreateOperation, entity: str = "records"):
        """
        Args:
            create: Async callable creating one record; raising marks the record failed
            entity: Entity name for log and metric context
        """
        self.create = create
        self.entity = entity

    async def run(
        self,
        records: Sequence[RawRecord],
        on_progress: ProgressCallback | None = None,
        row_numbers: Sequence[int] | None = None,
    ) -> ImportResult:
        """
        Import every record.

        Args:
            records: Eligible records, in the order they must be created
            on_progress: Called after each record with the integer percentage done;
                         an exception it raises is logged and the batch continues
            row_numbers: Source row number per record, for failure reporting;
                         defaults to the 1-based position in ``records``

        Returns:
            ImportResult with total, succeeded, failed and per-record failures

        Raises:
            NothingToImportError: If records is empty
        """
        if not records:
            raise NothingToImportError()
        if row_numbers is not None and len(row_numbers) != len(records):
            raise ValueError("row_numbers must have one entry per record")

        total = len(records)
        succeeded = 0
        failures: list[ImportFailure] = []

        with log_operation("Importing records", logger=logger, entity=self.entity, total=total), \
                metrics.track_duration(metrics.import_duration_seconds, entity=self.entity):
            for index, record in enumerate(records):
                row_number = row_numbers[index] if row_numbers is not None else index + 1

                try:
                    await self.create(record)
                except Exception as e:
                    logger.error(
                        f"Error importing record: {e}",
                        extra={"entity": self.entity, "row_number": row_number},
                        exc_info=True,
                    )
                    failures.append(ImportFailure(row_number=row_number, error=str(e) or e.__class__.__name__))
                    metrics.records_imported_total.labels(entity=self.entity, status="failure").inc()
                else:
                    succeeded += 1
                    metrics.records_imported_total.labels(entity=self.entity, status="success").inc()

                if on_progress is not None:
                    try:
                        on_progress(progress_percent(index + 1, total))
                    except Exception as e:
                        logger.warning(
                            f"Progress callback failed: {e}",
                            extra={"entity": self.entity, "row_number": row_number},
                            exc_info=True,
                        )

        result = ImportResult(
            total=total,
            succeeded=succeeded,
            failed=len(failures),
            failures=failures,
        )
        logger.info(
            "Import finished",
            extra={"entity": self.entity, "total": total, "succeeded": succeeded, "failed": len(failures)},
        )
        return result


async def import_records(
    records: Sequence[RawRecord],
    create: CreateOperation,
    on_progress: ProgressCallback | None = None,
    row_numbers: Sequence[int] | None = None,
    entity: str = "records",
) -> ImportResult:
    """Run a BulkImporter over records."""
    return await BulkImporter(create, entity=entity).run(
        records, on_progress=on_progress, row_numbers=row_numbers
    )

"""
Import pipeline orchestration.

Coordinates the flow: upload → validate → review → import → complete
"""

import asyncio
from collections.abc import Callable, Iterable
from pathlib import Path, PurePath
from typing import Any

from bulk_import.batch.importer import BulkImporter, CreateOperation, ProgressCallback
from bulk_import.batch.readers import FileReader
from bulk_import.core.errors import (
    ImportPipelineError,
    InvalidTransitionError,
    NothingToImportError,
)
from bulk_import.core.models import (
    Complete,
    FieldSchema,
    Idle,
    Importing,
    ImportResult,
    PipelineState,
    ReviewingResults,
    Uploading,
    ValidationReport,
    ValidationRule,
    Validating,
)
from bulk_import.core.rules import RuleEngine
from bulk_import.observability.logger import get_logger

logger = get_logger(__name__)

GENERIC_FILE_ERROR = "Error al procesar el archivo"
GENERIC_IMPORT_ERROR = "La importación se interrumpió antes de terminar"

StateListener = Callable[[PipelineState], None]


class ImportPipeline:
    """
    State machine driving one import run at a time.

    Flow:
    1. Idle: waiting for a file
    2. Uploading: the file is read into memory
    3. Validating: rows are parsed and classified
    4. ReviewingResults: the operator inspects errors and warnings
    5. Importing: eligible rows are created one by one
    6. Complete: the final tally is available

    A parse or validation failure, or an interrupted import, returns the
    pipeline to Idle with the error message. ``reset()`` returns to Idle
    from review or completion and discards the run's artifacts.
    """

    def __init__(
        self,
        schema: FieldSchema,
        rules: Iterable[dict[str, Any] | ValidationRule],
        create: CreateOperation,
        on_state_change: StateListener | None = None,
        reader: FileReader | None = None,
    ):
        """
        Initialize import pipeline.

        Args:
            schema: Field schema of the imported entity
            rules: Validation rules applied after the schema's required fields
            create: Async create operation for one record
            on_state_change: Called with the new state on every transition
            reader: File reader (a default FileReader when omitted)
        """
        self.schema = schema
        self.engine = RuleEngine(rules, schema=schema)
        self.importer = BulkImporter(create, entity=schema.entity)
        self.reader = reader or FileReader()
        self._listeners: list[StateListener] = [on_state_change] if on_state_change else []
        self._state: PipelineState = Idle()
        self.progress = 0

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def stage(self) -> str:
        return self._state.stage

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _transition(self, state: PipelineState) -> None:
        previous = self._state.stage
        self._state = state
        logger.debug(
            f"Pipeline stage {previous} -> {state.stage}",
            extra={"entity": self.schema.entity, "stage": state.stage},
        )
        for listener in self._listeners:
            listener(state)

    def load(
        self,
        source: bytes | str | Path,
        file_name: str | None = None,
        file_format: str | None = None,
        content_type: str | None = None,
    ) -> ValidationReport:
        """
        Read and validate a file, leaving the pipeline in ReviewingResults.

        Args:
            source: File content (bytes or text) or a Path
            file_name: Original file name
            file_format: Declared format; sniffed from name or MIME type when omitted
            content_type: MIME type of the upload

        Returns:
            The validation report for review

        Raises:
            InvalidTransitionError: If the pipeline is not Idle
            ImportPipelineError: If the file cannot be parsed (pipeline returns to Idle)
        """
        if not isinstance(self._state, Idle):
            raise InvalidTransitionError(self.stage, "load a file")

        if file_name is None and isinstance(source, PurePath):
            file_name = source.name

        self.progress = 0
        self._transition(Uploading(file_name=file_name))

        try:
            records = self.reader.read(
                source,
                file_format=file_format,
                file_name=file_name,
                content_type=content_type,
            )
            self._transition(Validating(file_name=file_name, records=records))
            report = self.engine.validate_batch(records)
        except Exception as e:
            message = e.message if isinstance(e, ImportPipelineError) else GENERIC_FILE_ERROR
            logger.error(
                f"Aborting import run: {message}",
                extra={"entity": self.schema.entity, "file_name": file_name},
            )
            self._transition(Idle(error=message))
            raise

        self._transition(ReviewingResults(file_name=file_name, records=records, report=report))
        return report

    async def run_import(self, on_progress: ProgressCallback | None = None) -> ImportResult:
        """
        Create every eligible record, leaving the pipeline in Complete.

        An exception escaping the import loop (cancellation included) returns
        the pipeline to Idle with an error message and is re-raised.

        Args:
            on_progress: Called after each record with the integer percentage done

        Returns:
            The final import tally

        Raises:
            InvalidTransitionError: If the pipeline is not reviewing results
            NothingToImportError: If no row is eligible (pipeline stays in review)
        """
        state = self._state
        if not isinstance(state, ReviewingResults):
            raise InvalidTransitionError(self.stage, "start an import")
        if not state.can_import:
            raise NothingToImportError()

        self._transition(Importing(file_name=state.file_name, records=state.records, report=state.report))

        def report_progress(percent: int) -> None:
            self.progress = percent
            if on_progress is not None:
                on_progress(percent)

        outcomes = state.report.eligible_outcomes
        try:
            result = await self.importer.run(
                [outcome.record for outcome in outcomes],
                on_progress=report_progress,
                row_numbers=[outcome.row_number for outcome in outcomes],
            )
        except (Exception, asyncio.CancelledError) as e:
            message = e.message if isinstance(e, ImportPipelineError) else GENERIC_IMPORT_ERROR
            logger.error(
                f"Import run interrupted: {message}",
                extra={"entity": self.schema.entity, "file_name": state.file_name},
                exc_info=True,
            )
            self.progress = 0
            self._transition(Idle(error=message))
            raise

        self._transition(
            Complete(
                file_name=state.file_name,
                records=state.records,
                report=state.report,
                result=result,
            )
        )
        return result

    def reset(self) -> None:
        """
        Discard the current run and return to Idle ("select another file").

        Raises:
            InvalidTransitionError: If a file is being read or imported
        """
        if not isinstance(self._state, (Idle, ReviewingResults, Complete)):
            raise InvalidTransitionError(self.stage, "reset")

        self.progress = 0
        self._transition(Idle())

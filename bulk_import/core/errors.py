"""
Exceptions raised by the import pipeline.

Record-level rule violations are not exceptions: they are collected as
diagnostics on each ValidationOutcome. The errors here abort a stage.
"""


class ImportPipelineError(Exception):
    """Base class for errors that abort an import run."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnsupportedFormatError(ImportPipelineError):
    """Raised when the declared or sniffed file format is not supported."""

    def __init__(self, file_format: str | None):
        self.file_format = file_format
        shown = file_format or "desconocido"
        super().__init__(
            f"Formato de archivo no válido ({shown}). Use CSV, Excel o JSON."
        )


class MalformedInputError(ImportPipelineError):
    """Raised when file content cannot be decoded as its format."""

    def __init__(self, file_format: str, reason: str):
        self.file_format = file_format
        self.reason = reason
        super().__init__(f"Error al procesar el archivo {file_format}: {reason}")


class NothingToImportError(ImportPipelineError):
    """Raised when an import is triggered with no eligible records."""

    def __init__(self):
        super().__init__("No hay registros válidos para importar")


class InvalidTransitionError(ImportPipelineError):
    """Raised when the pipeline is asked to move to a state it cannot reach."""

    def __init__(self, current: str, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} while pipeline is in stage '{current}'")

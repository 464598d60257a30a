"""
Generic file reader for multiple formats (CSV, JSON, XLSX).
"""

from pathlib import Path, PurePath

from bulk_import.core.errors import MalformedInputError, UnsupportedFormatError
from bulk_import.core.models import RawRecord
from bulk_import.observability import metrics
from bulk_import.observability.logger import get_logger, log_operation

from .csv_reader import CSVReader
from .json_reader import JSONReader
from .xlsx_reader import XLSXReader

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("csv", "json", "xlsx")

EXTENSION_FORMATS = {
    ".csv": "csv",
    ".json": "json",
    ".xlsx": "xlsx",
}

CONTENT_TYPE_FORMATS = {
    "text/csv": "csv",
    # Windows browsers report .csv uploads with the legacy Excel MIME type
    "application/vnd.ms-excel": "csv",
    "application/json": "json",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
}


def detect_format(file_name: str | None = None, content_type: str | None = None) -> str | None:
    """
    Sniff the file format from its name, then from its MIME type.

    Returns:
        "csv", "json" or "xlsx", or None when neither hint is recognized
    """
    if file_name:
        suffix = PurePath(file_name).suffix.lower()
        if suffix in EXTENSION_FORMATS:
            return EXTENSION_FORMATS[suffix]

    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in CONTENT_TYPE_FORMATS:
            return CONTENT_TYPE_FORMATS[mime]

    return None


class FileReader:
    """
    Generic file reader supporting multiple formats.
    """

    def __init__(self):
        self.csv_reader = CSVReader()
        self.json_reader = JSONReader()
        self.xlsx_reader = XLSXReader()

    def read(
        self,
        source: bytes | str | Path,
        file_format: str | None = None,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> list[RawRecord]:
        """
        Read a file into raw records.

        Args:
            source: File content as bytes or text, or a Path to read from disk
            file_format: Declared format (csv, json, xlsx); sniffed when omitted
            file_name: Original file name, used to sniff the format
            content_type: MIME type reported by the upload, used to sniff the format

        Returns:
            Records in file order

        Raises:
            UnsupportedFormatError: If the format is unknown or unsupported
            MalformedInputError: If the content cannot be decoded
        """
        if isinstance(source, PurePath):
            file_name = file_name or source.name

        resolved = (file_format or detect_format(file_name, content_type) or "").lower()
        if resolved not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(file_format or resolved or None)

        if isinstance(source, PurePath):
            try:
                source = Path(source).read_bytes()
            except OSError as e:
                raise MalformedInputError(resolved, f"no se pudo leer el archivo ({e.strerror})")

        with log_operation("Parsing file", logger=logger, file_name=file_name, file_format=resolved):
            if resolved == "csv":
                records = self.csv_reader.read(source)
            elif resolved == "json":
                records = self.json_reader.read(source)
            else:
                if isinstance(source, str):
                    raise MalformedInputError("xlsx", "se esperaba contenido binario")
                records = self.xlsx_reader.read(source)

        metrics.records_parsed_total.labels(file_format=resolved).inc(len(records))
        logger.info(
            "Parsed file",
            extra={"file_name": file_name, "file_format": resolved, "total": len(records)},
        )
        return records


def read_records(
    source: bytes | str | Path,
    file_format: str | None = None,
    file_name: str | None = None,
    content_type: str | None = None,
) -> list[RawRecord]:
    """Parse a file into raw records with a default FileReader."""
    return FileReader().read(
        source,
        file_format=file_format,
        file_name=file_name,
        content_type=content_type,
    )

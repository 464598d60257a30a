"""
Excel (.xlsx) reader using openpyxl.
"""

import io
import zipfile
from datetime import date, datetime, time
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from bulk_import.core.errors import MalformedInputError
from bulk_import.core.models import RawRecord

from .csv_reader import normalize_cell


def cell_to_text(value: Any) -> str:
    """Render a worksheet cell the way it would appear in an exported CSV."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class XLSXReader:
    """
    Reads the first worksheet of a workbook.

    The first row is the header; columns without a header name are ignored.
    Cells go through the same normalization as CSV cells, and rows with no
    content are skipped.
    """

    def read(self, content: bytes) -> list[RawRecord]:
        try:
            workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
            raise MalformedInputError("xlsx", str(e) or e.__class__.__name__)

        try:
            rows = workbook.worksheets[0].iter_rows(values_only=True)

            header_row = next(rows, None)
            if header_row is None:
                raise MalformedInputError("xlsx", "la hoja está vacía")

            columns = [
                (index, cell_to_text(name).strip())
                for index, name in enumerate(header_row)
                if cell_to_text(name).strip()
            ]
            if not columns:
                raise MalformedInputError("xlsx", "la primera fila no contiene cabeceras")

            records: list[RawRecord] = []
            for row in rows:
                cells = [cell_to_text(cell) for cell in row]
                if not any(cell.strip() for cell in cells):
                    continue

                records.append({
                    name: normalize_cell(cells[index]) if index < len(cells) else ""
                    for index, name in columns
                })

            return records
        finally:
            workbook.close()

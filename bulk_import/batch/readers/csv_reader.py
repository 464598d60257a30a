"""
Semicolon-delimited CSV reader.
"""

import json
import re
from typing import Any

from bulk_import.core.errors import MalformedInputError
from bulk_import.core.models import FieldValue, RawRecord

# Semicolon keeps comma-containing free text (names, addresses) in one cell.
CSV_DELIMITER = ";"

_QUOTED_VALUE = re.compile(r'"(.*)"', re.DOTALL)


def normalize_cell(raw: Any) -> FieldValue:
    """
    Normalize one cell value.

    Trims whitespace, strips one layer of surrounding double quotes and
    decodes bracketed text as a JSON array. Bracketed text that is not a
    valid JSON array is kept as the original string.
    """
    value = str(raw).strip()

    match = _QUOTED_VALUE.fullmatch(value)
    if match:
        value = match.group(1)

    if value.startswith("[") and value.endswith("]"):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return value
        if isinstance(decoded, list):
            return decoded

    return value


class CSVReader:
    """
    Reads semicolon-delimited CSV content into raw records.

    The first non-blank line is the header. Each following non-blank line
    becomes one record; missing trailing cells are empty strings and cells
    beyond the header are ignored. Quoting is not delimiter-aware: a quoted
    value cannot contain the delimiter.
    """

    def __init__(self, delimiter: str = CSV_DELIMITER):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
        """
        self.delimiter = delimiter

    def read(self, content: bytes | str) -> list[RawRecord]:
        """
        Parse CSV content.

        Args:
            content: Raw bytes (UTF-8, optional BOM) or decoded text

        Returns:
            Records in file order

        Raises:
            MalformedInputError: If content is not UTF-8 or has no header row
        """
        if isinstance(content, bytes):
            try:
                text = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise MalformedInputError("csv", f"el archivo no está codificado en UTF-8 ({e.reason})")
        else:
            text = content.lstrip("\ufeff")

        lines = iter(text.split("\n"))

        header_line = next((line for line in lines if line.strip()), None)
        if header_line is None:
            raise MalformedInputError("csv", "el archivo está vacío")

        headers = [name.strip() for name in header_line.split(self.delimiter)]

        records: list[RawRecord] = []
        for line in lines:
            if not line.strip():
                continue

            values = line.split(self.delimiter)
            record: RawRecord = {}
            for index, header in enumerate(headers):
                record[header] = normalize_cell(values[index]) if index < len(values) else ""
            records.append(record)

        return records

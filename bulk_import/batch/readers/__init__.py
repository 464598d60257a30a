"""
Import file readers.
"""

from .csv_reader import CSV_DELIMITER, CSVReader, normalize_cell
from .file_reader import SUPPORTED_FORMATS, FileReader, detect_format, read_records
from .json_reader import JSONReader
from .xlsx_reader import XLSXReader

__all__ = [
    "CSV_DELIMITER",
    "CSVReader",
    "JSONReader",
    "XLSXReader",
    "FileReader",
    "SUPPORTED_FORMATS",
    "detect_format",
    "normalize_cell",
    "read_records",
]

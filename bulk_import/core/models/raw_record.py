"""
RawRecord: one parsed input row as a field-name -> value mapping.
"""

from typing import Any

# A field value is a string, or a list when the source cell held a JSON array.
FieldValue = str | list[Any]

# Field order follows the source header; missing CSV/XLSX cells are "".
RawRecord = dict[str, Any]


def is_blank(value: Any) -> bool:
    """
    Return True when a field value counts as absent.

    None, empty or whitespace-only strings, and empty lists are blank.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False

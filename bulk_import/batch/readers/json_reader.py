"""
JSON reader: an array of flat objects, one record per element.
"""

import json

from bulk_import.core.errors import MalformedInputError
from bulk_import.core.models import RawRecord


class JSONReader:
    """Reads a JSON array of objects; elements become records verbatim."""

    def read(self, content: bytes | str) -> list[RawRecord]:
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedInputError("json", str(e))

        if not isinstance(data, list):
            raise MalformedInputError("json", "se esperaba un array de objetos")

        for index, item in enumerate(data, start=1):
            if not isinstance(item, dict):
                raise MalformedInputError("json", f"el elemento {index} no es un objeto")

        return data

"""
Import template generation.

The template is a two-line CSV (header and one example row) that the CSV
reader parses back to the example values. Example values written as JSON
arrays (`'["A", "B"]'`) come back as lists, the same as in an uploaded file.
"""

from pathlib import Path

from bulk_import.batch.readers.csv_reader import CSV_DELIMITER, normalize_cell
from bulk_import.core.models import FieldSchema
from bulk_import.observability.logger import get_logger

logger = get_logger(__name__)

TEMPLATE_FILENAME = "plantilla_importacion_{entity}.csv"


def template_filename(entity: str) -> str:
    return TEMPLATE_FILENAME.format(entity=entity)


def generate_template(schema: FieldSchema, example: dict[str, str] | None = None) -> bytes:
    """
    Build the CSV template for a schema.

    Args:
        schema: Schema whose headers (required then optional) form the first line
        example: Example value per field; defaults to the schema's example

    Returns:
        UTF-8 encoded CSV content

    Raises:
        ValueError: If an example value contains the delimiter or a line break,
                    or would be altered by cell normalization (surrounding
                    whitespace or double quotes)
    """
    values = schema.example if example is None else example

    for name, value in values.items():
        if CSV_DELIMITER in value or "\n" in value or "\r" in value:
            raise ValueError(f"Example value for '{name}' cannot contain '{CSV_DELIMITER}' or line breaks")

        parsed = normalize_cell(value)
        if not isinstance(parsed, list) and parsed != value:
            raise ValueError(
                f"Example value for '{name}' would be read back as {parsed!r}; "
                "remove surrounding whitespace or quotes"
            )

    headers = schema.headers
    lines = [
        CSV_DELIMITER.join(headers),
        CSV_DELIMITER.join(values.get(name, "") for name in headers),
    ]
    return "\n".join(lines).encode("utf-8")


class TemplateWriter:
    """Writes the import template for a schema to disk."""

    def __init__(self, schema: FieldSchema):
        self.schema = schema

    @property
    def filename(self) -> str:
        return template_filename(self.schema.entity)

    def write(self, directory: str | Path, example: dict[str, str] | None = None) -> Path:
        """
        Write the template into a directory.

        Returns:
            Path of the written file
        """
        path = Path(directory) / self.filename
        path.write_bytes(generate_template(self.schema, example))
        logger.info("Template written", extra={"entity": self.schema.entity, "path": str(path)})
        return path

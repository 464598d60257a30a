"""
Import pipeline: readers, validation, bulk create loop and templates.
"""

from .importer import BulkImporter, import_records
from .pipeline import ImportPipeline
from .readers import FileReader, read_records
from .writers import TemplateWriter, generate_template, template_filename

__all__ = [
    "BulkImporter",
    "ImportPipeline",
    "FileReader",
    "TemplateWriter",
    "generate_template",
    "import_records",
    "read_records",
    "template_filename",
]

"""
Output writers.
"""

from .template_writer import TemplateWriter, generate_template, template_filename

__all__ = [
    "TemplateWriter",
    "generate_template",
    "template_filename",
]

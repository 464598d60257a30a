"""
Bulk record import pipeline.

Parses CSV/JSON/XLSX files into raw records, validates them against a
field- and role-dependent rule set, and creates the eligible records one
at a time through an external create operation.
"""

__version__ = "0.1.0"

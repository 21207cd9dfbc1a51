"""Import-file parsing and record conversion."""

from bookmark_sync.importer.converter import ConversionReport, convert, convert_with_report
from bookmark_sync.importer.loader import load_import_file, parse_import_payload
from bookmark_sync.importer.models import RawRecord

__all__ = [
    "ConversionReport",
    "RawRecord",
    "convert",
    "convert_with_report",
    "load_import_file",
    "parse_import_payload",
]

"""Read a Pinboard JSON export into ``RawRecord`` objects."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from bookmark_sync.domain.exceptions import ImportFileError
from bookmark_sync.importer.models import RawRecord

logger = logging.getLogger(__name__)


def parse_import_payload(data: bytes | str) -> list[RawRecord]:
    """Parse an in-memory export payload.

    Raises:
        ImportFileError: If the payload is not valid JSON, not a top-level array,
            or contains an element that is not a record object.
    """
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        msg = f"Import payload is not valid JSON: {exc}"
        raise ImportFileError(msg) from exc

    if not isinstance(payload, list):
        msg = f"Import payload must be a JSON array, got {type(payload).__name__}"
        raise ImportFileError(msg)

    records: list[RawRecord] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            msg = f"Import record #{index} is not an object"
            raise ImportFileError(msg, {"index": index})
        try:
            records.append(RawRecord.model_validate(item))
        except ValidationError as exc:
            msg = f"Import record #{index} is malformed: {exc.error_count()} invalid field(s)"
            raise ImportFileError(msg, {"index": index, "errors": exc.errors()}) from exc
    return records


def load_import_file(path: str | Path) -> list[RawRecord]:
    """Read the export file once and parse it.

    Raises:
        ImportFileError: If the file cannot be read or parsed.
    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read import file {file_path}: {exc}"
        raise ImportFileError(msg, {"path": str(file_path)}) from exc

    records = parse_import_payload(data)
    logger.info("import_file_loaded", extra={"path": str(file_path), "records": len(records)})
    return records

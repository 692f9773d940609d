"""
Export Helpers
==============

Dump lists of documents (measurements, sensors...) to CSV or JSON.

CSV columns come from the first row's keys. Nested values (a location,
metadata) are written as JSON text in their cell.
"""

import csv
import io
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Union


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def to_csv(rows: list[dict]) -> str:
    """
    Render rows as CSV text with a header line.

    Raises:
        ValueError: If there are no rows (no header can be built)
    """
    if not rows:
        raise ValueError("No data to export")

    fieldnames = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: _cell(row.get(key)) for key in fieldnames})
    return buffer.getvalue()


def to_json(data: Any) -> str:
    """Pretty-printed JSON; datetimes are written as ISO strings."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=_json_default)


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def export_to_csv(rows: list[dict], path: Union[str, Path]) -> Path:
    path = Path(path)
    path.write_text(to_csv(rows), encoding="utf-8")
    return path


def export_to_json(data: Any, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.write_text(to_json(data), encoding="utf-8")
    return path

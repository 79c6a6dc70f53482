from __future__ import annotations

import csv
import io
import json
from typing import Any, Dict, List, Sequence

from fastapi.encoders import jsonable_encoder

EXPORT_FORMATS = {
    "json": "application/json",
    "csv": "text/csv",
}


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(jsonable_encoder(value))
    return value


def render_json(rows: Sequence[Dict[str, Any]]) -> str:
    return json.dumps(jsonable_encoder(list(rows)))


def render_csv(rows: Sequence[Dict[str, Any]]) -> str:
    """CSV with the first row's columns; later rows are projected onto them."""
    if not rows:
        return ""
    header: List[str] = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(row.get(column)) for column in header])
    return buffer.getvalue()


def render_export(rows: Sequence[Dict[str, Any]], export_format: str) -> str:
    if export_format == "csv":
        return render_csv(rows)
    return render_json(rows)

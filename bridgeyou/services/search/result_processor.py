"""
Result post-processor - turns database rows into plain, transport-ready dicts.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping
from uuid import UUID

from bridgeyou.models import CorrectionStatus

# Columns built with json_build_object / json_agg arrive as JSON text
JSON_COLUMNS = ("bank", "corrections")


def serialize(value: Any) -> Any:
    """Convert a database value into a JSON-compatible one."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return value


def is_corrected(corrections: Iterable[Mapping[str, Any]]) -> bool:
    """A post is corrected once any of its corrections is approved."""
    return any(
        c.get("status") == CorrectionStatus.APPROVED.value
        for c in corrections or []
        if isinstance(c, Mapping)
    )


def process_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    post = dict(row)
    for column in JSON_COLUMNS:
        if isinstance(post.get(column), str):
            post[column] = json.loads(post[column])

    if post.get("corrections") is None:
        post["corrections"] = []
    post["corrected"] = is_corrected(post["corrections"])
    return serialize(post)


def process_rows(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Attach the derived `corrected` flag and serialize every row.

    Args:
        rows: asyncpg records (or mappings) from the posts query

    Returns:
        List of plain dicts
    """
    return [process_row(row) for row in rows]

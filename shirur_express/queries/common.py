# shirur_express/queries/common.py
import json
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import asyncpg


def to_dict(record: Optional[asyncpg.Record], json_fields: Iterable[str] = ()) -> Optional[Dict[str, Any]]:
    """Plain dict from a record: UUIDs as strings, JSONB columns decoded"""
    if record is None:
        return None
    row = dict(record)
    for key, value in row.items():
        if isinstance(value, UUID):
            row[key] = str(value)
    for field in json_fields:
        if isinstance(row.get(field), str):
            row[field] = json.loads(row[field])
    return row


def to_dicts(records: List[asyncpg.Record], json_fields: Iterable[str] = ()) -> List[Dict[str, Any]]:
    return [to_dict(r, json_fields) for r in records]


def to_json(value: Any) -> str:
    return json.dumps(value, default=str)

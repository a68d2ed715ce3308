from datetime import datetime
from typing import Any, Dict, Iterable, List

from sqlalchemy import inspect


def normalize_content(item) -> Dict[str, Any]:
    """
    Serialize a promotional content row into API-safe JSON.

    Column names are used as keys, so ``metadata_`` is exposed as
    ``metadata``; datetimes are ISO-8601 strings.
    """
    if item is None:
        raise ValueError("Content item cannot be None")

    data: Dict[str, Any] = {}
    for attr in inspect(item).mapper.column_attrs:
        value = getattr(item, attr.key)
        if isinstance(value, datetime):
            value = value.isoformat()
        data[attr.columns[0].name] = value

    return data


def normalize_many(items: Iterable) -> List[Dict[str, Any]]:
    return [normalize_content(item) for item in items]

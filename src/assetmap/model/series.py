# series.py
from typing import Any, Dict, Iterable, List, Mapping, Optional


def value_by_id(series: Iterable[Mapping[str, Any]], series_id: str) -> Optional[List[Any]]:
    for s in series:
        if s.get("id") == series_id:
            return s.get("values")
    return None


def values_by_id(series: Iterable[Mapping[str, Any]], ids: Optional[Iterable[str]]) -> Dict[str, Any]:
    """Pick several series by id. Ids with no matching series map to None."""
    series = list(series)
    if not ids:
        return {}
    return {sid: value_by_id(series, sid) for sid in ids}


def to_records(columns: Mapping[str, Optional[List[Any]]]) -> List[Dict[str, Any]]:
    """
    Turn a mapping of columns into a list of row dicts.

        {"name": ["a", "b"], "age": [25]}  ->  [{"name": "a", "age": 25}, {"name": "b", "age": None}]

    The longest column sets the row count; shorter or missing columns pad with None.
    """
    keys = list(columns.keys())
    if not keys:
        return []
    length = max(len(columns[k] or []) for k in keys)
    records = []
    for i in range(length):
        row = {}
        for k in keys:
            col = columns[k] or []
            row[k] = col[i] if i < len(col) else None
        records.append(row)
    return records

from __future__ import annotations
import json
import math
import pathlib
from typing import Any, Iterable, List, Mapping

from jsonschema import validate
from loguru import logger

from .models import GeoPoint
from .series import to_records, values_by_id

# series ids used by the metrics API
SERIES_IDS = ("ids", "latitudes", "longitudes", "names", "statuses")


class PointLoader:
    """Reads asset point documents (record or series form) into GeoPoints."""

    def __init__(self, validate_schema: bool = True, schema_dir: str | pathlib.Path | None = None):
        self.validate_schema = validate_schema
        # default: the schemas directory shipped with the package
        if schema_dir is None:
            self.schema_dir = pathlib.Path(__file__).parent.parent / "schemas"
        else:
            self.schema_dir = pathlib.Path(schema_dir)

    def _load_json(self, path: str | pathlib.Path) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _validate(self, instance: Any, schema_name: str) -> None:
        if self.validate_schema:
            schema = self._load_json(self.schema_dir / schema_name)
            validate(instance=instance, schema=schema)

    # --- public API ----------------------------------------------------

    def load(self, path: str | pathlib.Path) -> List[GeoPoint]:
        """points.json -> GeoPoint list. Accepts {"points": [...]} or a series list."""
        data = self._load_json(path)
        if isinstance(data, list):
            return self.from_series(data)
        return self.from_document(data)

    def from_document(self, data: Mapping[str, Any]) -> List[GeoPoint]:
        self._validate(data, "points.schema.json")
        return self.from_records(data["points"])

    def from_series(self, series: Iterable[Mapping[str, Any]]) -> List[GeoPoint]:
        """[{"id": "latitudes", "values": [...]}, ...] -> GeoPoint list"""
        series = list(series)
        self._validate(series, "series.schema.json")
        columns = values_by_id(series, SERIES_IDS)
        rows = to_records(columns)
        return [
            self._make_point(
                i,
                point_id=row["ids"],
                lat=row["latitudes"],
                lon=row["longitudes"],
                status=row["statuses"],
                name=row["names"],
            )
            for i, row in enumerate(rows)
        ]

    def from_records(self, records: Iterable[Mapping[str, Any]]) -> List[GeoPoint]:
        return [
            self._make_point(
                i,
                point_id=r.get("id"),
                lat=r.get("latitude"),
                lon=r.get("longitude"),
                status=r.get("status"),
                name=r.get("name"),
            )
            for i, r in enumerate(records)
        ]

    # --- helpers ---------------------------------------------------------

    def _make_point(self, index: int, *, point_id, lat, lon, status, name) -> GeoPoint:
        pid = str(point_id) if point_id is not None else str(index)
        return GeoPoint(
            id=pid,
            latitude=_coord(lat, pid, "latitude"),
            longitude=_coord(lon, pid, "longitude"),
            status=status,
            display_name=name if name is not None else pid,
        )


def _coord(value: Any, point_id: str, name: str) -> float:
    # bad coordinates degrade to NaN; the point then renders on its own
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"point {point_id}: {name}={value!r} is not a number, using NaN")
        return math.nan

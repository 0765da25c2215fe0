from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Tuple, Union


# --- status ----------------------------------------------------------

class StatusTag(str, Enum):
    """Health status of a tracked asset.

    Upstream data spells statuses freely ("predicted failure",
    "Down_For_Repairs", ...). Lookup normalises the spelling; anything
    unrecognised becomes UNKNOWN instead of raising.
    """
    HEALTHY = "healthy"
    PREDICTED_FAILURE = "predicted-failure"
    DOWN_FOR_REPAIRS = "down-for-repairs"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "StatusTag":
        if isinstance(value, str):
            key = "-".join(value.strip().lower().replace("_", " ").split())
            for member in cls:
                if member.value == key:
                    return member
        return cls.UNKNOWN

    @classmethod
    def parse(cls, value: Any) -> "StatusTag":
        if isinstance(value, cls):
            return value
        return cls(value)


# --- input -----------------------------------------------------------

@dataclass(frozen=True)
class GeoPoint:
    id: str
    latitude: float
    longitude: float
    status: StatusTag = StatusTag.UNKNOWN
    display_name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))
        object.__setattr__(self, "status", StatusTag.parse(self.status))


@dataclass(frozen=True)
class Viewport:
    """Camera state. Replaced wholesale on every pan/zoom."""
    longitude: float = -122.4194
    latitude: float = 37.7749
    zoom: float = 13.0
    pitch: float = 0.0
    bearing: float = 0.0
    width: int = 800
    height: int = 600

    def replace(self, **changes) -> "Viewport":
        return replace(self, **changes)


@dataclass(frozen=True)
class ProjectedPoint:
    point: GeoPoint
    screen_x: float
    screen_y: float
    source_index: int


# --- output ----------------------------------------------------------

@dataclass(frozen=True)
class Centroid:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SingleEntity:
    point: GeoPoint
    source_index: int
    is_cluster: bool = field(default=False, init=False)

    @property
    def id(self) -> str:
        return str(self.point.id)

    @property
    def member_count(self) -> int:
        return 1

    @property
    def members(self) -> Tuple[GeoPoint, ...]:
        return (self.point,)

    @property
    def source_indices(self) -> Tuple[int, ...]:
        return (self.source_index,)


@dataclass(frozen=True)
class ClusterEntity:
    id: str
    centroid: Centroid
    status_counts: Mapping[StatusTag, int] = field(hash=False)
    dominant_status: StatusTag
    member_count: int
    members: Tuple[GeoPoint, ...] = ()
    source_indices: Tuple[int, ...] = ()
    is_cluster: bool = field(default=True, init=False)

    def __post_init__(self):
        # read-only view, in first-seen order
        object.__setattr__(self, "status_counts", MappingProxyType(dict(self.status_counts)))


RenderEntity = Union[SingleEntity, ClusterEntity]


def entity_position(entity: RenderEntity) -> Tuple[float, float]:
    """(lon, lat) the entity is drawn at."""
    if entity.is_cluster:
        return entity.centroid.longitude, entity.centroid.latitude
    return entity.point.longitude, entity.point.latitude


def entity_status(entity: RenderEntity) -> StatusTag:
    return entity.dominant_status if entity.is_cluster else entity.point.status


__all__ = [
    "StatusTag",
    "GeoPoint",
    "Viewport",
    "ProjectedPoint",
    "Centroid",
    "SingleEntity",
    "ClusterEntity",
    "RenderEntity",
    "entity_position",
    "entity_status",
]

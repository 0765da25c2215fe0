# projection.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence, Tuple
import math
import numpy as np

from assetmap.model.models import GeoPoint, Viewport

TILE_SIZE = 512                 # world size in px at zoom 0
EARTH_RADIUS = 6378137.0        # EPSG:3857 sphere (m)
DEFAULT_ALTITUDE = 1.5          # camera height in screen heights
NEAR, FAR = 0.1, 1000.0


class Projector(Protocol):
    def project(self, lon: float, lat: float, viewport: Viewport) -> Tuple[float, float]: ...


@dataclass(frozen=True)
class WebMercatorProjection:
    """EPSG:4326 <-> EPSG:3857"""
    def __post_init__(self):
        from pyproj import Transformer
        object.__setattr__(self, "_to_merc",
            Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True))
    def lonlat_to_xy(self, lon, lat):
        return self._to_merc.transform(lon, lat)
    def xy_to_lonlat(self, x, y):
        return self._to_geo.transform(x, y)

    # world units: 0..TILE_SIZE across the globe, y pointing north
    def lonlat_to_world(self, lon, lat):
        mx, my = self.lonlat_to_xy(_plain(lon), _plain(lat))
        k = TILE_SIZE / (2 * math.pi)
        return (np.asarray(mx) / EARTH_RADIUS + math.pi) * k, (np.asarray(my) / EARTH_RADIUS + math.pi) * k

    def world_to_lonlat(self, wx, wy):
        k = 2 * math.pi / TILE_SIZE
        mx = (np.asarray(wx, dtype=float) * k - math.pi) * EARTH_RADIUS
        my = (np.asarray(wy, dtype=float) * k - math.pi) * EARTH_RADIUS
        return self.xy_to_lonlat(_plain(mx), _plain(my))


def _plain(a):
    # pyproj takes floats or 1-d arrays
    a = np.asarray(a, dtype=float)
    return float(a) if a.ndim == 0 else a


# --- camera matrices (column vectors, OpenGL conventions) -----------------

def _translate(x, y, z):
    m = np.eye(4); m[:3, 3] = (x, y, z)
    return m

def _scale(x, y, z):
    return np.diag([x, y, z, 1.0])

def _rotate_x(rad):
    c, s = math.cos(rad), math.sin(rad)
    return np.array([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]], dtype=float)

def _rotate_z(rad):
    c, s = math.cos(rad), math.sin(rad)
    return np.array([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]], dtype=float)

def _perspective(fovy, aspect, near, far):
    f = 1.0 / math.tan(fovy / 2)
    return np.array([
        [f / aspect, 0, 0, 0],
        [0, f, 0, 0],
        [0, 0, (far + near) / (near - far), 2 * far * near / (near - far)],
        [0, 0, -1, 0],
    ], dtype=float)


@dataclass(frozen=True)
class ViewportProjector:
    """
    Web Mercator perspective camera, as used by the browser map libraries.

    At pitch 0 and bearing 0 this reduces to
        x = width/2  + (wx - cx) * 2**zoom
        y = height/2 - (wy - cy) * 2**zoom
    with (wx, wy) in 512 px world units.
    """
    altitude: float = DEFAULT_ALTITUDE

    def __post_init__(self):
        object.__setattr__(self, "proj", WebMercatorProjection())

    def pixel_matrix(self, vp: Viewport) -> np.ndarray:
        cx, cy = self.proj.lonlat_to_world(vp.longitude, vp.latitude)
        scale = 2.0 ** vp.zoom
        view = (
            _translate(0, 0, -self.altitude)
            @ _rotate_x(-math.radians(vp.pitch))
            @ _rotate_z(math.radians(vp.bearing))
            @ _scale(scale / vp.height, scale / vp.height, scale / vp.height)
            @ _translate(-float(cx), -float(cy), 0)
        )
        fovy = 2 * math.atan(0.5 / self.altitude)
        proj = _perspective(fovy, vp.width / vp.height, NEAR, FAR)
        screen = _scale(vp.width / 2, -vp.height / 2, 1) @ _translate(1, -1, 0)
        return screen @ proj @ view

    def project(self, lon: float, lat: float, viewport: Viewport) -> Tuple[float, float]:
        x, y = self.project_many([lon], [lat], viewport)[0]
        return float(x), float(y)

    def project_many(self, lons: Sequence[float], lats: Sequence[float], viewport: Viewport) -> np.ndarray:
        """(N,) lon/lat -> (N, 2) screen pixels, y down."""
        lons = np.asarray(lons, dtype=float).ravel()
        lats = np.asarray(lats, dtype=float).ravel()
        if lons.size == 0:
            return np.empty((0, 2))
        if viewport.width <= 0 or viewport.height <= 0:
            # hidden or not yet laid out: nothing has a screen position
            return np.full((lons.size, 2), np.nan)
        wx, wy = self.proj.lonlat_to_world(lons, lats)
        world = np.stack([wx, wy, np.zeros_like(wx), np.ones_like(wx)])
        with np.errstate(invalid="ignore", divide="ignore"):
            clip = self.pixel_matrix(viewport) @ world
            return (clip[:2] / clip[3]).T

    def unproject(self, x: float, y: float, viewport: Viewport) -> Tuple[float, float]:
        """Screen pixel -> (lon, lat) on the ground plane."""
        inv = np.linalg.inv(self.pixel_matrix(viewport))
        p0 = inv @ np.array([x, y, 0.0, 1.0]); p0 = p0[:3] / p0[3]
        p1 = inv @ np.array([x, y, 1.0, 1.0]); p1 = p1[:3] / p1[3]
        t = 0.0 if p0[2] == p1[2] else -p0[2] / (p1[2] - p0[2])
        wx, wy = p0[:2] + t * (p1[:2] - p0[:2])
        lon, lat = self.proj.world_to_lonlat(wx, wy)
        return float(lon), float(lat)

    def mercator_bounds(self, viewport: Viewport) -> Tuple[float, float, float, float]:
        """EPSG:3857 (xmin, ymin, xmax, ymax) visible in a flat viewport."""
        corners = [self.unproject(x, y, viewport) for x, y in
                   ((0, 0), (viewport.width, 0), (0, viewport.height), (viewport.width, viewport.height))]
        mx, my = self.proj.lonlat_to_xy([c[0] for c in corners], [c[1] for c in corners])
        return float(np.min(mx)), float(np.min(my)), float(np.max(mx)), float(np.max(my))


def fit_viewport(points: Iterable[GeoPoint], width: int, height: int,
                 padding: int = 40, max_zoom: float = 20.0) -> Viewport:
    """Flat camera that frames every finite point."""
    pts = [p for p in points if math.isfinite(p.latitude) and math.isfinite(p.longitude)]
    if not pts:
        raise ValueError("no points with finite coordinates to fit")
    proj = WebMercatorProjection()
    wx, wy = proj.lonlat_to_world([p.longitude for p in pts], [p.latitude for p in pts])
    dx, dy = float(np.ptp(wx)), float(np.ptp(wy))
    avail_w = max(1, width - 2 * padding)
    avail_h = max(1, height - 2 * padding)
    scales = [s for s in (avail_w / dx if dx > 0 else None, avail_h / dy if dy > 0 else None) if s]
    zoom = min(math.log2(min(scales)), max_zoom) if scales else max_zoom
    lon, lat = proj.world_to_lonlat((np.min(wx) + np.max(wx)) / 2, (np.min(wy) + np.max(wy)) / 2)
    return Viewport(longitude=float(lon), latitude=float(lat), zoom=zoom,
                    pitch=0.0, bearing=0.0, width=width, height=height)

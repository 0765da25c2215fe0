# overlay.py
"""Basemap tiles drawn under the asset layer."""
from dataclasses import dataclass
import math
import numpy as np
import contextily as ctx

WORLD_M = 2 * math.pi * 6378137.0  # EPSG:3857 equator length
TILE_PX = 256


@dataclass(frozen=True)
class TileOverlay:
    """
    Basemap image for a Web Mercator box, fetched through contextily.

    tiles:  dotted contextily provider name ("CartoDB.Positron") or an XYZ url
    zoom:   fixed tile zoom; None follows the map zoom
    max_px: widest image ever requested
    """
    tiles: str = "OpenStreetMap.Mapnik"
    zoom: int | None = None
    max_px: int = 8192

    def provider(self):
        if self.tiles.startswith(("http://", "https://")):
            return self.tiles
        source = ctx.providers
        for name in filter(None, self.tiles.split(".")):
            source = getattr(source, name)
        return source

    def tile_zoom(self, view_zoom: float, provider) -> int:
        # map zoom counts 512px tiles, tile servers count 256px ones
        lo = getattr(provider, "min_zoom", 0)
        hi = getattr(provider, "max_zoom", 22)
        return int(np.clip(round(view_zoom + 1), lo, hi))

    def limit_zoom(self, width_m: float, zoom: int) -> int:
        """Highest tile zoom <= `zoom` at which `width_m` metres fit in max_px."""
        if not width_m > 0:
            return zoom
        fit = math.floor(math.log2(self.max_px * WORLD_M / (TILE_PX * width_m)))
        return max(0, min(zoom, fit))

    def fetch(self, xmin, ymin, xmax, ymax, view_zoom: float | None = None):
        """Tiles covering the EPSG:3857 box -> (image, extent, zoom used)."""
        source = self.provider()
        z = self.zoom
        if z is None and view_zoom is not None:
            z = self.tile_zoom(view_zoom, source)
        z = "auto" if z is None else self.limit_zoom(xmax - xmin, z)
        img, extent = ctx.bounds2img(xmin, ymin, xmax, ymax, source=source, zoom=z, ll=False)
        return img, extent, z

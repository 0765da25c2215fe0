# renderer.py
import math
from typing import Dict, List, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib import patches
from loguru import logger

from assetmap.model.models import RenderEntity, StatusTag, Viewport, entity_position, entity_status
from .labels import format_large_number
from .overlay import TileOverlay
from .projection import ViewportProjector

RGB = Tuple[int, int, int]

STATUS_COLORS: Dict[StatusTag, RGB] = {
    StatusTag.HEALTHY: (0, 192, 0),
    StatusTag.PREDICTED_FAILURE: (255, 255, 128),
    StatusTag.DOWN_FOR_REPAIRS: (235, 52, 52),
    StatusTag.UNKNOWN: (40, 171, 160),
}


def status_color(status: StatusTag) -> Tuple[float, float, float]:
    r, g, b = STATUS_COLORS.get(status, STATUS_COLORS[StatusTag.UNKNOWN])
    return r / 255, g / 255, b / 255


def cluster_radius_px(count: int) -> float:
    return 12.0 + 4.0 * math.log2(max(count, 1))


class PlotRenderer:
    """
    Draws render entities in screen-pixel space. The figure is sized from
    the viewport so one data unit is one screen pixel.
    """

    def __init__(self, projector: ViewportProjector, overlay: TileOverlay | None = None, dpi: int = 100):
        self.p = projector
        self.ov = overlay
        self.dpi = dpi

    def __call__(self, entities: List[RenderEntity], viewport: Viewport):
        return self.draw(entities, viewport)

    def draw(self, entities: List[RenderEntity], viewport: Viewport):
        w, h = viewport.width, viewport.height
        fig = plt.figure(figsize=(w / self.dpi, h / self.dpi), dpi=self.dpi)
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_axis_off()

        # basemap
        if self.ov:
            if viewport.pitch or viewport.bearing:
                logger.warning("tile overlay needs a flat, north-up view; skipped")
            else:
                self._draw_basemap(ax, viewport)

        if not entities:
            return self._frame(fig, ax, w, h)

        lonlat = np.array([entity_position(e) for e in entities], dtype=float)
        xy = self.p.project_many(lonlat[:, 0], lonlat[:, 1], viewport)

        # singles
        singles = [(x, y, e) for (x, y), e in zip(xy, entities) if not e.is_cluster]
        if singles:
            ax.scatter(
                [s[0] for s in singles], [s[1] for s in singles],
                s=60, c=[status_color(entity_status(s[2])) for s in singles],
                edgecolors="black", linewidths=0.5, zorder=5,
            )

        # clusters: donut of the status breakdown + member count
        for (x, y), e in zip(xy, entities):
            if not e.is_cluster or not (math.isfinite(x) and math.isfinite(y)):
                continue
            r = cluster_radius_px(e.member_count)
            start = 90.0
            for status, n in e.status_counts.items():
                sweep = 360.0 * n / e.member_count
                ax.add_patch(patches.Wedge(
                    (x, y), r, start, start + sweep, width=r * 0.4,
                    facecolor=status_color(status), edgecolor="white", linewidth=0.5, zorder=6,
                ))
                start += sweep
            ax.add_patch(patches.Circle((x, y), r * 0.6, facecolor="white", alpha=0.85, zorder=6))
            ax.annotate(format_large_number(e.member_count), (x, y),
                        ha="center", va="center", fontsize=9, fontweight="bold", zorder=7)
        return self._frame(fig, ax, w, h)

    @staticmethod
    def _frame(fig, ax, w, h):
        # y grows downwards, like the screen
        ax.set_xlim(0, w)
        ax.set_ylim(h, 0)
        return fig

    def _draw_basemap(self, ax, viewport: Viewport):
        xmin, ymin, xmax, ymax = self.p.mercator_bounds(viewport)
        img, (ex0, ex1, ey0, ey1), z = self.ov.fetch(xmin, ymin, xmax, ymax, viewport.zoom)
        (lon0, lon1), (lat0, lat1) = self.p.proj.xy_to_lonlat([ex0, ex1], [ey0, ey1])
        corners = self.p.project_many([lon0, lon1], [lat0, lat1], viewport)
        (left, bottom), (right, top) = corners
        logger.debug(f"basemap z={z} extent px=({left:.1f},{right:.1f},{bottom:.1f},{top:.1f})")
        ax.imshow(img, extent=(left, right, bottom, top), origin="upper",
                  interpolation="bilinear", zorder=0)

# view.py
from typing import Any, Callable, List, Optional, Sequence, Tuple
import math

from assetmap.clustering.engine import DEFAULT_RADIUS_PX, cluster
from assetmap.model.models import GeoPoint, RenderEntity, Viewport, entity_position
from .projection import ViewportProjector
from .renderer import cluster_radius_px

RenderCallback = Callable[[List[RenderEntity], Viewport], Any]


class ClusterView:
    """
    Host-side glue between camera/data events and the clustering engine.

    The view only remembers what the host told it (points, viewport) and the
    last result. Every change triggers a fresh cluster() call whose result
    replaces the previous list and is handed to the render callback.
    """

    def __init__(
        self,
        viewport: Viewport,
        points: Sequence[GeoPoint] = (),
        *,
        radius_px: float = DEFAULT_RADIUS_PX,
        on_render: Optional[RenderCallback] = None,
        projector: Optional[ViewportProjector] = None,
    ):
        self.viewport = viewport
        self.points: Tuple[GeoPoint, ...] = tuple(points)
        self.radius_px = radius_px
        self.on_render = on_render
        self.projector = projector or ViewportProjector()
        self.entities: List[RenderEntity] = []
        self.refresh()

    # --- triggers ------------------------------------------------------

    def set_points(self, points: Sequence[GeoPoint]) -> List[RenderEntity]:
        """Data refresh."""
        self.points = tuple(points)
        return self.refresh()

    def set_viewport(self, viewport: Viewport) -> List[RenderEntity]:
        """View-state change (pan/zoom/rotate)."""
        self.viewport = viewport
        return self.refresh()

    def update_view_state(self, **changes) -> List[RenderEntity]:
        return self.set_viewport(self.viewport.replace(**changes))

    def resize(self, width: int, height: int) -> List[RenderEntity]:
        """The map container was resized; its own pixel size is authoritative."""
        return self.update_view_state(width=width, height=height)

    def refresh(self) -> List[RenderEntity]:
        self.entities = cluster(self.points, self.viewport, self.radius_px, self.projector)
        if self.on_render is not None:
            self.on_render(self.entities, self.viewport)
        return self.entities

    # --- picking -------------------------------------------------------

    def pick(self, x: float, y: float, tolerance_px: float = 8.0) -> Optional[RenderEntity]:
        """Entity drawn nearest to screen position (x, y), if any is close enough."""
        best, best_d = None, math.inf
        for e in self.entities:
            lon, lat = entity_position(e)
            ex, ey = self.projector.project(lon, lat, self.viewport)
            reach = tolerance_px + (cluster_radius_px(e.member_count) if e.is_cluster else 0.0)
            d = math.hypot(ex - x, ey - y)
            if d <= reach and d < best_d:
                best, best_d = e, d
        return best

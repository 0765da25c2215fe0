# config.py
from dataclasses import dataclass
from pathlib import Path
import json

from assetmap.model.models import Viewport


@dataclass
class VizConfig:
    points: str | None = None
    # initial view state
    longitude: float = -122.4194
    latitude: float = 37.7749
    zoom: float = 13.0
    pitch: float = 0.0
    bearing: float = 0.0
    width: int = 800
    height: int = 600
    fit: bool = False
    # clustering
    radius_px: float = 50.0
    # output
    overlay_map: bool = False
    tiles: str = "OpenStreetMap.Mapnik"
    tile_zoom: int | None = None
    show: bool = False
    output: str | None = None
    print_entities: bool = False
    log_level: str = "INFO"

    def viewport(self) -> Viewport:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"viewport size must be positive, got {self.width}x{self.height}")
        return Viewport(
            longitude=float(self.longitude), latitude=float(self.latitude),
            zoom=float(self.zoom), pitch=float(self.pitch), bearing=float(self.bearing),
            width=int(self.width), height=int(self.height),
        )

def load_json(path: str | None) -> dict:
    if not path: return {}
    p = Path(path)
    if not p.exists(): raise FileNotFoundError(path)
    with p.open("r", encoding="utf-8") as f: return json.load(f)

# cli.py
import argparse
import sys

from jsonschema import ValidationError
from loguru import logger

from assetmap.model.loader import PointLoader
from assetmap.model.models import entity_position, entity_status
from .config import VizConfig, load_json
from .overlay import TileOverlay
from .projection import ViewportProjector, fit_viewport
from .renderer import PlotRenderer
from .view import ClusterView

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Cluster asset points for a map viewport")
    p.add_argument("--config", help="JSON config; flags below override it")
    p.add_argument("--points", help="points JSON (record or series form)")
    p.add_argument("--longitude", type=float)
    p.add_argument("--latitude", type=float)
    p.add_argument("--zoom", type=float)
    p.add_argument("--pitch", type=float)
    p.add_argument("--bearing", type=float)
    p.add_argument("--width", type=int)
    p.add_argument("--height", type=int)
    p.add_argument("--radius-px", dest="radius_px", type=float)
    p.add_argument("--fit", action="store_true", default=None, help="frame all points")
    p.add_argument("--overlay-map", dest="overlay_map", action="store_true", default=None)
    p.add_argument("--tiles")
    p.add_argument("--show", action="store_true", default=None)
    p.add_argument("--output", help="save the rendered map to this image file")
    p.add_argument("--print-entities", dest="print_entities", action="store_true", default=None)
    p.add_argument("--log-level", dest="log_level")
    return p.parse_args(argv)


def build_config(args) -> VizConfig:
    cfg_dict = load_json(args.config)
    # JSON gives the defaults, flags override
    for k, v in vars(args).items():
        if k == "config": continue
        if v is not None: cfg_dict[k] = v
    return VizConfig(**cfg_dict)


def print_entities(entities):
    print("# kind,id,lat,lon,count,status")
    for e in entities:
        lon, lat = entity_position(e)
        kind = "cluster" if e.is_cluster else "single"
        print(f"{kind},{e.id},{lat:.6f},{lon:.6f},{e.member_count},{entity_status(e).value}")


def run(cfg: VizConfig) -> int:
    points = PointLoader(validate_schema=True).load(cfg.points) if cfg.points else []
    if not points:
        logger.warning("no points loaded")

    viewport = cfg.viewport()
    if cfg.fit and points:
        try:
            viewport = fit_viewport(points, viewport.width, viewport.height)
        except ValueError as e:
            logger.warning(f"fit skipped: {e}")
    logger.info(
        f"viewport lon={viewport.longitude:.5f} lat={viewport.latitude:.5f} "
        f"zoom={viewport.zoom:.2f} size={viewport.width}x{viewport.height}"
    )

    projector = ViewportProjector()
    view = ClusterView(viewport, points, radius_px=cfg.radius_px, projector=projector)
    entities = view.entities
    n_clusters = sum(1 for e in entities if e.is_cluster)
    logger.success(f"{len(points)} points -> {len(entities)} entities ({n_clusters} clusters)")

    if cfg.print_entities:
        print_entities(entities)

    if cfg.show or cfg.output:
        import matplotlib.pyplot as plt
        overlay = TileOverlay(cfg.tiles, cfg.tile_zoom) if cfg.overlay_map else None
        fig = PlotRenderer(projector, overlay).draw(entities, viewport)
        if cfg.output:
            fig.savefig(cfg.output)
            logger.info(f"saved {cfg.output}")
        if cfg.show:
            plt.show()
        plt.close(fig)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        cfg = build_config(args)
        level = logger.level(cfg.log_level.upper()).name
    except (FileNotFoundError, TypeError, ValueError) as e:
        logger.error(f"bad configuration: {e}")
        return 1

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    try:
        return run(cfg)
    except FileNotFoundError as e:
        logger.error(f"file not found: {e}")
    except ValidationError as e:
        logger.error(f"invalid points file: {e.message}")
    except ValueError as e:
        logger.error(str(e))
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Map-side collaborators of the clustering engine.

- projection: lon/lat -> screen pixels for a viewport
- view: re-clusters on camera/data changes and calls the render callback
- renderer / overlay: matplotlib drawing with an optional contextily basemap
- cli: `assetmap-viz`
"""

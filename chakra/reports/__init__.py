from .overlay_builder import OverlayArtifacts, build_overlay_geojson, write_overlay

from geoshift.split.splitter import PolygonSplitter, split_polygon_by_line

__all__ = ["PolygonSplitter", "split_polygon_by_line"]

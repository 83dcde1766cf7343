"""
# Split Example

An example of moving a parcel between the public and offset coordinate systems and splitting it with a line
"""


def main():
    from pathlib import Path

    """
    First, we load a few parcels.
    The test suite ships a small GeoJSON file we can use for demonstration.
    
    geoshift never guesses what kind of input it has been handed, so we wrap the path in a `FileSource`:
    """

    from geoshift.constructs.geometry_source import FileSource, load_features

    parcels_file = Path(__file__).parents[2] / "tests/test_assets/parcels.geojson"
    parcels = load_features(FileSource(parcels_file))
    parcels.head()

    """
    Notice that the coordinates are WGS84 longitude and latitude (EPSG:4326).
    If your data comes from a map provider that draws in GCJ-02 or BD-09, pass that code with `crs=` so the frame remembers it.
    
    Next, we need a registry that knows how to move between coordinate systems.
    `default_registry` builds one holding the six built-in systems and freezes it so it can be shared safely:
    """

    from geoshift.registry.defaults import default_registry

    registry = default_registry()
    registry.codes

    """
    Every system is connected to the EPSG:4326 hub, and some pairs have a direct transform as well.
    We can ask the registry which systems a conversion passes through:
    """

    registry.path("BD-09-Mecator", "EPSG:3857")

    """
    Here the registry goes through the hub: BD-09 Mercator meters are first turned into public degrees,
    then projected onto the standard web mercator plane.
    
    Let's convert the first parcel into the GCJ-02 offset system:
    """

    from geoshift.utils.crs import GCJ02_CRS, LATLON_CRS
    from geoshift.utils.geo import transform_geometry

    parcel = parcels.geometry.iloc[0]
    shifted = transform_geometry(parcel, LATLON_CRS, GCJ02_CRS, registry)

    """
    The offset moves points inside the territory by a few hundred meters; outside it the transform is the identity.
    
    Raw coordinate arrays can be transformed too, in place if we like, which is handy for vertex buffers coming from a drawing tool:
    """

    from geoshift.utils.geo import transform_coordinates

    ring = [[113.93, 22.55], [113.96, 22.55], [113.96, 22.57], [113.93, 22.55]]
    transform_coordinates(registry, LATLON_CRS, "BD-09-Mecator", ring, ring)

    """
    Now, let's split the shifted parcel with a line drawn across it in the same GCJ-02 system.
    The splitter works in public degrees, so we give it the registry and tell it which system our inputs are in:
    """

    from shapely.geometry import LineString

    from geoshift.split.splitter import PolygonSplitter

    line = transform_geometry(
        LineString([(113.92, 22.56), (113.97, 22.56)]), LATLON_CRS, GCJ02_CRS, registry
    )

    splitter = PolygonSplitter(registry=registry)
    result = splitter.split(
        shifted, line, properties=parcels.iloc[0].drop("geometry").to_dict(), crs=GCJ02_CRS
    )

    """
    Both ends of the line must lie outside the parcel, otherwise the split is undefined and the result is empty.
    Each piece carries a copy of the parcel attributes with its id suffixed by the piece index:
    """

    [f.properties["id"] for f in result]

    """
    Lastly, we measure the pieces on the WGS84 ellipsoid.
    The measuring functions take the system of the geometry and remove the offset before measuring:
    """

    from geoshift.utils.measure import format_area, geodesic_area

    for piece in result.geometries:
        print(format_area(geodesic_area(piece, GCJ02_CRS, registry)))

    """
    The result can also be turned into a GeoJSON string for a web map, or a GeoDataFrame for further analysis:
    """

    result.to_geojson()
    result.to_geodataframe()


if __name__ == "__main__":
    main()

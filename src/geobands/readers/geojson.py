import json


def extract_samples(geojson_path, configuration):
    """
    Returns raw sample records from the Point features of a GeoJSON
    FeatureCollection; the value comes from the configured property.

    Features of other geometry types are passed along with no position so
    that ingestion counts them as dropped.
    """
    with open(geojson_path) as geojson_file:
        collection = json.load(geojson_file)

    return [sample_record(f, configuration.value_field) for f in collection.get("features", [])]


def sample_record(feature, value_field):
    geometry = feature.get("geometry") or {}
    properties = feature.get("properties") or {}
    if geometry.get("type") == "Point":
        position = list(geometry.get("coordinates", []))[:2]
    else:
        position = None

    return {"position": position, "value": properties.get(value_field)}

from collections.abc import Callable

from geobands.config import Config
from geobands.readers import csv, geojson


def lookup(extension: str) -> Callable[[str, Config], list]:
    """
    Determine which sample reader to use for the given file extension.
    """
    readers = {
        ".csv": csv.extract_samples,
        ".json": geojson.extract_samples,
        ".geojson": geojson.extract_samples,
    }

    try:
        return readers[extension.lower()]
    except KeyError:
        raise ValueError(f"No sample reader for {extension} files")

import pandas as pd


def extract_samples(csv_path, configuration):
    """
    Returns raw sample records from a CSV file with longitude, latitude and
    value columns named in the configuration.
    """
    df = pd.read_csv(csv_path)

    lons = df[configuration.longitude_field]
    lats = df[configuration.latitude_field]
    values = df[configuration.value_field]

    return [{"position": [lon, lat], "value": value} for (lon, lat, value) in zip(lons, lats, values)]

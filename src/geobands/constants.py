# Logging
ROOT_LOGGER = 'geobands'
LOGFILE_NAME = 'geobands.log'

# Default configuration values
DEFAULT_CELL_SIZE = 0.5
DEFAULT_CELL_SIZE_UNITS = 'kilometers'
DEFAULT_WEIGHT = 2.0
DEFAULT_MODE = 'isobands'
DEFAULT_NUM_BANDS = 10
DEFAULT_THRESHOLDS = ''
DEFAULT_COLOR_RAMP = 'default'
DEFAULT_OPACITY = 0.8
DEFAULT_FILL_FORMAT = 'hex'
DEFAULT_STROKE_WIDTH = 0
DEFAULT_OUTPUT_FILE = 'contours.geojson'
DEFAULT_LONGITUDE_FIELD = 'longitude'
DEFAULT_LATITUDE_FIELD = 'latitude'
DEFAULT_VALUE_FIELD = 'value'

# Ingestion
MINIMUM_SAMPLES = 3

# Configuration sections
SOURCE_SECTION_NAME = 'Source'
GRID_SECTION_NAME = 'Grid'
CONTOURS_SECTION_NAME = 'Contours'
STYLE_SECTION_NAME = 'Style'
DESTINATION_SECTION_NAME = 'Destination'

# Accepted option values
MODES = ('isobands', 'thresholds', 'isolines', 'cells')
CELL_SIZE_UNITS = ('degrees', 'meters', 'kilometers', 'miles')
FILL_FORMATS = ('hex', 'packed')
METERS_PER_UNIT = {
    'meters': 1.0,
    'kilometers': 1000.0,
    'miles': 1609.344,
}

# Synthetic elevation field
SYNTHETIC_BOUNDS = (-2.9691437069012636, 53.276823185185435, -1.6440644345684063, 53.695462187191424)
SYNTHETIC_SPACING_M = 20
SYNTHETIC_NUM_BANDS = 30
SYNTHETIC_OPACITY = 0.7
SYNTHETIC_OUTPUT_FILE = 'test-data.geojson'
SYNTHETIC_BASE_ELEVATION = 50.0
SYNTHETIC_NOISE = 20.0
# (fraction across, fraction up, height, falloff)
SYNTHETIC_PEAKS = (
    (0.30, 0.70, 500.0, 5.0),
    (0.70, 0.40, 600.0, 4.0),
    (0.50, 0.20, 400.0, 6.0),
    (0.15, 0.50, 350.0, 7.0),
    (0.85, 0.80, 450.0, 5.0),
)

# Color ramps
DEFAULT_COLOR_RANGE = (
    (65, 182, 196),
    (127, 205, 187),
    (199, 233, 180),
    (237, 248, 177),
    (255, 255, 204),
    (255, 237, 160),
    (254, 217, 118),
    (254, 178, 76),
    (253, 141, 60),
    (252, 78, 42),
    (227, 26, 28),
    (189, 0, 38),
)

ELEVATION_COLOR_RANGE = (
    (8, 29, 88),
    (16, 56, 126),
    (23, 82, 156),
    (32, 112, 180),
    (43, 140, 190),
    (65, 182, 196),
    (99, 198, 189),
    (127, 205, 187),
    (161, 218, 180),
    (199, 233, 180),
    (217, 240, 179),
    (237, 248, 177),
    (255, 255, 204),
    (255, 245, 178),
    (255, 237, 160),
    (254, 227, 140),
    (254, 217, 118),
    (254, 198, 96),
    (254, 178, 76),
    (253, 159, 68),
    (253, 141, 60),
    (252, 112, 51),
    (252, 78, 42),
    (240, 52, 35),
    (227, 26, 28),
    (208, 13, 33),
    (189, 0, 38),
    (165, 0, 38),
    (128, 0, 38),
    (89, 0, 28),
)

COLOR_RAMPS = {
    'default': DEFAULT_COLOR_RANGE,
    'elevation': ELEVATION_COLOR_RANGE,
}

# GeoJSON envelope
FEATURE_COLLECTION_HEADER = '{"type":"FeatureCollection","features":[\n'
FEATURE_SEPARATOR = ',\n'
FEATURE_COLLECTION_FOOTER = '\n]}\n'

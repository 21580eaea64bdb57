__version__ = "v0.1.0"


__all__ = ["__version__", "cli", "colors", "config", "constants", "errors", "features",
           "geobands", "ingest", "interpolation", "models", "streaming", "thresholds"]

from . import cli
from . import colors
from . import config
from . import constants
from . import errors
from . import features
from . import geobands
from . import ingest
from . import interpolation
from . import models
from . import streaming
from . import thresholds

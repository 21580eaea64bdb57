"""
Error and warning taxonomy for geobands.

Fatal conditions are exceptions derived from GeobandsError and abort a run.
Non-fatal conditions are UserWarning subclasses: they can be raised for
local recovery (a rejected sample) or recorded as diagnostics on a run's
result (too few samples, degenerate value range).
"""


class GeobandsError(Exception):
    """Base class for errors that abort a run."""
    pass


class InterpolationFailure(GeobandsError):
    """Raised when a grid is malformed or cannot be contoured."""
    pass


class SinkWriteFailure(GeobandsError):
    """Raised when the output sink fails while features are streamed.

    Bytes already written are truncated output and must not be consumed.
    """
    pass


class GeobandsWarning(UserWarning):
    """Base class for non-fatal conditions."""
    pass


class InvalidSample(GeobandsWarning):
    """A raw record without a usable position or value."""
    pass


class InsufficientSamples(GeobandsWarning):
    """Fewer valid samples than interpolation needs."""
    pass


class DegenerateValueRange(GeobandsWarning):
    """The observed minimum and maximum are equal."""
    pass

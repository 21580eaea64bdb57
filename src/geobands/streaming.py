"""
Incremental GeoJSON output.

A single band's polygons can hold tens of megabytes of coordinates, so
features are serialized and written one at a time inside a hand-written
FeatureCollection envelope rather than building the whole document.
"""

import dataclasses
import json
import logging
import os
from typing import IO, Iterable, Union

from geobands import constants
from geobands.errors import SinkWriteFailure

logger = logging.getLogger(__name__)

MEGABYTE = 1024 * 1024


@dataclasses.dataclass(frozen=True)
class StreamSummary:
    features: int
    bytes_written: int


def _write(sink: IO[str], text: str) -> int:
    try:
        sink.write(text)
    except OSError as e:
        raise SinkWriteFailure(f'Unable to write output: {e}') from e
    return len(text)


def _flush(sink: IO[str]) -> None:
    try:
        sink.flush()
    except OSError as e:
        raise SinkWriteFailure(f'Unable to flush output: {e}') from e


def _open(sink: Union[str, os.PathLike, IO[str]]) -> IO[str]:
    if isinstance(sink, (str, os.PathLike)):
        try:
            return open(sink, 'w', encoding='utf-8')
        except OSError as e:
            raise SinkWriteFailure(f'Unable to open {sink}: {e}') from e
    return sink


def stream_features(features: Iterable[dict], sink: Union[str, os.PathLike, IO[str]]) -> StreamSummary:
    """
    Writes features to sink as one FeatureCollection and closes the sink.

    The sink is a path or an open text stream. Only one serialized feature
    is held at a time; every feature after the first is preceded by ",\\n".
    Writes block until the sink accepts the data. Any write failure raises
    SinkWriteFailure and ends the stream; the sink is flushed and closed
    whether or not the stream completes, and partial output is invalid.
    """
    sink = _open(sink)
    count = 0
    written = 0
    try:
        written += _write(sink, constants.FEATURE_COLLECTION_HEADER)
        for feature in features:
            text = json.dumps(feature)
            if count > 0:
                written += _write(sink, constants.FEATURE_SEPARATOR)
            written += _write(sink, text)
            count += 1
            logger.debug(f'  feature {count} (value {feature.get("properties", {}).get("value")}): '
                         f'{len(text) / MEGABYTE:.1f} MB')
        written += _write(sink, constants.FEATURE_COLLECTION_FOOTER)
    finally:
        try:
            _flush(sink)
        finally:
            sink.close()

    logger.info(f'Written {count} features (~{written / MEGABYTE:.1f} MB)')
    return StreamSummary(count, written)

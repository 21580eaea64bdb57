import io
import json

import pytest

from geobands import constants
from geobands.errors import SinkWriteFailure
from geobands.streaming import stream_features

# Unit tests for the 'streaming' module functions.


class TrackingSink(io.StringIO):
    """Keeps its text readable after close."""

    def close(self):
        self.text = self.getvalue()
        super().close()


class FailingSink(TrackingSink):
    """Accepts `limit` writes and then fails."""

    def __init__(self, limit):
        super().__init__()
        self.limit = limit

    def write(self, text):
        if self.limit == 0:
            raise OSError('disk full')
        self.limit -= 1
        return super().write(text)


def make_feature(value):
    return {
        'type': 'Feature',
        'geometry': {'type': 'Point', 'coordinates': [value, value]},
        'properties': {'value': value},
    }

@pytest.mark.parametrize("count", [0, 1, 5])
def test_output_is_valid_geojson(count):
    sink = TrackingSink()
    summary = stream_features((make_feature(k) for k in range(count)), sink)
    collection = json.loads(sink.text)
    assert collection['type'] == 'FeatureCollection'
    assert [f['properties']['value'] for f in collection['features']] == list(range(count))
    assert summary.features == count

def test_envelope_layout():
    sink = TrackingSink()
    stream_features([make_feature(1), make_feature(2)], sink)
    assert sink.text.startswith(constants.FEATURE_COLLECTION_HEADER)
    assert sink.text.endswith(constants.FEATURE_COLLECTION_FOOTER)
    assert sink.text.count(constants.FEATURE_SEPARATOR) == 1

def test_bytes_written_matches_output():
    sink = TrackingSink()
    summary = stream_features([make_feature(1)], sink)
    assert summary.bytes_written == len(sink.text)

def test_sink_closed_on_success():
    sink = TrackingSink()
    stream_features([], sink)
    assert sink.closed

def test_write_failure_raises():
    sink = FailingSink(limit=2)
    with pytest.raises(SinkWriteFailure):
        stream_features([make_feature(k) for k in range(5)], sink)
    assert sink.closed

def test_failing_feature_source_still_closes_sink():
    def features():
        yield make_feature(1)
        raise RuntimeError('boom')

    sink = TrackingSink()
    with pytest.raises(RuntimeError):
        stream_features(features(), sink)
    assert sink.closed

def test_stream_to_path(tmp_path):
    output = tmp_path / 'contours.geojson'
    summary = stream_features([make_feature(3)], output)
    assert json.loads(output.read_text())['features'][0]['properties']['value'] == 3
    assert summary.features == 1

def test_unwritable_path(tmp_path):
    with pytest.raises(SinkWriteFailure):
        stream_features([], tmp_path / 'missing' / 'contours.geojson')

def test_separator_written_apart_from_feature():
    writes = []

    class RecordingSink(TrackingSink):
        def write(self, text):
            writes.append(text)
            return super().write(text)

    stream_features([make_feature(1), make_feature(2)], RecordingSink())
    assert constants.FEATURE_SEPARATOR in writes
    assert writes[-2] == json.dumps(make_feature(2))

def test_features_consumed_one_at_a_time():
    consumed = []
    sink = TrackingSink()

    def features():
        for k in range(3):
            consumed.append(k)
            assert sink.getvalue().count('"Feature"') == k
            yield make_feature(k)

    stream_features(features(), sink)
    assert consumed == [0, 1, 2]

"""
Tests for the sensor service client and the ingestion-boundary parser.

Tests cover:
- Equivalence classes: well-formed latest/history/devices payloads
- Error scenarios: non-200 responses, missing data, unusable timestamps
- Coercion rules: numeric strings, blanks, negatives, GPS formats
"""

from unittest.mock import Mock

import pytest
import requests

from smaa_monitor.client import ApiError, SmaaClient, parse_location, parse_reading
from smaa_monitor.config import MonitorConfig
from smaa_monitor.models import Location


def _response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return SmaaClient("https://example.test/getData", "SMAA_002", timeout=5, session=session)


class TestParseReading:
    """Test suite for parse_reading()."""

    def test_numeric_strings_are_coerced(self):
        reading = parse_reading({"timestamp": "1700000000", "pm25": "12.5", "battery": 80})
        assert reading.timestamp == 1_700_000_000
        assert reading.pm25 == 12.5
        assert reading.battery == 80.0

    def test_missing_and_blank_fields_are_none(self):
        reading = parse_reading({"timestamp": 1_700_000_000, "pm10": "", "o3": "n/a"})
        assert reading.pm10 is None
        assert reading.o3 is None
        assert reading.humidity is None

    def test_negative_pollutant_dropped(self):
        reading = parse_reading({"timestamp": 1_700_000_000, "co": -1, "temperature": -3})
        assert reading.co is None
        assert reading.temperature == -3

    def test_iso_timestamp(self):
        reading = parse_reading({"timestamp": "2023-11-14T22:13:20Z"})
        assert reading.timestamp == 1_700_000_000

    def test_millisecond_timestamp(self):
        assert parse_reading({"timestamp": 1_700_000_000_000}).timestamp == 1_700_000_000

    def test_missing_timestamp_raises(self):
        with pytest.raises(ApiError):
            parse_reading({"pm25": 10})

    def test_online_and_device_fields(self):
        reading = parse_reading(
            {"timestamp": 1, "online": "true", "last_seen_seconds": 30, "fixed_gps": [14.6, -90.5]},
            device_id="SMAA_002",
        )
        assert reading.online is True
        assert reading.last_seen == 30
        assert reading.device_id == "SMAA_002"
        assert reading.location == Location(14.6, -90.5)

    def test_non_mapping_record_raises(self):
        with pytest.raises(ApiError):
            parse_reading(["not", "a", "record"])


class TestParseLocation:
    """Test suite for parse_location()."""

    @pytest.mark.parametrize(
        "value",
        [
            {"lat": 14.6, "lon": -90.5},
            {"latitude": "14.6", "longitude": "-90.5"},
            "14.6,-90.5",
            (14.6, -90.5),
        ],
    )
    def test_supported_formats(self, value):
        assert parse_location(value) == Location(14.6, -90.5)

    @pytest.mark.parametrize("value", [None, "", "somewhere", {"lat": 1}, [1, 2, 3]])
    def test_unusable_values(self, value):
        assert parse_location(value) is None


class TestSmaaClient:
    """Test suite for SmaaClient requests."""

    def test_get_latest(self, client, session):
        session.get.return_value = _response(
            {"deviceID": "SMAA_002", "data": {"timestamp": 1_700_000_000, "pm25": 8, "online": True}}
        )
        reading = client.get_latest()
        assert reading.pm25 == 8
        assert reading.device_id == "SMAA_002"
        session.get.assert_called_once_with(
            "https://example.test/getData",
            params={"action": "latest", "deviceID": "SMAA_002"},
            timeout=5,
        )

    def test_get_history_sorted_ascending(self, client, session):
        session.get.return_value = _response(
            {"data": [{"timestamp": 300, "pm25": 3}, {"timestamp": 100, "pm25": 1}, {"timestamp": 200, "pm25": 2}]}
        )
        readings = client.get_history(hours=12, limit=50)
        assert [r.pm25 for r in readings] == [1, 2, 3]
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"action": "history", "deviceID": "SMAA_002", "hours": 12, "limit": 50}

    @pytest.mark.parametrize("payload", [{"data": []}, {"data": None}, {}])
    def test_get_history_empty(self, client, session, payload):
        session.get.return_value = _response(payload)
        assert client.get_history() == []

    def test_get_devices_status(self, client, session):
        session.get.return_value = _response({"devices": [{"deviceID": "SMAA_001"}, {"deviceID": "SMAA_002"}]})
        assert len(client.get_devices_status()) == 2
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"action": "devices"}

    # ==================== Error Scenarios ====================

    def test_non_200_raises_with_status(self, client, session):
        session.get.return_value = _response({}, status_code=503)
        with pytest.raises(ApiError) as excinfo:
            client.get_latest()
        assert excinfo.value.status_code == 503
        assert "503" in str(excinfo.value)

    def test_latest_without_data_raises(self, client, session):
        session.get.return_value = _response({"deviceID": "SMAA_002"})
        with pytest.raises(ApiError):
            client.get_latest()

    def test_invalid_json_raises(self, client, session):
        response = _response(None)
        response.json.side_effect = ValueError("no json")
        session.get.return_value = response
        with pytest.raises(ApiError):
            client.get_history()

    def test_transport_errors_propagate(self, client, session):
        session.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(requests.ConnectionError):
            client.get_latest()

    def test_from_config(self):
        config = MonitorConfig()
        client = SmaaClient.from_config(config)
        assert client.device_id == "SMAA_002"
        assert client.timeout == 10.0

"""
Tests for the Sensor tick loop.

Uses an in-memory transport so every payload can be inspected, plus a small
data source whose readings are set per test.
"""
import json
import threading
import time

import pytest

from relay.errors import AcquisitionError, ConfigurationError, SendError
from relay.models import SensorConfig
from relay.sensor import Sensor


class DummyTransport:
    def __init__(self, fail_send: bool = False):
        self.connected = False
        self.sent = []
        self.close_calls = 0
        self.fail_send = fail_send
        self.first_send = threading.Event()

    def connect(self):
        self.connected = True

    def send_string(self, payload):
        if self.fail_send:
            raise SendError("tcp send: connection closed by peer")
        self.sent.append(payload)
        self.first_send.set()
        return len(payload.encode("utf-8"))

    def close(self):
        self.close_calls += 1
        self.connected = False

    def is_connected(self):
        return self.connected


class DictSource:
    def __init__(self, readings=None, error=None):
        self.readings = readings or {}
        self.error = error
        self.calls = 0

    def read_all(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.readings)


def _sensor(readings=None, **cfg):
    cfg.setdefault("sensor_id", "s1")
    cfg.setdefault("interval_seconds", 1)
    transport = DummyTransport()
    source = DictSource(readings)
    return Sensor(SensorConfig(**cfg), source, transport), source, transport


class TestConstruction:
    def test_empty_sensor_id_is_rejected(self):
        with pytest.raises(ConfigurationError, match="sensor_id"):
            Sensor(SensorConfig(sensor_id="", interval_seconds=1), DictSource(), DummyTransport())

    @pytest.mark.parametrize("interval", [0, -5])
    def test_non_positive_interval_is_rejected(self, interval):
        with pytest.raises(ConfigurationError, match="interval_seconds"):
            Sensor(SensorConfig(sensor_id="s1", interval_seconds=interval), DictSource(), DummyTransport())

    def test_connect_and_close_delegate_to_transport(self):
        sensor, _, transport = _sensor()
        sensor.connect()
        assert transport.is_connected()
        sensor.close()
        sensor.close()
        assert not transport.is_connected()
        assert transport.close_calls == 2


class TestRunOnce:
    def test_scenario_unknown_unit(self):
        sensor, _, transport = _sensor({"temperature": 42.0})

        sent = sensor.run_once()

        assert sent == len(transport.sent[0])
        payload = json.loads(transport.sent[0])
        assert payload["sensor_id"] == "s1"
        assert payload["readings"]["temperature"]["unit"] == "unknown"
        assert payload["readings"]["temperature"]["value"] == pytest.approx(42.0)
        assert "metadata" not in payload

    def test_payload_is_one_compact_line(self):
        sensor, _, transport = _sensor({"temperature": 21.5})
        sensor.run_once()

        line = transport.sent[0]
        assert line.endswith("\n")
        assert line.count("\n") == 1
        assert ", " not in line and ": " not in line

    def test_field_order_matches_wire_format(self):
        sensor, _, transport = _sensor({"t": 1.0}, metadata={"site": "lab"})
        sensor.run_once()
        keys = list(json.loads(transport.sent[0]))
        assert keys == ["sensor_id", "metadata", "timestamp_ms", "readings"]

    def test_timestamp_is_epoch_milliseconds(self):
        sensor, _, transport = _sensor({"t": 1.0})
        before = int(time.time() * 1000)
        sensor.run_once()
        after = int(time.time() * 1000)

        ts = json.loads(transport.sent[0])["timestamp_ms"]
        assert isinstance(ts, int)
        assert before <= ts <= after

    def test_empty_readings_and_metadata_are_omitted(self):
        sensor, _, transport = _sensor({})
        sensor.run_once()

        payload = json.loads(transport.sent[0])
        assert set(payload) == {"sensor_id", "timestamp_ms"}

    def test_metadata_included_when_configured(self):
        sensor, _, transport = _sensor({"t": 1.0}, metadata={"environment": "unit-test"})
        sensor.run_once()
        assert json.loads(transport.sent[0])["metadata"] == {"environment": "unit-test"}

    def test_values_rounded_to_three_decimals(self):
        sensor, _, transport = _sensor({"pressure": 101.32549, "ratio": 0.0004})
        sensor.run_once()

        readings = json.loads(transport.sent[0])["readings"]
        assert readings["pressure"]["value"] == pytest.approx(101.325)
        assert readings["ratio"]["value"] == pytest.approx(0.0)

    def test_configured_unit_wins_over_heuristics(self):
        sensor, _, transport = _sensor(
            {"frame_width": 640.0, "brightness": 0.5},
            units={"frame_width": "px", "brightness": "intensity"},
        )
        sensor.run_once()

        readings = json.loads(transport.sent[0])["readings"]
        assert readings["frame_width"]["unit"] == "px"
        assert readings["brightness"]["unit"] == "intensity"

    @pytest.mark.parametrize(
        "metric, unit",
        [
            ("frame_width", "pixels"),
            ("frame_height", "pixels"),
            ("channels", "count"),
            ("frame_bytes", "bytes"),
            ("buffer_size", "bytes"),
            ("mean_brightness", "intensity"),
            ("luma_avg", "intensity"),
            ("humidity", "unknown"),
        ],
    )
    def test_unit_heuristics(self, metric, unit):
        sensor, _, _ = _sensor()
        assert sensor.infer_unit(metric) == unit

    def test_acquisition_failure_propagates_without_sending(self):
        transport = DummyTransport()
        source = DictSource(error=AcquisitionError("camera unavailable"))
        sensor = Sensor(SensorConfig(sensor_id="s1"), source, transport)

        with pytest.raises(AcquisitionError, match="camera unavailable"):
            sensor.run_once()
        assert transport.sent == []

    def test_send_failure_propagates(self):
        transport = DummyTransport(fail_send=True)
        sensor = Sensor(SensorConfig(sensor_id="s1"), DictSource({"t": 1.0}), transport)

        with pytest.raises(SendError):
            sensor.run_once()


class TestRun:
    def test_stop_set_before_run_means_no_ticks(self):
        sensor, source, transport = _sensor({"t": 1.0})
        stop = threading.Event()
        stop.set()

        sensor.run(stop)

        assert source.calls == 0
        assert transport.sent == []

    def test_stop_is_observed_only_after_the_current_sleep(self):
        """A stop requested mid-sleep waits for the rest of the interval."""
        sensor, _, transport = _sensor({"t": 1.0}, interval_seconds=1)
        stop = threading.Event()
        worker = threading.Thread(target=sensor.run, args=(stop,), daemon=True)
        worker.start()

        assert transport.first_send.wait(timeout=2.0)
        stop.set()
        stopped_at = time.monotonic()

        time.sleep(0.3)
        assert worker.is_alive(), "loop exited before its sleep finished"

        worker.join(timeout=3.0)
        elapsed = time.monotonic() - stopped_at
        assert not worker.is_alive()
        assert 0.5 <= elapsed <= 1.5
        assert len(transport.sent) == 1

    def test_failed_tick_ends_the_loop(self):
        transport = DummyTransport(fail_send=True)
        sensor = Sensor(SensorConfig(sensor_id="s1"), DictSource({"t": 1.0}), transport)

        with pytest.raises(SendError):
            sensor.run(threading.Event())

# relay/sensor.py
from __future__ import annotations
import logging
import threading
import time
from typing import Dict, Mapping

from .errors import ConfigurationError
from .models import Payload, ReadingValue, SensorConfig
from .sources.interface import DataSource
from .transports.interface import Transport

logger = logging.getLogger(__name__)

VALUE_DECIMALS = 3

# (substrings, unit) checked in order when a metric has no configured unit
_UNIT_HEURISTICS = (
    (("width", "height"), "pixels"),
    (("channels",), "count"),
    (("bytes", "size"), "bytes"),
    (("brightness", "luma"), "intensity"),
)
UNKNOWN_UNIT = "unknown"


class Sensor:
    """
    Reads a data source every ``interval_seconds`` and ships the readings
    as one line of JSON through a transport.

    The sensor is driven by a single worker thread: connect(), run(), close().
    It holds no locks; the stop event passed to run() is the only thing shared
    with other threads.
    """

    def __init__(self, config: SensorConfig, source: DataSource, transport: Transport) -> None:
        if not config.sensor_id:
            raise ConfigurationError("Sensor: sensor_id must not be empty")
        interval = config.interval_seconds
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ConfigurationError(f"Sensor: interval_seconds must be a positive integer, got {interval!r}")

        self._config = config
        self._source = source
        self._transport = transport

    @property
    def sensor_id(self) -> str:
        return self._config.sensor_id

    @property
    def interval_seconds(self) -> int:
        return self._config.interval_seconds

    def connect(self) -> None:
        self._transport.connect()
        logger.info(f"Sensor {self.sensor_id} connected via {self._transport}")

    def close(self) -> None:
        self._transport.close()

    def run_once(self) -> int:
        """One tick: read -> encode -> send. Failures propagate; nothing is retried."""
        readings = self._source.read_all()
        payload = self.build_payload(readings)
        sent = self._transport.send_string(payload)
        logger.debug(f"Sensor {self.sensor_id} sent {sent} bytes ({len(readings)} readings)")
        return sent

    def run(self, stop_event: threading.Event) -> None:
        """
        Tick until ``stop_event`` is set.

        The flag is only checked between ticks and the sleep is not interrupted,
        so a stop request can take up to one full interval to be honoured.
        """
        logger.info(f"Sensor {self.sensor_id} loop started with interval {self.interval_seconds}s")
        while not stop_event.is_set():
            self.run_once()
            time.sleep(self.interval_seconds)
        logger.info(f"Sensor {self.sensor_id} loop stopped")

    # --- payload -----------------------------------------------------------

    def infer_unit(self, metric: str) -> str:
        unit = self._config.units.get(metric)
        if unit is not None:
            return unit
        for needles, heuristic_unit in _UNIT_HEURISTICS:
            if any(n in metric for n in needles):
                return heuristic_unit
        return UNKNOWN_UNIT

    def build_payload(self, readings: Mapping[str, float]) -> str:
        """
        Serialize one tick as compact JSON terminated by a newline.

        sensor_id and timestamp_ms are always present; metadata and readings
        are omitted when empty.
        """
        values: Dict[str, ReadingValue] = {
            name: ReadingValue(value=round(float(value), VALUE_DECIMALS), unit=self.infer_unit(name))
            for name, value in readings.items()
        }
        payload = Payload(
            sensor_id=self.sensor_id,
            metadata=dict(self._config.metadata) or None,
            timestamp_ms=int(time.time() * 1000),
            readings=values or None,
        )
        return payload.model_dump_json(exclude_none=True) + "\n"

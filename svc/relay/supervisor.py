# relay/supervisor.py
from __future__ import annotations
import logging
import signal
import threading
import time
from typing import Optional

from dotenv import load_dotenv

from .config import Settings, get_settings
from .errors import ConfigurationError, RelayError
from .loader import load_sensor_config, load_simulation_config, load_transport_config
from .log import configure_logging
from .sensor import Sensor
from .sources.interface import DataSource
from .sources.simulation import SimulationDataSource
from .sources.static import StaticDataSource
from .transports.factory import make_transport

logger = logging.getLogger(__name__)

POLL_SECONDS = 1.0


def make_data_source(settings: Settings) -> DataSource:
    kind = settings.datasource_kind
    if kind == "sim":
        return SimulationDataSource(load_simulation_config(settings.simulation_config))
    if kind == "static":
        return StaticDataSource()
    raise ConfigurationError(f"unsupported data source kind '{kind}' (expected 'sim' or 'static')")


def build_sensor(settings: Settings) -> Sensor:
    """Load every config file and wire data source + transport into a Sensor."""
    sensor_cfg = load_sensor_config(settings.sensor_config)
    transport_cfg = load_transport_config(settings.transport_config)
    source = make_data_source(settings)
    transport = make_transport(transport_cfg)
    return Sensor(sensor_cfg, source, transport)


class SensorWorker(threading.Thread):
    """
    Drives one sensor: connect -> run -> close.

    Any error ends the worker. It is logged, kept in ``error`` for the
    supervisor, and the shared stop event is set so the whole process winds
    down instead of running on with a dead transport.
    """

    def __init__(self, sensor: Sensor, stop_event: threading.Event) -> None:
        super().__init__(name=f"sensor-{sensor.sensor_id}", daemon=True)
        self.sensor = sensor
        self.stop_event = stop_event
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.sensor.connect()
            self.sensor.run(self.stop_event)
            self.sensor.close()
        except Exception as e:
            self.error = e
            logger.error(f"Sensor thread uncaught exception: {e}", exc_info=True)
            self.stop_event.set()
            logger.warning("Sensor attempting to close after exception...")
            self.sensor.close()


def install_signal_handlers(stop_event: threading.Event) -> None:
    """SIGINT/SIGTERM request a graceful stop. Must be called from the main thread."""

    def _handle(signum, _frame) -> None:
        logger.info(f"Received termination signal: {signal.Signals(signum).name}")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def supervise(
    stop_event: threading.Event,
    run_duration_s: int = 0,
    heartbeat_s: int = 60,
    poll_s: float = POLL_SECONDS,
) -> None:
    """Block until the stop event is set or the optional run duration has elapsed."""
    started = time.monotonic()
    ticks = 0
    while not stop_event.is_set():
        ticks += 1
        if ticks % heartbeat_s == 0:
            logger.info("Main loop heartbeat: system running normally.")

        if run_duration_s > 0 and time.monotonic() - started >= run_duration_s:
            logger.info("Run duration reached, stopping...")
            stop_event.set()
            break
        stop_event.wait(poll_s)


def main() -> int:
    load_dotenv()  # .env values become defaults for get_settings()
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    logger.info("Sensor starting up...")

    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    try:
        sensor = build_sensor(settings)
    except RelayError as e:
        logger.error(f"Fatal error during setup: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected fatal error during setup: {e}", exc_info=True)
        return 1

    worker = SensorWorker(sensor, stop_event)
    worker.start()

    suffix = (
        f" Will auto-stop after {settings.run_duration_seconds} seconds."
        if settings.run_duration_seconds > 0
        else ""
    )
    logger.info("Sensor running. Press Ctrl-C to stop." + suffix)

    supervise(stop_event, settings.run_duration_seconds, settings.heartbeat_seconds)

    # the worker only notices the stop event between ticks
    worker.join()
    logger.info("Sensor shutting down...")
    return 1 if worker.error is not None else 0

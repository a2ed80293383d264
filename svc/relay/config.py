from __future__ import annotations
import os
from dataclasses import dataclass

# Relative config paths are resolved against the svc directory
_SVC_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_SENSOR_CONFIG = os.path.join("config", "sensor_config.json")
DEFAULT_TRANSPORT_CONFIG = os.path.join("config", "transport_config.json")
DEFAULT_SIMULATION_CONFIG = os.path.join("config", "simulation_config.json")

# Data source: "sim" for the rule-driven simulator, "static" for fixed readings
DEFAULT_DATASOURCE_KIND = "sim"

# 0 = run until SIGINT/SIGTERM
DEFAULT_RUN_DURATION_SECONDS = 0
DEFAULT_HEARTBEAT_SECONDS = 60

DEFAULT_LOG_FILE = "sensor.log"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    sensor_config: str
    transport_config: str
    simulation_config: str
    datasource_kind: str
    run_duration_seconds: int
    heartbeat_seconds: int
    log_file: str
    log_level: str


def _resolve(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(_SVC_DIR, path))


def _env_int(name: str, default: int) -> int:
    # an unparsable value falls back to the default rather than aborting startup
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_settings() -> Settings:
    """Read settings from the environment (call after load_dotenv())."""
    log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE)
    return Settings(
        sensor_config=_resolve(os.getenv("SENSOR_CONFIG", DEFAULT_SENSOR_CONFIG)),
        transport_config=_resolve(os.getenv("TRANSPORT_CONFIG", DEFAULT_TRANSPORT_CONFIG)),
        simulation_config=_resolve(
            os.getenv("SIMULATION_DATASOURCE_CONFIG", DEFAULT_SIMULATION_CONFIG)
        ),
        datasource_kind=os.getenv("DATASOURCE_KIND", DEFAULT_DATASOURCE_KIND).lower(),
        run_duration_seconds=max(0, _env_int("RUN_DURATION_SECONDS", DEFAULT_RUN_DURATION_SECONDS)),
        heartbeat_seconds=max(1, _env_int("HEARTBEAT_SECONDS", DEFAULT_HEARTBEAT_SECONDS)),
        log_file=_resolve(log_file) if log_file else "",
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )

# relay/loader.py
"""
Load and validate the JSON configuration files.

sensor_config.json:
    {
      "sensor_id": "temp-01",
      "interval_seconds": 5,
      "units": {"temperature": "C"},
      "metadata": {"location": "lab"}
    }

transport_config.json (the endpoint lives under a key named after the kind):
    {
      "kind": "udp",
      "udp": {"host": "127.0.0.1", "port": 50002}
    }

simulation_config.json:
    {
      "limits": {
        "temperature": {"min": 18.0, "max": 24.0, "bad_probability": 0.05},
        "pressure": {"fixed": 101.3}
      }
    }
"""
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict

from pydantic import BaseModel, StrictStr, ValidationError, conint

from .errors import ConfigurationError
from .models import SensorConfig, SimulationConfig, TransportConfig

logger = logging.getLogger(__name__)

SUPPORTED_KINDS = ("tcp", "udp")

Port = conint(strict=True, gt=0, le=65535)


class _EndpointSection(BaseModel):
    host: StrictStr
    port: Port


def _read_json(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigurationError(f"ConfigLoader: cannot open file: {path}")

    logger.debug(f"Reading JSON config from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"ConfigLoader: invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        # directory, permission denied, or bytes that are not UTF-8
        raise ConfigurationError(f"ConfigLoader: cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"ConfigLoader: top level of {path} must be an object")
    return data


def _describe(err: ValidationError, prefix: str = "") -> str:
    first = err.errors()[0]
    where = prefix + ".".join(str(p) for p in first["loc"])
    return f"'{where}': {first['msg']}"


def load_sensor_config(path: str) -> SensorConfig:
    data = _read_json(path)
    try:
        cfg = SensorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"SensorConfig: {_describe(e)} in {path}") from e

    if cfg.interval_seconds <= 0:
        raise ConfigurationError(f"SensorConfig: 'interval_seconds' must be > 0 in {path}")
    return cfg


def load_transport_config(path: str) -> TransportConfig:
    data = _read_json(path)

    kind = data.get("kind")
    if not isinstance(kind, str) or not kind:
        raise ConfigurationError(f"TransportConfig: missing or invalid 'kind' in {path}")
    key = kind.lower()
    if key not in SUPPORTED_KINDS:
        raise ConfigurationError(f"TransportConfig: unsupported kind '{kind}' in {path}")

    section = data.get(key)
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"TransportConfig: missing '{key}' object for kind='{kind}' in {path}"
        )
    try:
        endpoint = _EndpointSection.model_validate(section)
    except ValidationError as e:
        raise ConfigurationError(f"TransportConfig: {_describe(e, key + '.')} in {path}") from e

    return TransportConfig(kind=kind, host=endpoint.host, port=endpoint.port)


def load_simulation_config(path: str) -> SimulationConfig:
    data = _read_json(path)
    if "limits" not in data:
        raise ConfigurationError(f"SimulationConfig: missing 'limits' field in {path}")
    try:
        return SimulationConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"SimulationConfig: {_describe(e)} in {path}") from e

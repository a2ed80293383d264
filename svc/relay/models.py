from __future__ import annotations
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, confloat

Probability = confloat(ge=0.0, le=1.0)


class Endpoint(BaseModel):
    """Network destination a socket is bound to for its whole life."""
    model_config = ConfigDict(frozen=True)

    host: str = Field(description="Hostname or IP literal")
    port: int = Field(description="Destination port")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class SensorConfig(BaseModel):
    """Identity and cadence of one sensor."""
    model_config = ConfigDict(frozen=True)

    sensor_id: StrictStr = Field(description="Sensor identity (e.g., temp-01)")
    interval_seconds: StrictInt = Field(default=1, description="Seconds between ticks")
    units: Dict[StrictStr, StrictStr] = Field(
        default_factory=dict, description="Metric name to unit (e.g., temperature -> F)"
    )
    metadata: Dict[StrictStr, StrictStr] = Field(
        default_factory=dict, description="Free-form tags (location, model, ...)"
    )


class TransportConfig(BaseModel):
    """How bytes leave the process."""
    model_config = ConfigDict(frozen=True)

    kind: str = Field(description="Transport kind: 'tcp' or 'udp'")
    host: str = Field(description="Collector host")
    port: int = Field(default=0, description="Collector port (1-65535)")


class MetricRule(BaseModel):
    """Generation rule for one simulated metric: fixed, or a range with outliers."""
    fixed: Optional[float] = Field(default=None, description="Constant value; wins over a range")
    min: Optional[float] = Field(default=None, description="Lower bound of the normal range")
    max: Optional[float] = Field(default=None, description="Upper bound of the normal range")
    bad_probability: Probability = Field(
        default=0.0, description="Chance to emit an out-of-range value"
    )

    @property
    def has_fixed(self) -> bool:
        return self.fixed is not None

    @property
    def has_range(self) -> bool:
        return self.min is not None and self.max is not None


class SimulationConfig(BaseModel):
    limits: Dict[str, MetricRule] = Field(default_factory=dict)


class ReadingValue(BaseModel):
    value: float
    unit: str


class Payload(BaseModel):
    """One tick's envelope. Empty metadata/readings are left as None and omitted."""
    sensor_id: str
    metadata: Optional[Dict[str, str]] = None
    timestamp_ms: int
    readings: Optional[Dict[str, ReadingValue]] = None

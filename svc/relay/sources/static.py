# relay/sources/static.py
from __future__ import annotations
from typing import Dict, Mapping, Optional

from .interface import DataSource

DEFAULT_READINGS: Dict[str, float] = {
    "temperature": 42.0,
    "pressure": 101.3,
}


class StaticDataSource(DataSource):
    """Stand-in for a hardware driver: returns the same readings every tick."""

    def __init__(self, values: Optional[Mapping[str, float]] = None) -> None:
        source = DEFAULT_READINGS if values is None else values
        self._values = {name: float(v) for name, v in source.items()}

    def read_all(self) -> Dict[str, float]:
        return dict(self._values)

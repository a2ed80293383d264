# relay/sources/interface.py
from __future__ import annotations
from typing import Dict, Protocol


class DataSource(Protocol):
    """
    Minimal interface every data source must implement.
    One instance feeds one Sensor; it is only ever called from the sensor worker.
    """

    def read_all(self) -> Dict[str, float]:
        """
        Produce a fresh reading set: metric name -> numeric value.

        Raise AcquisitionError when the readings cannot be produced
        (device unavailable, misconfigured metric, ...).
        """
        ...

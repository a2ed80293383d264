# relay/sources/simulation.py
"""
Rule-driven simulated readings.

Each metric follows one MetricRule:
  - "fixed": always the same value;
  - "min"/"max": uniform draw in the range, except that with probability
    "bad_probability" an out-of-range value (min - 10 or max + 10) is emitted
    so the collector's validation can be exercised.
"""
from __future__ import annotations
import logging
import random
from typing import Dict, Optional

from relay.errors import AcquisitionError
from relay.models import MetricRule, SimulationConfig
from .interface import DataSource

logger = logging.getLogger(__name__)

OUTLIER_OFFSET = 10.0


class SimulationDataSource(DataSource):
    def __init__(self, config: SimulationConfig, rng: Optional[random.Random] = None) -> None:
        self._limits: Dict[str, MetricRule] = dict(config.limits)
        self._rng = rng or random.Random()
        logger.debug(f"SimulationDataSource metrics={sorted(self._limits)}")

    @property
    def metrics(self) -> list[str]:
        return list(self._limits)

    def generate(self, metric: str) -> float:
        rule = self._limits.get(metric)
        if rule is None:
            raise AcquisitionError(f"Metric not found: {metric}")
        return self._generate_value(metric, rule)

    def read_all(self) -> Dict[str, float]:
        return {name: self._generate_value(name, rule) for name, rule in self._limits.items()}

    def _generate_value(self, metric: str, rule: MetricRule) -> float:
        if rule.has_fixed:
            return float(rule.fixed)

        if rule.has_range:
            if self._rng.random() < rule.bad_probability:
                value = rule.min - OUTLIER_OFFSET if self._rng.random() < 0.5 else rule.max + OUTLIER_OFFSET
                logger.debug(f"Simulated outlier for {metric}: {value}")
                return value
            return self._rng.uniform(rule.min, rule.max)

        raise AcquisitionError(f"Metric misconfigured: {metric} has no fixed or range values")

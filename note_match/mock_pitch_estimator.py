from typing import Iterable, Optional

from .services.interfaces import IPitchEstimator


class MockPitchEstimator(IPitchEstimator):
    """A scripted pitch estimator for unit tests. Returns None once exhausted."""

    def __init__(self, readings: Iterable[Optional[float]] = ()):
        self._readings = list(readings)
        self.reads = 0

    def push(self, reading: Optional[float]) -> None:
        self._readings.append(reading)

    def read(self) -> Optional[float]:
        self.reads += 1
        if not self._readings:
            return None
        return self._readings.pop(0)

"""Frequency values and the musical distance between them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from .errors import InvalidFrequencyError


CENTS_PER_OCTAVE = 1200.0


@dataclass(frozen=True)
class MusicalDistance:
    """A signed pitch distance measured in cents.

    Positive values are sharp, negative values are flat. Exactly zero counts
    as sharp so that ``is_flat`` and ``is_sharp`` always partition the line.
    """

    cents: float

    @property
    def is_flat(self) -> bool:
        return self.cents < 0

    @property
    def is_sharp(self) -> bool:
        return self.cents >= 0

    def is_in_tune(self, threshold_cents: float = 5.0) -> bool:
        """True if the distance is within ``threshold_cents`` either way."""
        return abs(self.cents) <= threshold_cents

    def __abs__(self) -> float:
        return abs(self.cents)

    def __float__(self) -> float:
        return self.cents

    def __str__(self):
        return f"{self.cents:+.1f} cents"


@dataclass(frozen=True, order=True)
class Frequency:
    """A positive frequency in Hertz.

    Octave shifts multiply by powers of two and distances are logarithmic,
    so a Frequency never becomes zero or negative through its own operations.
    """

    hz: float

    def __post_init__(self):
        value = self.hz
        if isinstance(value, bool) or not isinstance(
            value, (int, float, np.integer, np.floating)
        ):
            raise InvalidFrequencyError(value)
        if not np.isfinite(value) or value <= 0:
            raise InvalidFrequencyError(value)
        object.__setattr__(self, "hz", float(value))

    @classmethod
    def of(cls, value: Union["Frequency", float]) -> "Frequency":
        """Coerce a plain number (or an existing Frequency) into a Frequency."""
        if isinstance(value, Frequency):
            return value
        return cls(value)

    @classmethod
    def from_kilohertz(cls, khz: float) -> "Frequency":
        return cls(khz * 1000.0)

    @property
    def kilohertz(self) -> float:
        return self.hz / 1000.0

    @property
    def period(self) -> float:
        """Duration of one cycle in seconds."""
        return 1.0 / self.hz

    def shifted(self, by_octaves: int) -> "Frequency":
        """Return this frequency moved up (or down, if negative) by whole octaves."""
        return Frequency(self.hz * 2.0 ** by_octaves)

    def distance_in_octaves(self, to: "Frequency") -> int:
        """Number of whole octaves ``to`` lies above this frequency (floored)."""
        return int(np.floor(np.log2(to.hz / self.hz)))

    def distance(self, to: "Frequency") -> MusicalDistance:
        """Distance in cents from this frequency to ``to``.

        Positive when ``to`` is higher than this frequency.
        """
        return MusicalDistance(float(CENTS_PER_OCTAVE * np.log2(to.hz / self.hz)))

    def __float__(self) -> float:
        return self.hz

    def __str__(self):
        return f"{self.hz:.2f} Hz"

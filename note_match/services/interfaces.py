from abc import ABC, abstractmethod
from typing import Optional

from ..scale_note import Match


class IPitchEstimator(ABC):
    """An abstract interface for the pitch estimator feeding the tuner."""

    @abstractmethod
    def read(self) -> Optional[float]:
        """Returns the latest fundamental frequency in Hz, or None when silent."""
        pass


class IMatchPresenter(ABC):
    """An abstract interface for components that render match results."""

    @abstractmethod
    def present(self, match: Optional[Match]) -> None:
        """Renders a match, or the absence of one."""
        pass

"""Services connecting the note matching core to its collaborators."""

from .interfaces import IPitchEstimator, IMatchPresenter
from .tuner import TunerService

__all__ = ["IPitchEstimator", "IMatchPresenter", "TunerService"]

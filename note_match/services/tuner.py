from typing import Any, Callable, Dict, Optional, Union

from ..core.events import EventEmitter, MatchEventType
from ..errors import InvalidFrequencyError
from ..frequency import Frequency
from ..logger import get_logger
from ..scale_note import Match, ScaleNote, closest_note
from .interfaces import IMatchPresenter, IPitchEstimator

logger = get_logger(__name__)


class TunerService:
    """Turns raw pitch estimates into note matches for presenters.

    This is the input boundary of the matching core: silence, invalid numbers
    and frequencies outside the configured window are rejected here and never
    reach ``closest_note``.
    """

    def __init__(
        self,
        estimator: Optional[IPitchEstimator] = None,
        transposition: Union[ScaleNote, str] = ScaleNote.C,
        use_flats: bool = False,
        min_frequency: float = 0.0,
        max_frequency: float = 0.0,
        in_tune_cents: float = 5.0,
        strict_invariants: bool = True,
    ) -> None:
        """Initialize the TunerService.

        Args:
            estimator: Pitch estimator polled by ``poll``
            transposition: Written transposition applied to every match
            use_flats: If True, describe notes with flats (e.g. 'Bb') instead of sharps
            min_frequency: Lowest accepted frequency in Hz, 0 for no limit
            max_frequency: Highest accepted frequency in Hz, 0 for no limit
            in_tune_cents: Distance in cents within which a match counts as in tune
            strict_invariants: Raise on an internal matching invariant violation
        """
        if isinstance(transposition, str):
            transposition = ScaleNote.from_name(transposition)
        if min_frequency and max_frequency and min_frequency > max_frequency:
            raise ValueError(
                f"min_frequency ({min_frequency}) is above max_frequency ({max_frequency})"
            )

        self._estimator = estimator
        self.transposition = transposition
        self.use_flats = use_flats
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency
        self.in_tune_cents = in_tune_cents
        self.strict_invariants = strict_invariants
        self._events = EventEmitter()

        logger.info(
            f"Tuner service initialized: transposition={transposition.names}, "
            f"window=({min_frequency or '-'}, {max_frequency or '-'}) Hz"
        )

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], estimator: Optional[IPitchEstimator] = None
    ) -> "TunerService":
        """Build a service from a ConfigManager "tuner" section."""
        return cls(
            estimator=estimator,
            transposition=config.get("transposition", "C"),
            use_flats=bool(config.get("use_flats", False)),
            min_frequency=float(config.get("min_frequency", 0.0)),
            max_frequency=float(config.get("max_frequency", 0.0)),
            in_tune_cents=float(config.get("in_tune_cents", 5.0)),
            strict_invariants=bool(config.get("strict_invariants", True)),
        )

    def on_match(self, callback: Callable[[Optional[Match]], None]) -> None:
        """Register a callback for every polled result, including None."""
        self._events.on(MatchEventType.NOTE_MATCHED, callback)

    def on_rejected(self, callback: Callable[[Any], None]) -> None:
        """Register a callback for raw values rejected at the boundary."""
        self._events.on(MatchEventType.INPUT_REJECTED, callback)

    def add_presenter(self, presenter: IMatchPresenter) -> None:
        self.on_match(presenter.present)

    def _in_window(self, frequency: Frequency) -> bool:
        if self.min_frequency and frequency.hz < self.min_frequency:
            return False
        if self.max_frequency and frequency.hz > self.max_frequency:
            return False
        return True

    def match(self, raw: Optional[Any]) -> Optional[Match]:
        """Match a raw pitch estimate.

        Args:
            raw: Frequency in Hz from the pitch estimator, or None for silence

        Returns:
            The transposed match, or None if there was no usable input
        """
        if raw is None:
            logger.debug("No pitch input (silence)")
            return None

        try:
            frequency = Frequency.of(raw)
        except InvalidFrequencyError as e:
            logger.warning(f"Rejected pitch input: {e}")
            self._events.emit(MatchEventType.INPUT_REJECTED, raw)
            return None

        if not self._in_window(frequency):
            logger.debug(f"Frequency {frequency} outside accepted window")
            self._events.emit(MatchEventType.INPUT_REJECTED, raw)
            return None

        result = closest_note(frequency, strict=self.strict_invariants)
        transposed = result.in_transposition(self.transposition)
        logger.debug(f"Matched {frequency} -> {result} (written {transposed})")
        return transposed

    def poll(self) -> Optional[Match]:
        """Read the estimator once and hand the result to every presenter."""
        if self._estimator is None:
            raise RuntimeError("TunerService.poll() requires a pitch estimator")

        result = self.match(self._estimator.read())
        self._events.emit(MatchEventType.NOTE_MATCHED, result)
        return result

    def describe(self, match: Optional[Match]) -> str:
        """Render a match as text, e.g. 'A4 +19.6 cents (sharp)'."""
        if match is None:
            return "---"

        if match.distance.is_in_tune(self.in_tune_cents):
            state = "in tune"
        elif match.distance.is_flat:
            state = "flat"
        else:
            state = "sharp"
        return f"{match.label(self.use_flats)} {match.distance} ({state})"

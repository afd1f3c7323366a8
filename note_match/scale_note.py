"""Twelve-tone equal temperament notes and nearest-note matching.

A measured frequency is matched to a note in three steps:

1. Octave normalization folds the input into the octave-0 range [C0, B0].
2. A fast search picks the note with the smallest absolute cents distance to
   the folded frequency.
3. When the fast result sits on the B/C seam (a flat C or a sharp B), the
   candidates on either side of the seam are re-measured against the
   original input and the nearest one wins.

See https://en.wikipedia.org/wiki/Equal_temperament
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from .errors import NoteMatchInvariantError
from .frequency import Frequency, MusicalDistance
from .logger import get_logger

logger = get_logger(__name__)

# Raise on the unreachable correction fall-through unless running with -O.
STRICT_INVARIANTS: bool = __debug__

NOTE_COUNT = 12


class ScaleNote(Enum):
    """A pitch class in the chromatic scale, valued by its index from C."""

    C = 0
    CS = 1
    D = 2
    DS = 3
    E = 4
    F = 5
    FS = 6
    G = 7
    GS = 8
    A = 9
    AS = 10
    B = 11

    @property
    def index(self) -> int:
        return self.value

    @property
    def frequency(self) -> Frequency:
        """Frequency of this note at octave 0 in standard pitch (A4 = 440 Hz)."""
        return _OCTAVE_ZERO_FREQUENCIES[self]

    @property
    def name_sharp(self) -> str:
        return _SHARP_NAMES[self.value]

    @property
    def name_flat(self) -> str:
        return _FLAT_NAMES[self.value]

    @property
    def names(self) -> str:
        """Display label with both spellings for accidentals, e.g. 'C#/Db'."""
        if self.name_sharp == self.name_flat:
            return self.name_sharp
        return f"{self.name_sharp}/{self.name_flat}"

    def label(self, use_flats: bool = False) -> str:
        return self.name_flat if use_flats else self.name_sharp

    @classmethod
    def all_notes(cls) -> List["ScaleNote"]:
        """All twelve notes in chromatic order starting from C."""
        return list(cls)

    @classmethod
    def from_name(cls, name: str) -> "ScaleNote":
        """Parse a note label such as 'C#', 'Bb', 'f♯' or 'Cb'.

        Raises:
            ValueError: If the label is not a recognised note name.
        """
        if not isinstance(name, str):
            raise ValueError(f"Invalid note name: {name!r}")
        cleaned = name.strip().replace("♯", "#").replace("♭", "b")
        if not cleaned:
            raise ValueError(f"Invalid note name: {name!r}")
        cleaned = cleaned[0].upper() + cleaned[1:]
        try:
            return _NAME_LOOKUP[cleaned]
        except KeyError:
            raise ValueError(f"Invalid note name: {name!r}") from None

    @staticmethod
    def closest_note(
        frequency: Union[Frequency, float], strict: Optional[bool] = None
    ) -> "Match":
        return closest_note(frequency, strict=strict)


_SHARP_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
_FLAT_NAMES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Published octave-0 reference table: https://en.wikipedia.org/wiki/Standard_pitch
_OCTAVE_ZERO_FREQUENCIES: Dict[ScaleNote, Frequency] = {
    ScaleNote.C: Frequency(16.35160),
    ScaleNote.CS: Frequency(17.32391),
    ScaleNote.D: Frequency(18.35405),
    ScaleNote.DS: Frequency(19.44544),
    ScaleNote.E: Frequency(20.60172),
    ScaleNote.F: Frequency(21.82676),
    ScaleNote.FS: Frequency(23.12465),
    ScaleNote.G: Frequency(24.49971),
    ScaleNote.GS: Frequency(25.95654),
    ScaleNote.A: Frequency(27.5),
    ScaleNote.AS: Frequency(29.13524),
    ScaleNote.B: Frequency(30.86771),
}

_NAME_LOOKUP: Dict[str, ScaleNote] = {
    **{name: note for name, note in zip(_SHARP_NAMES, ScaleNote)},
    **{name: note for name, note in zip(_FLAT_NAMES, ScaleNote)},
    # Enharmonic spellings that cross a natural half step
    "B#": ScaleNote.C,
    "E#": ScaleNote.F,
    "Cb": ScaleNote.B,
    "Fb": ScaleNote.E,
}


@dataclass(frozen=True)
class Match:
    """A note match for an input frequency."""

    note: ScaleNote  # The matched note
    octave: int  # Octave of the matched note, never below 0
    distance: MusicalDistance  # Input frequency relative to the matched note

    @property
    def frequency(self) -> Frequency:
        """The matched note's frequency, adjusted by octave."""
        return self.note.frequency.shifted(self.octave)

    def in_transposition(self, transposition: ScaleNote) -> "Match":
        """Map this match onto the written pitch of a transposing instrument.

        Args:
            transposition: The concert note sounded when the instrument reads
                a written C (e.g. ``ScaleNote.AS`` for a Bb clarinet).

        Returns:
            The match relabelled for the transposition. The distance is a
            property of the measured sound and is carried over unchanged.
        """
        if transposition.index == 0:
            return self

        all_notes = ScaleNote.all_notes()
        note_offset = (NOTE_COUNT - transposition.index) + self.note.index
        transposed_note = all_notes[note_offset % NOTE_COUNT]
        octave_shift = 1 if note_offset > NOTE_COUNT - 1 else 0
        return Match(
            note=transposed_note,
            octave=self.octave + octave_shift,
            distance=self.distance,
        )

    def label(self, use_flats: bool = False) -> str:
        """Scientific pitch notation label, e.g. 'A4' or 'Bb3'."""
        return f"{self.note.label(use_flats)}{self.octave}"

    def __str__(self):
        return f"{self.label()} {self.distance}"


def closest_note(
    frequency: Union[Frequency, float], strict: Optional[bool] = None
) -> Match:
    """Find the closest note to the specified frequency.

    Args:
        frequency: The frequency to match, as a Frequency or a number of Hz.
        strict: Raise NoteMatchInvariantError if the boundary correction
            cannot settle. Defaults to ``STRICT_INVARIANTS``.

    Returns:
        The closest note match. Inputs below C0 keep their pitch class and
        distance but report octave 0.

    Raises:
        InvalidFrequencyError: If a number is given that is not finite and positive.
        NoteMatchInvariantError: If strict and the correction pass falls through.
    """
    frequency = Frequency.of(frequency)
    if strict is None:
        strict = STRICT_INVARIANTS

    all_notes = ScaleNote.all_notes()
    lowest = all_notes[0].frequency
    highest = all_notes[-1].frequency

    # Shift frequency octave to be within range of scale note frequencies.
    normalized = frequency
    while normalized > highest:
        normalized = normalized.shifted(-1)
    while normalized < lowest:
        normalized = normalized.shifted(1)

    # min() keeps the first of equal candidates, so ties resolve towards C.
    nearest = min(all_notes, key=lambda note: abs(note.frequency.distance(normalized)))
    octave = normalized.distance_in_octaves(frequency)
    fast_result = Match(
        note=nearest,
        octave=max(octave, 0),
        distance=nearest.frequency.distance(normalized),
    )
    logger.debug(
        f"Fast match for {frequency}: normalized={normalized}, "
        f"octave={octave}, result={fast_result}"
    )

    on_seam = (fast_result.note is ScaleNote.C and fast_result.distance.is_flat) or (
        fast_result.note is ScaleNote.B and fast_result.distance.is_sharp
    )
    if not on_seam:
        return fast_result

    # The fast result can be on the wrong side of the B/C octave boundary.
    # Candidates ascend in pitch, so the first one that is further away than
    # the running best ends the search.
    best: Optional[Match] = None
    best_octave = octave
    for candidate_octave in (octave, octave + 1):
        for note in (ScaleNote.C, ScaleNote.B):
            distance = note.frequency.shifted(candidate_octave).distance(frequency)
            if best is not None and abs(distance) > abs(best.distance):
                logger.debug(
                    f"Boundary correction for {frequency}: {fast_result} -> "
                    f"{best} (octave {best_octave})"
                )
                return best
            best_octave = candidate_octave
            best = Match(note=note, octave=max(candidate_octave, 0), distance=distance)

    logger.error(f"Closest note could not be found for {frequency}")
    if strict:
        raise NoteMatchInvariantError(
            f"Boundary correction did not converge for {frequency}"
        )
    return fast_result

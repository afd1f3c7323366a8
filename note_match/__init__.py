"""Closest-note matching for twelve-tone equal temperament."""

from .errors import InvalidFrequencyError, NoteMatchError, NoteMatchInvariantError
from .frequency import Frequency, MusicalDistance
from .scale_note import Match, ScaleNote, closest_note

__all__ = [
    "Frequency",
    "InvalidFrequencyError",
    "Match",
    "MusicalDistance",
    "NoteMatchError",
    "NoteMatchInvariantError",
    "ScaleNote",
    "closest_note",
]

"""Exception types raised by the note matching core."""


class NoteMatchError(Exception):
    """Base class for all note matching errors."""


class InvalidFrequencyError(NoteMatchError, ValueError):
    """Raised when a frequency is not a finite, positive number of Hertz."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid frequency value: {value!r}")


class NoteMatchInvariantError(NoteMatchError, AssertionError):
    """Raised when the boundary correction pass fails to settle on a match."""

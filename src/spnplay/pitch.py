"""
Pitch resolution for scientific pitch notation.

Maps a pitch class and octave to a frequency in 12-tone equal temperament
with the reference pitch fixed at A4 = 440 Hz. Alternate tunings are not
supported.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import TYPE_CHECKING, Iterable, Optional

import numpy as np
from numpy.typing import ArrayLike

from spnplay.config import REFERENCE_FREQUENCY, REFERENCE_OCTAVE, REFERENCE_PITCH_CLASS
from spnplay.errors import UnknownPitchError
from spnplay.logger import get_logger

if TYPE_CHECKING:
    from spnplay.notation import NoteToken

logger = get_logger(__name__)

# Index 0 is C. The order defines semitone distances.
PITCH_CLASSES: tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)

_PITCH_INDEX: dict[str, int] = {name: i for i, name in enumerate(PITCH_CLASSES)}


class EqualTemperament:
    """
    12-tone equal temperament.

    Each semitone is a frequency ratio of 2^(1/12). Pitches are expressed
    as semitone distances from the reference pitch (A4), so distance 0 is
    the reference frequency, 12 is one octave up, -9 is middle C.

    Example:
        >>> et = EqualTemperament()
        >>> et.pitch_to_freq(0)
        440.0
        >>> et.pitch_to_freq([-9, 3])
        array([261.6255..., 523.2511...])
    """

    DIVISIONS = 12

    def __init__(self, reference_freq: float = REFERENCE_FREQUENCY):
        if reference_freq <= 0:
            raise ValueError(f"Reference frequency must be positive, got {reference_freq}")
        self._reference_freq = float(reference_freq)

    @property
    def reference_freq(self) -> float:
        """Frequency of semitone distance 0, in Hz."""
        return self._reference_freq

    def pitch_to_freq(self, distance: ArrayLike) -> np.ndarray:
        """Convert semitone distance(s) from the reference to frequency in Hz."""
        distance = np.asarray(distance, dtype=np.float64)
        return self._reference_freq * (2.0 ** (distance / self.DIVISIONS))

    def __repr__(self) -> str:
        return f"EqualTemperament(reference_freq={self._reference_freq})"


_TEMPERAMENT = EqualTemperament()


def pitch_class_index(pitch_class: str) -> int:
    """
    Look up a pitch name in the 12-entry table, case-insensitively.

    Raises:
        UnknownPitchError: If the name is not one of the 12 pitch classes
    """
    index = _PITCH_INDEX.get(pitch_class.upper())
    if index is None:
        raise UnknownPitchError(f"Invalid note {pitch_class}", token=pitch_class)
    return index


def semitone_distance(pitch_class: str, octave: int) -> int:
    """
    Semitone distance from A4 to the given pitch.

    Example:
        >>> semitone_distance("C", 4)
        -9
        >>> semitone_distance("E", 2)
        -29
    """
    note_distance = pitch_class_index(pitch_class) - _PITCH_INDEX[REFERENCE_PITCH_CLASS]
    octave_distance = octave - REFERENCE_OCTAVE
    return note_distance + octave_distance * EqualTemperament.DIVISIONS


def resolve(pitch_class: str, octave: int) -> float:
    """
    Resolve a pitch class and octave to a frequency in Hz.

    The result is rounded to 2 decimal places.

    Args:
        pitch_class: One of the 12 pitch names (any case), e.g. "C#"
        octave: SPN octave number (A4 = 440 Hz)

    Returns:
        Frequency in Hz

    Raises:
        UnknownPitchError: If pitch_class is not recognized

    Example:
        >>> resolve("A", 4)
        440.0
        >>> resolve("C#", 4)
        277.18
    """
    distance = semitone_distance(pitch_class, octave)
    return float(np.round(_TEMPERAMENT.pitch_to_freq(distance), 2))


@dataclass(frozen=True)
class ResolvedNote:
    """A note event with its frequency resolved. Rests have no frequency."""

    frequency_hz: Optional[float]
    duration_units: Fraction
    is_rest: bool = False
    token: Optional[str] = None


def resolve_token(token: NoteToken) -> ResolvedNote:
    """Resolve one parsed token; rests resolve to silence (frequency None)."""
    if token.is_rest:
        return ResolvedNote(None, token.duration_units, is_rest=True, token=token.text)
    try:
        frequency = resolve(token.pitch_class, token.octave)
    except UnknownPitchError as e:
        raise UnknownPitchError(f"Invalid unit: {token.text}", token=token.text) from e
    return ResolvedNote(frequency, token.duration_units, is_rest=False, token=token.text)


def resolve_notes(tokens: Iterable[NoteToken]) -> list[ResolvedNote]:
    """Resolve a sequence of parsed tokens, failing on the first bad pitch."""
    notes = [resolve_token(token) for token in tokens]
    logger.debug(f"Resolved {len(notes)} notes")
    return notes

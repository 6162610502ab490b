"""
Musical time conversion utility functions.

Duration arithmetic is exact (fractions.Fraction) up to the point where
beats become seconds; time conversions accept numpy arrays or scalars.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from fractions import Fraction

import numpy as np
from numpy.typing import ArrayLike

# Dotted notes last one and a half times their undotted value.
DOT_MODIFIER = Fraction(3, 2)

# A quarter note is one beat.
BEATS_PER_WHOLE_NOTE = 4


def duration_units(denominator: int, dotted: bool = False) -> Fraction:
    """
    Convert a note-value denominator to a duration in beats.

    Args:
        denominator: Note value, e.g. 4 for a quarter note, 16 for a sixteenth.
                     Must be positive.
        dotted: True for a dotted note (x 1.5)

    Returns:
        Duration in beats (quarter note = 1)

    Raises:
        ValueError: If denominator is not positive

    Example:
        >>> duration_units(16)
        Fraction(1, 4)
        >>> duration_units(8, dotted=True)
        Fraction(3, 4)
        >>> duration_units(2)
        Fraction(2, 1)
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    units = Fraction(BEATS_PER_WHOLE_NOTE, denominator)
    if dotted:
        units *= DOT_MODIFIER
    return units


def beat_duration(bpm: float) -> float:
    """
    Seconds per beat at the given tempo.

    Example:
        >>> beat_duration(120)
        0.5
    """
    if bpm <= 0:
        raise ValueError(f"bpm must be positive, got {bpm}")
    return 60.0 / bpm


def beats_to_seconds(beats: ArrayLike, bpm: float) -> np.ndarray:
    """
    Convert a beat position or duration to seconds.

    Example:
        >>> beats_to_seconds(3, 120)
        1.5
        >>> beats_to_seconds([0, 1, 2.5], 60)
        array([0. , 1. , 2.5])
    """
    beats = np.asarray(beats, dtype=np.float64)
    return beats * beat_duration(bpm)


def samples_to_seconds(samples: ArrayLike, sample_rate: float) -> np.ndarray:
    """
    Convert sample count to seconds.

    Example:
        >>> samples_to_seconds(22050, 44100)
        0.5
    """
    samples = np.asarray(samples, dtype=np.float64)
    return samples / sample_rate


def seconds_to_samples(seconds: ArrayLike, sample_rate: float) -> np.ndarray:
    """
    Convert seconds to sample count.

    Returns a float; callers round as appropriate.

    Example:
        >>> seconds_to_samples(0.5, 44100)
        22050.0
    """
    seconds = np.asarray(seconds, dtype=np.float64)
    return seconds * sample_rate

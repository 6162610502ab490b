"""
Naive oscillators for the four voice waveforms.

These are not band-limited (no BLIT/BLEP); high notes alias. Phase is 0 at
the first sample. Output is in [-1, 1].

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

import numpy as np

from spnplay.schedule import Waveform


def phase(frequency: float, n_samples: int, sample_rate: int) -> np.ndarray:
    """Phase in cycles, wrapped to [0, 1), for n_samples starting at 0."""
    idx = np.arange(n_samples, dtype=np.float64)
    return np.mod(idx * (frequency / float(sample_rate)), 1.0)


def oscillate(
    waveform: Waveform,
    frequency: float,
    n_samples: int,
    sample_rate: int,
) -> np.ndarray:
    """
    Generate n_samples of the given waveform.

    Args:
        waveform: Oscillator shape
        frequency: Frequency in Hz
        n_samples: Number of samples to generate
        sample_rate: Sample rate in Hz

    Returns:
        1-D float64 array
    """
    p = phase(frequency, n_samples, sample_rate)
    if waveform == Waveform.SINE:
        return np.sin(2.0 * np.pi * p)
    if waveform == Waveform.SAWTOOTH:
        # Rising ramp, -1 -> +1 each cycle
        return 2.0 * p - 1.0
    if waveform == Waveform.SQUARE:
        return np.where(p < 0.5, 1.0, -1.0)
    if waveform == Waveform.TRIANGLE:
        # -1 at phase 0, +1 at phase 0.5
        return 1.0 - 4.0 * np.abs(p - 0.5)
    raise ValueError(f"Unsupported waveform {waveform!r}")

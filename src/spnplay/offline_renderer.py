"""
OfflineRenderer - realizes schedules as sample buffers.

Each schedule entry becomes an oscillator of the entry's waveform, active
from its start time to its finish time, multiplied by its envelope. Voices
are summed into one mono buffer.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

import math

import numpy as np
import soundfile as sf

from spnplay.config import DEFAULT_SAMPLE_RATE
from spnplay.conversions import samples_to_seconds, seconds_to_samples
from spnplay.logger import get_logger
from spnplay.oscillators import oscillate
from spnplay.schedule import ScheduleEntry, VoiceSchedule
from spnplay.session import Session

logger = get_logger(__name__)


class OfflineRenderer:
    """
    Renders entries, voices and sessions to float32 numpy arrays.

    Time t seconds maps to sample round(t * sample_rate). Buffers span
    [0, ceil(finish_time * sample_rate)).

    Args:
        sample_rate: Audio sample rate in Hz (default: 44100)
        normalize: Scale the session mix down when its peak exceeds 1.0
                   (default: True)

    Example:
        session = build_session([VoiceConfig("C4/4 E4/4 G4/2")])
        samples = OfflineRenderer().render_session(session)
        write_wav("melody.wav", samples, 44100)
    """

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE, normalize: bool = True):
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self._sample_rate = int(sample_rate)
        self._normalize = normalize

    @property
    def sample_rate(self) -> int:
        """The sample rate in Hz."""
        return self._sample_rate

    def length_for(self, finish_time: float) -> int:
        """Number of samples needed to hold audio up to finish_time."""
        return int(math.ceil(seconds_to_samples(finish_time, self._sample_rate)))

    def _first_sample(self, entry: ScheduleEntry) -> int:
        return int(np.round(seconds_to_samples(entry.start_time, self._sample_rate)))

    def render_entry(self, entry: ScheduleEntry) -> np.ndarray:
        """
        Render one entry, covering [entry.start_time, entry.finish_time).

        Returns:
            1-D float32 array; sample 0 is at entry.start_time
        """
        first = self._first_sample(entry)
        last = self.length_for(entry.finish_time)
        n_samples = max(last - first, 0)
        wave = oscillate(entry.waveform, entry.frequency_hz, n_samples, self._sample_rate)
        times = samples_to_seconds(first + np.arange(n_samples), self._sample_rate)
        gain = entry.envelope.value_at(times)
        return (wave * gain).astype(np.float32)

    def _mix_entry(self, out: np.ndarray, entry: ScheduleEntry) -> None:
        data = self.render_entry(entry)
        first = self._first_sample(entry)
        end = min(first + len(data), len(out))
        if end > first:
            out[first:end] += data[: end - first]

    def render_voice(self, voice: VoiceSchedule) -> np.ndarray:
        """Render a voice from time 0 to its finish time."""
        out = np.zeros(self.length_for(voice.finish_time), dtype=np.float32)
        for entry in voice.entries:
            self._mix_entry(out, entry)
        return out

    def render_session(self, session: Session) -> np.ndarray:
        """
        Render and sum every voice from time 0 to the session finish time.
        """
        out = np.zeros(self.length_for(session.finish_time), dtype=np.float32)
        for voice in session.voices:
            for entry in voice.entries:
                self._mix_entry(out, entry)

        peak = float(np.max(np.abs(out))) if len(out) else 0.0
        if self._normalize and peak > 1.0:
            logger.debug(f"Mix peak {peak:.3f} exceeds full scale, normalizing")
            out /= peak

        logger.info(
            f"Rendered {len(session.voices)} voices, "
            f"{len(out)} samples at {self._sample_rate} Hz"
        )
        return out

    def __repr__(self) -> str:
        return f"OfflineRenderer(sample_rate={self._sample_rate}, normalize={self._normalize})"


def write_wav(
    path: str,
    samples: np.ndarray,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    subtype: str = "PCM_16",
) -> None:
    """
    Write a rendered buffer to a WAV file.

    Args:
        path: Output file path
        samples: 1-D (mono) or (frames, channels) array
        sample_rate: Sample rate in Hz
        subtype: soundfile subtype, e.g. 'PCM_16', 'PCM_24', 'FLOAT'
    """
    data = np.asarray(samples, dtype=np.float32)
    sf.write(path, data, sample_rate, subtype=subtype)
    logger.info(f"Wrote {data.shape[0]} frames to {path}")

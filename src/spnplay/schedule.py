"""
Schedule builder: turns a sequence of note events into timed envelope
instructions for one voice.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from itertools import accumulate
from numbers import Real
from typing import Iterator, Optional, Protocol, Sequence, Union

from spnplay.config import RELEASE_FLOOR, handle_error
from spnplay.conversions import beats_to_seconds
from spnplay.envelope import Envelope
from spnplay.logger import get_logger

logger = get_logger(__name__)


class Waveform(Enum):
    """Oscillator shape, constant per voice."""

    SINE = "sine"
    SAWTOOTH = "sawtooth"
    SQUARE = "square"
    TRIANGLE = "triangle"

    @classmethod
    def coerce(cls, value: Union["Waveform", str]) -> "Waveform":
        """Accept a Waveform or its name (any case)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            names = ", ".join(w.value for w in cls)
            raise ValueError(f"waveform must be one of {names}, got {value!r}") from None


@dataclass(frozen=True)
class Adsr:
    """
    Envelope parameters.

    attack, decay and release are fractions of each note's own duration,
    so the envelope scales with the note rather than with the tempo.
    sustain is the amplitude held between the end of decay and the note's
    stop time.
    """

    attack: float = 0.01
    decay: float = 0.01
    sustain: float = 1.0
    release: float = 0.01


class NoteEvent(Protocol):
    """What the builder needs from a note; pitch.ResolvedNote satisfies it."""

    frequency_hz: Optional[float]
    duration_units: Union[Fraction, float]
    is_rest: bool


@dataclass(frozen=True)
class ScheduleEntry:
    """One oscillator to realize: pitch, timing, gain envelope and shape."""

    index: int
    frequency_hz: float
    start_time: float
    stop_time: float
    envelope: Envelope
    waveform: Waveform

    @property
    def duration(self) -> float:
        """Nominal note length, stop_time - start_time."""
        return self.stop_time - self.start_time

    @property
    def finish_time(self) -> float:
        """When the release tail reaches silence."""
        return self.envelope.end


@dataclass(frozen=True)
class VoiceSchedule:
    """
    The built schedule for one voice.

    Unpacks as (entries, finish_time).
    """

    entries: tuple[ScheduleEntry, ...]
    finish_time: float
    bpm: float
    waveform: Waveform
    total_beats: Union[Fraction, float] = Fraction(0)

    @property
    def duration(self) -> float:
        """Nominal end of the last note or rest, ignoring release tails."""
        return float(beats_to_seconds(float(self.total_beats), self.bpm))

    def __iter__(self) -> Iterator:
        return iter((list(self.entries), self.finish_time))

    def __len__(self) -> int:
        return len(self.entries)


def _checked_adsr(adsr: Adsr) -> Adsr:
    for field in ("attack", "decay", "sustain", "release"):
        value = getattr(adsr, field)
        if not isinstance(value, Real):
            raise TypeError(f"ADSR {field} must be a number, got {value!r}")
        if value < 0:
            if handle_error(
                f"ADSR {field} must be >= 0, got {value}",
                exception_class=ValueError,
            ):
                adsr = replace(adsr, **{field: 0.0})
    return adsr


def adsr_envelope(start_time: float, stop_time: float, adsr: Adsr) -> Envelope:
    """
    Build the five-breakpoint envelope for one note.

    Silence at start_time, full amplitude after the attack, the sustain level
    after the decay, sustain held until stop_time, then a release ramp to
    RELEASE_FLOOR. Ramp lengths are fractions of (stop_time - start_time).
    When attack + decay exceed the note, their breakpoints are clamped to
    stop_time.
    """
    note_duration = stop_time - start_time
    attack_end = start_time + note_duration * adsr.attack
    decay_end = attack_end + note_duration * adsr.decay
    if decay_end > stop_time:
        logger.debug(
            f"attack + decay ({adsr.attack} + {adsr.decay}) exceed note length, "
            f"clamping to stop time {stop_time}"
        )
        attack_end = min(attack_end, stop_time)
        decay_end = stop_time
    release_end = stop_time + note_duration * adsr.release

    return Envelope([
        (start_time, 0.0),
        (attack_end, 1.0),
        (decay_end, adsr.sustain),
        (stop_time, adsr.sustain),
        (release_end, RELEASE_FLOOR),
    ])


def build_schedule(
    notes: Sequence[NoteEvent],
    bpm: float,
    adsr: Adsr,
    waveform: Union[Waveform, str] = Waveform.SINE,
) -> VoiceSchedule:
    """
    Map note events to absolute start/stop times and envelopes.

    Each note starts at the cumulative beat position of the notes before it.
    Rests advance that position but produce no entry.

    Args:
        notes: Note events in playing order (e.g. from pitch.resolve_notes)
        bpm: Tempo in quarter-note beats per minute. Must be positive.
        adsr: Envelope parameters
        waveform: Oscillator shape for every entry

    Returns:
        VoiceSchedule with entries in input order and the voice finish time
        (the latest release end, 0.0 if nothing sounds)

    Raises:
        ValueError: If bpm is not positive, the waveform is unknown, or (in
                    STRICT error mode) an ADSR value is negative
    """
    # Beat positions of every note boundary, summed exactly
    boundaries = list(accumulate((note.duration_units for note in notes), initial=Fraction(0)))
    times = beats_to_seconds([float(b) for b in boundaries], bpm)
    waveform = Waveform.coerce(waveform)
    adsr = _checked_adsr(adsr)

    entries: list[ScheduleEntry] = []
    finish_time = 0.0

    for index, note in enumerate(notes):
        if note.is_rest:
            continue
        start_time = float(times[index])
        stop_time = float(times[index + 1])

        entry = ScheduleEntry(
            index=index,
            frequency_hz=float(note.frequency_hz),
            start_time=start_time,
            stop_time=stop_time,
            envelope=adsr_envelope(start_time, stop_time, adsr),
            waveform=waveform,
        )
        entries.append(entry)
        finish_time = max(finish_time, entry.finish_time)

    logger.debug(
        f"Scheduled {len(entries)} entries at {bpm} bpm, "
        f"finish_time={finish_time:.3f}s"
    )
    return VoiceSchedule(
        entries=tuple(entries),
        finish_time=finish_time,
        bpm=bpm,
        waveform=waveform,
        total_beats=boundaries[-1],
    )

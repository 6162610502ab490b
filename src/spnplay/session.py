"""
Multi-voice coordinator: builds one schedule per voice and reduces them to
a single playback finish time.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from spnplay.logger import get_logger
from spnplay.notation import parse
from spnplay.pitch import resolve_notes
from spnplay.schedule import Adsr, VoiceSchedule, Waveform, build_schedule

logger = get_logger(__name__)


@dataclass(frozen=True)
class VoiceConfig:
    """Everything needed to build one voice."""

    notation: str
    bpm: float = 100
    adsr: Adsr = field(default_factory=Adsr)
    waveform: Union[Waveform, str] = Waveform.SINE


@dataclass(frozen=True)
class Session:
    """
    A set of voices sharing one start instant (time 0).

    finish_time is the latest finish time over all voices, 0.0 when there
    are none.
    """

    voices: tuple[VoiceSchedule, ...]
    finish_time: float

    def is_finished(self, clock_time: float) -> bool:
        """True once clock_time (seconds since start) is past finish_time."""
        return clock_time > self.finish_time

    def __len__(self) -> int:
        return len(self.voices)


def build_voice(config: VoiceConfig) -> VoiceSchedule:
    """
    Parse, resolve and schedule a single voice.

    Raises:
        ParseError: If the notation is malformed
        ValueError: If the tempo, waveform or envelope is invalid
    """
    notes = resolve_notes(parse(config.notation))
    return build_schedule(notes, config.bpm, config.adsr, config.waveform)


def build_session(voice_configs: Iterable[VoiceConfig]) -> Session:
    """
    Build every voice independently and combine them into a Session.

    Voices share no state, so the order they are built in does not matter.
    The first failure propagates; no partial session is returned.

    Args:
        voice_configs: One VoiceConfig per voice

    Returns:
        Session with voices in the order given
    """
    voices = tuple(build_voice(config) for config in voice_configs)
    finish_time = max((voice.finish_time for voice in voices), default=0.0)
    logger.info(f"Session built: {len(voices)} voices, finish_time={finish_time:.3f}s")
    return Session(voices=voices, finish_time=finish_time)

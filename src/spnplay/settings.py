"""
Editable per-voice settings and their validation state.

This is the layer a user interface talks to: it holds the raw notation text
and controls, recomputes the parsed notes and validity on demand, and turns
valid settings into a VoiceConfig for the session builder.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Union

from spnplay.config import MAX_BPM, MIN_BPM, handle_error
from spnplay.errors import NotationError
from spnplay.logger import get_logger
from spnplay.notation import parse
from spnplay.pitch import ResolvedNote, resolve_notes
from spnplay.presets import PRESETS
from spnplay.schedule import Adsr, Waveform
from spnplay.session import VoiceConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class SettingsState:
    """
    Result of validating a NotationSettings.

    error holds the message to display (naming the offending token for
    notation errors), or None when valid.
    """

    is_valid: bool
    notes: tuple[ResolvedNote, ...] = ()
    error: Optional[str] = None
    error_token: Optional[str] = None


@dataclass(frozen=True)
class NotationSettings:
    """One voice as edited by a user."""

    notation: str = ""
    bpm: float = 100
    waveform: Union[Waveform, str] = Waveform.SINE
    attack: float = 0.01
    decay: float = 0.01
    sustain: float = 1.0
    release: float = 0.01
    preset: Optional[str] = field(default=None, compare=False)

    @property
    def adsr(self) -> Adsr:
        return Adsr(self.attack, self.decay, self.sustain, self.release)

    def with_changes(self, **changes) -> "NotationSettings":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def validate(self) -> SettingsState:
        """
        Recompute notes and validity from the current fields.

        A BPM outside [MIN_BPM, MAX_BPM] makes the settings invalid even when
        the notation parses; its message takes precedence. error_token is set
        only when the reported error is a notation error.
        """
        notes: tuple[ResolvedNote, ...] = ()
        error: Optional[str] = None
        error_token: Optional[str] = None

        try:
            notes = tuple(resolve_notes(parse(self.notation)))
        except NotationError as e:
            error, error_token = str(e), e.token

        try:
            Waveform.coerce(self.waveform)
        except ValueError as e:
            error, error_token = str(e), None

        if not MIN_BPM <= self.bpm <= MAX_BPM:
            error, error_token = f"BPM must be between {MIN_BPM} and {MAX_BPM}", None

        if error is not None:
            logger.debug(f"Settings invalid: {error}")
            return SettingsState(False, (), error, error_token)
        return SettingsState(True, notes)

    def to_voice_config(self) -> VoiceConfig:
        return VoiceConfig(
            notation=self.notation,
            bpm=self.bpm,
            adsr=self.adsr,
            waveform=Waveform.coerce(self.waveform),
        )


def apply_preset(settings: NotationSettings, preset_name: str) -> NotationSettings:
    """
    Overwrite tempo, waveform and envelope with a named preset.

    The notation text is kept. The input is not modified.

    Raises:
        KeyError: If the preset is unknown (in LENIENT error mode a warning
                  is logged and the settings are returned unchanged)
    """
    preset = PRESETS.get(preset_name)
    if preset is None:
        handle_error(
            f"Unknown preset {preset_name!r}; choose from {sorted(PRESETS)}",
            exception_class=KeyError,
        )
        return settings
    return replace(
        settings,
        bpm=preset.bpm,
        waveform=preset.waveform,
        attack=preset.adsr.attack,
        decay=preset.adsr.decay,
        sustain=preset.adsr.sustain,
        release=preset.adsr.release,
        preset=preset_name,
    )

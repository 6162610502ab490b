"""
spnplay - turn scientific pitch notation melodies into timed ADSR schedules
and play several voices in parallel.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from spnplay.config import (
    ErrorMode,
    set_error_mode,
    get_error_mode,
    handle_error,
    RELEASE_FLOOR,
    MIN_BPM,
    MAX_BPM,
)
from spnplay.errors import NotationError, ParseError, UnknownPitchError
from spnplay.notation import NoteToken, parse, parse_token
from spnplay.pitch import (
    PITCH_CLASSES,
    EqualTemperament,
    ResolvedNote,
    resolve,
    resolve_notes,
    resolve_token,
    semitone_distance,
)
from spnplay.conversions import (
    duration_units,
    beat_duration,
    beats_to_seconds,
    samples_to_seconds,
    seconds_to_samples,
)
from spnplay.envelope import Breakpoint, Envelope
from spnplay.schedule import (
    Adsr,
    Waveform,
    ScheduleEntry,
    VoiceSchedule,
    adsr_envelope,
    build_schedule,
)
from spnplay.session import VoiceConfig, Session, build_voice, build_session
from spnplay.presets import Preset, PRESETS, get_preset
from spnplay.settings import NotationSettings, SettingsState, apply_preset
from spnplay.offline_renderer import OfflineRenderer, write_wav
from spnplay.backend import AudioBackend, BufferBackend, PlaybackMonitor, PlaybackState
from spnplay.player import Player
from spnplay.logger import set_global_logging, get_logger

__version__ = "0.1.0"

# Lazy imports for modules with heavy dependencies (sounddevice needs PortAudio)
_lazy_imports = {
    "SoundDeviceBackend": ("spnplay.audio_backend", "SoundDeviceBackend"),
}

def __getattr__(name):
    if name in _lazy_imports:
        module_name, attr_name = _lazy_imports[name]
        import importlib
        module = importlib.import_module(module_name)
        return getattr(module, attr_name)
    raise AttributeError(f"module 'spnplay' has no attribute {name!r}")

__all__ = [
    # Configuration
    "ErrorMode",
    "set_error_mode",
    "get_error_mode",
    "handle_error",
    "RELEASE_FLOOR",
    "MIN_BPM",
    "MAX_BPM",
    # Errors
    "NotationError",
    "ParseError",
    "UnknownPitchError",
    # Notation and pitch
    "NoteToken",
    "parse",
    "parse_token",
    "PITCH_CLASSES",
    "EqualTemperament",
    "ResolvedNote",
    "resolve",
    "resolve_notes",
    "resolve_token",
    "semitone_distance",
    # Conversion functions
    "duration_units",
    "beat_duration",
    "beats_to_seconds",
    "samples_to_seconds",
    "seconds_to_samples",
    # Scheduling
    "Breakpoint",
    "Envelope",
    "Adsr",
    "Waveform",
    "ScheduleEntry",
    "VoiceSchedule",
    "adsr_envelope",
    "build_schedule",
    "VoiceConfig",
    "Session",
    "build_voice",
    "build_session",
    # Presets and settings
    "Preset",
    "PRESETS",
    "get_preset",
    "NotationSettings",
    "SettingsState",
    "apply_preset",
    # Playback
    "OfflineRenderer",
    "write_wav",
    "AudioBackend",
    "BufferBackend",
    "PlaybackMonitor",
    "PlaybackState",
    "Player",
    "SoundDeviceBackend",
    # Logging utilities
    "set_global_logging",
    "get_logger",
    # Version
    "__version__",
]

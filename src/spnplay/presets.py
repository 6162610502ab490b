"""
Named instrument presets: tempo, waveform and envelope bundles.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from dataclasses import dataclass

from spnplay.schedule import Adsr, Waveform


@dataclass(frozen=True)
class Preset:
    bpm: int
    waveform: Waveform
    adsr: Adsr


PRESETS: dict[str, Preset] = {
    "piano": Preset(
        bpm=100,
        waveform=Waveform.SINE,
        adsr=Adsr(attack=0.01, decay=0.44, sustain=0.01, release=0.3),
    ),
    "synthesizer": Preset(
        bpm=200,
        waveform=Waveform.SAWTOOTH,
        adsr=Adsr(attack=0.01, decay=0.01, sustain=1.0, release=0.01),
    ),
    "drums": Preset(
        bpm=144,
        waveform=Waveform.TRIANGLE,
        adsr=Adsr(attack=0.01, decay=0.15, sustain=0.01, release=0.01),
    ),
}


def get_preset(name: str) -> Preset:
    """
    Look up a preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}; choose from {sorted(PRESETS)}") from None

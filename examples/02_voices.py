"""
02_voices.py

Build a three-voice session from presets, then either write it to a WAV
file or play it through the sound card.

Usage:
  python examples/02_voices.py
  python examples/02_voices.py 1
  python examples/02_voices.py a

Copyright (c) 2026 spnplay contributors
MIT License
"""

import time
from pathlib import Path

import spnplay as sp

SAMPLE_RATE = 44100

MELODY = "E4/4 E4/4 E4/4 D#4/8. A#4/16 E4/4 D#4/8. A#4/16 E4/2"
BASS = "E2/2 _/4 B2/4 E2/2 _/2"
BEAT = "C6/8 _/8 C6/8 _/8 C6/8 _/8 C6/8 _/8 C6/8 _/8 C6/8 _/8 C6/8 _/8 C6/8 _/8"


def _voices():
    melody = sp.apply_preset(sp.NotationSettings(MELODY), "piano")
    bass = sp.apply_preset(sp.NotationSettings(BASS), "synthesizer").with_changes(bpm=100)
    beat = sp.apply_preset(sp.NotationSettings(BEAT), "drums").with_changes(bpm=100)
    for settings in (melody, bass, beat):
        state = settings.validate()
        if not state.is_valid:
            raise SystemExit(f"invalid voice: {state.error}")
    return [melody, bass, beat]


def demo_write_wav():
    print("Write WAV")
    print("---------")
    session = sp.build_session(s.to_voice_config() for s in _voices())
    samples = sp.OfflineRenderer(sample_rate=SAMPLE_RATE).render_session(session)
    path = Path(__file__).parent / "voices.wav"
    sp.write_wav(str(path), samples, SAMPLE_RATE)
    print(f"{session.finish_time:.2f}s written to {path}")


def demo_play():
    print("Play")
    print("----")
    player = sp.Player()
    player.add_listener(lambda state: print(f"state: {state.value}"))
    player.play(_voices())
    while not player.poll():
        time.sleep(0.5)


DEMOS = {
    "Write WAV": demo_write_wav,
    "Play": demo_play,
}


if __name__ == "__main__":
    import sys

    sp.set_global_logging(level="INFO")
    items = list(DEMOS.items())

    choice = sys.argv[1].strip().lower() if len(sys.argv) > 1 else None
    if choice is None:
        for i, name in enumerate(DEMOS, start=1):
            print(f"  {i}: {name}")
        choice = input("Select demo (number or 'a' for all): ").strip().lower()

    if choice == "a":
        for fn in DEMOS.values():
            fn()
    elif choice.isdigit() and 1 <= int(choice) <= len(items):
        items[int(choice) - 1][1]()
    else:
        print(f"Invalid choice '{choice}'")

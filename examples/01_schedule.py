"""
Example 01: Parse a melody and print its schedule.

Shows the note tokens, resolved frequencies and the envelope breakpoints
for each scheduled note, then the voice finish time.

Copyright (c) 2026 spnplay contributors
MIT License
"""

import spnplay as sp

MELODY = (
    "E4/4 E4/4 E4/4 D#4/8. A#4/16 E4/4 D#4/8. A#4/16 E4/2 "
    "D5/4 D5/4 D5/4 D#5/8. A#4/16 F#4/4 D#4/8. A#4/16 E4/2"
)


def main():
    sp.set_global_logging(level="INFO")

    notes = sp.resolve_notes(sp.parse(MELODY))
    schedule = sp.build_schedule(
        notes,
        bpm=100,
        adsr=sp.Adsr(attack=0.25, decay=0.5, sustain=0.25, release=0.5),
        waveform="sine",
    )

    for entry in schedule.entries:
        print(
            f"{entry.index:3d}  {entry.frequency_hz:8.2f} Hz  "
            f"{entry.start_time:6.3f}s -> {entry.stop_time:6.3f}s  "
            f"(release ends {entry.finish_time:6.3f}s)"
        )
        for point in entry.envelope:
            print(f"       t={point.time:6.3f}  gain={point.value:.5f}")

    print()
    print(f"Voice finishes at {schedule.finish_time:.3f}s")


if __name__ == "__main__":
    main()

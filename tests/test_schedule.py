"""
Tests for the schedule builder.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from fractions import Fraction

import pytest

from spnplay import (
    RELEASE_FLOOR,
    Adsr,
    ErrorMode,
    ResolvedNote,
    ScheduleEntry,
    VoiceSchedule,
    Waveform,
    adsr_envelope,
    beats_to_seconds,
    build_schedule,
    parse,
    resolve_notes,
    set_error_mode,
)


def notes_for(notation):
    return resolve_notes(parse(notation))


ADSR = Adsr(attack=0.1, decay=0.2, sustain=0.5, release=0.5)


class TestAdsrEnvelope:
    """Test the five-breakpoint envelope."""

    def test_breakpoints(self):
        env = adsr_envelope(1.0, 3.0, ADSR)
        times = [p.time for p in env]
        values = [p.value for p in env]
        assert times == pytest.approx([1.0, 1.2, 1.6, 3.0, 4.0])
        assert values == pytest.approx([0.0, 1.0, 0.5, 0.5, RELEASE_FLOOR])

    def test_release_ends_above_zero(self):
        env = adsr_envelope(0.0, 1.0, ADSR)
        assert env.points[-1].value == RELEASE_FLOOR
        assert env.points[-1].value > 0.0

    def test_attack_and_decay_clamped_to_stop(self):
        """Attack + decay longer than the note stop at the stop time."""
        env = adsr_envelope(0.0, 1.0, Adsr(attack=0.8, decay=0.6, sustain=0.3, release=0.1))
        times = [p.time for p in env]
        assert times == pytest.approx([0.0, 0.8, 1.0, 1.0, 1.1])
        assert times == sorted(times)

    def test_attack_alone_clamped(self):
        env = adsr_envelope(0.0, 1.0, Adsr(attack=1.5, decay=0.1, sustain=0.3, release=0.1))
        times = [p.time for p in env]
        assert times == pytest.approx([0.0, 1.0, 1.0, 1.0, 1.1])

    def test_zero_fractions(self):
        env = adsr_envelope(0.0, 1.0, Adsr(attack=0.0, decay=0.0, sustain=1.0, release=0.0))
        assert [p.time for p in env] == [0.0, 0.0, 0.0, 1.0, 1.0]


class TestBuildSchedule:
    """Test schedule timing."""

    def test_cumulative_start_times(self):
        """Each note starts where the previous one stopped."""
        schedule = build_schedule(notes_for("C4/4 D4/8 E4/2"), 60, ADSR)
        assert [e.start_time for e in schedule.entries] == pytest.approx([0.0, 1.0, 1.5])
        assert [e.stop_time for e in schedule.entries] == pytest.approx([1.0, 1.5, 3.5])

    def test_rest_advances_without_entry(self):
        schedule = build_schedule(notes_for("C4/4 _/2 E4/4"), 120, ADSR)
        assert len(schedule.entries) == 2
        assert [e.index for e in schedule.entries] == [0, 2]
        assert schedule.entries[1].start_time == pytest.approx(1.5)

    def test_dotted_duration(self):
        schedule = build_schedule(notes_for("C4/8. D4/16"), 60, ADSR)
        assert schedule.entries[0].stop_time == pytest.approx(0.75)
        assert schedule.entries[1].start_time == pytest.approx(0.75)

    def test_entry_fields(self):
        schedule = build_schedule(notes_for("A4/4"), 120, ADSR, "square")
        entry = schedule.entries[0]
        assert isinstance(entry, ScheduleEntry)
        assert entry.frequency_hz == 440.0
        assert entry.waveform == Waveform.SQUARE
        assert entry.duration == pytest.approx(0.5)
        assert entry.envelope.start == entry.start_time

    def test_finish_time_includes_release_tail(self):
        schedule = build_schedule(notes_for("C4/4 E4/4"), 60, ADSR)
        last = schedule.entries[-1]
        assert last.stop_time == pytest.approx(2.0)
        assert schedule.finish_time == pytest.approx(2.5)
        assert schedule.finish_time == last.finish_time

    def test_finish_time_is_max_not_last(self):
        """A long release on an early note can outlast later notes."""
        schedule = build_schedule(
            notes_for("C4/1 E4/16"), 60, Adsr(attack=0.1, decay=0.1, sustain=0.5, release=1.0)
        )
        assert schedule.finish_time == pytest.approx(8.0)
        assert schedule.entries[-1].finish_time < schedule.finish_time

    def test_only_rests(self):
        schedule = build_schedule(notes_for("_/4 _/2"), 60, ADSR)
        assert schedule.entries == ()
        assert schedule.finish_time == 0.0
        assert schedule.duration == pytest.approx(3.0)

    def test_empty(self):
        schedule = build_schedule([], 60, ADSR)
        assert len(schedule) == 0
        assert schedule.finish_time == 0.0

    def test_unpacks_as_entries_and_finish_time(self):
        entries, finish_time = build_schedule(notes_for("C4/4"), 60, ADSR)
        assert len(entries) == 1
        assert finish_time == pytest.approx(1.5)

    def test_returns_voice_schedule(self):
        schedule = build_schedule(notes_for("C4/4 _/4"), 90, ADSR, Waveform.TRIANGLE)
        assert isinstance(schedule, VoiceSchedule)
        assert schedule.bpm == 90
        assert schedule.waveform == Waveform.TRIANGLE
        assert schedule.total_beats == 2

    def test_accepts_any_note_producer(self):
        notes = [
            ResolvedNote(440.0, 1.0),
            ResolvedNote(None, 0.5, is_rest=True),
            ResolvedNote(880.0, 0.5),
        ]
        schedule = build_schedule(notes, 60, ADSR)
        assert [e.start_time for e in schedule.entries] == pytest.approx([0.0, 1.5])

    def test_monotonic_times(self):
        schedule = build_schedule(
            notes_for("C4/16 _/8 D4/8. E4/2 _/1 F4/4 G4/12"), 137, ADSR
        )
        starts = [e.start_time for e in schedule.entries]
        stops = [e.stop_time for e in schedule.entries]
        assert starts == sorted(starts)
        assert stops == sorted(stops)
        for entry in schedule.entries:
            assert entry.stop_time >= entry.start_time
            times = [p.time for p in entry.envelope]
            assert times == sorted(times)

    def test_adjacent_notes_share_boundary(self):
        """Each note stops exactly where the next one starts."""
        schedule = build_schedule(notes_for("C4/16 D4/8. E4/12 F4/12 G4/12 A4/3"), 137, ADSR)
        entries = schedule.entries
        for before, after in zip(entries, entries[1:]):
            assert before.stop_time == after.start_time

    def test_times_follow_beat_positions(self):
        schedule = build_schedule(notes_for("C4/4 _/8 D4/8. E4/2"), 90, ADSR)
        starts = [e.start_time for e in schedule.entries]
        expected = beats_to_seconds([0.0, 1.5, 2.25], 90)
        assert starts == pytest.approx(list(expected))
        assert schedule.duration == pytest.approx(float(beats_to_seconds(4.25, 90)))

    def test_deterministic(self):
        """Identical inputs give identical schedules."""
        notes = notes_for("C4/4 E4/8. G4/16 _/4 C5/2")
        first = build_schedule(notes, 100, ADSR)
        second = build_schedule(notes, 100, ADSR)
        assert first == second
        assert [e.envelope.points for e in first.entries] == [
            e.envelope.points for e in second.entries
        ]

    def test_doubling_bpm_halves_times(self):
        notes = notes_for("C4/4 E4/8. G4/16 _/4 C5/2")
        slow = build_schedule(notes, 100, ADSR)
        fast = build_schedule(notes, 200, ADSR)
        for s, f in zip(slow.entries, fast.entries):
            assert f.start_time == pytest.approx(s.start_time / 2)
            assert f.stop_time == pytest.approx(s.stop_time / 2)
            # Envelope shape relative to the note is unchanged
            s_shape = [(p.time - s.start_time) / s.duration for p in s.envelope]
            f_shape = [(p.time - f.start_time) / f.duration for p in f.envelope]
            assert f_shape == pytest.approx(s_shape)
        assert fast.finish_time == pytest.approx(slow.finish_time / 2)

    def test_fractional_durations_accumulate_exactly(self):
        """Three thirds of a beat land exactly on the next beat."""
        schedule = build_schedule(notes_for("C4/12 D4/12 E4/12 F4/4"), 60, ADSR)
        assert schedule.entries[3].start_time == 1.0


class TestBuildScheduleErrors:
    """Test precondition handling."""

    @pytest.mark.parametrize("bpm", [0, -60])
    def test_non_positive_bpm(self, bpm):
        with pytest.raises(ValueError):
            build_schedule(notes_for("C4/4"), bpm, ADSR)

    def test_unknown_waveform(self):
        with pytest.raises(ValueError, match="waveform"):
            build_schedule(notes_for("C4/4"), 60, ADSR, "noise")

    def test_waveform_case_insensitive(self):
        schedule = build_schedule(notes_for("C4/4"), 60, ADSR, "SawTooth")
        assert schedule.waveform == Waveform.SAWTOOTH

    def test_negative_adsr_strict(self):
        with pytest.raises(ValueError, match="attack"):
            build_schedule(notes_for("C4/4"), 60, Adsr(attack=-0.1))

    def test_negative_adsr_lenient_clamps(self, caplog):
        set_error_mode(ErrorMode.LENIENT)
        schedule = build_schedule(notes_for("C4/4"), 60, Adsr(attack=0.1, release=-1.0))
        assert "release" in caplog.text
        assert schedule.finish_time == pytest.approx(1.0)

    def test_attack_plus_decay_over_one_not_rejected(self):
        schedule = build_schedule(notes_for("C4/4"), 60, Adsr(attack=0.7, decay=0.7))
        assert len(schedule.entries) == 1

    def test_fraction_units_are_exact(self):
        schedule = build_schedule(notes_for("C4/12 D4/12 E4/12"), 60, ADSR)
        assert schedule.total_beats == Fraction(1)

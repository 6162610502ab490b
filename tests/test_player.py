"""
Tests for Player.

Copyright (c) 2026 spnplay contributors

MIT License
"""

import pytest

from spnplay import (
    BufferBackend,
    NotationSettings,
    ParseError,
    PlaybackState,
    Player,
    VoiceConfig,
    apply_preset,
)

SR = 8000


@pytest.fixture
def backends():
    return []


@pytest.fixture
def player(backends):
    def factory():
        backend = BufferBackend(sample_rate=SR)
        backends.append(backend)
        return backend
    return Player(backend_factory=factory)


@pytest.fixture
def states(player):
    seen = []
    player.add_listener(seen.append)
    return seen


class TestPlayer:
    """Test play / pause / resume / stop and state notifications."""

    def test_initially_closed(self, player):
        assert player.state == PlaybackState.CLOSED
        assert player.poll() is True

    def test_play_builds_session(self, player, states):
        session = player.play([
            NotationSettings("C4/4 E4/4", bpm=60),
            VoiceConfig("G3/1", bpm=60),
        ])
        assert len(session.voices) == 2
        assert player.session is session
        assert player.state == PlaybackState.RUNNING
        assert states == [PlaybackState.RUNNING]

    def test_pause_and_resume(self, player, states):
        player.play([VoiceConfig("C4/4")])
        player.pause()
        assert player.state == PlaybackState.SUSPENDED
        player.resume()
        assert states == [
            PlaybackState.RUNNING,
            PlaybackState.SUSPENDED,
            PlaybackState.RUNNING,
        ]

    def test_stop(self, player, states, backends):
        player.play([VoiceConfig("C4/4")])
        player.stop()
        assert player.state == PlaybackState.CLOSED
        assert player.session is None
        assert backends[0].state == PlaybackState.CLOSED
        assert states[-1] == PlaybackState.CLOSED

    def test_pause_when_stopped_is_noop(self, player, states):
        player.pause()
        player.resume()
        player.stop()
        assert states == []

    def test_play_again_closes_previous(self, player, backends):
        player.play([VoiceConfig("C4/4")])
        player.play([VoiceConfig("D4/4")])
        assert len(backends) == 2
        assert backends[0].state == PlaybackState.CLOSED
        assert backends[1].state == PlaybackState.RUNNING

    def test_poll_stops_after_finish_time(self, player, states, backends):
        session = player.play([VoiceConfig("A4/16", bpm=120)])
        assert player.poll() is False
        backends[0].pull(int(session.finish_time * SR) + 1)
        assert player.poll() is True
        assert player.state == PlaybackState.CLOSED
        assert states[-1] == PlaybackState.CLOSED

    def test_preset_settings(self, player):
        settings = apply_preset(NotationSettings("C4/4 _/4 E4/4"), "synthesizer")
        session = player.play([settings])
        assert session.voices[0].bpm == 200

    def test_invalid_notation_raises_and_starts_nothing(self, player, backends):
        with pytest.raises(ParseError):
            player.play([NotationSettings("C4/4"), NotationSettings("C4/4 X9")])
        assert backends == []
        assert player.state == PlaybackState.CLOSED

    def test_bpm_out_of_range_raises(self, player, backends):
        with pytest.raises(ValueError, match="BPM"):
            player.play([NotationSettings("C4/4", bpm=500)])
        assert backends == []

    def test_bpm_error_reported_over_bad_notation(self, player, backends):
        with pytest.raises(ValueError, match="BPM") as excinfo:
            player.play([NotationSettings("C4/4 X9/4", bpm=500)])
        assert not isinstance(excinfo.value, ParseError)
        assert backends == []

    def test_failed_start_leaves_player_stopped(self, states):
        created = []

        class UnavailableOutputBackend(BufferBackend):
            def _on_start(self):
                raise OSError("no output device")

        def factory():
            backend = UnavailableOutputBackend(sample_rate=SR)
            created.append(backend)
            return backend

        player = Player(backend_factory=factory)
        player.add_listener(states.append)
        with pytest.raises(OSError):
            player.play([VoiceConfig("C4/4")])
        assert created[0].state == PlaybackState.CLOSED
        assert player.state == PlaybackState.CLOSED
        assert player.backend is None
        assert player.session is None
        assert player.poll() is True
        assert states == []

    def test_remove_listener(self, player, states):
        player.remove_listener(states.append)
        player.play([VoiceConfig("C4/4")])
        assert states == []

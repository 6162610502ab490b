"""
Player - plays several voices in parallel and reports playback state.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Union

from spnplay.backend import AudioBackend, PlaybackMonitor, PlaybackState
from spnplay.logger import get_logger
from spnplay.session import Session, VoiceConfig, build_session
from spnplay.settings import NotationSettings

logger = get_logger(__name__)

StateListener = Callable[[PlaybackState], None]


def _default_backend() -> AudioBackend:
    # Imported here so the engine does not need PortAudio
    from spnplay.audio_backend import SoundDeviceBackend
    return SoundDeviceBackend()


def _voice_config(item: Union[NotationSettings, VoiceConfig]) -> VoiceConfig:
    if isinstance(item, NotationSettings):
        state = item.validate()
        # Notation errors are raised by build_session with their token
        if not state.is_valid and state.error_token is None:
            raise ValueError(state.error)
        return item.to_voice_config()
    return item


class Player:
    """
    Owns one playback session at a time.

    play() builds a Session from the voices and starts a fresh backend;
    any previous playback is stopped first. Every state change is passed to
    the registered listeners. poll() should be called periodically (every
    500 ms or so) to close the backend once the clock
    has passed the session finish time.

    Args:
        backend_factory: Callable returning a new AudioBackend per play()
                         (default: SoundDeviceBackend)

    Example:
        player = Player()
        player.add_listener(lambda state: print(state.value))
        player.play([NotationSettings("C4/4 E4/4 G4/2"), VoiceConfig("C3/1")])
        while not player.poll():
            time.sleep(0.5)
    """

    def __init__(self, backend_factory: Optional[Callable[[], AudioBackend]] = None):
        self._backend_factory = backend_factory or _default_backend
        self._backend: Optional[AudioBackend] = None
        self._monitor: Optional[PlaybackMonitor] = None
        self._session: Optional[Session] = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> PlaybackState:
        if self._backend is None:
            return PlaybackState.CLOSED
        return self._backend.state

    @property
    def session(self) -> Optional[Session]:
        """The session of the current playback, None when stopped."""
        return self._session

    @property
    def backend(self) -> Optional[AudioBackend]:
        return self._backend

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)

    def play(self, voices: Iterable[Union[NotationSettings, VoiceConfig]]) -> Session:
        """
        Stop any current playback, then build and start a new session.

        Raises:
            ParseError: If any voice's notation is malformed
            ValueError: If any voice's settings are otherwise invalid
        """
        self.stop()
        session = build_session([_voice_config(v) for v in voices])

        backend = self._backend_factory()
        try:
            backend.start(session)
        except Exception:
            backend.close()
            raise
        self._backend = backend
        self._session = session
        self._monitor = PlaybackMonitor(backend, session.finish_time)
        self._notify()
        return session

    def pause(self) -> None:
        if self._backend is None:
            return
        self._backend.suspend()
        self._notify()

    def resume(self) -> None:
        if self._backend is None:
            return
        self._backend.resume()
        self._notify()

    def stop(self) -> None:
        """Close the backend. Listeners are told CLOSED only if something was playing."""
        if self._backend is None:
            return
        self._backend.close()
        self._backend = None
        self._monitor = None
        self._session = None
        self._notify()

    def poll(self) -> bool:
        """
        Check whether playback has finished, stopping it if so.

        Returns:
            True if nothing is playing any more
        """
        if self._monitor is None:
            return True
        if self._monitor.poll():
            logger.info("Playback finished")
            self.stop()
            return True
        return False

"""
Audio backend boundary: playback state, clock and finish polling.

The engine hands a Session to an AudioBackend and never touches the
backend's clock. Whether playback has finished is decided by polling:
comparing the backend's current time with the session finish time.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import numpy as np

from spnplay.config import DEFAULT_SAMPLE_RATE, handle_error
from spnplay.conversions import samples_to_seconds
from spnplay.logger import get_logger
from spnplay.offline_renderer import OfflineRenderer
from spnplay.session import Session

logger = get_logger(__name__)


class PlaybackState(Enum):
    """Run state reported by a backend."""

    RUNNING = "running"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class AudioBackend(ABC):
    """
    Realizes a Session as sound.

    Lifecycle:
        1. start(session) - begin playback at time 0 (state RUNNING)
        2. suspend() / resume() - pause and continue without losing position
        3. close() - release resources (state CLOSED); idempotent

    current_time is seconds since the session start and does not advance
    while suspended.
    """

    @property
    @abstractmethod
    def state(self) -> PlaybackState:
        pass

    @property
    @abstractmethod
    def current_time(self) -> float:
        pass

    @abstractmethod
    def start(self, session: Session) -> None:
        pass

    @abstractmethod
    def suspend(self) -> None:
        pass

    @abstractmethod
    def resume(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures close() is called."""
        self.close()
        return False


class BufferBackend(AudioBackend):
    """
    A backend that renders the whole session up front and plays it out of
    a buffer, one pull() at a time.

    Its clock is the number of samples pulled while running. Nothing drives
    pull() here; subclasses connect it to an audio device callback, and
    tests call it directly.

    Args:
        sample_rate: Audio sample rate in Hz (default: 44100)
    """

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE):
        self._renderer = OfflineRenderer(sample_rate=sample_rate)
        self._lock = threading.Lock()
        self._buffer: np.ndarray = np.zeros(0, dtype=np.float32)
        self._position: int = 0
        self._state = PlaybackState.CLOSED
        self._session: Optional[Session] = None

    @property
    def sample_rate(self) -> int:
        return self._renderer.sample_rate

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> int:
        """Samples played since start."""
        return self._position

    @property
    def current_time(self) -> float:
        return float(samples_to_seconds(self._position, self.sample_rate))

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def start(self, session: Session) -> None:
        """
        Render the session and begin playback from time 0.

        If the output cannot be opened the backend is left CLOSED and the
        error propagates.

        Raises:
            RuntimeError: If already started (in STRICT mode)
        """
        if self._state != PlaybackState.CLOSED:
            if handle_error("Already started. Call close() first."):
                return
        buffer = self._renderer.render_session(session)
        with self._lock:
            self._buffer = buffer
            self._position = 0
            self._session = session
            self._state = PlaybackState.RUNNING
        try:
            self._on_start()
        except Exception as e:
            logger.error(f"Playback start failed: {e}")
            self._on_close()
            with self._lock:
                self._state = PlaybackState.CLOSED
                self._session = None
            raise
        logger.info(f"Playback started, finish_time={session.finish_time:.3f}s")

    def suspend(self) -> None:
        """
        Pause playback, keeping the position.

        Raises:
            RuntimeError: If closed (in STRICT mode)
        """
        if self._state == PlaybackState.CLOSED:
            if handle_error("Cannot suspend a closed backend."):
                return
        with self._lock:
            self._state = PlaybackState.SUSPENDED
        logger.debug(f"Suspended at {self.current_time:.3f}s")

    def resume(self) -> None:
        """
        Continue playback from where it was suspended.

        Raises:
            RuntimeError: If closed (in STRICT mode)
        """
        if self._state == PlaybackState.CLOSED:
            if handle_error("Cannot resume a closed backend."):
                return
        with self._lock:
            self._state = PlaybackState.RUNNING
        logger.debug(f"Resumed at {self.current_time:.3f}s")

    def close(self) -> None:
        """Stop playback and release resources. Safe to call repeatedly."""
        if self._state == PlaybackState.CLOSED:
            return
        self._on_close()
        with self._lock:
            self._state = PlaybackState.CLOSED
        logger.info(f"Playback closed at {self.current_time:.3f}s")

    def pull(self, frames: int) -> np.ndarray:
        """
        Take the next `frames` samples of output.

        Returns silence while suspended or closed and past the end of the
        buffer. The clock advances only while running.
        """
        out = np.zeros(frames, dtype=np.float32)
        with self._lock:
            if self._state != PlaybackState.RUNNING:
                return out
            start = self._position
            available = self._buffer[start:start + frames]
            out[: len(available)] = available
            self._position += frames
        return out

    def _on_start(self) -> None:
        """Hook for subclasses; called after start() set up the buffer."""
        pass

    def _on_close(self) -> None:
        """Hook for subclasses; called before close() marks the backend closed."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(sample_rate={self.sample_rate}, state={self._state.value})"


class PlaybackMonitor:
    """
    Detects the end of playback by polling.

    Args:
        backend: The backend whose clock is compared
        finish_time: Session finish time in seconds

    Example:
        monitor = PlaybackMonitor(backend, session.finish_time)
        while not monitor.poll():
            time.sleep(0.5)
    """

    def __init__(self, backend: AudioBackend, finish_time: float):
        self._backend = backend
        self._finish_time = float(finish_time)

    @property
    def finish_time(self) -> float:
        return self._finish_time

    def is_finished(self) -> bool:
        """True when the backend is closed or its clock is past the finish time."""
        if self._backend.state == PlaybackState.CLOSED:
            return True
        return self._backend.current_time > self._finish_time

    def poll(self) -> bool:
        """
        Check for the end of playback, closing the backend when it is reached.

        Returns:
            True if playback has finished
        """
        if self.is_finished():
            self._backend.close()
            return True
        return False

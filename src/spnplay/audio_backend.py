"""
SoundDeviceBackend - plays a session through the system sound output.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

import sounddevice as sd

from spnplay.backend import BufferBackend
from spnplay.config import DEFAULT_SAMPLE_RATE
from spnplay.logger import get_logger

logger = get_logger(__name__)


class SoundDeviceBackend(BufferBackend):
    """
    A BufferBackend fed to the DAC by a sounddevice (PortAudio) callback.

    The stream stays open while suspended and plays silence, so resuming
    continues from the same position.

    Args:
        sample_rate: Audio sample rate in Hz (default: 44100)
        device: Audio device index or name (default: None = system default)
        blocksize: Samples per callback block (default: 1024)
        latency: Latency setting ('low', 'high', or seconds, default: 'low')

    Example:
        with SoundDeviceBackend() as backend:
            backend.start(session)
            monitor = PlaybackMonitor(backend, session.finish_time)
            while not monitor.poll():
                sd.sleep(500)
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        device: int | str | None = None,
        blocksize: int = 1024,
        latency: str | float = 'low',
    ):
        super().__init__(sample_rate=sample_rate)
        self._device = device
        self._blocksize = blocksize
        self._latency = latency
        self._stream: sd.OutputStream | None = None

    @property
    def device(self) -> int | str | None:
        """The audio output device."""
        return self._device

    @property
    def blocksize(self) -> int:
        return self._blocksize

    def _callback(self, outdata, frames, time_info, status) -> None:
        if status:
            logger.warning(f"Stream status: {status}")
        outdata[:, 0] = self.pull(frames)

    def _on_start(self) -> None:
        self._stream = sd.OutputStream(
            samplerate=self.sample_rate,
            channels=1,
            dtype='float32',
            device=self._device,
            blocksize=self._blocksize,
            latency=self._latency,
            callback=self._callback,
        )
        self._stream.start()
        logger.debug("Output stream started")

    def _on_close(self) -> None:
        if self._stream is not None:
            stream, self._stream = self._stream, None
            try:
                if stream.active:
                    stream.stop()
            finally:
                stream.close()
            logger.debug("Output stream closed")

    @staticmethod
    def list_devices() -> None:
        """Print available audio devices."""
        print(sd.query_devices())

    def __repr__(self) -> str:
        return (
            f"SoundDeviceBackend(sample_rate={self.sample_rate}, "
            f"device={self._device}, blocksize={self._blocksize})"
        )

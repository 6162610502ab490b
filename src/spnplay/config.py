"""
Engine constants, error mode and error handling utilities for spnplay.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from enum import Enum
from typing import Type, Optional

from spnplay.logger import get_logger

logger = get_logger(__name__)

# Reference pitch for equal temperament: A4 = 440 Hz
REFERENCE_FREQUENCY: float = 440.0
REFERENCE_PITCH_CLASS: str = "A"
REFERENCE_OCTAVE: int = 4

# Release ramps end just above zero; a true zero is a singularity for
# exponential gain ramps in audio backends.
RELEASE_FLOOR: float = 1e-5

# Tempo range accepted by the settings layer. The engine itself only
# requires bpm > 0.
MIN_BPM: int = 10
MAX_BPM: int = 300

DEFAULT_SAMPLE_RATE: int = 44100


class ErrorMode(Enum):
    """
    Error handling mode for recoverable spnplay problems.

    STRICT: All errors raise exceptions (default, fail-fast)
    LENIENT: Non-fatal errors become warnings, execution continues

    Notation errors are never subject to the mode: they always raise.
    """
    STRICT = "strict"
    LENIENT = "lenient"


DEFAULT_ERROR_MODE: ErrorMode = ErrorMode.STRICT


def set_error_mode(mode: ErrorMode) -> None:
    """
    Set the default error mode for all spnplay operations.

    Args:
        mode: The error mode to use
    """
    global DEFAULT_ERROR_MODE
    DEFAULT_ERROR_MODE = mode


def get_error_mode() -> ErrorMode:
    """Get the current default error mode."""
    return DEFAULT_ERROR_MODE


def handle_error(
    message: str,
    fatal: bool = False,
    error_mode: Optional[ErrorMode] = None,
    exception_class: Type[Exception] = RuntimeError,
) -> bool:
    """
    Handle an error based on the error mode.

    In STRICT mode (or if fatal=True), raises an exception.
    In LENIENT mode (and fatal=False), logs a warning and returns True.

    Args:
        message: Error description
        fatal: If True, always raise regardless of mode
        error_mode: Override the default error mode (optional)
        exception_class: Exception type to raise (default: RuntimeError)

    Returns:
        True if the caller should continue (a warning was issued)

    Raises:
        exception_class: If in STRICT mode or fatal=True

    Example:
        # Negative ADSR fraction: raises in strict mode,
        # warns and clamps in lenient mode
        if attack < 0:
            if handle_error("attack must be >= 0", exception_class=ValueError):
                attack = 0.0
    """
    mode = error_mode if error_mode is not None else DEFAULT_ERROR_MODE

    if fatal or mode == ErrorMode.STRICT:
        raise exception_class(message)
    else:
        logger.warning(message)
        return True

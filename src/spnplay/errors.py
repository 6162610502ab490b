"""
Exception types for SPN notation handling.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from typing import Optional


class NotationError(ValueError):
    """
    Base class for errors raised while reading notation.

    Attributes:
        token: The offending raw token, or None if not tied to one
    """

    def __init__(self, message: str, token: Optional[str] = None):
        super().__init__(message)
        self.token = token


class ParseError(NotationError):
    """Raised for a malformed token: bad structure, octave or denominator."""

    pass


class UnknownPitchError(ParseError):
    """Raised when a pitch name is not one of the 12 recognized names."""

    pass

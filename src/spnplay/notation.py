"""
Scientific pitch notation (SPN) parser.

A notation string is a sequence of tokens separated by single spaces:

    token := (pitch | "_") "/" denominator ["."]
    pitch := letter [octave] | letter "#" octave

"_" is a rest, the denominator is the note value (4 = quarter note = one
beat) and a trailing "." marks a dotted note. For example:

    E4/4 E4/4 D#4/8. A#4/16 _/2 E4/2

Parsing is strict: empty tokens (leading, trailing or doubled spaces) and
malformed tokens raise ParseError, and no partial result is returned.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from spnplay.conversions import duration_units
from spnplay.errors import ParseError, UnknownPitchError
from spnplay.logger import get_logger
from spnplay.pitch import PITCH_CLASSES

logger = get_logger(__name__)

REST_SYMBOL = "_"
SHARP = "#"
DOT = "."

_OCTAVE_RE = re.compile(r"-?[0-9]+")
_DURATION_RE = re.compile(r"([0-9]+)(\.?)")

_KNOWN_PITCHES = frozenset(PITCH_CLASSES)


@dataclass(frozen=True)
class NoteToken:
    """
    One parsed unit of notation.

    pitch_class keeps the case it was written in; it is upper-cased only
    when the frequency is resolved.
    """

    text: str
    pitch_class: Optional[str]
    octave: Optional[int]
    is_rest: bool
    duration_units: Fraction
    dotted: bool = False


def _parse_pitch(text: str, pitch_part: str) -> tuple[str, int]:
    if len(pitch_part) > 1 and pitch_part[1] == SHARP:
        name, octave_text = pitch_part[:2], pitch_part[2:]
        # A sharp must carry an explicit octave
        if not octave_text:
            raise ParseError(f"Invalid unit: {text}", token=text)
    else:
        name, octave_text = pitch_part[:1], pitch_part[1:]

    if not name:
        raise ParseError(f"Invalid unit: {text}", token=text)

    if not octave_text:
        octave = 0
    elif _OCTAVE_RE.fullmatch(octave_text):
        octave = int(octave_text)
    else:
        raise ParseError(f"Invalid unit: {text}", token=text)

    if name.upper() not in _KNOWN_PITCHES:
        raise UnknownPitchError(f"Invalid note {name} in unit: {text}", token=text)

    return name, octave


def _parse_duration(text: str, duration_part: str) -> tuple[Fraction, bool]:
    match = _DURATION_RE.fullmatch(duration_part)
    if match is None:
        raise ParseError(f"Invalid unit: {text}", token=text)
    denominator = int(match.group(1))
    if denominator == 0:
        raise ParseError(f"Invalid unit: {text}", token=text)
    dotted = match.group(2) == DOT
    return duration_units(denominator, dotted), dotted


def parse_token(text: str) -> NoteToken:
    """
    Parse a single notation unit such as "C#4/8." or "_/2".

    Raises:
        ParseError: If the unit does not split into exactly a pitch and a
                    duration, or the octave or denominator is invalid
        UnknownPitchError: If the pitch name is not one of the 12 names
    """
    parts = text.split("/")
    if len(parts) != 2:
        raise ParseError(f"Invalid unit: {text}", token=text)

    pitch_part, duration_part = parts
    units, dotted = _parse_duration(text, duration_part)

    if pitch_part == REST_SYMBOL:
        return NoteToken(text, None, None, True, units, dotted)

    name, octave = _parse_pitch(text, pitch_part)
    return NoteToken(text, name, octave, False, units, dotted)


def parse(notation: str) -> list[NoteToken]:
    """
    Parse a notation string into an ordered list of note tokens.

    Args:
        notation: Tokens separated by single spaces

    Returns:
        One NoteToken per token, in order

    Raises:
        ParseError: On the first malformed token (carries .token)

    Example:
        >>> [t.duration_units for t in parse("C3/16 D#7/8. _/2")]
        [Fraction(1, 4), Fraction(3, 4), Fraction(2, 1)]
    """
    tokens = [parse_token(unit) for unit in notation.split(" ")]
    logger.debug(f"Parsed {len(tokens)} tokens")
    return tokens

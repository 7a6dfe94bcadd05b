"""52-position rotary alphabet.

Each Latin letter owns two adjacent positions on a circle split into 52 equal
steps (about 6.923 degrees each); the first of the pair is the one used for
drawing, so letter ``i`` maps to position ``2 * i``.
"""

from __future__ import annotations

import math
import string

from domain.models import Point

ROTARY_POSITIONS = 52
PEN_UP_CHAR = " "

_LETTER_INDEX = {letter: index for index, letter in enumerate(string.ascii_uppercase)}


def rotary_position_for_char(char: str) -> int | None:
    index = _LETTER_INDEX.get(char.upper()) if len(char) == 1 and char.isascii() else None
    if index is None:
        return None
    return index * 2


def degree_for_char(char: str) -> int | None:
    position = rotary_position_for_char(char)
    if position is None:
        return None
    return round(position * 360 / ROTARY_POSITIONS)


def is_drawable_char(char: str) -> bool:
    return char == PEN_UP_CHAR or degree_for_char(char) is not None


def advance(origin: Point, heading_degrees: float, length: float) -> Point:
    # Screen y grows downwards, so a positive heading turns upwards on screen.
    radians = math.radians(heading_degrees)
    return Point(
        origin.x + length * math.cos(radians),
        origin.y - length * math.sin(radians),
    )

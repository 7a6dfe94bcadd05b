from __future__ import annotations

import math
from typing import List

from domain.models import (
    DEFAULT_SEGMENT_LENGTH,
    ORIGIN,
    ORIGIN_BOUNDS,
    Bounds,
    GeneratedPath,
    PathCommand,
    PathPoint,
    Point,
)
from domain.services.rotary_alphabet import (
    PEN_UP_CHAR,
    advance,
    degree_for_char,
    is_drawable_char,
)


def generate_path(text: str, segment_length: float = DEFAULT_SEGMENT_LENGTH) -> GeneratedPath:
    """Walk a turtle over ``text`` and return the resulting polyline.

    Letters turn the heading by their rotary angle and draw one segment,
    spaces advance along the current heading with the pen up, and every other
    character is ignored. The heading is cumulative and never wrapped.
    """
    position = ORIGIN
    heading = 0.0
    points: List[PathPoint] = [PathPoint(ORIGIN.x, ORIGIN.y, "", 0.0, False)]
    commands: List[PathCommand] = [PathCommand("M", ORIGIN.x, ORIGIN.y)]
    min_x = min_y = math.inf
    max_x = max_y = -math.inf

    for char in text:
        is_space = char == PEN_UP_CHAR
        if not is_space:
            degree = degree_for_char(char)
            if degree is None:
                continue
            heading += degree

        position = advance(position, heading, segment_length)
        commands.append(PathCommand("M" if is_space else "L", position.x, position.y))
        points.append(PathPoint(position.x, position.y, char, heading, is_space))

        min_x = min(min_x, position.x)
        max_x = max(max_x, position.x)
        min_y = min(min_y, position.y)
        max_y = max(max_y, position.y)

    return GeneratedPath(
        commands=tuple(commands),
        points=tuple(points),
        end_point=Point(position.x, position.y),
        bounds=Bounds(min_x, max_x, min_y, max_y) if len(points) > 1 else ORIGIN_BOUNDS,
    )


def count_drawable_chars(text: str) -> int:
    return sum(1 for char in text if is_drawable_char(char))

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field, FiniteFloat, field_validator

DEFAULT_SEGMENT_LENGTH = 10
MIN_SEGMENT_LENGTH = 2
MAX_SEGMENT_LENGTH = 50

DEFAULT_LAYER_COLOR = "#1e293b"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to_origin(self) -> float:
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point(self.min_x + self.width / 2, self.min_y + self.height / 2)

    def translated(self, dx: float, dy: float) -> Bounds:
        return Bounds(self.min_x + dx, self.max_x + dx, self.min_y + dy, self.max_y + dy)

    def union(self, other: Bounds) -> Bounds:
        return Bounds(
            min(self.min_x, other.min_x),
            max(self.max_x, other.max_x),
            min(self.min_y, other.min_y),
            max(self.max_y, other.max_y),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
            "width": self.width,
            "height": self.height,
        }


ORIGIN = Point(0.0, 0.0)
ORIGIN_BOUNDS = Bounds(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PathPoint:
    x: float
    y: float
    char: str
    angle: float
    is_space: bool


@dataclass(frozen=True)
class PathCommand:
    op: str  # "M" (pen up) or "L" (pen down)
    x: float
    y: float

    def to_svg(self) -> str:
        return f"{self.op} {format_number(self.x)} {format_number(self.y)}"


@dataclass(frozen=True)
class GeneratedPath:
    commands: Tuple[PathCommand, ...]
    points: Tuple[PathPoint, ...]
    end_point: Point
    bounds: Bounds

    @property
    def path_data(self) -> str:
        return " ".join(command.to_svg() for command in self.commands)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path_data": self.path_data,
            "point_count": len(self.points),
            "end_point": {"x": self.end_point.x, "y": self.end_point.y},
            "bounds": self.bounds.to_dict(),
        }


@dataclass(frozen=True)
class ViewBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def to_attribute(self) -> str:
        return " ".join(format_number(value) for value in (self.x, self.y, self.width, self.height))

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class Layer(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    text: str = ""
    color: str = DEFAULT_LAYER_COLOR
    x: float = Field(0.0, allow_inf_nan=False)
    y: float = Field(0.0, allow_inf_nan=False)
    locked: bool = False
    visible: bool = True
    segment_length: int = Field(
        DEFAULT_SEGMENT_LENGTH, ge=MIN_SEGMENT_LENGTH, le=MAX_SEGMENT_LENGTH
    )

    @field_validator("color", mode="after")
    @classmethod
    def normalize_color(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            msg = "Layer color must not be empty"
            raise ValueError(msg)
        return normalized.lower()


class LayerPatch(BaseModel):
    name: str | None = None
    text: str | None = None
    color: str | None = None
    x: FiniteFloat | None = None
    y: FiniteFloat | None = None
    locked: bool | None = None
    visible: bool | None = None
    segment_length: int | None = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


def format_number(value: float) -> str:
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))

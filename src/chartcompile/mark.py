"""
Mark types and mark definitions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MarkType(Enum):
    ARC = "arc"
    AREA = "area"
    BAR = "bar"
    IMAGE = "image"
    LINE = "line"
    POINT = "point"
    RECT = "rect"
    RULE = "rule"
    TEXT = "text"
    TICK = "tick"
    TRAIL = "trail"
    CIRCLE = "circle"
    SQUARE = "square"
    GEOSHAPE = "geoshape"


class InvalidMode(Enum):
    """
    How a mark treats null/NaN positions.

    FILTER drops or pins invalid data; NONE disables the handling
    entirely (no validity test is generated).
    """

    FILTER = "filter"
    NONE = "none"


_PATH_MARKS = {MarkType.LINE, MarkType.AREA, MarkType.TRAIL}
_RECT_BASED_MARKS = {MarkType.RECT, MarkType.BAR, MarkType.IMAGE, MarkType.ARC}


def is_path_mark(mark: MarkType) -> bool:
    """Path marks skip invalid points via their own "defined" channel."""
    return mark in _PATH_MARKS


def is_rect_based_mark(mark: MarkType) -> bool:
    return mark in _RECT_BASED_MARKS


@dataclass
class MarkDef:
    """
    Mark definition as authored on a unit view.

    Properties left as None fall back to the mark config.
    """

    type: MarkType
    invalid: Optional[InvalidMode] = None
    time_unit_band: Optional[float] = None
    time_unit_band_position: Optional[float] = None

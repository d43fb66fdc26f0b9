"""
Scale metadata consumed by this package.

Domains and ranges are computed elsewhere. A ScaleComponent only carries
what layout sizing and value-reference synthesis read: the scale type,
its configured range and its zero-baseline flag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ScaleType(Enum):
    # Continuous to continuous
    LINEAR = "linear"
    LOG = "log"
    POW = "pow"
    SQRT = "sqrt"
    SYMLOG = "symlog"
    TIME = "time"
    UTC = "utc"

    # Continuous to discrete
    QUANTILE = "quantile"
    QUANTIZE = "quantize"
    THRESHOLD = "threshold"

    # Continuous domain, interpolated range
    SEQUENTIAL = "sequential"

    # Discrete domain
    ORDINAL = "ordinal"
    BIN_ORDINAL = "bin-ordinal"
    POINT = "point"
    BAND = "band"


DISCRETE_DOMAIN_SCALES = {
    ScaleType.ORDINAL,
    ScaleType.BIN_ORDINAL,
    ScaleType.POINT,
    ScaleType.BAND,
}

CONTINUOUS_TO_CONTINUOUS_SCALES = {
    ScaleType.LINEAR,
    ScaleType.LOG,
    ScaleType.POW,
    ScaleType.SQRT,
    ScaleType.SYMLOG,
    ScaleType.TIME,
    ScaleType.UTC,
}


def has_discrete_domain(scale_type: Optional[ScaleType]) -> bool:
    return scale_type in DISCRETE_DOMAIN_SCALES


def is_continuous_to_continuous(scale_type: Optional[ScaleType]) -> bool:
    return scale_type in CONTINUOUS_TO_CONTINUOUS_SCALES


@dataclass(frozen=True)
class RangeStep:
    """A range given as a per-category step (band/point scales)."""

    step: float


def is_range_step(range: Any) -> bool:
    return isinstance(range, RangeStep)


@dataclass
class ScaleComponent:
    """
    Resolved scale for one channel of a view.

    Properties:
        name: Scale name referenced from value refs (e.g. "x")
        type: ScaleType
        range: Configured range; a RangeStep, a list, a named range or None
        zero: Whether the domain is forced to include zero (None = unset)
    """

    name: str
    type: ScaleType
    range: Any = None
    zero: Optional[bool] = None

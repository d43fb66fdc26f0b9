"""
Compiler configuration consumed by this package.

Only view sizing defaults and the mark properties read during
value-reference synthesis are modelled. Loading config files is the
caller's job; see serialization.config_from_dict for the dict form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from chartcompile.mark import InvalidMode, MarkDef, MarkType

DEFAULT_STEP = 20
DEFAULT_CONTINUOUS_SIZE = 200


@dataclass(frozen=True)
class Step:
    """A size given per category, e.g. {"step": 20}."""

    step: float


def is_step(size: Any) -> bool:
    return isinstance(size, Step)


Size = Union[int, float, Step]


@dataclass
class ViewConfig:
    """
    Default view sizes.

    Properties:
        continuous_width / continuous_height:
            Pixel size for views with a continuous x / y scale
        discrete_width / discrete_height:
            Size for views with a discrete x / y scale. A number is a fixed
            pixel size, a Step is a per-category size. None falls back to
            Step(step).
        step:
            Default per-category step
    """

    continuous_width: float = DEFAULT_CONTINUOUS_SIZE
    continuous_height: float = DEFAULT_CONTINUOUS_SIZE
    discrete_width: Optional[Size] = None
    discrete_height: Optional[Size] = None
    step: float = DEFAULT_STEP


@dataclass
class MarkConfig:
    invalid: Optional[InvalidMode] = None
    time_unit_band: Optional[float] = None
    time_unit_band_position: Optional[float] = None


@dataclass
class Config:
    view: ViewConfig = field(default_factory=ViewConfig)
    mark: MarkConfig = field(default_factory=lambda: MarkConfig(invalid=InvalidMode.FILTER))
    mark_types: Dict[MarkType, MarkConfig] = field(default_factory=dict)


def get_view_config_continuous_size(view_config: ViewConfig, size_type: str) -> float:
    if size_type == "width":
        return view_config.continuous_width
    return view_config.continuous_height


def get_view_config_discrete_size(view_config: ViewConfig, size_type: str) -> Size:
    size = view_config.discrete_width if size_type == "width" else view_config.discrete_height
    if size is None:
        return Step(view_config.step)
    return size


def get_mark_config(prop: str, mark_def: MarkDef, config: Config) -> Any:
    """
    Resolve a mark property: mark def, then per-mark-type config, then
    the generic mark config.
    """
    value = getattr(mark_def, prop, None)
    if value is not None:
        return value
    type_config = config.mark_types.get(mark_def.type)
    if type_config is not None:
        value = getattr(type_config, prop, None)
        if value is not None:
            return value
    return getattr(config.mark, prop, None)

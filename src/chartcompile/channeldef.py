"""
Channel definitions.

A channel is encoded by exactly one of four definitions:

    FieldDef   - bound to a data field (optionally binned, aggregated,
                 or discretized by a time unit)
    DatumDef   - a literal data value that still goes through the scale
    ValueDef   - a literal visual value (pixels, colors, ...)
    SignalRef  - a dynamic expression evaluated by the renderer

These are immutable and carry structure only. Field naming
(vg_field) and band lookups (get_band) live here because both the
layout and value-reference stages need them.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional, Tuple, Union

from chartcompile.channel import Channel, is_scale_channel
from chartcompile.config import Config, get_mark_config
from chartcompile.mark import MarkDef, is_rect_based_mark


class FieldType(Enum):
    QUANTITATIVE = "quantitative"
    TEMPORAL = "temporal"
    ORDINAL = "ordinal"
    NOMINAL = "nominal"
    GEOJSON = "geojson"


BINNED = "binned"
DEFAULT_MAXBINS = 10

COUNTING_OPS = {"count", "valid", "missing", "distinct"}


@dataclass(frozen=True)
class Bin:
    """
    Binning parameters. Unset parameters are left to the bin transform.

    Field order matters: it is the order used when naming the bin.
    """

    anchor: Optional[float] = None
    base: Optional[float] = None
    divide: Optional[Tuple[float, ...]] = None
    extent: Optional[Tuple[float, float]] = None
    maxbins: Optional[int] = None
    minstep: Optional[float] = None
    nice: Optional[bool] = None
    step: Optional[float] = None
    steps: Optional[Tuple[float, ...]] = None


BinSpec = Union[Bin, bool, str, None]


@dataclass(frozen=True)
class SignalRef:
    """A dynamic expression, e.g. SignalRef("width / 2")."""

    signal: str


@dataclass(frozen=True)
class FieldDef:
    """
    Field-bound channel definition.

    Properties:
        field: Data field name; may be None for count aggregates
        type: Measurement type
        bin: Bin parameters, True (default binning), BINNED (data already
             carries start/end fields), or None
        time_unit: Time unit name, e.g. "yearmonth"
        aggregate: Aggregate op, e.g. "mean", "count"
        band: Position within the band/bin, 0 = start, 1 = end
    """

    field: Optional[str]
    type: FieldType
    bin: BinSpec = None
    time_unit: Optional[str] = None
    aggregate: Optional[str] = None
    band: Optional[float] = None


@dataclass(frozen=True)
class DatumDef:
    """A literal data value encoded through the channel's scale."""

    datum: Any
    type: Optional[FieldType] = None
    band: Optional[float] = None


@dataclass(frozen=True)
class ValueDef:
    """A literal visual value. May itself be a SignalRef."""

    value: Any


ChannelDef = Union[FieldDef, DatumDef, ValueDef, SignalRef]


def is_field_or_datum_def(channel_def: Any) -> bool:
    return isinstance(channel_def, (FieldDef, DatumDef))


def is_binning(bin: BinSpec) -> bool:
    """True if the bin transform still has to run (parameters or True)."""
    return bin is True or isinstance(bin, Bin)


def is_binned(bin: BinSpec) -> bool:
    """True if the data is already binned into separate start/end fields."""
    return bin == BINNED


def is_counting_aggregate_op(aggregate: Optional[str]) -> bool:
    return aggregate in COUNTING_OPS


def normalize_bin(bin: BinSpec) -> Optional[Bin]:
    if bin is True:
        return Bin(maxbins=DEFAULT_MAXBINS)
    if isinstance(bin, Bin):
        return bin
    return None


def _var_name(s: str) -> str:
    return re.sub(r"\W", "_", s)


def _format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (tuple, list)):
        return ",".join(_format_param(v) for v in value)
    return str(value)


def bin_to_string(bin: BinSpec) -> str:
    """Bin(maxbins=10) -> "bin_maxbins_10"."""
    params = normalize_bin(bin)
    if params is None:
        return "bin"
    parts = ["bin"]
    for f in fields(params):
        value = getattr(params, f.name)
        if value is not None:
            parts.append(_var_name(f"_{f.name}_{_format_param(value)}"))
    return "".join(parts)


def flat_access_with_datum(field: str, datum: str = "datum") -> str:
    return f"{datum}[{json.dumps(field)}]"


def replace_path_in_field(field: str) -> str:
    """Escape nested-path dots so the name is read as one flat field."""
    return re.sub(r"(?<!\\)\.", lambda m: "\\.", field)


def vg_field(
    field_def: FieldDef,
    bin_suffix: Optional[str] = None,
    suffix: Optional[str] = None,
    expr: Optional[str] = None,
) -> Optional[str]:
    """
    Name of the field a FieldDef resolves to after its transforms.

    Examples:
        FieldDef("a", Q, bin=True)               -> "bin_maxbins_10_a"
        ... with bin_suffix="range"              -> "bin_maxbins_10_a_range"
        FieldDef("a", Q, aggregate="mean")       -> "mean_a"
        FieldDef("d", T, time_unit="month")      -> "month_d"
        FieldDef("a", Q), expr="datum"           -> 'datum["a"]'

    bin_suffix only applies when the field is actively binned.
    """
    field = field_def.field

    if field_def.aggregate == "count":
        field = "__count"
    else:
        fn = None
        if is_binning(field_def.bin):
            fn = bin_to_string(field_def.bin)
            suffix = (bin_suffix or "") + (suffix or "")
        elif field_def.aggregate:
            fn = field_def.aggregate
        elif field_def.time_unit:
            fn = field_def.time_unit
        if fn:
            field = f"{fn}_{field}" if field else fn

    if field is None:
        return None
    if suffix:
        field = f"{field}_{suffix}"

    if expr:
        return flat_access_with_datum(field, expr)
    return replace_path_in_field(field)


def bin_requires_range(field_def: FieldDef, channel: Channel) -> bool:
    """Discrete binned fields are labelled by a "start - end" range string."""
    if not is_binning(field_def.bin):
        return False
    return is_scale_channel(channel) and field_def.type in (FieldType.ORDINAL, FieldType.NOMINAL)


def get_band(
    channel: Channel,
    field_def: Union[FieldDef, DatumDef],
    field_def2: Optional[ChannelDef],
    mark_def: MarkDef,
    config: Config,
    is_mid_point: bool = False,
) -> Optional[float]:
    """
    Band position for x/y. None for every other channel.

    An explicit band wins. Time units without a secondary field place the
    mark by the configured time unit band; active bins sit in the middle
    of the bin unless a rect-based mark spans the whole bin.
    """
    if channel not in (Channel.X, Channel.Y):
        return None
    if field_def.band is not None:
        return field_def.band
    if isinstance(field_def, FieldDef):
        if field_def.time_unit and field_def2 is None:
            if is_mid_point:
                return get_mark_config("time_unit_band_position", mark_def, config)
            if is_rect_based_mark(mark_def.type):
                return get_mark_config("time_unit_band", mark_def, config)
            return 0
        if is_binning(field_def.bin):
            return 1 if is_rect_based_mark(mark_def.type) and not is_mid_point else 0.5
    return None

"""
Value references for mark encodings.

A value reference tells the renderer how to compute one encoding channel
of a mark: run a field or a literal through a scale, use a literal
directly, evaluate a signal expression, or pick the first entry of a
conditional list whose test passes.

All functions here are pure. They read the channel definition, scale
and stack metadata they are given and return fresh ValueRef objects.
"""

from __future__ import annotations

import json
import warnings
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Union

from chartcompile.channel import Channel, get_main_range_channel
from chartcompile.channeldef import (
    ChannelDef,
    DatumDef,
    FieldDef,
    FieldType,
    SignalRef,
    ValueDef,
    bin_requires_range,
    get_band,
    is_binned,
    is_binning,
    is_field_or_datum_def,
    is_counting_aggregate_op,
    vg_field,
)
from chartcompile.config import Config, get_mark_config
from chartcompile.log import ChannelRequiredWarning, channel_required_for_binned
from chartcompile.mark import InvalidMode, MarkDef, is_path_mark
from chartcompile.scale import ScaleComponent, ScaleType, has_discrete_domain, is_continuous_to_continuous
from chartcompile.stack import StackProperties


@dataclass(frozen=True)
class GroupFieldRef:
    """Reference to a property of the enclosing group, e.g. its height."""

    group: str


@dataclass(frozen=True)
class ValueRef:
    """
    A renderer-evaluable reference. Unset properties are omitted on output.

    Properties:
        scale: Scale name the field/value is passed through
        field: Field name, or a GroupFieldRef
        value: Literal value
        signal: Signal expression
        band: Band position for band scales (0 = start, 1 = end)
        offset: Pixel offset, a number or another reference
        test: Predicate expression; only set on conditional entries
    """

    scale: Optional[str] = None
    field: Union[str, GroupFieldRef, None] = None
    value: Any = None
    signal: Optional[str] = None
    band: Optional[float] = None
    offset: Any = None
    test: Optional[str] = None


ValueRefOrList = Union[ValueRef, List[ValueRef]]
DefaultRef = Union[ValueRef, Callable[[], ValueRef], None]


def _with_offset(ref: ValueRef, offset: Any) -> ValueRef:
    # Zero means no offset.
    if offset:
        return replace(ref, offset=offset)
    return ref


def field_valid_predicate(field_expr: str, valid: bool = True) -> str:
    if valid:
        return f"isValid({field_expr}) && isFinite(+{field_expr})"
    return f"!isValid({field_expr}) || !isFinite(+{field_expr})"


def field_invalid_predicate(field: Union[str, FieldDef], invalid: bool = True) -> str:
    field_expr = field if isinstance(field, str) else vg_field(field, expr="datum")
    return field_valid_predicate(field_expr, not invalid)


def field_invalid_test_value_ref(field_def: FieldDef, channel: Channel) -> ValueRef:
    """Invalid x sits at 0, invalid y at the bottom of the group."""
    test = field_invalid_predicate(field_def, True)
    if get_main_range_channel(channel) == Channel.X:
        return ValueRef(test=test, value=0)
    return ValueRef(test=test, field=GroupFieldRef("height"))


def wrap_position_invalid_test(
    field_def: FieldDef,
    channel: Channel,
    mark_def: MarkDef,
    ref: ValueRef,
    config: Config,
) -> ValueRefOrList:
    if is_path_mark(mark_def.type):
        # Path marks already skip invalid points through "defined".
        return ref

    if get_mark_config("invalid", mark_def, config) == InvalidMode.NONE:
        return ref

    return [field_invalid_test_value_ref(field_def, channel), ref]


def mid_point_ref_with_position_invalid_test(
    channel: Channel,
    channel_def: Optional[ChannelDef],
    mark_def: MarkDef,
    config: Config,
    scale_name: Optional[str] = None,
    scale: Optional[ScaleComponent] = None,
    channel2_def: Optional[ChannelDef] = None,
    stack: Optional[StackProperties] = None,
    offset: Any = None,
    default_ref: DefaultRef = None,
) -> Optional[ValueRefOrList]:
    """
    mid_point() for x/y, pinning null/NaN data to the axis baseline.

    Only continuous scales without a zero baseline need this: with zero
    included, an invalid value already lands on the baseline.
    """
    ref = mid_point(
        channel,
        channel_def,
        mark_def,
        config,
        scale_name=scale_name,
        scale=scale,
        channel2_def=channel2_def,
        stack=stack,
        offset=offset,
        default_ref=default_ref,
    )

    if (
        channel in (Channel.X, Channel.Y)
        and isinstance(channel_def, FieldDef)
        and not is_counting_aggregate_op(channel_def.aggregate)
        and scale is not None
        and is_continuous_to_continuous(scale.type)
        and scale.zero is False
    ):
        return wrap_position_invalid_test(channel_def, channel, mark_def, ref, config)
    return ref


def value_ref_for_field_or_datum_def(
    field_def: Union[FieldDef, DatumDef],
    scale_name: Optional[str],
    opt: Optional[Dict[str, Any]] = None,
    offset: Any = None,
    band: Optional[float] = None,
) -> ValueRef:
    """
    Scale-qualified reference to a field, or to a datum literal.

    opt holds vg_field options such as {"bin_suffix": "range"}.
    A datum keeps going through the scale so marks and legends agree.
    """
    if isinstance(field_def, DatumDef):
        ref = ValueRef(scale=scale_name or None, value=field_def.datum)
    else:
        ref = ValueRef(scale=scale_name or None, field=vg_field(field_def, **(opt or {})))

    if offset:
        ref = replace(ref, offset=offset)
    if band:
        ref = replace(ref, band=band)
    return ref


def _format_operand(operand: Union[str, DatumDef]) -> str:
    if isinstance(operand, DatumDef):
        return json.dumps(operand.datum)
    return operand


def interpolated_signal_ref(
    scale_name: str,
    field_def: Union[FieldDef, DatumDef],
    field_def2: Union[FieldDef, DatumDef, None] = None,
    offset: Any = None,
    start_suffix: Optional[str] = None,
    band: float = 0.5,
) -> ValueRef:
    """
    Position between a start and an end field: band * start + (1 - band) * end.

    Without field_def2 the end is the "_end" field of a binned field_def.
    band 0 and 1 select start or end as a plain field reference; anything
    in between reads both per datum inside a scale() signal.
    """
    expr = "datum" if 0 < band < 1 else None

    if isinstance(field_def, FieldDef):
        start = vg_field(field_def, expr=expr, suffix=start_suffix)
    else:
        start = field_def

    if field_def2 is not None:
        end = vg_field(field_def2, expr=expr) if isinstance(field_def2, FieldDef) else field_def2
    elif isinstance(field_def, FieldDef):
        end = vg_field(field_def, suffix="end", expr=expr)
    else:
        end = field_def

    if band == 0 or band == 1:
        val = start if band == 0 else end
        if isinstance(val, str):
            ref = ValueRef(scale=scale_name, field=val)
        else:
            ref = ValueRef(scale=scale_name, value=val.datum)
    else:
        datum = f"{band} * {_format_operand(start)} + {1 - band} * {_format_operand(end)}"
        ref = ValueRef(signal=f'scale("{scale_name}", {datum})')

    return _with_offset(ref, offset)


def width_height_value_ref(channel: Channel, value: Any) -> ValueRef:
    """The literals "width"/"height" on x/y refer to the view's own size."""
    if channel in (Channel.X, Channel.X2) and value == "width":
        return ValueRef(field=GroupFieldRef("width"))
    if channel in (Channel.Y, Channel.Y2) and value == "height":
        return ValueRef(field=GroupFieldRef("height"))
    return signal_or_value_ref(value)


def signal_or_value_ref(value: Any) -> ValueRef:
    if isinstance(value, SignalRef):
        return ValueRef(signal=value.signal)
    return ValueRef(value=value)


def mid_point(
    channel: Channel,
    channel_def: Optional[ChannelDef],
    mark_def: MarkDef,
    config: Config,
    scale_name: Optional[str] = None,
    scale: Optional[ScaleComponent] = None,
    channel2_def: Optional[ChannelDef] = None,
    stack: Optional[StackProperties] = None,
    offset: Any = None,
    default_ref: DefaultRef = None,
) -> Optional[ValueRef]:
    """
    Value reference for the center of a mark along one channel
    (xc/yc for x/y, the plain value for every other channel).

    Args:
        channel: Channel being encoded
        channel_def: Its definition, or None to use default_ref
        mark_def / config: Mark properties and defaults (band lookups)
        scale_name: Name of the scale the channel is bound to
        scale: The scale component, None for unscaled channels
        channel2_def: Secondary definition (x2/y2) for pre-binned data
        stack: Stack descriptor, if the channel is stacked
        offset: Pixel offset added when non-zero
        default_ref: Reference (or zero-argument factory) used when the
            channel is not encoded

    Returns:
        A ValueRef, or None when there is no definition and no default
    """
    if is_field_or_datum_def(channel_def):
        if isinstance(channel_def, FieldDef):
            band = get_band(channel, channel_def, channel2_def, mark_def, config, is_mid_point=True)

            if is_binning(channel_def.bin) or (band and channel_def.time_unit):
                # Only x/y are placed at the middle of the bin, so that
                # other channels (size, color) match their legends.
                if channel in (Channel.X, Channel.Y) and channel_def.type in (
                    FieldType.QUANTITATIVE,
                    FieldType.TEMPORAL,
                ):
                    if stack is not None and stack.impute:
                        # Imputed stacks precompute the bin mid point.
                        return value_ref_for_field_or_datum_def(
                            channel_def, scale_name, {"bin_suffix": "mid"}, offset=offset
                        )
                    return interpolated_signal_ref(
                        scale_name,
                        channel_def,
                        offset=offset,
                        band=band if band is not None else 0.5,
                    )
                return value_ref_for_field_or_datum_def(
                    channel_def,
                    scale_name,
                    {"bin_suffix": "range"} if bin_requires_range(channel_def, channel) else {},
                    offset=offset,
                )

            if is_binned(channel_def.bin):
                if isinstance(channel2_def, FieldDef):
                    return interpolated_signal_ref(
                        scale_name,
                        channel_def,
                        field_def2=channel2_def,
                        offset=offset,
                        band=band if band is not None else 0.5,
                    )
                channel2 = Channel.X2 if channel == Channel.X else Channel.Y2
                warnings.warn(channel_required_for_binned(channel2.value), ChannelRequiredWarning, stacklevel=2)

        if scale is not None and has_discrete_domain(scale.type):
            if scale.type == ScaleType.BAND:
                # Center within the band.
                band = channel_def.band if channel_def.band is not None else 0.5
                return value_ref_for_field_or_datum_def(
                    channel_def, scale_name, {"bin_suffix": "range"}, offset=offset, band=band
                )
            return value_ref_for_field_or_datum_def(channel_def, scale_name, {"bin_suffix": "range"}, offset=offset)

        return value_ref_for_field_or_datum_def(channel_def, scale_name, {}, offset=offset)

    if isinstance(channel_def, ValueDef):
        return _with_offset(width_height_value_ref(channel, channel_def.value), offset)

    if isinstance(channel_def, SignalRef):
        return ValueRef(signal=channel_def.signal)

    ref = default_ref() if callable(default_ref) else default_ref
    if ref is not None:
        return _with_offset(ref, offset)
    return None

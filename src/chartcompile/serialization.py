"""
Serialization helpers for chartcompile objects.

Value references are emitted as plain dicts (omitting unset keys) and
from there as JSON or YAML. Channel definitions, configs and view trees
can be read back from the same dict form, which is how fixtures and
demos describe them.
"""
from __future__ import annotations

import json
from dataclasses import fields
from typing import Any, Dict, List, Optional

import yaml

from chartcompile.channel import Channel
from chartcompile.channeldef import (
    BINNED,
    Bin,
    ChannelDef,
    DatumDef,
    FieldDef,
    FieldType,
    SignalRef,
    ValueDef,
)
from chartcompile.config import Config, MarkConfig, Size, Step, ViewConfig
from chartcompile.mark import InvalidMode, MarkDef, MarkType
from chartcompile.scale import RangeStep, ScaleComponent, ScaleType
from chartcompile.valueref import GroupFieldRef, ValueRef
from chartcompile.view import Resolve, ResolveMode, ViewKind, ViewNode, ViewTree


# =========================================================================
# VALUE REFERENCES
# =========================================================================

def _operand_to_dict(value: Any) -> Any:
    if isinstance(value, ValueRef):
        return value_ref_to_dict(value)
    if isinstance(value, SignalRef):
        return {"signal": value.signal}
    return value


def value_ref_to_dict(ref: ValueRef | List[ValueRef] | None) -> Any:
    if ref is None:
        return None
    if isinstance(ref, list):
        return [value_ref_to_dict(r) for r in ref]
    if not isinstance(ref, ValueRef):
        raise TypeError(f"Unsupported value reference type: {type(ref)}")

    d: Dict[str, Any] = {}
    if ref.test is not None:
        d["test"] = ref.test
    if ref.scale is not None:
        d["scale"] = ref.scale
    if isinstance(ref.field, GroupFieldRef):
        d["field"] = {"group": ref.field.group}
    elif ref.field is not None:
        d["field"] = ref.field
    if ref.value is not None:
        d["value"] = ref.value
    if ref.signal is not None:
        d["signal"] = ref.signal
    if ref.band is not None:
        d["band"] = ref.band
    if ref.offset is not None:
        d["offset"] = _operand_to_dict(ref.offset)
    return d


def value_ref_from_dict(d: Any) -> ValueRef | List[ValueRef] | None:
    if d is None:
        return None
    if isinstance(d, list):
        return [value_ref_from_dict(item) for item in d]
    field = d.get("field")
    if isinstance(field, dict):
        field = GroupFieldRef(field["group"])
    offset = d.get("offset")
    if isinstance(offset, dict):
        offset = value_ref_from_dict(offset)
    return ValueRef(
        scale=d.get("scale"),
        field=field,
        value=d.get("value"),
        signal=d.get("signal"),
        band=d.get("band"),
        offset=offset,
        test=d.get("test"),
    )


def value_ref_to_json(ref: ValueRef | List[ValueRef] | None) -> str:
    return json.dumps(value_ref_to_dict(ref), sort_keys=True)


def value_ref_to_yaml(ref: ValueRef | List[ValueRef] | None) -> str:
    return yaml.safe_dump(value_ref_to_dict(ref))


# =========================================================================
# CHANNEL DEFINITIONS
# =========================================================================

def bin_to_dict(bin: Any) -> Any:
    if isinstance(bin, Bin):
        out = {}
        for f in fields(bin):
            value = getattr(bin, f.name)
            if value is not None:
                out[f.name] = list(value) if isinstance(value, tuple) else value
        return out
    return bin


def bin_from_dict(d: Any) -> Any:
    if isinstance(d, dict):
        params = {k: tuple(v) if isinstance(v, list) else v for k, v in d.items()}
        return Bin(**params)
    if d is True or d == BINNED:
        return d
    return None


def channel_def_to_dict(channel_def: ChannelDef | None) -> Any:
    if channel_def is None:
        return None
    if isinstance(channel_def, FieldDef):
        d: Dict[str, Any] = {"field": channel_def.field, "type": channel_def.type.value}
        if channel_def.bin is not None:
            d["bin"] = bin_to_dict(channel_def.bin)
        if channel_def.time_unit:
            d["timeUnit"] = channel_def.time_unit
        if channel_def.aggregate:
            d["aggregate"] = channel_def.aggregate
        if channel_def.band is not None:
            d["band"] = channel_def.band
        return d
    if isinstance(channel_def, DatumDef):
        d = {"datum": channel_def.datum}
        if channel_def.type is not None:
            d["type"] = channel_def.type.value
        if channel_def.band is not None:
            d["band"] = channel_def.band
        return d
    if isinstance(channel_def, ValueDef):
        return {"value": _operand_to_dict(channel_def.value)}
    if isinstance(channel_def, SignalRef):
        return {"signal": channel_def.signal}
    raise TypeError(f"Unsupported ChannelDef type: {type(channel_def)}")


def channel_def_from_dict(d: Dict[str, Any] | None) -> ChannelDef | None:
    """
    Read one channel definition. The variant is decided by which key is
    present: "field" (or a count aggregate), "datum", "value", "signal".
    """
    if d is None:
        return None
    if "signal" in d:
        return SignalRef(d["signal"])
    if "value" in d:
        value = d["value"]
        if isinstance(value, dict) and "signal" in value:
            value = SignalRef(value["signal"])
        return ValueDef(value)
    if "datum" in d:
        return DatumDef(
            datum=d["datum"],
            type=FieldType(d["type"]) if d.get("type") else None,
            band=d.get("band"),
        )
    if "field" in d or "aggregate" in d:
        return FieldDef(
            field=d.get("field"),
            type=FieldType(d.get("type", "quantitative")),
            bin=bin_from_dict(d.get("bin")),
            time_unit=d.get("timeUnit"),
            aggregate=d.get("aggregate"),
            band=d.get("band"),
        )
    raise TypeError(f"Unsupported channel definition: {d}")


def mark_def_from_dict(d: Dict[str, Any] | str) -> MarkDef:
    if isinstance(d, str):
        return MarkDef(type=MarkType(d))
    invalid = _invalid_from_value(d["invalid"]) if "invalid" in d else None
    return MarkDef(
        type=MarkType(d["type"]),
        invalid=invalid,
        time_unit_band=d.get("timeUnitBand"),
        time_unit_band_position=d.get("timeUnitBandPosition"),
    )


# =========================================================================
# CONFIG
# =========================================================================

def _invalid_from_value(value: Any) -> InvalidMode:
    # null disables invalid handling
    if value is None:
        return InvalidMode.NONE
    return InvalidMode(value)


def size_from_value(value: Any) -> Size | None:
    if isinstance(value, dict) and "step" in value:
        return Step(value["step"])
    return value


def _mark_config_from_dict(d: Dict[str, Any], mark: MarkConfig | None = None) -> MarkConfig:
    mark = mark or MarkConfig()
    if "invalid" in d:
        mark.invalid = _invalid_from_value(d["invalid"])
    mark.time_unit_band = d.get("timeUnitBand")
    mark.time_unit_band_position = d.get("timeUnitBandPosition")
    return mark


def config_from_dict(d: Dict[str, Any] | None) -> Config:
    """Build a Config from camelCase keys; missing keys keep defaults."""
    config = Config()
    if not d:
        return config

    view = d.get("view", {})
    config.view = ViewConfig(
        continuous_width=view.get("continuousWidth", config.view.continuous_width),
        continuous_height=view.get("continuousHeight", config.view.continuous_height),
        discrete_width=size_from_value(view.get("discreteWidth")),
        discrete_height=size_from_value(view.get("discreteHeight")),
        step=view.get("step", config.view.step),
    )

    if "mark" in d:
        config.mark = _mark_config_from_dict(d["mark"], config.mark)
    for mark_type in MarkType:
        if mark_type.value in d:
            config.mark_types[mark_type] = _mark_config_from_dict(d[mark_type.value])
    return config


def config_from_yaml(s: str) -> Config:
    return config_from_dict(yaml.safe_load(s))


# =========================================================================
# VIEW TREES
# =========================================================================

def _scale_from_dict(channel: Channel, d: Dict[str, Any]) -> ScaleComponent:
    range_ = d.get("range")
    if isinstance(range_, dict) and "step" in range_:
        range_ = RangeStep(range_["step"])
    return ScaleComponent(
        name=d.get("name", channel.value),
        type=ScaleType(d["type"]),
        range=range_,
        zero=d.get("zero"),
    )


def _add_view(tree: ViewTree, d: Dict[str, Any], parent: Optional[int]) -> int:
    node = ViewNode(
        kind=ViewKind(d.get("kind", "unit")),
        name=d.get("name", ""),
        width=size_from_value(d.get("width")),
        height=size_from_value(d.get("height")),
        has_projection=bool(d.get("projection", False)),
    )
    for channel_name, scale in d.get("scales", {}).items():
        channel = Channel(channel_name)
        node.scales[channel] = _scale_from_dict(channel, scale)
    if "mark" in d:
        node.mark = mark_def_from_dict(d["mark"])
    resolve = d.get("resolve", {}).get("scale", {})
    node.resolve = Resolve(scale={Channel(c): ResolveMode(m) for c, m in resolve.items()})

    index = tree.add(node, parent)
    for child in d.get("children", []):
        _add_view(tree, child, index)
    return index


def view_tree_from_dict(d: Dict[str, Any], config: Config | None = None) -> ViewTree:
    """
    Build a ViewTree from nested dicts:

        {"kind": "concat", "resolve": {"scale": {"x": "shared"}},
         "children": [{"kind": "unit", "name": "concat_0",
                       "scales": {"x": {"type": "band"}}}]}
    """
    tree = ViewTree(config)
    _add_view(tree, d, None)
    return tree


def view_tree_from_yaml(s: str, config: Config | None = None) -> ViewTree:
    return view_tree_from_dict(yaml.safe_load(s), config)


def layout_size_to_dict(tree: ViewTree) -> Dict[str, Any]:
    """
    Resolved layout sizes per node, keyed by node name (or "#<index>" for
    unnamed nodes), with each local signal name mapped through the alias
    table.
    """
    out: Dict[str, Any] = {}
    for index, node in enumerate(tree.nodes):
        key = node.name or f"#{index}"
        sizes = {}
        for size_type, value in node.layout_size.combine().items():
            sizes[size_type] = {
                "value": value,
                "explicit": size_type in node.layout_size.explicit,
                "signal": tree.get_signal_name(node.get_name(size_type)),
            }
        out[key] = sizes
    return out


def layout_size_to_yaml(tree: ViewTree) -> str:
    return yaml.safe_dump(layout_size_to_dict(tree))

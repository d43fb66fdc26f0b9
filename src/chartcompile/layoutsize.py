"""
Layout size resolution.

Computes width/height for unit views and merges child sizes into their
containers, children strictly before parents:

    layer              -> width, height
    concat/repeat/facet -> childWidth, childHeight

A size is a pixel number, STEP (decided at render time by the number of
categories of a discrete scale), or None (unresolved). After a
successful merge each child entry is set to MERGED and the child's size
signal is aliased to the container's signal.
"""

from __future__ import annotations

from typing import Optional, Union

from chartcompile.channel import (
    POSITION_SCALE_CHANNELS,
    get_position_scale_channel,
    get_size_type,
    get_size_type_from_layout_size_type,
)
from chartcompile.config import (
    get_view_config_continuous_size,
    get_view_config_discrete_size,
    is_step,
)
from chartcompile.explicit import Explicit, merge_values_with_explicit
from chartcompile.scale import has_discrete_domain, is_range_step
from chartcompile.view import ResolveMode, ViewKind, ViewTree

STEP = "step"
MERGED = "merged"

LayoutSize = Union[int, float, str, None]


def parse_layout_size(tree: ViewTree, index: Optional[int] = None) -> None:
    """Resolve layout sizes for the subtree rooted at index (default: root)."""
    index = tree.root if index is None else index
    kind = tree.node(index).kind

    if kind == ViewKind.UNIT:
        parse_unit_layout_size(tree, index)
    elif kind == ViewKind.LAYER:
        parse_layer_layout_size(tree, index)
    elif kind == ViewKind.REPEAT:
        parse_repeat_layout_size(tree, index)
    elif kind == ViewKind.FACET:
        parse_facet_layout_size(tree, index)
    else:
        parse_concat_layout_size(tree, index)


def parse_children_layout_size(tree: ViewTree, index: int) -> None:
    for child in tree.node(index).children:
        parse_layout_size(tree, child)


def parse_layer_layout_size(tree: ViewTree, index: int) -> None:
    parse_children_layout_size(tree, index)

    parse_non_unit_layout_size_for_channel(tree, index, "width")
    parse_non_unit_layout_size_for_channel(tree, index, "height")


def parse_concat_layout_size(tree: ViewTree, index: int) -> None:
    parse_children_layout_size(tree, index)

    parse_non_unit_layout_size_for_channel(tree, index, "childWidth")
    parse_non_unit_layout_size_for_channel(tree, index, "childHeight")


parse_repeat_layout_size = parse_concat_layout_size
parse_facet_layout_size = parse_concat_layout_size


def parse_non_unit_layout_size_for_channel(tree: ViewTree, index: int, layout_size_type: str) -> None:
    """
    Merge the children's width or height into the container.

    layout_size_type is what the container emits (width/height for layers,
    childWidth/childHeight for concatenations) while size_type is the
    property read from each child. A concat's shared child width is not
    the concat's own width.
    """
    node = tree.node(index)
    size_type = get_size_type_from_layout_size_type(layout_size_type)
    channel = get_position_scale_channel(size_type)
    scale_resolve = tree.resolve_scale(index, channel)

    merged: Optional[Explicit[LayoutSize]] = None
    for child in tree.children(index):
        child_size = child.layout_size.get_with_explicit(size_type)

        if scale_resolve == ResolveMode.INDEPENDENT and child_size.value == STEP:
            # Independent step scales size themselves from their own domains.
            merged = None
            break

        if merged is not None:
            if scale_resolve == ResolveMode.INDEPENDENT and merged.value != child_size.value:
                merged = None
                break
            merged = merge_values_with_explicit(merged, child_size, size_type, node.name)
        else:
            merged = child_size

    if merged is not None:
        parent_signal = node.get_name(layout_size_type)
        for child in tree.children(index):
            tree.rename_signal(child.get_name(size_type), parent_signal)
            child.layout_size.set(size_type, MERGED, False)
        node.layout_size.set_with_explicit(layout_size_type, merged)
    else:
        node.layout_size.set_with_explicit(layout_size_type, Explicit(False, None))


def parse_unit_layout_size(tree: ViewTree, index: int) -> None:
    node = tree.node(index)
    for channel in POSITION_SCALE_CHANNELS:
        size_type = get_size_type(channel)
        specified = node.get_size(size_type)

        if specified is not None:
            node.layout_size.set(size_type, STEP if is_step(specified) else specified, True)
        else:
            node.layout_size.set(size_type, default_unit_size(tree, index, size_type), False)


def default_unit_size(tree: ViewTree, index: int, size_type: str) -> LayoutSize:
    """
    Default size of a unit view along one axis.

    Discrete scales get STEP when either their range or the configured
    discrete size is per-category; continuous scales and projections get
    the continuous default.
    """
    node = tree.node(index)
    view_config = tree.config.view
    scale = node.get_scale_component(get_position_scale_channel(size_type))

    if scale is not None:
        if has_discrete_domain(scale.type):
            size = get_view_config_discrete_size(view_config, size_type)
            if is_range_step(scale.range) or is_step(size):
                return STEP
            return size
        return get_view_config_continuous_size(view_config, size_type)

    if node.has_projection:
        return get_view_config_continuous_size(view_config, size_type)

    size = get_view_config_discrete_size(view_config, size_type)
    return size.step if is_step(size) else size


def get_layout_size(tree: ViewTree, index: int, layout_size_type: str) -> Explicit[LayoutSize]:
    return tree.node(index).layout_size.get_with_explicit(layout_size_type)


def is_merged(tree: ViewTree, index: int, size_type: str) -> bool:
    """True if the entry was superseded by the parent's shared size."""
    return tree.node(index).layout_size.get(size_type) == MERGED

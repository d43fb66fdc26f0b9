#!/usr/bin/env python3
"""
Demo: resolve layout sizes and value references for an example dashboard.

Prints the resolved size table, a few value references, and writes a
DOT diagram of the view tree.
"""

from chartcompile.backends import DotMode, generate_dot, save_dot_file
from chartcompile.channel import Channel
from chartcompile.channeldef import FieldDef, FieldType
from chartcompile.examples import build_dashboard
from chartcompile.layoutsize import parse_layout_size
from chartcompile.serialization import layout_size_to_yaml, value_ref_to_json
from chartcompile.valueref import ValueRef, mid_point, mid_point_ref_with_position_invalid_test


def main():
    tree = build_dashboard()
    parse_layout_size(tree)

    print("=" * 80)
    print("LAYOUT SIZES")
    print("=" * 80)
    print(layout_size_to_yaml(tree))

    print("=" * 80)
    print("VALUE REFERENCES")
    print("=" * 80)

    scatter = tree.node(tree.find("concat_0_layer_0"))
    x_scale = scatter.get_scale_component(Channel.X)
    ref = mid_point_ref_with_position_invalid_test(
        Channel.X,
        FieldDef("horsepower", FieldType.QUANTITATIVE),
        scatter.mark,
        tree.config,
        scale_name=x_scale.name,
        scale=x_scale,
    )
    print(f"scatter x:  {value_ref_to_json(ref)}")

    binned = mid_point(
        Channel.X,
        FieldDef("horsepower", FieldType.QUANTITATIVE, bin=True),
        scatter.mark,
        tree.config,
        scale_name=x_scale.name,
        scale=x_scale,
    )
    print(f"binned x:   {value_ref_to_json(binned)}")

    bars = tree.node(tree.find("concat_1_concat_0"))
    band_scale = bars.get_scale_component(Channel.X)
    bar_ref = mid_point(
        Channel.X,
        FieldDef("origin", FieldType.NOMINAL),
        bars.mark,
        tree.config,
        scale_name=band_scale.name,
        scale=band_scale,
        default_ref=ValueRef(value=0),
    )
    print(f"bar xc:     {value_ref_to_json(bar_ref)}")

    print("\n" + "=" * 80)
    print(generate_dot(tree, mode=DotMode.DETAILED))
    save_dot_file(tree, "views.dot", mode=DotMode.DETAILED)
    print("\nSaved to: views.dot")
    print("  dot -Tpng views.dot -o views.png")


if __name__ == "__main__":
    main()

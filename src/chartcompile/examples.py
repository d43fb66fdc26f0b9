"""
Example view trees used by the demo and the tests.

Each builder returns an unresolved ViewTree; run
layoutsize.parse_layout_size() on it to populate sizes.
"""
from chartcompile.channel import Channel
from chartcompile.config import Config, Step
from chartcompile.mark import MarkDef, MarkType
from chartcompile.scale import RangeStep, ScaleComponent, ScaleType
from chartcompile.view import Resolve, ResolveMode, ViewKind, ViewNode, ViewTree


def _bar_view(name: str, width=None) -> ViewNode:
    return ViewNode(
        kind=ViewKind.UNIT,
        name=name,
        width=width,
        mark=MarkDef(type=MarkType.BAR),
        scales={
            Channel.X: ScaleComponent(name=f"{name}_x", type=ScaleType.BAND, range=RangeStep(20)),
            Channel.Y: ScaleComponent(name=f"{name}_y", type=ScaleType.LINEAR, zero=True),
        },
    )


def _point_view(name: str, width=None, height=None) -> ViewNode:
    return ViewNode(
        kind=ViewKind.UNIT,
        name=name,
        width=width,
        height=height,
        mark=MarkDef(type=MarkType.POINT),
        scales={
            Channel.X: ScaleComponent(name=f"{name}_x", type=ScaleType.LINEAR, zero=False),
            Channel.Y: ScaleComponent(name=f"{name}_y", type=ScaleType.LINEAR, zero=False),
        },
    )


def build_shared_band_concat(config: Config = None) -> ViewTree:
    """Two bar charts side by side sharing one band x scale, both sized by step."""
    tree = ViewTree(config)
    root = tree.add(ViewNode(kind=ViewKind.CONCAT, resolve=Resolve(scale={Channel.X: ResolveMode.SHARED})))
    tree.add(_bar_view("concat_0", width=Step(20)), root)
    tree.add(_bar_view("concat_1", width=Step(20)), root)
    return tree


def build_independent_concat(config: Config = None) -> ViewTree:
    """Two bar charts with independent x scales; their widths cannot be shared."""
    tree = ViewTree(config)
    root = tree.add(ViewNode(kind=ViewKind.CONCAT))
    tree.add(_bar_view("concat_0"), root)
    tree.add(_bar_view("concat_1"), root)
    return tree


def build_layered_scatter(config: Config = None) -> ViewTree:
    """A scatter plot layered over a second scatter plot with an authored size."""
    tree = ViewTree(config)
    root = tree.add(ViewNode(kind=ViewKind.LAYER))
    tree.add(_point_view("layer_0"), root)
    tree.add(_point_view("layer_1", width=300, height=150), root)
    return tree


def build_dashboard(config: Config = None) -> ViewTree:
    """
    A vertical concatenation of a layered scatter plot and a row of two
    shared-scale bar charts:

        concat
          +- concat_0 (layer)
          |    +- concat_0_layer_0
          |    +- concat_0_layer_1
          +- concat_1 (concat, shared x)
               +- concat_1_concat_0
               +- concat_1_concat_1
    """
    tree = ViewTree(config)
    root = tree.add(ViewNode(kind=ViewKind.CONCAT, resolve=Resolve(scale={Channel.X: ResolveMode.SHARED})))

    layer = tree.add(ViewNode(kind=ViewKind.LAYER, name="concat_0"), root)
    tree.add(_point_view("concat_0_layer_0"), layer)
    tree.add(_point_view("concat_0_layer_1"), layer)

    row = tree.add(
        ViewNode(kind=ViewKind.CONCAT, name="concat_1", resolve=Resolve(scale={Channel.X: ResolveMode.SHARED})),
        root,
    )
    tree.add(_bar_view("concat_1_concat_0"), row)
    tree.add(_bar_view("concat_1_concat_1"), row)
    return tree

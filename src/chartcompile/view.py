"""
View composition tree.

Nodes are held in a flat arena (ViewTree.nodes) and refer to each other
by integer index. Each node owns its child index list and a mutable
component side-table (layout sizes).

Signal renaming never rewrites a node. It records an alias in the
tree-wide NameMap; get_signal_name() resolves aliases when output is
assembled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from chartcompile.channel import Channel
from chartcompile.config import Config, Size
from chartcompile.explicit import Split
from chartcompile.mark import MarkDef
from chartcompile.scale import ScaleComponent


class ViewKind(Enum):
    UNIT = "unit"
    LAYER = "layer"
    CONCAT = "concat"
    FACET = "facet"
    REPEAT = "repeat"


class ResolveMode(Enum):
    SHARED = "shared"
    INDEPENDENT = "independent"


@dataclass
class Resolve:
    """Authored scale resolution per channel. Missing channels use the kind default."""

    scale: Dict[Channel, ResolveMode] = field(default_factory=dict)


def default_scale_resolve(kind: ViewKind, channel: Channel) -> ResolveMode:
    """
    Layers and facets share scales; concatenations keep x/y independent
    because sibling views usually plot different data.
    """
    if kind in (ViewKind.CONCAT, ViewKind.REPEAT) and channel in (Channel.X, Channel.Y):
        return ResolveMode.INDEPENDENT
    return ResolveMode.SHARED


class NameMap:
    """Signal alias table: old name -> new name."""

    def __init__(self) -> None:
        self._names: Dict[str, str] = {}

    def rename(self, old_name: str, new_name: str) -> None:
        if old_name == new_name:
            return
        self._names[old_name] = new_name

    def has(self, name: str) -> bool:
        return name in self._names

    def get(self, name: str) -> str:
        # Follow the chain until it stops changing.
        while name in self._names and self._names[name] != name:
            name = self._names[name]
        return name

    def items(self):
        return self._names.items()


@dataclass
class ViewNode:
    """
    A node of the view composition tree.

    Properties:
        kind: Unit view or composition container
        name: Node name; prefixes its signal names. The root is usually ""
        width / height: Authored size (pixels or Step), None if not given
        scales: Resolved scale per channel (unit views)
        has_projection: Whether the view uses a geographic projection
        mark: Mark definition (unit views)
        resolve: Authored scale resolution (containers)
        children: Child indices in declaration order
        parent: Parent index, None for the root
        layout_size: Component side-table populated by layoutsize
    """

    kind: ViewKind
    name: str = ""
    width: Optional[Size] = None
    height: Optional[Size] = None
    scales: Dict[Channel, ScaleComponent] = field(default_factory=dict)
    has_projection: bool = False
    mark: Optional[MarkDef] = None
    resolve: Resolve = field(default_factory=Resolve)
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None
    layout_size: Split = field(default_factory=Split)

    def get_name(self, text: str) -> str:
        """Local signal name, e.g. "concat_0_width"."""
        return f"{self.name}_{text}" if self.name else text

    def get_size(self, size_type: str) -> Optional[Size]:
        return self.width if size_type == "width" else self.height

    def get_scale_component(self, channel: Channel) -> Optional[ScaleComponent]:
        return self.scales.get(channel)


class ViewTree:
    """
    Arena of view nodes. Index 0 is the root once added.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.nodes: List[ViewNode] = []
        self.signal_names = NameMap()

    def add(self, node: ViewNode, parent: Optional[int] = None) -> int:
        """Append a node; children keep the order they were added in."""
        index = len(self.nodes)
        if parent is not None:
            self.node(parent).children.append(index)
            node.parent = parent
        self.nodes.append(node)
        return index

    @property
    def root(self) -> int:
        if not self.nodes:
            raise IndexError("ViewTree is empty")
        return 0

    def node(self, index: int) -> ViewNode:
        return self.nodes[index]

    def children(self, index: int) -> List[ViewNode]:
        return [self.nodes[i] for i in self.nodes[index].children]

    def find(self, name: str) -> Optional[int]:
        for index, node in enumerate(self.nodes):
            if node.name == name:
                return index
        return None

    def resolve_scale(self, index: int, channel: Channel) -> ResolveMode:
        node = self.node(index)
        if channel in node.resolve.scale:
            return node.resolve.scale[channel]
        return default_scale_resolve(node.kind, channel)

    def rename_signal(self, old_name: str, new_name: str) -> None:
        self.signal_names.rename(old_name, new_name)

    def get_signal_name(self, name: str) -> str:
        return self.signal_names.get(name)

    def walk_post_order(self, index: Optional[int] = None) -> Iterator[int]:
        """Children strictly before their parent, siblings in order."""
        start = self.root if index is None else index
        for child in self.nodes[start].children:
            yield from self.walk_post_order(child)
        yield start

    def __len__(self) -> int:
        return len(self.nodes)

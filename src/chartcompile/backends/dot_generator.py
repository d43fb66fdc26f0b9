"""
Graphviz DOT diagram generator for view trees.

Draws the composition tree after layout sizing, which makes merge and
aliasing decisions visible.

Supports two modes:
    - SIMPLE: Tree structure with node kinds
    - DETAILED: Adds resolved sizes and signal aliases
"""

from enum import Enum
from typing import Any, Dict, List

from chartcompile.layoutsize import MERGED
from chartcompile.view import ViewNode, ViewTree


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"      # Just the tree
    DETAILED = "detailed"  # Include sizes and aliases


_FILL_BY_KIND = {
    "unit": "lightblue",
    "layer": "lightyellow",
    "concat": "lightgreen",
    "facet": "lightpink",
    "repeat": "lightpink",
}


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    # Escape backslashes first
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _node_id(index: int) -> str:
    return f"v{index}"


def _format_size(value: Any) -> str:
    if value is None:
        return "unresolved"
    return str(value)


def _node_label(node: ViewNode, mode: DotMode) -> str:
    title = node.name or "(root)"
    lines = [f"{title} [{node.kind.value}]"]

    if mode == DotMode.DETAILED:
        combined = node.layout_size.combine()
        for size_type, value in combined.items():
            marker = "!" if size_type in node.layout_size.explicit else ""
            lines.append(f"{size_type}: {_format_size(value)}{marker}")

    return "\n".join(lines)


def generate_dot(tree: ViewTree, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a view tree.

    Args:
        tree: ViewTree, usually after parse_layout_size
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines = []

    lines.append("digraph views {")
    lines.append("  rankdir=TB;")
    lines.append("  node [shape=box, style=filled];")

    # =========================================================================
    # NODES
    # =========================================================================

    for index, node in enumerate(tree.nodes):
        label = _escape_dot_string(_node_label(node, mode))
        fill = _FILL_BY_KIND.get(node.kind.value, "white")
        if MERGED in node.layout_size.combine().values():
            fill = "lightgrey"
        lines.append(f"  {_node_id(index)} [label={label}, fillcolor={fill}];")

    # =========================================================================
    # EDGES (PARENT -> CHILD)
    # =========================================================================

    for index, node in enumerate(tree.nodes):
        for child in node.children:
            lines.append(f"  {_node_id(index)} -> {_node_id(child)};")

    # =========================================================================
    # SIGNAL ALIASES (DETAILED MODE)
    # =========================================================================

    if mode == DotMode.DETAILED:
        owners: Dict[str, int] = {}
        for index, node in enumerate(tree.nodes):
            for size_type in node.layout_size.combine():
                owners[node.get_name(size_type)] = index

        aliases: List[str] = []
        for old_name, new_name in tree.signal_names.items():
            if old_name in owners and new_name in owners:
                label = _escape_dot_string(f"{old_name} = {new_name}")
                aliases.append(
                    f"  {_node_id(owners[old_name])} -> {_node_id(owners[new_name])} "
                    f"[style=dashed, constraint=false, label={label}];"
                )
        lines.extend(aliases)

    lines.append("}")

    return "\n".join(lines)


def save_dot_file(tree: ViewTree, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        tree: ViewTree to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(tree, mode=mode)
    with open(filename, 'w') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]

"""
Tests for the DOT diagram generator.

Tests cover:
    - Nodes and parent/child edges
    - Size labels in detailed mode
    - Signal alias edges
    - Label escaping
"""

from chartcompile.backends.dot_generator import DotMode, generate_dot, save_dot_file
from chartcompile.examples import build_dashboard, build_shared_band_concat
from chartcompile.layoutsize import parse_layout_size
from chartcompile.view import ViewKind, ViewNode, ViewTree


class TestDotBasicStructure:
    """Test basic DOT graph structure."""

    def test_empty_tree_generates_valid_dot(self):
        dot = generate_dot(ViewTree())
        assert dot.startswith("digraph views {")
        assert dot.endswith("}")

    def test_every_view_becomes_a_node(self):
        tree = build_dashboard()
        dot = generate_dot(tree)
        for index, node in enumerate(tree.nodes):
            assert f"v{index} [label=" in dot
        assert "concat_1_concat_0 [unit]" in dot
        assert "(root) [concat]" in dot

    def test_parent_child_edges(self):
        dot = generate_dot(build_shared_band_concat())
        assert "v0 -> v1;" in dot
        assert "v0 -> v2;" in dot

    def test_simple_mode_has_no_sizes(self):
        tree = build_shared_band_concat()
        parse_layout_size(tree)
        assert "childWidth" not in generate_dot(tree, DotMode.SIMPLE)


class TestDotDetailed:
    """Test sizes and aliases in detailed mode."""

    def test_sizes_in_labels(self):
        tree = build_shared_band_concat()
        parse_layout_size(tree)
        dot = generate_dot(tree, DotMode.DETAILED)
        assert "childWidth: step!" in dot
        assert "width: merged" in dot

    def test_merged_views_are_grey(self):
        tree = build_shared_band_concat()
        parse_layout_size(tree)
        dot = generate_dot(tree, DotMode.DETAILED)
        assert "fillcolor=lightgrey" in dot

    def test_alias_edges(self):
        tree = build_shared_band_concat()
        parse_layout_size(tree)
        dot = generate_dot(tree, DotMode.DETAILED)
        assert "v1 -> v0 [style=dashed" in dot
        assert "concat_0_width = childWidth" in dot

    def test_quotes_are_escaped(self):
        tree = ViewTree()
        tree.add(ViewNode(kind=ViewKind.UNIT, name='say "hi"'))
        assert 'say \\"hi\\"' in generate_dot(tree)


def test_save_dot_file(tmp_path):
    tree = build_shared_band_concat()
    target = tmp_path / "views.dot"
    save_dot_file(tree, str(target), mode=DotMode.SIMPLE)
    assert target.read_text().startswith("digraph views {")

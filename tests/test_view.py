"""
Tests for the view tree arena and signal aliasing.
"""

import pytest

from chartcompile.channel import Channel
from chartcompile.view import NameMap, Resolve, ResolveMode, ViewKind, ViewNode, ViewTree


class TestViewTree:

    def test_add_links_parent_and_children(self):
        tree = ViewTree()
        root = tree.add(ViewNode(kind=ViewKind.CONCAT))
        a = tree.add(ViewNode(kind=ViewKind.UNIT, name="a"), root)
        b = tree.add(ViewNode(kind=ViewKind.UNIT, name="b"), root)
        assert tree.node(root).children == [a, b]
        assert tree.node(b).parent == root
        assert [n.name for n in tree.children(root)] == ["a", "b"]
        assert tree.find("b") == b
        assert tree.find("missing") is None

    def test_empty_tree_has_no_root(self):
        with pytest.raises(IndexError):
            ViewTree().root

    def test_signal_names(self):
        assert ViewNode(kind=ViewKind.UNIT).get_name("width") == "width"
        assert ViewNode(kind=ViewKind.UNIT, name="concat_0").get_name("width") == "concat_0_width"


class TestScaleResolution:

    def test_concat_defaults_to_independent_position(self):
        tree = ViewTree()
        root = tree.add(ViewNode(kind=ViewKind.CONCAT))
        assert tree.resolve_scale(root, Channel.X) == ResolveMode.INDEPENDENT
        assert tree.resolve_scale(root, Channel.COLOR) == ResolveMode.SHARED

    @pytest.mark.parametrize("kind", [ViewKind.LAYER, ViewKind.FACET])
    def test_layer_and_facet_default_to_shared(self, kind):
        tree = ViewTree()
        root = tree.add(ViewNode(kind=kind))
        assert tree.resolve_scale(root, Channel.X) == ResolveMode.SHARED

    def test_authored_resolve_wins(self):
        tree = ViewTree()
        root = tree.add(ViewNode(kind=ViewKind.CONCAT, resolve=Resolve(scale={Channel.X: ResolveMode.SHARED})))
        assert tree.resolve_scale(root, Channel.X) == ResolveMode.SHARED


class TestNameMap:

    def test_unknown_name_resolves_to_itself(self):
        assert NameMap().get("width") == "width"

    def test_chain(self):
        names = NameMap()
        names.rename("a_width", "b_width")
        names.rename("b_width", "childWidth")
        assert names.get("a_width") == "childWidth"
        assert names.has("a_width")
        assert not names.has("childWidth")

    def test_self_alias_terminates(self):
        names = NameMap()
        names.rename("width", "width")
        assert names.get("width") == "width"
        assert not names.has("width")

    def test_self_alias_keeps_earlier_alias(self):
        """Renaming a name to itself leaves an existing alias in place."""
        names = NameMap()
        names.rename("width", "childWidth")
        names.rename("width", "width")
        assert names.get("width") == "childWidth"

"""
Tests for slug generation and the in-memory category tree.
"""

from types import SimpleNamespace

import pytest

from cms.services.categories import build_category_tree
from cms.utils.slug import generate_slug


def row(id, name, parent_id=None, display_order=0):
    return SimpleNamespace(
        id=id,
        name=name,
        slug=generate_slug(name),
        description=None,
        parent_id=parent_id,
        display_order=display_order,
    )


class TestGenerateSlug:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Web Development", "web-development"),
            ("  Hello,   World!  ", "hello-world"),
            ("Node.js Tips", "nodejs-tips"),
            ("Café Crème", "cafe-creme"),
            ("UI/UX Design", "ui-ux-design"),
            ("C++ & Rust", "c-rust"),
        ],
    )
    def test_examples(self, text, expected):
        assert generate_slug(text) == expected

    def test_deterministic(self):
        assert generate_slug("Case Studies") == generate_slug("Case Studies")


class TestBuildCategoryTree:
    def test_empty(self):
        assert build_category_tree([]) == []

    def test_nests_children_under_parents(self):
        tree = build_category_tree(
            [
                row(1, "Technology"),
                row(2, "Python", parent_id=1),
                row(3, "FastAPI", parent_id=2),
                row(4, "Business"),
            ]
        )
        assert [n.name for n in tree] == ["Technology", "Business"]
        python = tree[0].children[0]
        assert python.name == "Python"
        assert [c.name for c in python.children] == ["FastAPI"]
        assert tree[1].children == []

    def test_keeps_input_order_for_siblings(self):
        tree = build_category_tree([row(1, "Root"), row(3, "Zeta", 1), row(2, "Alpha", 1)])
        assert [c.name for c in tree[0].children] == ["Zeta", "Alpha"]

    def test_orphan_becomes_root(self):
        """A row pointing at a parent not in the input is shown at top level."""
        tree = build_category_tree([row(5, "Orphan", parent_id=99)])
        assert [n.id for n in tree] == [5]

    def test_cycle_does_not_recurse_forever(self):
        tree = build_category_tree([row(1, "A", parent_id=2), row(2, "B", parent_id=1)])
        # Neither row is reachable from a root
        assert tree == []

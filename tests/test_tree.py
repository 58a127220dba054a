"""
Tests for the view tree built from session state.

Run: pytest tests/test_tree.py -v
"""

from linemarks.tree import (
    BookmarkNode,
    FileNode,
    GroupNode,
    active_bookmark_tree,
    file_name,
    file_path,
    group_children,
    group_nodes,
)


def test_file_names():
    assert file_name("/src/pkg/mod.py") == "mod.py"
    assert file_name("file:///src/pkg/my%20mod.py") == "my mod.py"
    assert file_path("file:///src/pkg/mod.py") == "/src/pkg/mod.py"
    assert file_name("mod.py") == "mod.py"


def test_group_nodes(session):
    session.create_group("Tests")
    session.toggle("a.py", 1)

    nodes = group_nodes(session)

    assert [(n.name, n.active, n.count) for n in nodes] == [
        ("Default", False, 0),
        ("Tests", True, 1),
    ]
    assert nodes[1].label == "Tests (active)"
    assert all(isinstance(n, GroupNode) for n in nodes)


def test_group_children_keep_insertion_order(session):
    session.toggle("/src/b.py", 9, "late")
    session.toggle("/src/a.py", 0, "early")

    children = group_children(session, "Default")

    assert [c.label for c in children] == ["b.py:10 late", "a.py:1 early"]
    assert children[0].tooltip == "/src/b.py (Line 10)"
    assert all(isinstance(c, BookmarkNode) for c in children)


def test_active_tree_groups_by_file_and_sorts_lines(session):
    session.toggle("/src/b.py", 9, "nine")
    session.toggle("/src/a.py", 4, "four")
    session.toggle("/src/b.py", 2, "two")
    session.create_group("Other", activate=False)
    session.toggle("/src/c.py", 1, group="Other")

    tree = active_bookmark_tree(session)

    assert [n.name for n in tree] == ["b.py", "a.py"]
    assert all(isinstance(n, FileNode) for n in tree)
    assert [c.bookmark.line for c in tree[0].children] == [2, 9]
    assert tree[0].children[0].label == "b.py:3 two"

"""
Tests for next/previous ordering.

Run: pytest tests/test_navigator.py -v
"""

from linemarks.navigator import Navigator, ordered


def _setup(bookmarks, groups, marks, group="Default"):
    for file_id, line in marks:
        bookmarks.toggle(file_id, line, "", group)
    return Navigator(bookmarks, groups)


def _pos(bm):
    return (bm.file_id, bm.line)


def test_ordering_is_file_then_line(bookmarks):
    for file_id, line in [("fileB", 1), ("fileA", 9), ("fileA", 3)]:
        bookmarks.toggle(file_id, line, "", "Default")

    assert [_pos(b) for b in ordered(bookmarks.all())] == [
        ("fileA", 3), ("fileA", 9), ("fileB", 1),
    ]


def test_next_wraps_around(bookmarks, groups):
    nav = _setup(bookmarks, groups, [("fileA", 3), ("fileA", 9), ("fileB", 1)])

    assert _pos(nav.next("fileA", 3)) == ("fileA", 9)
    assert _pos(nav.next("fileA", 9)) == ("fileB", 1)
    assert _pos(nav.next("fileB", 1)) == ("fileA", 3)


def test_prev_wraps_around(bookmarks, groups):
    nav = _setup(bookmarks, groups, [("fileA", 3), ("fileA", 9), ("fileB", 1)])

    assert _pos(nav.prev("fileB", 1)) == ("fileA", 9)
    assert _pos(nav.prev("fileA", 9)) == ("fileA", 3)
    assert _pos(nav.prev("fileA", 3)) == ("fileB", 1)


def test_cursor_between_bookmarks(bookmarks, groups):
    nav = _setup(bookmarks, groups, [("fileA", 3), ("fileA", 9), ("fileB", 1)])

    assert _pos(nav.next("fileA", 5)) == ("fileA", 9)
    assert _pos(nav.prev("fileA", 5)) == ("fileA", 3)
    # a file sorting between the two bookmarked files
    assert _pos(nav.next("fileAB", 0)) == ("fileB", 1)
    assert _pos(nav.prev("fileAB", 100)) == ("fileA", 9)


def test_cursor_outside_all_bookmarks(bookmarks, groups):
    nav = _setup(bookmarks, groups, [("m.py", 3), ("m.py", 9)])

    assert _pos(nav.next("z.py", 0)) == ("m.py", 3)
    assert _pos(nav.prev("a.py", 0)) == ("m.py", 9)


def test_only_active_group_is_navigated(bookmarks, groups):
    groups.create_group("Other")
    bookmarks.toggle("a.py", 5, "", "Other")
    nav = _setup(bookmarks, groups, [("a.py", 1)])

    assert _pos(nav.next("a.py", 1)) == ("a.py", 1)

    groups.set_active_group("Other")
    assert _pos(nav.next("a.py", 0)) == ("a.py", 5)


def test_empty_group_is_noop(bookmarks, groups):
    nav = Navigator(bookmarks, groups)

    assert nav.next("a.py", 0) is None
    assert nav.prev("a.py", 0) is None


def test_single_bookmark_returns_itself(bookmarks, groups):
    nav = _setup(bookmarks, groups, [("a.py", 4)])

    assert _pos(nav.next("a.py", 4)) == ("a.py", 4)
    assert _pos(nav.prev("a.py", 4)) == ("a.py", 4)

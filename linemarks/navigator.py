"""
Deterministic next/previous bookmark navigation.

Bookmarks are ordered by file id (plain string order), then line. The
cursor does not have to sit on a bookmark: the neighbour is found by the
ordering relation, wrapping around at either end.
"""

from bisect import bisect_left, bisect_right
from typing import List, Optional

from .bookmarks import Bookmark


def position_key(file_id: str, line: int):
    return (file_id, line)


def ordered(bookmarks) -> List[Bookmark]:
    return sorted(bookmarks, key=lambda b: position_key(b.file_id, b.line))


class Navigator:
    def __init__(self, bookmarks, groups):
        self._bookmarks = bookmarks
        self._groups = groups

    def _active_ordered(self) -> List[Bookmark]:
        return ordered(self._bookmarks.list_by_group(self._groups.active_group))

    def next(self, file_id: str, line: int) -> Optional[Bookmark]:
        items = self._active_ordered()
        if not items:
            return None
        keys = [position_key(b.file_id, b.line) for b in items]
        i = bisect_right(keys, position_key(file_id, line))
        return items[i] if i < len(items) else items[0]

    def prev(self, file_id: str, line: int) -> Optional[Bookmark]:
        items = self._active_ordered()
        if not items:
            return None
        keys = [position_key(b.file_id, b.line) for b in items]
        i = bisect_left(keys, position_key(file_id, line))
        return items[i - 1] if i > 0 else items[-1]

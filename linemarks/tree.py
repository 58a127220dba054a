"""
Presentation-neutral tree nodes for the host's bookmark views.

The groups view lists every group with its bookmarks; the bookmarks view
shows the active group's bookmarks grouped by file name.
"""

import os
from dataclasses import dataclass, field
from typing import List, Union
from urllib.parse import unquote, urlparse

from .bookmarks import Bookmark


@dataclass(frozen=True)
class GroupNode:
    name: str
    color: str
    active: bool
    count: int

    @property
    def label(self) -> str:
        return f"{self.name} (active)" if self.active else self.name


@dataclass(frozen=True)
class BookmarkNode:
    bookmark: Bookmark
    label: str
    tooltip: str


@dataclass(frozen=True)
class FileNode:
    name: str
    children: List[BookmarkNode] = field(default_factory=list)


TreeNode = Union[GroupNode, FileNode, BookmarkNode]


def file_path(file_id: str) -> str:
    """Filesystem-ish path of a file id (plain path or file:// URI)."""
    parsed = urlparse(file_id)
    if len(parsed.scheme) > 1 and parsed.path:
        return unquote(parsed.path)
    return file_id


def file_name(file_id: str) -> str:
    return os.path.basename(file_path(file_id).rstrip("/\\")) or file_id


def bookmark_node(bm: Bookmark) -> BookmarkNode:
    return BookmarkNode(
        bookmark=bm,
        label=f"{file_name(bm.file_id)}:{bm.line + 1} {bm.content}".rstrip(),
        tooltip=f"{file_path(bm.file_id)} (Line {bm.line + 1})",
    )


def group_nodes(session) -> List[GroupNode]:
    active = session.active_group
    nodes = []
    for name, color in session.list_groups().items():
        nodes.append(
            GroupNode(
                name=name,
                color=color,
                active=name == active,
                count=len(session.list_bookmarks(group=name)),
            )
        )
    return nodes


def group_children(session, name: str) -> List[BookmarkNode]:
    return [bookmark_node(b) for b in session.list_bookmarks(group=name)]


def active_bookmark_tree(session) -> List[FileNode]:
    grouped = {}
    for b in session.list_bookmarks(group=session.active_group):
        grouped.setdefault(file_name(b.file_id), []).append(b)

    return [
        FileNode(
            name=name,
            children=[bookmark_node(b) for b in sorted(bms, key=lambda b: b.line)],
        )
        for name, bms in grouped.items()
    ]

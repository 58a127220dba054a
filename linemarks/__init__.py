from .bookmarks import Bookmark, BookmarkStore
from .config import Config, load_config
from .groups import GroupStore
from .navigator import Navigator
from .results import CommandResult
from .session import Session
from .sync import ChangedRange, DocumentChange, SyncEngine

__all__ = [
    "Bookmark",
    "BookmarkStore",
    "ChangedRange",
    "CommandResult",
    "Config",
    "DocumentChange",
    "GroupStore",
    "Navigator",
    "Session",
    "SyncEngine",
    "load_config",
]

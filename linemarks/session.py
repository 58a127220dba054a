import functools
import logging
import threading
from typing import Dict, List, Optional, Union

from .bookmarks import BookmarkStore
from .colors import with_alpha
from .config import Config
from .groups import GroupStore
from .navigator import Navigator
from .results import (
    ADDED,
    EMPTY_STATE,
    INVALID,
    NOT_FOUND,
    CommandResult,
    failure,
    success,
)
from .sync import DocumentChange, SyncEngine

log = logging.getLogger("linemarks.session")


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            self._require_open()
            return method(self, *args, **kwargs)
    return wrapper


def _location_problem(file_id, line) -> Optional[str]:
    if not isinstance(file_id, str) or not file_id:
        return "File id must not be empty"
    if isinstance(line, bool) or not isinstance(line, int) or line < 0:
        return f"Invalid line {line!r}"
    return None


class Session:
    """
    Owns all bookmark state for one host process.

    Every command runs its full read-modify-write cycle under the session
    lock before returning, so two commands never interleave.
    """

    def __init__(self, state, config: Optional[Config] = None, rng=None):
        self._state = state
        self._config = config or Config()
        self._rng = rng
        self._lock = threading.RLock()
        self.bookmarks: Optional[BookmarkStore] = None
        self.groups: Optional[GroupStore] = None
        self.navigator: Optional[Navigator] = None
        self.sync: Optional[SyncEngine] = None

    # -----------------------
    # Lifecycle
    # -----------------------
    def init(self) -> "Session":
        with self._lock:
            if self.bookmarks is not None:
                return self
            self.bookmarks = BookmarkStore(self._state)
            self.groups = GroupStore(self._state, self.bookmarks, self._config, self._rng)
            self.navigator = Navigator(self.bookmarks, self.groups)
            self.sync = SyncEngine(self.bookmarks)
            log.info(
                "Session ready: %d groups, %d bookmarks, active=%s",
                len(self.groups.list_groups()),
                len(self.bookmarks.all()),
                self.groups.active_group,
            )
        return self

    def teardown(self) -> None:
        with self._lock:
            self.bookmarks = None
            self.groups = None
            self.navigator = None
            self.sync = None
            close = getattr(self._state, "close", None)
            if close is not None:
                close()
            log.info("Session closed")

    @property
    def is_open(self) -> bool:
        return self.bookmarks is not None

    def _require_open(self) -> None:
        if not self.is_open:
            raise RuntimeError("Session is not initialised; call init() first")

    @property
    def config(self) -> Config:
        return self._config

    @property
    def active_group(self) -> str:
        self._require_open()
        return self.groups.active_group

    # -----------------------
    # Bookmark commands
    # -----------------------
    @_locked
    def toggle(self, file_id: str, line: int, content: str = "", group: Optional[str] = None) -> CommandResult:
        problem = _location_problem(file_id, line)
        if problem:
            return failure(INVALID, problem)
        if group is not None and not self.groups.has_group(group):
            return failure(NOT_FOUND, f"Group '{group}' not found")

        target = self.groups.resolve_group(group)
        existing = self.bookmarks.find(file_id, line, target)
        action = self.bookmarks.toggle(file_id, line, (content or "").strip(), target)
        bm = existing if action != ADDED else self.bookmarks.find(file_id, line, target)
        message = f"Bookmark added to {target}" if action == ADDED else "Bookmark removed"
        return success(
            action,
            message=message,
            bookmarks=[bm] if bm else [],
            groups=[target],
            count=1,
        )

    @_locked
    def remove(self, file_id: str, line: int, group: Optional[str] = None) -> CommandResult:
        group = group or self.groups.active_group
        bm = self.bookmarks.find(file_id, line, group)
        if bm is None or not self.bookmarks.remove(file_id, line, group):
            return failure(NOT_FOUND, f"No bookmark at {file_id}:{line} in '{group}'")
        return success("removed", message="Bookmark removed", bookmarks=[bm], groups=[group], count=1)

    @_locked
    def clear_group(self, group: Optional[str] = None) -> CommandResult:
        group = group or self.groups.active_group
        if not self.groups.has_group(group):
            return failure(NOT_FOUND, f"Group '{group}' not found")
        if not self.bookmarks.count(group):
            return failure(EMPTY_STATE, "No bookmarks to clear")

        removed = self.bookmarks.clear_group(group)
        return success("cleared", message=f"Cleared bookmarks from {group}", groups=[group], count=removed)

    @_locked
    def move_to_group(
        self,
        file_id: str,
        line: int,
        from_group: str,
        to_group: str,
    ) -> CommandResult:
        if not self.groups.has_group(to_group):
            return failure(NOT_FOUND, f"Group '{to_group}' not found")
        return self.bookmarks.move_to_group(file_id, line, from_group, to_group)

    # -----------------------
    # Group commands
    # -----------------------
    @_locked
    def create_group(self, name: str, activate: bool = True) -> CommandResult:
        result = self.groups.create_group(name)
        if result.ok and activate:
            self.groups.set_active_group(result.groups[0])
        return result

    @_locked
    def rename_group(self, old: str, new: str) -> CommandResult:
        return self.groups.rename_group(old, new)

    @_locked
    def delete_group(self, name: str) -> CommandResult:
        return self.groups.delete_group(name)

    @_locked
    def set_active_group(self, name: str) -> CommandResult:
        return self.groups.set_active_group(name)

    # -----------------------
    # Navigation
    # -----------------------
    @_locked
    def next_bookmark(self, file_id: str, line: int) -> CommandResult:
        bm = self.navigator.next(file_id, line)
        if bm is None:
            return failure(EMPTY_STATE, f"No bookmarks in '{self.groups.active_group}'")
        return success("navigated", bookmarks=[bm], groups=[bm.group])

    @_locked
    def prev_bookmark(self, file_id: str, line: int) -> CommandResult:
        bm = self.navigator.prev(file_id, line)
        if bm is None:
            return failure(EMPTY_STATE, f"No bookmarks in '{self.groups.active_group}'")
        return success("navigated", bookmarks=[bm], groups=[bm.group])

    # -----------------------
    # Host notifications
    # -----------------------
    @_locked
    def on_document_changed(self, event: Union[DocumentChange, dict]) -> int:
        if isinstance(event, dict):
            event = DocumentChange.from_dict(event)
        return self.sync.apply(event)

    @_locked
    def on_config_changed(self, config: Config) -> bool:
        self._config = config
        return self.groups.apply_config(config)

    # -----------------------
    # Queries
    # -----------------------
    @_locked
    def is_bookmarked(self, file_id: str, line: int) -> bool:
        return self.bookmarks.exists(file_id, line, self.groups.active_group)

    @_locked
    def list_groups(self) -> Dict[str, str]:
        return self.groups.list_groups()

    @_locked
    def list_bookmarks(self, group: Optional[str] = None, file_id: Optional[str] = None) -> List:
        if file_id is not None:
            items = self.bookmarks.list_by_file(file_id)
            return [b for b in items if group is None or b.group == group]
        if group is not None:
            return self.bookmarks.list_by_group(group)
        return self.bookmarks.all()

    @_locked
    def decoration_colors(self) -> Dict[str, str]:
        """Group name -> #rrggbbaa highlight color at the configured opacity."""
        names = list(self.groups.list_groups())
        for name in self.bookmarks.groups_in_use():
            if name not in names:
                names.append(name)
        return {
            name: with_alpha(self.groups.ensure_color(name), self._config.opacity)
            for name in names
        }

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .results import (
    ADDED,
    ALREADY_EXISTS,
    NOT_FOUND,
    REMOVED,
    CommandResult,
    failure,
    success,
)

log = logging.getLogger("linemarks.bookmarks")

BOOKMARKS_KEY = "bookmarks"


@dataclass
class Bookmark:
    """
    A marked line in a file, owned by a group.
    """
    file_id: str
    line: int          # zero-based
    content: str
    group: str

    def key(self) -> Tuple[str, int, str]:
        return (self.file_id, self.line, self.group)

    def to_dict(self) -> dict:
        return {
            "file_id": self.file_id,
            "line": self.line,
            "content": self.content,
            "group": self.group,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Bookmark":
        file_id = data.get("file_id", data.get("uri"))
        if not file_id:
            raise ValueError("missing file_id")
        line = int(data["line"])
        if line < 0:
            raise ValueError(f"negative line {line}")
        return cls(
            file_id=str(file_id),
            line=line,
            content=str(data.get("content", "")),
            group=str(data["group"]),
        )


def _validate_location(file_id: str, line: int) -> None:
    if not isinstance(file_id, str) or not file_id:
        raise ValueError("file_id must be a non-empty string")
    if isinstance(line, bool) or not isinstance(line, int):
        raise ValueError("line must be an integer")
    if line < 0:
        raise ValueError("line must be >= 0")


class BookmarkStore:
    """
    Ordered bookmark storage keyed by (file_id, line, group).

    Every mutation is persisted before the method returns.
    """

    def __init__(self, state):
        self._state = state
        self._bookmarks: List[Bookmark] = []
        self.load()

    # -----------------------
    # Persistence
    # -----------------------
    def load(self) -> None:
        raw = self._state.get(BOOKMARKS_KEY, [])
        if not isinstance(raw, list):
            raise RuntimeError(f"Persisted '{BOOKMARKS_KEY}' is not a list")

        loaded: List[Bookmark] = []
        seen = set()
        for i, entry in enumerate(raw):
            try:
                bm = Bookmark.from_dict(entry)
            except (AttributeError, KeyError, TypeError, ValueError) as err:
                log.warning("Skipping malformed bookmark #%d: %s", i, err)
                continue
            if bm.key() in seen:
                log.warning("Skipping duplicate bookmark %s", bm.key())
                continue
            seen.add(bm.key())
            loaded.append(bm)

        self._bookmarks = loaded

    def _save(self) -> None:
        self._state.set(BOOKMARKS_KEY, [b.to_dict() for b in self._bookmarks])

    def _index(self, file_id: str, line: int, group: str) -> int:
        for i, b in enumerate(self._bookmarks):
            if b.file_id == file_id and b.line == line and b.group == group:
                return i
        return -1

    # -----------------------
    # Mutations
    # -----------------------
    def toggle(self, file_id: str, line: int, content: str, group: str) -> str:
        _validate_location(file_id, line)

        idx = self._index(file_id, line, group)
        if idx >= 0:
            del self._bookmarks[idx]
            self._save()
            log.info("Removed bookmark %s:%d from %s", file_id, line, group)
            return REMOVED

        self._bookmarks.append(
            Bookmark(
                file_id=file_id,
                line=line,
                content=content,
                group=group,
            )
        )
        self._save()
        log.info("Added bookmark %s:%d to %s", file_id, line, group)
        return ADDED

    def remove(self, file_id: str, line: int, group: str) -> bool:
        idx = self._index(file_id, line, group)
        if idx < 0:
            return False

        del self._bookmarks[idx]
        self._save()
        log.info("Removed bookmark %s:%d from %s", file_id, line, group)
        return True

    def move_to_group(
        self,
        file_id: str,
        line: int,
        from_group: str,
        to_group: str,
    ) -> CommandResult:
        idx = self._index(file_id, line, from_group)
        if idx < 0:
            return failure(NOT_FOUND, f"No bookmark at {file_id}:{line} in '{from_group}'")

        bm = self._bookmarks[idx]
        if from_group == to_group:
            return success("moved", bookmarks=[replace(bm)], groups=[to_group])

        if self._index(file_id, line, to_group) >= 0:
            return failure(ALREADY_EXISTS, f"'{to_group}' already bookmarks {file_id}:{line}")

        bm.group = to_group
        self._save()
        log.info("Moved bookmark %s:%d from %s to %s", file_id, line, from_group, to_group)
        return success(
            "moved",
            message=f"Moved to {to_group}",
            bookmarks=[replace(bm)],
            groups=[from_group, to_group],
            count=1,
        )

    def clear_group(self, group: str) -> int:
        kept = [b for b in self._bookmarks if b.group != group]
        removed = len(self._bookmarks) - len(kept)
        if removed:
            self._bookmarks = kept
            self._save()
            log.info("Cleared %d bookmarks from %s", removed, group)
        return removed

    def rename_group(self, old: str, new: str) -> int:
        moved = 0
        for b in self._bookmarks:
            if b.group == old:
                b.group = new
                moved += 1
        if moved:
            self._save()
        return moved

    def apply_edit_delta(self, file_id: str, edit_start_line: int, delta: int) -> int:
        """
        Shift bookmarks below an edit so they stay on the same source line.

        Only bookmarks of file_id whose line is strictly greater than
        edit_start_line move; lines are clamped at 0. When bookmarks of one
        group fold onto the same line, the earliest inserted one is kept.
        """
        if delta == 0:
            return 0

        moved = 0
        for b in self._bookmarks:
            if b.file_id == file_id and b.line > edit_start_line:
                b.line = max(0, b.line + delta)
                moved += 1

        if not moved:
            return 0

        deduped: List[Bookmark] = []
        seen = set()
        for b in self._bookmarks:
            if b.key() in seen:
                log.debug("Dropping bookmark folded onto %s", b.key())
                continue
            seen.add(b.key())
            deduped.append(b)
        self._bookmarks = deduped

        self._save()
        return moved

    # -----------------------
    # Read views
    # -----------------------
    def all(self) -> List[Bookmark]:
        return [replace(b) for b in self._bookmarks]

    def list_by_group(self, group: str) -> List[Bookmark]:
        return [replace(b) for b in self._bookmarks if b.group == group]

    def list_by_file(self, file_id: str) -> List[Bookmark]:
        return [replace(b) for b in self._bookmarks if b.file_id == file_id]

    def find(self, file_id: str, line: int, group: str) -> Optional[Bookmark]:
        idx = self._index(file_id, line, group)
        return replace(self._bookmarks[idx]) if idx >= 0 else None

    def exists(self, file_id: str, line: int, group: str) -> bool:
        return self._index(file_id, line, group) >= 0

    def count(self, group: str) -> int:
        return sum(1 for b in self._bookmarks if b.group == group)

    def groups_in_use(self) -> List[str]:
        names: List[str] = []
        for b in self._bookmarks:
            if b.group not in names:
                names.append(b.group)
        return names

import logging
from dataclasses import dataclass, field
from typing import List

log = logging.getLogger("linemarks.sync")


@dataclass(frozen=True)
class ChangedRange:
    start_line: int
    end_line_inclusive: int
    replacement_text: str

    @property
    def line_delta(self) -> int:
        return line_delta(self.start_line, self.end_line_inclusive, self.replacement_text)


@dataclass(frozen=True)
class DocumentChange:
    """
    One document change notification from the host editor.
    """
    file_id: str
    changed_ranges: List[ChangedRange] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentChange":
        file_id = data.get("fileId", data.get("file_id"))
        if not file_id:
            raise ValueError("Document change without file id")

        ranges = []
        for r in data.get("changedRanges", data.get("changed_ranges", [])):
            start = int(r.get("startLine", r.get("start_line", 0)))
            end = int(r.get("endLineInclusive", r.get("end_line_inclusive", start)))
            text = r.get("replacementText", r.get("replacement_text", ""))
            if end < start:
                raise ValueError(f"Changed range ends before it starts: {start}..{end}")
            ranges.append(
                ChangedRange(
                    start_line=start,
                    end_line_inclusive=end,
                    replacement_text=str(text),
                )
            )

        return cls(file_id=str(file_id), changed_ranges=ranges)


def line_delta(start_line: int, end_line_inclusive: int, replacement_text: str) -> int:
    """
    Signed line-count change of replacing lines start..end with text.
    """
    new_count = len(replacement_text.split("\n"))
    old_count = end_line_inclusive - start_line + 1
    return new_count - old_count


class SyncEngine:
    """
    Keeps bookmark lines anchored while documents are edited.
    """

    def __init__(self, bookmarks):
        self._bookmarks = bookmarks

    def apply(self, event: DocumentChange) -> int:
        # changes are applied one by one, in the order the host reported them
        moved = 0
        for change in event.changed_ranges:
            delta = change.line_delta
            if delta == 0:
                continue
            moved += self._bookmarks.apply_edit_delta(event.file_id, change.start_line, delta)

        if moved:
            log.debug("Shifted %d bookmarks in %s", moved, event.file_id)
        return moved

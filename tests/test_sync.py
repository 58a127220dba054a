"""
Tests for keeping bookmarks anchored across document edits.

Run: pytest tests/test_sync.py -v
"""

import pytest

from linemarks.sync import ChangedRange, DocumentChange, SyncEngine, line_delta


def _lines(bookmarks, file_id="F"):
    return [b.line for b in bookmarks.list_by_file(file_id)]


def test_line_delta():
    # typing on a single line
    assert line_delta(4, 4, "abc") == 0
    # pressing enter
    assert line_delta(4, 4, "\n") == 1
    # pasting three lines into one
    assert line_delta(4, 4, "a\nb\nc") == 2
    # deleting a line break
    assert line_delta(4, 5, "") == -1
    # deleting three whole lines
    assert line_delta(2, 5, "") == -3


def test_windows_line_endings_count_once():
    assert line_delta(0, 0, "a\r\nb\r\n") == 2


def test_from_dict_host_payload():
    event = DocumentChange.from_dict({
        "fileId": "file:///a.py",
        "changedRanges": [
            {"startLine": 3, "endLineInclusive": 3, "replacementText": "x\ny"},
        ],
    })

    assert event == DocumentChange(
        file_id="file:///a.py",
        changed_ranges=[ChangedRange(3, 3, "x\ny")],
    )


def test_from_dict_snake_case_payload():
    event = DocumentChange.from_dict({
        "file_id": "a.py",
        "changed_ranges": [{"start_line": 1, "end_line_inclusive": 2, "replacement_text": ""}],
    })

    assert event.changed_ranges[0].line_delta == -1


def test_from_dict_rejects_bad_payloads():
    with pytest.raises(ValueError):
        DocumentChange.from_dict({"changedRanges": []})
    with pytest.raises(ValueError):
        DocumentChange.from_dict({
            "fileId": "a.py",
            "changedRanges": [{"startLine": 5, "endLineInclusive": 2, "replacementText": ""}],
        })


def test_apply_shifts_bookmarks_below_the_edit(bookmarks):
    for line in (5, 10, 20):
        bookmarks.toggle("F", line, "", "Default")
    engine = SyncEngine(bookmarks)

    moved = engine.apply(DocumentChange("F", [ChangedRange(7, 7, "a\nb\nc\nd")]))

    assert moved == 2
    assert _lines(bookmarks) == [5, 13, 23]


def test_changes_apply_in_report_order(bookmarks):
    bookmarks.toggle("F", 10, "", "Default")
    engine = SyncEngine(bookmarks)

    # insert 2 lines at 8 (10 -> 12), then delete 3 lines at 11 (12 -> 9)
    engine.apply(DocumentChange("F", [
        ChangedRange(8, 8, "\n\n"),
        ChangedRange(11, 14, "x"),
    ]))

    assert _lines(bookmarks) == [9]


def test_zero_delta_changes_do_not_persist(bookmarks, state):
    bookmarks.toggle("F", 10, "", "Default")
    writes = len(state.writes)

    moved = SyncEngine(bookmarks).apply(DocumentChange("F", [ChangedRange(2, 2, "edited")]))

    assert moved == 0
    assert len(state.writes) == writes


def test_other_files_are_untouched(bookmarks):
    bookmarks.toggle("G", 10, "", "Default")

    SyncEngine(bookmarks).apply(DocumentChange("F", [ChangedRange(0, 0, "\n\n\n")]))

    assert _lines(bookmarks, "G") == [10]

# linemarks_cli/commands.py
from linemarks.colors import is_hex_color
from linemarks.config import CONFIG_FILENAME, as_bool, get_config, load_config, set_config
from linemarks.session import Session
from linemarks.tree import active_bookmark_tree, group_nodes
from linemarks_db import StateDAO


# ==================================================
# Session Setup
# ==================================================

def open_session(db_path: str, config_path: str | None) -> Session:
    config = load_config(config_path or CONFIG_FILENAME)
    return Session(StateDAO(db_path), config).init()


def _report(result) -> int:
    if result.ok:
        print(f"[OK] {result.message or result.action}")
        return 0
    print(f"[ERR] {result.error}: {result.message}")
    return 1


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _needs_confirmation(config_path: str | None, assume_yes: bool) -> bool:
    if assume_yes:
        return False
    return as_bool(get_config(config_path or CONFIG_FILENAME, "confirmDestructive", True))


def _format(bm) -> str:
    return f"{bm.file_id}:{bm.line + 1} [{bm.group}] {bm.content}".rstrip()


# ==================================================
# Bookmark Commands
# ==================================================

def run_toggle(session: Session, file_id: str, line: int, content: str, group: str | None) -> int:
    return _report(session.toggle(file_id, line - 1, content, group))


def run_remove(session: Session, file_id: str, line: int, group: str | None) -> int:
    return _report(session.remove(file_id, line - 1, group))


def run_clear(session: Session, group: str | None, assume_yes: bool, config_path: str | None) -> int:
    group = group or session.active_group
    count = len(session.list_bookmarks(group=group))
    if count and _needs_confirmation(config_path, assume_yes):
        if not _confirm(f'Clear {count} bookmarks from "{group}"?'):
            print("Aborted.")
            return 1
    return _report(session.clear_group(group))


def run_move(session: Session, file_id: str, line: int, to_group: str, from_group: str | None) -> int:
    from_group = from_group or session.active_group
    return _report(session.move_to_group(file_id, line - 1, from_group, to_group))


def run_list(session: Session, group: str | None, file_id: str | None) -> int:
    if file_id is not None or group is not None:
        bookmarks = session.list_bookmarks(group=group, file_id=file_id)
        if not bookmarks:
            print("No bookmarks found.")
            return 0
        for bm in bookmarks:
            print(_format(bm))
        return 0

    tree = active_bookmark_tree(session)
    print(f"=== BOOKMARKS: {session.active_group} ===")
    if not tree:
        print("No bookmarks found.")
        return 0
    for file_node in tree:
        print(file_node.name)
        for child in file_node.children:
            print(f"  {child.label}")
    return 0


def run_edit(session: Session, file_id: str, start: int, end: int, text: str) -> int:
    try:
        moved = session.on_document_changed(
            {
                "fileId": file_id,
                "changedRanges": [
                    {
                        "startLine": start - 1,
                        "endLineInclusive": end - 1,
                        "replacementText": text,
                    }
                ],
            }
        )
    except ValueError as err:
        print(f"[ERR] Invalid: {err}")
        return 1

    print(f"[OK] Shifted {moved} bookmarks")
    return 0


# ==================================================
# Navigation Commands
# ==================================================

def run_next(session: Session, file_id: str, line: int) -> int:
    result = session.next_bookmark(file_id, line - 1)
    if not result.ok:
        return _report(result)
    print(_format(result.bookmarks[0]))
    return 0


def run_prev(session: Session, file_id: str, line: int) -> int:
    result = session.prev_bookmark(file_id, line - 1)
    if not result.ok:
        return _report(result)
    print(_format(result.bookmarks[0]))
    return 0


# ==================================================
# Group Commands
# ==================================================

def run_groups(session: Session) -> int:
    print("=== GROUPS ===")
    for node in group_nodes(session):
        marker = "*" if node.active else " "
        print(f"{marker} {node.name} | {node.color} | bookmarks={node.count}")
    return 0


def run_create_group(session: Session, name: str, activate: bool) -> int:
    return _report(session.create_group(name, activate=activate))


def run_rename_group(session: Session, old: str, new: str) -> int:
    return _report(session.rename_group(old, new))


def run_delete_group(session: Session, name: str, assume_yes: bool, config_path: str | None) -> int:
    count = len(session.list_bookmarks(group=name))
    if name in session.list_groups() and _needs_confirmation(config_path, assume_yes):
        if not _confirm(f'Delete "{name}" and {count} bookmarks?'):
            print("Aborted.")
            return 1
    return _report(session.delete_group(name))


def run_activate(session: Session, name: str) -> int:
    return _report(session.set_active_group(name))


def run_set_color(session: Session, config_path: str | None, group: str, color: str) -> int:
    if not is_hex_color(color):
        print(f"[ERR] Invalid: '{color}' is not a #rrggbb color")
        return 1

    config_path = config_path or CONFIG_FILENAME
    overrides = get_config(config_path, "groupColors", {})
    if not isinstance(overrides, dict):
        overrides = {}
    overrides[group] = color
    set_config(config_path, "groupColors", overrides)

    session.on_config_changed(load_config(config_path))
    print(f"[OK] {group} is now {color}")
    return 0
